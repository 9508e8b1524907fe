"""
Configuration management for Foldscan
"""

import os
import yaml
from pathlib import Path
from typing import Optional, List
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


DEFAULT_SELECTORS_PATH = Path(__file__).parent / "selectors.yml"

MOBILE_SAFARI_USER_AGENT = (
    'Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 '
    '(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1'
)


class Config:
    """Application configuration"""

    # Public URL the screenshots are served from (e.g. https://scan.example.com)
    BASE_URL: str = os.getenv('BASE_URL', '')

    # HTTP server
    PORT: int = int(os.getenv('PORT', '3000'))
    CORS_ORIGINS: str = os.getenv('CORS_ORIGINS', '*')
    FOLDSCAN_API_KEY: str = os.getenv('FOLDSCAN_API_KEY', '')
    RATE_LIMIT: str = os.getenv('RATE_LIMIT', '1 per 3 seconds')

    # Screenshot storage
    SCANS_DIR: str = os.getenv('SCANS_DIR', os.path.join('public', 'scans'))

    # Browser
    HEADLESS: bool = os.getenv('HEADLESS', 'true').lower() == 'true'
    USER_AGENT: str = os.getenv('USER_AGENT', MOBILE_SAFARI_USER_AGENT)
    NAVIGATION_TIMEOUT_MS: int = int(os.getenv('NAVIGATION_TIMEOUT_MS', '30000'))

    # Scan timing
    SETTLE_MS: int = int(os.getenv('SETTLE_MS', '1500'))
    MODAL_POLL_INTERVAL_MS: int = int(os.getenv('MODAL_POLL_INTERVAL_MS', '500'))
    MODAL_POLL_WINDOW_MS: int = int(os.getenv('MODAL_POLL_WINDOW_MS', '12000'))

    # Target URL policy
    ALLOW_PRIVATE_URLS: bool = os.getenv('ALLOW_PRIVATE_URLS', 'false').lower() == 'true'

    # Selector seeds (defaults to the bundled selectors.yml)
    SELECTORS_PATH: str = os.getenv('SELECTORS_PATH', '')

    @classmethod
    def validate(cls) -> bool:
        """Validate required configuration"""
        required = {
            'BASE_URL': cls.BASE_URL,
        }

        missing = [k for k, v in required.items() if not v]

        if missing:
            raise ValueError(f"Missing required configuration: {', '.join(missing)}")

        return True

    @classmethod
    def get(cls, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get configuration value"""
        return getattr(cls, key, default)


# Selector seeds


@dataclass
class SelectorConfig:
    """Query seeds for the fold detectors.

    These lists are deliberately over-inclusive; the detectors decide
    which matches count as evidence.
    """
    price: List[str] = field(default_factory=list)
    reviews: List[str] = field(default_factory=list)
    shipping_keywords: List[str] = field(default_factory=list)
    modal: List[str] = field(default_factory=list)


_SELECTOR_KEYS = ('price', 'reviews', 'shipping_keywords', 'modal')


def load_selector_config(path: Optional[str] = None) -> SelectorConfig:
    """
    Load selector seeds from YAML.

    Resolution order: explicit path, Config.SELECTORS_PATH, bundled selectors.yml.

    Args:
        path: Optional path to a selectors YAML file

    Returns:
        SelectorConfig instance

    Raises:
        FileNotFoundError: If the selectors file doesn't exist
        ValueError: If a required list is missing or malformed
    """
    config_path = Path(path or Config.SELECTORS_PATH or DEFAULT_SELECTORS_PATH)

    if not config_path.exists():
        raise FileNotFoundError(f"Selector configuration not found at {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        raw_config = yaml.safe_load(f) or {}

    lists = {}
    for key in _SELECTOR_KEYS:
        values = raw_config.get(key)
        if not isinstance(values, list):
            raise ValueError(f"Selector configuration {config_path} is missing list '{key}'")
        lists[key] = [str(v) for v in values if v is not None and str(v).strip()]

    return SelectorConfig(**lists)
