"""
Core module - Configuration, selector seeds, and data models
"""

from .config import Config, SelectorConfig, load_selector_config

__all__ = ['Config', 'SelectorConfig', 'load_selector_config']
