"""
Setup configuration for foldscan package.
"""

from setuptools import setup, find_packages

setup(
    name="foldscan",
    version="0.1.0",
    description="Above-the-fold signal scanner for mobile e-commerce product pages",
    packages=find_packages(include=["foldscan", "foldscan.*"]),
    package_data={"foldscan.core": ["selectors.yml"]},
    python_requires=">=3.9",
    install_requires=[
        # Keep in sync with requirements.txt
        "playwright>=1.40",
        "pydantic>=2.0",
        "fastapi>=0.100",
        "slowapi>=0.1.9",
        "uvicorn>=0.23",
        "click>=8.0",
        "python-dotenv>=1.0",
        "PyYAML>=6.0",
        "logfire>=0.40",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "foldscan=foldscan.cli.main:cli",
        ],
    },
)
