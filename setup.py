#!/usr/bin/env python3
"""
Setup script for configninja package.
"""

from setuptools import setup, find_packages

setup(
    name="configninja",
    version="0.1.0",
    description="Environment-aware JSON configuration loader with a per-process config registry",
    author="configninja Team",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "python-dotenv>=1.0",
        "rich>=13.0",
        "typer>=0.9",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "configninja=configninja.cli.main:app",
        ],
    },
)
