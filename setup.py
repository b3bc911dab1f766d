#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Legal Purifier - Setup Configuration
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

# Read requirements
requirements_path = Path(__file__).parent / "requirements.txt"
requirements = []
if requirements_path.exists():
    requirements = [
        line.strip()
        for line in requirements_path.read_text(encoding="utf-8").splitlines()
        if line.strip() and not line.startswith("#")
    ]

setup(
    name="legal-purifier",
    version="1.0.0",
    description="Monolingual, quality-gated Arabic/French legal text purification",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Legal Purifier Team",
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["quick_purify"],
    install_requires=requirements,
    extras_require={
        # Development dependencies
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "pytest-asyncio>=0.21.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "purify=quick_purify:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Text Processing :: Linguistic",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="arabic french legal purification translation nlp",
)
