#!/usr/bin/env python3
"""Setup script for the picture organizer."""

from setuptools import setup, find_packages
from pathlib import Path

# Read requirements
requirements_path = Path(__file__).parent / "requirements.txt"
with open(requirements_path) as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]

# Use a static version to avoid import issues during build
__version__ = "1.0.0"

setup(
    name="picture-organizer",
    version=__version__,
    description="Copy pictures and media into a dated year/month tree without duplicates",
    author="Homelab Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["organize"],
    install_requires=requirements,
    extras_require={
        'test': ['pytest>=7.0'],
    },
    python_requires=">=3.8",
    entry_points={
        'console_scripts': [
            'organize-pictures=organize:cli',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
)
