#!/usr/bin/env python3
"""
Setup script for files-cleanup
"""

from setuptools import setup, find_packages
import sys

# Ensure Python 3.8+
if sys.version_info < (3, 8):
    sys.exit("Python 3.8 or higher is required")

# Read version from __init__.py
def get_version():
    with open("filescleanup/__init__.py", "r", encoding="utf-8") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split('"')[1]
    raise RuntimeError("Version not found")

# Read long description from README
def get_long_description():
    with open("README.md", "r", encoding="utf-8") as f:
        return f.read()

# Core requirements (minimal dependencies)
core_requirements = []

# Faster hashing (optional)
fast_requirements = [
    "xxhash>=3.0.0",
]

# MCP tool server (optional)
server_requirements = [
    "fastmcp>=2.3.0",
]

dev_requirements = [
    "pytest>=7.4.0",
    "pytest-cov>=4.1.0",
    "black>=23.7.0",
    "flake8>=6.0.0",
    "mypy>=1.5.0",
]

all_requirements = fast_requirements + server_requirements

setup(
    name="files-cleanup",
    version=get_version(),
    author="files-cleanup Team",
    author_email="info@files-cleanup.dev",
    description="Bounded read-only scanner for empty and duplicate files",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    packages=find_packages(),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Filesystems",
        "Topic :: Utilities",
        "Environment :: Console",
    ],
    python_requires=">=3.8",
    install_requires=core_requirements,
    extras_require={
        "fast": fast_requirements,
        "server": server_requirements,
        "all": all_requirements,
        "dev": dev_requirements,
    },
    entry_points={
        "console_scripts": [
            "files-cleanup=filescleanup.cli.main:main",
            "files-cleanup-server=filescleanup.server:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
    keywords="cleanup, empty-files, duplicate-files, file-management, mcp",
)
