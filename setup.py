"""
Setup script for tidepool.

Tidepool is a terminal spaced-repetition trainer where every review
also plays a round of an island survival game:

1. Scheduler - SM-2 intervals from four review buttons
2. Island - loot, companions, crafting and a raft to escape
3. Sessions - bounded study runs persisted to SQLite

The 'tidepool' command is the entry point.
"""

from setuptools import find_namespace_packages, setup

setup(
    name="tidepool",
    version="0.1.0",
    description="Terminal spaced-repetition trainer with an island survival game",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "tidepool=src.study.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Games/Entertainment",
    ],
    keywords="learning spaced-repetition cli education game",
)
