"""
Hedge Layer CLI - Setup
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="hedgelayer",
    version="0.3.0",
    author="Hedge Layer",
    author_email="support@hedgelayer.ai",
    description="Hedge real-world risks with prediction markets from the command line",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://hedgelayer.ai",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Financial",
        "Framework :: AsyncIO",
        "Typing :: Typed",
    ],
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "httpx>=0.25.0",
        "typer>=0.9.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-mock>=3.10.0",
            "black>=23.0.0",
            "mypy>=1.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "hl=hedgelayer.cli.main:main",
        ],
    },
    keywords=[
        "hedging",
        "prediction-markets",
        "polymarket",
        "risk",
        "insurance",
        "cli",
        "sdk",
        "streaming",
        "async",
    ],
)
