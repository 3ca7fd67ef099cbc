#!/usr/bin/env python3
"""
Setup script for the PBX exporter.
Installs the exporter package and its console entry point.
"""

from setuptools import setup, find_packages

setup(
    name="pbx-exporter",
    version="1.0.0",
    description="Prometheus exporter for PBX management API status",
    python_requires=">=3.10",
    packages=find_packages(include=["pbx_exporter", "pbx_exporter.*"]),
    install_requires=[
        "fastapi>=0.100",
        "httpx>=0.24",
        "prometheus-client>=0.17",
        "pydantic>=2.0",
        "pyyaml>=6.0",
        "uvicorn>=0.23",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "pbx-exporter=pbx_exporter.__main__:main",
        ],
    },
)
