# setup.py
from setuptools import setup, find_packages

setup(
    name="adrules",
    version="0.1.0",
    description="Concurrent downloader and merger of AdGuard Home rule lists",
    packages=find_packages(include=["adrules", "adrules.*"]),
    package_data={"adrules": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "yarl>=1.9",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.1",
        "Jinja2>=3.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "adrules=adrules.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
