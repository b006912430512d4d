# setup.py
from setuptools import setup, find_packages

setup(
    name="sitepress",
    version="0.1.0",
    description="Static-site build orchestrator with server-side pre-rendering",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"sitepress": ["templates/*.html"]},
    install_requires=[
        "click>=8.1",
        "Jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["sitepress=sitepress.cli:cli"],
    },
    python_requires=">=3.11",
)
