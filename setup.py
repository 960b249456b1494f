"""Setup configuration for grouprun."""

from setuptools import setup, find_packages

setup(
    name="grouprun",
    version="0.1.0",
    description="Run tests by group or suite name through an external test runner",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pyyaml>=6.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "grouprun=grouprun.cli:main",
        ],
    },
)
