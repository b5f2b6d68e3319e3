"""
Build script for tuning-playground.

Pure Python package, no native extensions. For development:
    pip install -e ".[test]"
"""

from pathlib import Path

from setuptools import find_packages, setup

HERE = Path(__file__).parent


def read_version():
    init = HERE / "tuning_playground" / "__init__.py"
    for line in init.read_text(encoding="utf-8").splitlines():
        if line.startswith("__version__"):
            return line.split("=", 1)[1].strip().strip("\"'")
    raise RuntimeError("__version__ not found in tuning_playground/__init__.py")


setup(
    name="tuning-playground",
    version=read_version(),
    description="Online best-effort autotuning engine with simulated smoother demos",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.22",
        "click>=8.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "tuning-playground=tuning_playground.cli:cli",
        ],
    },
)
