"""
Setup script for IBD Field Designer
"""
from setuptools import setup, find_packages

with open("requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="ibd-field-designer",
    version="0.1.0",
    description="Randomized resolvable incomplete block designs for field trials, with A- and D-efficiency",
    python_requires=">=3.10,<4.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.0.0,<10.0.0",
            "pytest-cov>=4.0.0,<8.0.0",
            "pytest-mock>=3.10.0,<4.0.0",
            "httpx>=0.24.0",
        ],
    },
    entry_points={
        "console_scripts": ["ibd-designer=main:main"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
)
