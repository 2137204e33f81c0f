"""Setup script for Jira to Pivotal CSV Tool."""

from setuptools import setup, find_packages
from pathlib import Path

# Read version from VERSION file
version_file = Path(__file__).parent / "VERSION"
version = version_file.read_text().strip() if version_file.exists() else "0.1.0"

# Read requirements from requirements.txt
requirements_file = Path(__file__).parent / "requirements.txt"
if requirements_file.exists():
    with open(requirements_file, "r") as f:
        requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]
else:
    requirements = []

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="jira-pivotal-export",
    version=version,
    description="Python CLI tool for exporting Jira projects to Pivotal Tracker CSV",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Jira to Pivotal Tool",
    packages=find_packages(where=".", include=["src*"]),
    package_dir={"": "."},
    py_modules=[],
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "jira-pivotal=src.main:cli",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Office/Business",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="jira pivotal tracker csv migration cli",
)
