"""Setup script for ContextBudget package."""

from setuptools import setup, find_packages
import pathlib

# Get the long description from the README file
here = pathlib.Path(__file__).parent.resolve()
long_description = (here / "README.md").read_text(encoding="utf-8") if (here / "README.md").exists() else "ContextBudget: token-bounded context assembly for AI document generation."

setup(
    name="context-budget",
    version="0.1.0",
    description="Token-bounded context assembly for AI document generation",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="ContextBudget Team",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="llm, context, token-budgeting, document-generation, ai",
    packages=find_packages(include=["context_budget", "context_budget.*"]),
    python_requires=">=3.9, <4",
    install_requires=[
        "PyYAML>=6.0",
        "typer>=0.9",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "pytest-cov>=2.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
        "tiktoken": [
            "tiktoken>=0.4.0",
        ],
        "all": [
            "tiktoken>=0.4.0",
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "pytest-cov>=2.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "context-budget=context_budget.cli:main",
        ],
    },
)
