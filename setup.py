from setuptools import setup, find_packages

# Common dependencies
common_dependencies = [
    "pydantic>=2.0",
    "python-dotenv",
    "click",
]

setup(
    name="agentstudio",
    version="0.1.0",
    packages=find_packages(include=["agentstudio", "agentstudio.*"]),
    include_package_data=True,
    install_requires=common_dependencies,
    extras_require={
        "dev": [
            "coverage",
            "flake8",
            "pytest",
            "pytest-asyncio",
            "pytest-cov",
            "pytest-mock",
        ],
    },
    entry_points={
        "console_scripts": [
            "agentstudio=agentstudio.cli.studio_cli:main",
        ],
    },
    python_requires=">=3.10",
    description="Control plane for multi-agent task orchestration: event bus, task queue and tick-driven orchestrator",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    package_data={
        "agentstudio": ["py.typed"],
    },
)
