"""Setup script for the project."""

from setuptools import setup, find_packages

setup(
    name="gymbuddy-client",
    version="1.0.0",
    description="Workout tracking client: program progression, live sessions and service sync",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "httpx>=0.27",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "redis>=5.0.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    python_requires=">=3.10",
)
