from setuptools import find_packages, setup

setup(
    name="esrotate",
    version="1.0.0",
    description="Write to time rotated Elasticsearch indices",
    packages=find_packages(include=["esrotate", "esrotate.*"]),
    python_requires=">=3.8",
    install_requires=[
        "elasticsearch8>=8.13",
        "pyyaml>=6.0",
        "voluptuous>=0.14",
        "click>=8.1",
        "rich>=13.0",
    ],
    extras_require={
        "test": ["pytest>=7.2"],
    },
    entry_points={
        "console_scripts": [
            "esrotate=esrotate.cli.main:main",
        ],
    },
)
