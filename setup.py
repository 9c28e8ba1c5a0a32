"""Setup script for the datacollector package."""

from setuptools import find_packages, setup

setup(
    name="datacollector",
    version="0.1.0",
    description="UDP temperature/humidity telemetry collector",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pymysql",
        "pyyaml",
        "python-dotenv",
        "rich",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-asyncio",
            "black",
            "isort",
            "mypy",
        ],
    },
    entry_points={
        "console_scripts": [
            "datacollector-listener=datacollector.listener:main",
            "datacollector-display=datacollector.display:main",
            "datacollector-send=datacollector.sender:main",
        ],
    },
)
