from setuptools import setup, find_packages

setup(
    name="library-catalog",
    version="0.1",
    packages=find_packages(include=["src", "src.*"]),
    python_requires=">=3.9",
    install_requires=[
        "sqlalchemy[asyncio]>=2.0",
        "aiosqlite",
        "asyncpg",
        "pydantic>=2",
        "pydantic-settings",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "pytest-cov",
        ],
    },
)
