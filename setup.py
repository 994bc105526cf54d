from setuptools import setup, find_packages

setup(
    name="bioscience-explorer",
    version="0.1.0",
    description="Search, filter and trend analytics over a bioscience publication corpus",
    packages=find_packages(include=["src", "src.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests",
        "pydantic",
        "python-dotenv",
        "pydantic-settings",
        "fastapi",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
