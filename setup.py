from setuptools import setup, find_packages

setup(
    name="clusterwatch",
    version="1.0.0",
    description="Live system metrics polling for a small cluster of hosts",
    packages=find_packages(include=["clusterwatch", "clusterwatch.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0.0",
        "python-dotenv>=0.19.0",
        "aiohttp>=3.8.0",   # For HTTP client
        "prometheus-client>=0.17.0",
        "fastapi>=0.100.0",
        "uvicorn>=0.22.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "black>=21.0.0",
            "isort>=5.0.0",
        ]
    }
)
