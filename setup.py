from setuptools import setup, find_namespace_packages

setup(
    name="dockinfo",
    version="0.1.0",
    packages=find_namespace_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "pyyaml>=6.0",
        "click>=8.0",
        "python-dotenv>=1.0",
        "docker>=7.0",
        "requests>=2.28",
        "fastapi>=0.115",
        "uvicorn>=0.23",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "dockinfo=dockinfo.CLI.main:main",
        ],
    },
)
