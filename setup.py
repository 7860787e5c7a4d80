from setuptools import setup, find_packages

setup(
    name="network-inventory",
    version="1.0.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={
        "network_inventory": [
            "web_templates/*.html",
            "web_static/*.js",
            "web_static/*.css",
        ],
    },
    install_requires=[
        "aiohttp>=3.9.0",
        "fastapi>=0.110.0",
        "jinja2>=3.1.0",
        "pydantic>=2.5.0",
        "pyyaml>=6.0",
        "uvicorn>=0.27.0",
    ],
    extras_require={
        "dev": [
            "httpx>=0.26.0",
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "network-inventory=network_inventory.main:main",
        ],
    },
    python_requires=">=3.11",
)
