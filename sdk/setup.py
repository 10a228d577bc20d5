from setuptools import setup, find_packages

setup(
    name="asset-client",
    version="0.1.0",
    packages=find_packages(),
    install_requires=["httpx>=0.26.0"],
    entry_points={
        "console_scripts": [
            "asset-client=asset_client.cli:main",
        ],
    },
)
