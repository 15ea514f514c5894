from setuptools import setup, find_packages

setup(
    name="doctree",
    version="0.1.0",
    description="Document tree helper: folder lookup and bootstrap over opaque-id storage providers",
    packages=find_packages(),
    install_requires=[
        "click>=8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "doctree=doctree.cli:main",
        ],
    },
)
