from setuptools import setup, find_packages

setup(
    name="streamhu",
    version="0.1.0",
    description="Stream and Riparian Habitat Unit Calculator",
    author="onWater Engineering Team",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "pandas>=2.0",
        "numpy>=1.24",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
)
