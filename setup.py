from setuptools import find_packages, setup

setup(
    name="pipecheck",
    version="0.3.0",
    description="Connection rules for stream pipeline graphs",
    packages=find_packages(include=["pipecheck", "pipecheck.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "rich>=13.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["pipecheck=pipecheck.cli:main"],
    },
)
