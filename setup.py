from setuptools import find_packages, setup

setup(
    name="docrepo",
    version="0.1.0",
    description="Generic document repository over MongoDB with strict JSON and shell-syntax queries",
    packages=find_packages(include=["docrepo", "docrepo.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "pymongo",  # MongoDB driver and bson
        "mongomock",  # In-memory MongoDB backend
        "pydantic>=2",  # Config and entity models
        "pyyaml",  # Shell-syntax queries and YAML output
        "typer<0.26",  # CLI (0.26+ vendors click; code uses click contexts directly)
        "click",  # CLI exceptions and context (imported directly)
        "rich",  # Terminal formatting
    ],
    extras_require={
        "test": [
            "pytest>=7.0",  # Testing framework
            "pytest-timeout>=2.1",  # Test timeouts
        ],
    },
    entry_points={
        "console_scripts": [
            "docrepo=docrepo.cli:main",
        ],
    },
)
