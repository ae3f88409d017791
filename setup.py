from setuptools import setup, find_packages

setup(
    name="sparqlRecipes",
    version="0.1.0",
    description="Checks that Fedora 4 changes reach a Fuseki triplestore through the message consumer",
    author="Your Name",
    author_email="you@example.com",
    packages=find_packages(include=["sparqlRecipes", "sparqlRecipes.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
        "requests>=2.31.0",
        "tenacity>=8.2",
        "PyYAML>=6.0",
        "tabulate>=0.8.9",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "requests-mock>=1.11",
            "pytest-socket>=0.6",
        ],
    },
    entry_points={
        "console_scripts": ["sparql-recipes=sparqlRecipes.cli.__main__:main"],
    },
    license="Apache-2.0",
)
