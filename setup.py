from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="schedgraph",
    version="0.1.0",
    description=(
        "Task-graph analysis for scheduling: SCC condensation, topological "
        "ordering and DAG critical paths."
    ),
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"schedgraph": ["schemas/*.json"]},
    python_requires=">=3.10",
    install_requires=["networkx>=3.0", "PyYAML>=6.0", "jsonschema>=4.0"],
    extras_require={"test": ["pytest>=7.0"]},
    entry_points={"console_scripts": ["schedgraph=schedgraph.cli:main"]},
)
