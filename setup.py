from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="nodegroups",
    version="0.1.0",
    description="Capacity-bounded grouping of weighted nodes by pairwise affinity.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"nodegroups.schemas": ["*.json"]},
    python_requires=">=3.9",
    install_requires=["pyyaml", "jsonschema", "networkx"],
    extras_require={"dev": ["pytest"]},
    tests_require=["pytest"],
    entry_points={"console_scripts": ["nodegroups=nodegroups.cli:main"]},
)
