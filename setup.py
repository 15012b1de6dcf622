#!/usr/bin/env python

from setuptools import setup

setup(
    name="pbxgraph",
    version="0.1.0",
    packages=[
        "pbxgraph",
        "pbxgraph.details",
        "pbxgraph.details.tools",
    ],
    python_requires=">=3.9",
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["pbxgraph = pbxgraph.__main__:main"]},
)
