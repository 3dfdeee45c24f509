#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
Cache-backed finder of info blocks, their properties and property
enumerations stored in DynamoDB.
"""
__author__ = "bibow"

from setuptools import find_packages, setup

setup(
    name="Iblock-Finder",
    version="0.0.1",
    author="Idea Bosque",
    author_email="ideabosque@gmail.com",
    description="Cache-backed finder of info blocks and their properties",
    long_description=__doc__,
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    zip_safe=False,
    platforms="Linux",
    python_requires=">=3.8",
    install_requires=["tenacity", "pynamodb", "deepdiff", "cachetools"],
    extras_require={"test": ["pytest"]},
    classifiers=[
        "Programming Language :: Python",
        "Environment :: Web Environment",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
