#!/usr/bin/env python
#-*- coding:utf-8 -*-

from setuptools import setup, find_packages

setup(
	name = "optichi",
	version = "0.1.0",
	keywords = ("ecophysiology, photosynthesis, optimality, carbon isotopes, GPP"),
	description = "Least-cost optimality predictions of leaf ci:ca, carbon isotope discrimination and GPP",
	long_description = "Least-cost optimality predictions of leaf ci:ca, carbon isotope discrimination and GPP",
	license = "MIT Licence",

	packages = find_packages(exclude=["tests", "tests.*"]),
	include_package_data = True,
	platforms = "any",
	python_requires = ">=3.8",
	install_requires=[
		"numpy",
		"pandas",
	],
	extras_require={
		"test": ["pytest"],
	},
)
