#!/usr/bin/env python3
"""
The setup script used to package the fixup library and executable.

To build the project, enter the project's root directory and do:
python3 setup.py bdist_wheel

After the project has been built, you can install it locally:
pip3 install dist/fixup-*.whl

For development, install it in editable mode with the test dependencies:
pip3 install -e .[test]
"""

import re
from pathlib import Path
from setuptools import find_namespace_packages, setup


def _get_file_contents(file_path: Path) -> str:
	"""
	Helper function to get README contents
	"""

	with open(file_path, encoding="utf-8") as file:
		return file.read()

def _get_version() -> str:
	"""
	Helper function to get VERSION from source code
	"""

	source_path = Path(__file__).resolve().parent / "fixup" / "__init__.py"
	contents = _get_file_contents(source_path)
	match = re.search(r'^VERSION = "([^"]+)"$', contents, flags=re.MULTILINE)
	if not match:
		raise RuntimeError(f"VERSION not found in {source_path}")
	return match.group(1)

setup(
	version=_get_version(),
	name="fixup",
	description="Make e-book HTML exported by a converter readable in a browser.",
	long_description=_get_file_contents(Path(__file__).resolve().parent / "README.md"),
	long_description_content_type="text/markdown",
	classifiers=[
		"Development Status :: 5 - Production/Stable",
		"Intended Audience :: End Users/Desktop",
		"Topic :: Text Processing :: Markup :: HTML",
		"License :: OSI Approved :: MIT License",
		"Programming Language :: Python :: 3"
	],
	keywords="ebooks html calibre tidy",
	# `fixup.commands` has no __init__.py, so plain find_packages() would skip it
	packages=find_namespace_packages(include=["fixup", "fixup.*"]),
	package_data={
		"fixup": ["data/*.js"]
	},
	entry_points={
		"console_scripts": [
			"fixup = fixup.main:main",
		],
	},

	# Libraries are pinned to specific versions to prevent surprise breakage.
	python_requires=">=3.8",
	install_requires=[
		"chardet==5.2.0",
		"cssselect==1.2.0",
		"importlib_resources==6.4.5",
		"lxml==5.3.0",
		"natsort==8.4.0",
		"psutil==6.1.0",
		"regex==2024.11.6",
		"rich==13.9.4"
	],
	extras_require={
		"test": [
			"pytest==8.3.3"
		]
	}
)
