#!/usr/bin/env python3
"""
Defines functions for normalizing raw converter output with HTML Tidy.
"""

import shutil
import subprocess
from pathlib import Path

import fixup


def get_tidy_path() -> Path:
	"""
	Return the path to the `tidy` executable, or raise if it isn't installed.
	"""

	which_tidy = shutil.which("tidy")
	if not which_tidy:
		raise fixup.MissingDependencyException("Couldn’t locate [bash]tidy[/]. Is it installed?")

	return Path(which_tidy)

def run_tidy(input_path: Path, output_path: Path, wrap: int = fixup.DEFAULT_TIDY_WRAP, encoding: str = "utf8") -> int:
	"""
	Indent, wrap, and re-encode an HTML file with HTML Tidy.

	Tidy exits with a non-zero code for warnings as well as errors, so its exit code
	carries no reliable signal and is never treated as a failure here.

	INPUTS
	input_path: The HTML file to tidy
	output_path: Where to write the tidied HTML; may be the same as input_path
	wrap: The column to wrap lines at
	encoding: The input and output character encoding, as a Tidy flag name like `utf8`

	OUTPUTS
	Tidy's exit code, for informational purposes only.
	"""

	tidy_path = get_tidy_path()

	# Read the input up front, so that tidying a file onto itself doesn't truncate it before Tidy gets to read it
	with open(input_path, "rb") as file:
		source = file.read()

	# Path arguments must be cast to string for Windows compatibility.
	result = subprocess.run([str(tidy_path), "-i", "-wrap", str(wrap), f"-{encoding}"], input=source, stdout=subprocess.PIPE, stderr=subprocess.DEVNULL, check=False)

	with open(output_path, "wb") as file:
		file.write(result.stdout)

	return result.returncode
