"""
This module implements the `fixup print-engine` command.
"""

import argparse

import fixup.preprocess


def print_engine(plain_output: bool) -> int: # pylint: disable=unused-argument
	"""
	Entry point for `fixup print-engine`
	"""

	parser = argparse.ArgumentParser(description="Print the browser script that reflows a book on page load, exactly as `fixup inject` writes it.")
	parser.parse_args()

	print(fixup.preprocess.get_engine_script(), end="")

	return 0
