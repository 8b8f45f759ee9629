"""
This module implements the `fixup tidy` command.
"""

import argparse
from pathlib import Path

import fixup
import fixup.tidy


def tidy(plain_output: bool) -> int:
	"""
	Entry point for `fixup tidy`
	"""

	parser = argparse.ArgumentParser(description="Indent and wrap an HTML file with HTML Tidy. Tidy’s warnings and exit code are ignored.")
	parser.add_argument("-v", "--verbose", action="store_true", help="increase output verbosity")
	parser.add_argument("-w", "--wrap", metavar="COLUMNS", type=fixup.is_positive_integer, default=fixup.DEFAULT_TIDY_WRAP, help=f"wrap lines at this column; default: {fixup.DEFAULT_TIDY_WRAP}")
	parser.add_argument("input", metavar="INPUT", help="the HTML file to tidy")
	parser.add_argument("output", metavar="OUTPUT", nargs="?", help="where to write the tidied HTML; default: overwrite INPUT")
	args = parser.parse_args()

	console = fixup.init_console(plain_output)

	input_path = Path(args.input).resolve()
	output_path = Path(args.output).resolve() if args.output else input_path

	if args.verbose:
		console.print(fixup.prep_output(f"Tidying [path][link=file://{input_path}]{input_path}[/][/] ...", plain_output), end="")

	try:
		exit_code = fixup.tidy.run_tidy(input_path, output_path, args.wrap)
	except fixup.FixupException as ex:
		fixup.print_error(ex, plain_output=plain_output)
		return ex.code
	except FileNotFoundError:
		fixup.print_error(f"Invalid file: [path][link=file://{input_path}]{input_path}[/][/].", plain_output=plain_output)
		return fixup.InvalidFileException.code

	if args.verbose:
		console.print(f" OK (tidy exited with {exit_code})")

	return 0
