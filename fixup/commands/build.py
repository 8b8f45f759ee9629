"""
This module implements the `fixup build` command.
"""

import argparse
from pathlib import Path

import fixup
import fixup.preprocess
import fixup.tidy


def build(plain_output: bool) -> int:
	"""
	Entry point for `fixup build`
	"""

	parser = argparse.ArgumentParser(description="Tidy an HTML book exported by a converter, then prepare it to be reflowed in the browser. This is `fixup tidy` followed by `fixup inject`.")
	parser.add_argument("-a", "--asset-dir", metavar="NAME", default=fixup.DEFAULT_ASSET_DIR_NAME, help=f"the name of the asset directory to create next to OUTPUT; default: {fixup.DEFAULT_ASSET_DIR_NAME}")
	parser.add_argument("-l", "--library", metavar="FILE", default=fixup.DEFAULT_LIBRARY_FILENAME, help=f"the jQuery file to copy into the asset directory; default: {fixup.DEFAULT_LIBRARY_FILENAME}")
	parser.add_argument("-t", "--performance-tier", metavar="TIER", choices=fixup.PERFORMANCE_TIERS, help="the performance tier of the browser the book will be read in; on `slow`, the reader is asked before the layout is fixed up")
	parser.add_argument("-v", "--verbose", action="store_true", help="increase output verbosity")
	parser.add_argument("-w", "--wrap", metavar="COLUMNS", type=fixup.is_positive_integer, default=fixup.DEFAULT_TIDY_WRAP, help=f"wrap lines at this column; default: {fixup.DEFAULT_TIDY_WRAP}")
	parser.add_argument("input", metavar="INPUT", help="the HTML file exported by the converter")
	parser.add_argument("output", metavar="OUTPUT", nargs="?", help="where to write the finished book; default: overwrite INPUT")
	args = parser.parse_args()

	console = fixup.init_console(plain_output)

	input_path = Path(args.input).resolve()
	output_path = Path(args.output).resolve() if args.output else input_path

	if not input_path.is_file():
		fixup.print_error(f"Invalid file: [path][link=file://{input_path}]{input_path}[/][/].", plain_output=plain_output)
		return fixup.InvalidFileException.code

	try:
		if args.verbose:
			console.print(fixup.prep_output(f"Tidying [path][link=file://{input_path}]{input_path}[/][/] ...", plain_output), end="")

		exit_code = fixup.tidy.run_tidy(input_path, output_path, args.wrap)

		if args.verbose:
			console.print(f" OK (tidy exited with {exit_code})")
			console.print(fixup.prep_output(f"Injecting scripts into [path][link=file://{output_path}]{output_path}[/][/] ...", plain_output), end="")

		asset_dir = fixup.preprocess.inject_scripts(output_path, Path(args.library), args.asset_dir, fixup.DEFAULT_ENGINE_FILENAME, args.performance_tier)

		if args.verbose:
			console.print(" OK")
			console.print(fixup.prep_output(f"Assets written to [path][link=file://{asset_dir}]{asset_dir}[/][/].", plain_output))

	except fixup.FixupException as ex:
		fixup.print_error(ex, plain_output=plain_output)
		return ex.code
	except FileNotFoundError as ex:
		fixup.print_error(f"Invalid file: [path]{ex.filename}[/].", plain_output=plain_output)
		return fixup.InvalidFileException.code

	return 0
