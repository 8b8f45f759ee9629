"""
This module implements the `fixup inject` command.
"""

import argparse
from pathlib import Path

import fixup
import fixup.preprocess


def inject(plain_output: bool) -> int:
	"""
	Entry point for `fixup inject`
	"""

	parser = argparse.ArgumentParser(description="Reference the script library and the reflow engine from tidied HTML files, and hide their bodies until the engine has run. Assets are written to a directory next to each file.")
	parser.add_argument("-a", "--asset-dir", metavar="NAME", default=fixup.DEFAULT_ASSET_DIR_NAME, help=f"the name of the asset directory to create next to each file; default: {fixup.DEFAULT_ASSET_DIR_NAME}")
	parser.add_argument("-l", "--library", metavar="FILE", default=fixup.DEFAULT_LIBRARY_FILENAME, help=f"the jQuery file to copy into the asset directory; default: {fixup.DEFAULT_LIBRARY_FILENAME}")
	parser.add_argument("-t", "--performance-tier", metavar="TIER", choices=fixup.PERFORMANCE_TIERS, help="the performance tier of the browser the book will be read in; on `slow`, the reader is asked before the layout is fixed up")
	parser.add_argument("-v", "--verbose", action="store_true", help="increase output verbosity")
	parser.add_argument("targets", metavar="TARGET", nargs="+", help="an HTML file, or a directory containing HTML files")
	args = parser.parse_args()

	console = fixup.init_console(plain_output)

	for filepath in fixup.get_target_filenames(args.targets, (".html", ".htm")):
		if args.verbose:
			console.print(fixup.prep_output(f"Processing [path][link=file://{filepath}]{filepath}[/][/] ...", plain_output), end="")

		try:
			fixup.preprocess.inject_scripts(filepath, Path(args.library), args.asset_dir, fixup.DEFAULT_ENGINE_FILENAME, args.performance_tier)
		except fixup.FixupException as ex:
			fixup.print_error(f"File: [path][link=file://{filepath}]{filepath}[/][/]. Exception: {ex}", args.verbose, plain_output=plain_output)
			return ex.code
		except FileNotFoundError:
			fixup.print_error(f"Invalid file: [path][link=file://{filepath}]{filepath}[/][/].", args.verbose, plain_output=plain_output)
			return fixup.InvalidFileException.code

		if args.verbose:
			console.print(" OK")

	return 0
