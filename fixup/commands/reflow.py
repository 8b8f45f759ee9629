"""
This module implements the `fixup reflow` command.
"""

import argparse
from pathlib import Path
from typing import List, Tuple

from rich.table import Table

import fixup
import fixup.engine
import fixup.preprocess
from fixup.easy_html import EasyHtmlTree


def reflow(plain_output: bool) -> int:
	"""
	Entry point for `fixup reflow`
	"""

	parser = argparse.ArgumentParser(description="Apply the reflow engine’s rewrite rules ahead of time, producing static HTML that reads well without any scripts. Injected script references and the hidden body style are removed.")
	parser.add_argument("-a", "--asset-dir", metavar="NAME", default=fixup.DEFAULT_ASSET_DIR_NAME, help=f"the asset directory name used when the scripts were injected; default: {fixup.DEFAULT_ASSET_DIR_NAME}")
	parser.add_argument("-l", "--library", metavar="FILE", default=fixup.DEFAULT_LIBRARY_FILENAME, help=f"the jQuery file name used when the scripts were injected; default: {fixup.DEFAULT_LIBRARY_FILENAME}")
	parser.add_argument("-o", "--output-dir", metavar="DIRECTORY", type=str, default="", help="a directory to place output files in, instead of overwriting the targets; will be created if it doesn’t exist")
	parser.add_argument("-v", "--verbose", action="store_true", help="increase output verbosity")
	parser.add_argument("targets", metavar="TARGET", nargs="+", help="an HTML file, or a directory containing HTML files")
	args = parser.parse_args()

	console = fixup.init_console(plain_output)

	output_dir = None
	if args.output_dir:
		output_dir = Path(args.output_dir).resolve()
		try:
			output_dir.mkdir(parents=True, exist_ok=True)
		except OSError:
			fixup.print_error(f"Couldn’t create output directory: [path][link=file://{output_dir}]{output_dir}[/][/].", plain_output=plain_output)
			return fixup.InvalidArgumentsException.code

	# Files found in a directory target keep their path below that directory's parent, so the output tree mirrors the input
	jobs: List[Tuple[Path, Path]] = []
	for target in args.targets:
		target_path = Path(target).resolve()

		for filepath in fixup.get_target_filenames([target], (".html", ".htm")):
			output_path = filepath
			if output_dir:
				output_path = output_dir / (filepath.relative_to(target_path.parent) if target_path.is_dir() else Path(filepath.name))

			if output_path in [existing_path for _, existing_path in jobs]:
				fixup.print_error(f"More than one target would be written to [path][link=file://{output_path}]{output_path}[/][/].", plain_output=plain_output)
				return fixup.InvalidArgumentsException.code

			jobs.append((filepath, output_path))

	for filepath, output_path in jobs:
		if args.verbose:
			console.print(fixup.prep_output(f"Reflowing [path][link=file://{filepath}]{filepath}[/][/] ...", plain_output), end="")

		try:
			dom = EasyHtmlTree(fixup.preprocess.read_html_file(filepath))
			fixup.preprocess.remove_injected_scripts(dom, Path(args.library).name, args.asset_dir)

			# There is nobody to ask offline, so the gate never applies
			engine = fixup.engine.ReflowEngine(dom, fixup.PERFORMANCE_TIER_NORMAL)
			result = engine.run()

			output_path.parent.mkdir(parents=True, exist_ok=True)
			fixup.preprocess.write_html_file(output_path, dom)
		except fixup.FixupException as ex:
			fixup.print_error(f"File: [path][link=file://{filepath}]{filepath}[/][/]. Exception: {ex}", args.verbose, plain_output=plain_output)
			return ex.code
		except FileNotFoundError:
			fixup.print_error(f"Invalid file: [path][link=file://{filepath}]{filepath}[/][/].", args.verbose, plain_output=plain_output)
			return fixup.InvalidFileException.code

		if args.verbose:
			console.print(f" OK ({result.elapsed:.3f}s)")

			if plain_output:
				for name, count in result.counts.items():
					console.print(f"{fixup.MESSAGE_INDENT}{name}: {count}")
			else:
				table = Table(show_header=True, header_style="bold")
				table.add_column("Rule", no_wrap=True)
				table.add_column("Changed", justify="right")

				for name, count in result.counts.items():
					table.add_row(name, str(count))

				console.print(table)

	return 0
