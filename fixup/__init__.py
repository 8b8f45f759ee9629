#!/usr/bin/env python3
"""
Defines various package-level constants and helper functions.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Union, List, Optional

from rich.console import Console
from rich.theme import Theme
from natsort import natsorted, ns
import regex

VERSION = "1.0.0"
MESSAGE_INDENT = "    "
UNICODE_BOM = "\ufeff"
DEFAULT_LIBRARY_FILENAME = "jquery-1.6.2.min.js"
DEFAULT_ASSET_DIR_NAME = "js"
DEFAULT_ENGINE_FILENAME = "fixup.js"
DEFAULT_TIDY_WRAP = 120
PERFORMANCE_TIER_NORMAL = "normal"
PERFORMANCE_TIER_SLOW = "slow"
PERFORMANCE_TIERS = (PERFORMANCE_TIER_NORMAL, PERFORMANCE_TIER_SLOW)
RICH_THEME = Theme({
	"html": "bright_blue",
	"val": "bright_blue",
	"attr": "bright_blue",
	"class": "bright_blue",
	"path": "bright_blue",
	"url": "bright_blue",
	"text": "bright_blue",
	"bash": "bright_blue",
	"css": "bright_blue"
})

class FixupException(Exception):
	""" Wrapper class for fixup exceptions """

	code = 0

# Note that we skip error codes 1 and 2 as they have special meanings:
# http://www.tldp.org/LDP/abs/html/exitcodes.html

class InvalidHtmlException(FixupException):
	""" Invalid HTML """
	code = 3

class InvalidEncodingException(FixupException):
	""" Invalid encoding """
	code = 4

class MissingDependencyException(FixupException):
	""" Missing dependency """
	code = 5

class InvalidInputException(FixupException):
	""" Invalid input """
	code = 6

class InvalidFileException(FixupException):
	""" Invalid file """
	code = 8

class InvalidArgumentsException(FixupException):
	""" Invalid arguments """
	code = 11

class InvalidCssException(FixupException):
	""" Invalid CSS """
	code = 14

def strip_bom(string: str) -> str:
	"""
	Remove the Unicode Byte Order Mark from a string.

	INPUTS
	string: A Unicode string

	OUTPUTS
	The input string with the Byte Order Mark removed
	"""

	if string.startswith(UNICODE_BOM):
		string = string[1:]

	return string

def prep_output(message: str, plain_output: bool = False) -> str:
	"""
	Return a message formatted for the chosen output style, i.e., color or plain.
	"""

	if plain_output:
		# Replace color markup with `
		message = regex.sub(r"\[(?:/|html|val|attr|css|class|path|url|text|bash|link)(?:=[^\]]*?)*\]", "`", message)
		message = regex.sub(r"`+", "`", message)

	return message

def init_console(plain_output: bool = False) -> Console:
	"""
	Return a rich console configured with the package theme.
	"""

	# Syntax highlighting will do weird things when printing paths; force_terminal prints colors when called from GNU Parallel
	return Console(highlight=False, theme=RICH_THEME, force_terminal=False if plain_output else is_called_from_parallel())

def print_error(message: Union[FixupException, str], verbose: bool = False, is_warning: bool = False, plain_output: bool = False) -> None:
	"""
	Helper function to print a colored error message to the console.

	Allowed BBCode tags:
	[link=foo]bar[/] - Hyperlink
	[html] - HTML, usually a tag
	[attr] - A lone HTML attribute name (without `="foo"`)
	[val] - A lone HTML attribute value (not a class)
	[class] - A lone HTML class value
	[path] - Filesystem path or glob
	[url] - A URL
	[text] - Non-semantic text that requires color
	[bash] - A command or flag of a command
	"""

	label = "Error" if not is_warning else "Warning"
	bg_color = "red" if not is_warning else "yellow"

	# We have to print to stdout in case we're called from GNU Parallel, otherwise weird newline issues occur
	output_file = sys.stderr if not is_warning and not is_called_from_parallel() else sys.stdout

	message = str(message)

	if verbose:
		message = str(message).replace("\n", f"\n{MESSAGE_INDENT}")

	console = Console(file=output_file, highlight=False, theme=RICH_THEME, force_terminal=is_called_from_parallel())

	if plain_output:
		message = prep_output(message, True)
		console.print(f"{MESSAGE_INDENT if verbose else ''}[{label}] {message}")
	else:
		console.print(f"{MESSAGE_INDENT if verbose else ''}[white on {bg_color} bold] {label} [/] {message}")

def is_positive_integer(value: str) -> int:
	"""
	Helper function for argparse.
	Raise an exception if value is not a positive integer.
	"""

	try:
		int_value = int(value)
		if int_value <= 0:
			raise argparse.ArgumentTypeError(f"{value} is not a positive integer")
	except Exception as ex:
		raise argparse.ArgumentTypeError(f"{value} is not a positive integer") from ex

	return int_value

def get_target_filenames(targets: list, allowed_extensions: Union[tuple, str]) -> List[Path]:
	"""
	Helper function to convert a list of filenames or directories into a list of filenames based on some parameters.

	allowed_extensions is only applied on targets that are directories.

	INPUTS
	targets: A list of filenames or directories
	allowed_extensions: A tuple containing a series of allowed filename extensions; extensions must begin with "."

	OUTPUTS
	A naturally sorted list of file paths contained in the target list.
	"""

	target_filenames = set()

	if isinstance(allowed_extensions, str):
		allowed_extensions = (allowed_extensions,)

	for target in targets:
		target = Path(target).resolve()

		if target.is_dir():
			for file_path in target.glob("**/*"):
				if not file_path.is_file():
					continue

				if allowed_extensions:
					if file_path.suffix in allowed_extensions:
						target_filenames.add(file_path)
				else:
					target_filenames.add(file_path)
		else:
			# If we're looking at an actual file, just add it regardless of its extension
			target_filenames.add(target)

	return natsorted(list(target_filenames), key=lambda x: str(x.name), alg=ns.PATH)

def is_called_from_parallel(return_none=True) -> Union[bool,None]:
	"""
	Decide if we're being called from GNU parallel.
	This is good to know in case we want to tweak some output.

	This is almost always passed directly to the force_terminal option of rich.console(),
	meaning that `None` means "guess terminal status" and `False` means "no colors at all".
	We typically want to guess, so this returns None by default if not called from Parallel.
	To return false in that case, pass return_none=False
	"""

	import psutil # pylint: disable=import-outside-toplevel

	try:
		for line in psutil.Process(psutil.Process().ppid()).cmdline():
			if regex.search(fr"{os.sep}parallel$", line):
				return True
	except Exception:
		# If we can't figure it out, don't worry about it
		pass

	return None if return_none else False

def validate_performance_tier(value: Optional[str]) -> Optional[str]:
	"""
	Return a normalized performance tier, or raise if it isn't one we know.
	"""

	if value is None:
		return None

	tier = value.strip().lower()
	if tier not in PERFORMANCE_TIERS:
		raise InvalidArgumentsException(f"Unknown performance tier: [text]{value}[/]. Expected one of: {', '.join(PERFORMANCE_TIERS)}.")

	return tier
