"""
This file contains the entry point for the `fixup` command.
"""

import argparse
import importlib
import pkgutil
import sys
from typing import List, Optional, Tuple

import fixup.commands

# Subcommands whose entry point can't share the module name because it shadows a built-in
RENAMED_ENTRY_POINTS = {"help": "fixup_help"}

def get_commands() -> List[str]:
	"""
	Return the sorted names of the subcommands found under `fixup.commands`, like `print-engine`.
	"""

	return sorted(module_info.name.replace("_", "-") for module_info in pkgutil.iter_modules(fixup.commands.__path__) if module_info.name != "version")

def split_arguments(argv: List[str]) -> Tuple[List[str], List[str]]:
	"""
	Split a command line into the arguments for `fixup` itself and those for the subcommand.

	argparse would happily consume subcommand flags like `-v` as our own, so everything
	from the first non-flag argument (the subcommand name) onward belongs to the subcommand.

	OUTPUTS
	A tuple of (main arguments, subcommand arguments). The subcommand name is in both.
	"""

	for index, arg in enumerate(argv):
		if not arg.startswith("-"):
			return (argv[:index + 1], argv[index:])

	return (argv, [])

def main(argv: Optional[List[str]] = None) -> None:
	"""
	Entry point for the main `fixup` executable.

	This function delegates subcommands (like `fixup build`) to individual submodules under `fixup.commands`.
	"""

	if argv is None:
		argv = sys.argv[1:]

	# If we're asked for the version, short circuit and exit
	if argv in (["-v"], ["--version"]):
		sys.exit(importlib.import_module("fixup.commands.version").version())

	commands = get_commands()

	parser = argparse.ArgumentParser(description="Make e-book HTML exported by a converter readable in a browser.")
	parser.add_argument("-p", "--plain", dest="plain_output", action="store_true", help="print plain text output, without colors or formatting")
	parser.add_argument("-v", "--version", action="store_true", help="print version number and exit")
	parser.add_argument("command", metavar="COMMAND", choices=commands, help="one of: " + " ".join(commands))
	parser.add_argument("arguments", metavar="ARGS", nargs="*", help="arguments for the subcommand")

	main_args, subcommand_args = split_arguments(argv)
	args = parser.parse_args(main_args)

	# Subcommands parse sys.argv themselves
	sys.argv = subcommand_args

	command_name = args.command.replace("-", "_")
	module = importlib.import_module(f"fixup.commands.{command_name}")
	entry_point = getattr(module, RENAMED_ENTRY_POINTS.get(command_name, command_name))

	try:
		sys.exit(entry_point(args.plain_output))
	except KeyboardInterrupt:
		sys.exit(130) # See http://www.tldp.org/LDP/abs/html/exitcodes.html
