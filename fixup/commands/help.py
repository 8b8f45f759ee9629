"""
This module implements the `fixup help` command.
"""

from fixup.main import get_commands


def fixup_help(plain_output: bool) -> int: # pylint: disable=unused-argument
	"""
	Entry point for `fixup help`

	help() is a built-in function so this function is called fixup_help().
	"""

	print("The following commands are available:")

	for command in get_commands():
		print(command)

	return 0
