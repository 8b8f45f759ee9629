"""
This module implements the `fixup version` command.
"""

import fixup

def version() -> int:
	"""
	Entry point for `fixup version`, also reached through `fixup --version`.
	"""

	print(f"{fixup.VERSION}")
	return 0
