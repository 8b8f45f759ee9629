#!/usr/bin/env python3
"""
Defines functions for preparing a tidied HTML book for in-browser reflow.

The preprocessor copies the script library and the engine script into an asset
directory next to the book, references both from the book's `<head>`, and hides
the `<body>` so the unformatted page doesn't flash before the engine runs.
"""

import shutil
from pathlib import Path
from typing import Optional

import chardet
import importlib_resources

import fixup
from fixup.easy_html import EasyHtmlTree, create_element

def get_engine_script() -> str:
	"""
	Return the source of the browser engine script.

	The script is static; it takes no parameters and reads the performance tier
	from the document it is included in.
	"""

	return importlib_resources.files("fixup").joinpath("data", fixup.DEFAULT_ENGINE_FILENAME).read_text(encoding="utf-8")

def read_html_file(filename: Path) -> str:
	"""
	Return the contents of an HTML file as a string.

	Tidy writes UTF-8, so that is tried first. Anything else is decoded with whatever
	encoding chardet guesses.
	"""

	with open(filename, "rb") as file:
		contents = file.read()

	try:
		html = contents.decode("utf-8")
	except UnicodeDecodeError:
		guess = chardet.detect(contents)
		if not guess["encoding"]:
			raise fixup.InvalidEncodingException(f"Couldn’t detect the encoding of [path][link=file://{filename}]{filename}[/][/].") from None

		try:
			html = contents.decode(guess["encoding"])
		except (UnicodeDecodeError, LookupError) as ex:
			raise fixup.InvalidEncodingException(f"Couldn’t decode [path][link=file://{filename}]{filename}[/][/] as [text]{guess['encoding']}[/].") from ex

	return fixup.strip_bom(html)

def write_html_file(filename: Path, dom: EasyHtmlTree) -> None:
	"""
	Serialize a dom as UTF-8 and overwrite the file with it.

	Whatever encoding the file was read in, the `<head>` is made to declare UTF-8,
	so browsers opening the file from disk decode it correctly.
	"""

	dom.set_charset("utf-8")

	with open(filename, "wb") as file:
		file.write(dom.to_bytes("utf-8"))

def inject_into_dom(dom: EasyHtmlTree, library_filename: str, asset_dir_name: str = fixup.DEFAULT_ASSET_DIR_NAME, engine_filename: str = fixup.DEFAULT_ENGINE_FILENAME, performance_tier: Optional[str] = None) -> None:
	"""
	Add the library and engine script references to a dom and hide its body.

	The library is referenced first, because the engine needs it loaded before it runs.
	"""

	# Look everything up before touching anything, so a bad document or tier leaves the dom untouched
	head = dom.head
	body = dom.body
	tier = fixup.validate_performance_tier(performance_tier)

	for src in (f"{asset_dir_name}/{library_filename}", f"{asset_dir_name}/{engine_filename}"):
		head.append(create_element("script", {"type": "text/javascript", "src": src}))

	# Hide the body until the engine has reflowed it
	body.set_attr("style", "display:none")

	if tier:
		dom.root.set_attr("data-performance-tier", tier)

def inject_scripts(html_path: Path, library_path: Path, asset_dir_name: str = fixup.DEFAULT_ASSET_DIR_NAME, engine_filename: str = fixup.DEFAULT_ENGINE_FILENAME, performance_tier: Optional[str] = None) -> Path:
	"""
	Prepare a tidied HTML file for in-browser reflow, modifying it in place.

	INPUTS
	html_path: The tidied HTML file
	library_path: The script library (jQuery) to copy next to the file
	asset_dir_name: The name of the asset directory to create next to the file
	engine_filename: The filename to write the engine script to
	performance_tier: `normal`, `slow`, or None to let the engine assume `normal`

	OUTPUTS
	The path to the asset directory.
	"""

	html_path = Path(html_path)
	library_path = Path(library_path)

	if not library_path.is_file():
		raise fixup.InvalidFileException(f"Couldn’t find script library [path][link=file://{library_path}]{library_path}[/][/].")

	dom = EasyHtmlTree(read_html_file(html_path))

	# Change the dom first, so a document without a head or body leaves nothing behind on disk
	inject_into_dom(dom, library_path.name, asset_dir_name, engine_filename, performance_tier)

	asset_dir = html_path.parent / asset_dir_name
	asset_dir.mkdir(parents=True, exist_ok=True)

	shutil.copyfile(library_path, asset_dir / library_path.name)

	with open(asset_dir / engine_filename, "w", encoding="utf-8") as file:
		file.write(get_engine_script())

	write_html_file(html_path, dom)

	return asset_dir

def remove_injected_scripts(dom: EasyHtmlTree, library_filename: str, asset_dir_name: str = fixup.DEFAULT_ASSET_DIR_NAME, engine_filename: str = fixup.DEFAULT_ENGINE_FILENAME) -> int:
	"""
	Undo inject_into_dom(): remove the script references, the performance tier, and the hidden body style.

	OUTPUTS
	The number of script references removed.
	"""

	srcs = (f"{asset_dir_name}/{library_filename}", f"{asset_dir_name}/{engine_filename}")
	count = 0

	for node in dom.xpath("/html/head/script[@src]"):
		if node.get_attr("src") in srcs:
			node.remove()
			count = count + 1

	dom.root.remove_attr("data-performance-tier")

	body = dom.body
	if (body.get_attr("style") or "").replace(" ", "") in ("display:none", "display:none;"):
		body.remove_attr("style")

	return count
