#!/usr/bin/env python3
"""
Defines the ordered rewrite rules that turn converter output into readable HTML.

Each rule is an independent pass that selects elements and mutates them. Rules run
in the order of REWRITE_RULES, because later rules assume earlier ones have run.
A rule that matches nothing does nothing.

These are the same rules the browser engine (data/fixup.js) applies on page load.
"""

from typing import Callable, Dict, List, Tuple

import fixup
from fixup.easy_html import EasyHtmlTree, EasyHtmlElement, create_element

CONTENT_ID = "content"
BLOCK_TAG = "div"
HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
CODE_BLOCK_CLASS = "code-block"

# (class, labels); a heading matching any label marks its block with the class
CALLOUT_GROUPS: List[Tuple[str, Tuple[str, ...]]] = [
	("tip", ("Tip",)),
	("note", ("Note",)),
	("warn", ("Warning", "Caution"))
]

STYLESHEET_RULES = [
	"tt {font-size: 1.2em !important; margin-top:1em;}",
	"body {font-family: arial; font-size: 0.8em;}",
	"code {font-size: 1.2em;}",
	"table { border-collapse: collapse; }",
	"th {text-align: left;}",
	"th,td {padding: 0.2em;}",
	"hr {display:none;}",
	".code-block { margin-top: 1em; margin-left: 1em; }",
	".tip  { background-color: #E0FFE0; }",
	".note { background-color: #FFFFDD; }",
	".warn { background-color: #FFDDDD; }"
]

STYLESHEET = "".join(STYLESHEET_RULES)

class ReflowContext:
	"""
	The document being reflowed, plus the content container the rules are scoped to.

	The container may be detached from the document while the rules run.
	"""

	def __init__(self, dom: EasyHtmlTree, content: EasyHtmlElement):
		self.dom = dom
		self.content = content

def escape_xpath(string: str) -> str:
	"""
	Xpath string literals don't have escape sequences for ' and "
	So to escape them, we have to use the xpath concat() function.
	See https://stackoverflow.com/a/6938681

	This function returns the *enclosing quotes*, so it must be used without them.
	"""

	if "'" not in string:
		return f"'{string}'"

	if '"' not in string:
		return f'"{string}"'

	# Can't use f-strings here because f-strings can't contain \ escapes
	return "concat('%s')" % string.replace("'", "',\"'\",'")

def inject_stylesheet(context: ReflowContext) -> int:
	"""
	Append the reading stylesheet to the document head.
	"""

	context.dom.head.append(create_element("style", {"type": "text/css"}, STYLESHEET))

	return 1

def unwrap_inline_code(context: ReflowContext) -> int:
	"""
	Replace `<code>` elements inside `<tt>` with their contents.

	Example:
	<tt><code>x=1</code></tt> -> <tt>x=1</tt>
	"""

	nodes = context.content.css_select("tt code")
	for node in nodes:
		node.unwrap()

	return len(nodes)

def unwrap_table_cell_paragraphs(context: ReflowContext) -> int:
	"""
	Remove paragraphs wrapping `<font>` elements directly inside table cells.

	Example:
	<td><p><font>foo</font></p></td> -> <td><font>foo</font></td>
	"""

	paragraphs: List[EasyHtmlElement] = []
	for node in context.content.css_select("td > p > font"):
		if node.parent not in paragraphs:
			paragraphs.append(node.parent)

	for paragraph in paragraphs:
		paragraph.unwrap()

	return len(paragraphs)

def strip_size_attributes(context: ReflowContext) -> int:
	"""
	Remove hard-coded `size` attributes from every element in the document.

	The content container may be detached while the rules run, so it is searched
	separately from the rest of the document.
	"""

	nodes: List[EasyHtmlElement] = []
	for node in context.content.css_select("[size]") + context.dom.css_select("[size]"):
		if node not in nodes:
			nodes.append(node)

	for node in nodes:
		node.remove_attr("size")

	return len(nodes)

def mark_code_blocks(context: ReflowContext) -> int:
	"""
	Add the `code-block` class to the nearest block containing a `<tt>` element.
	"""

	count = 0
	for node in context.content.css_select("tt"):
		block = node.closest(BLOCK_TAG)
		if block is not None:
			block.add_attr_value("class", CODE_BLOCK_CLASS)
			count = count + 1

	return count

def _has_callout_class(node: EasyHtmlElement) -> bool:
	return any(node.has_attr_value("class", callout_class) for callout_class, _ in CALLOUT_GROUPS)

def classify_callouts(context: ReflowContext) -> int:
	"""
	Mark blocks headed by "Tip", "Note", "Warning", or "Caution" with a callout class.

	A block only ever gets one callout class. Groups are tried in the order of
	CALLOUT_GROUPS, so a block that already has a callout class is left alone.
	"""

	heading_test = " or ".join(f"self::{tag}" for tag in HEADING_TAGS)
	count = 0

	for callout_class, labels in CALLOUT_GROUPS:
		for label in labels:
			for heading in context.content.xpath(f"descendant-or-self::*[{heading_test}][contains(string(.), {escape_xpath(label)})]"):
				block = heading.closest(BLOCK_TAG)
				if block is not None and not _has_callout_class(block):
					block.add_attr_value("class", callout_class)
					count = count + 1

	return count

def move_cover_image(context: ReflowContext) -> int:
	"""
	Move the last image in the book, which is the cover, to the top of the content container.
	"""

	images = context.content.css_select("img")
	if not images:
		return 0

	cover = images[-1]
	cover.remove()
	context.content.prepend(cover)

	return 1

# Converted books sometimes carry a legacy `border` attribute on tables as well,
# but no rule strips it: the selection it was applied to was always empty.
REWRITE_RULES: List[Tuple[str, Callable[[ReflowContext], int]]] = [
	("inject-stylesheet", inject_stylesheet),
	("unwrap-inline-code", unwrap_inline_code),
	("unwrap-table-cell-paragraphs", unwrap_table_cell_paragraphs),
	("strip-size-attributes", strip_size_attributes),
	("mark-code-blocks", mark_code_blocks),
	("classify-callouts", classify_callouts),
	("move-cover-image", move_cover_image)
]

def apply_rules(context: ReflowContext) -> Dict[str, int]:
	"""
	Apply every rewrite rule, in order, to the context.

	OUTPUTS
	A dict of rule name to the number of elements that rule changed.
	"""

	if context.content is None:
		raise fixup.InvalidHtmlException(f"Document has no content container [html]<{BLOCK_TAG} id=\"{CONTENT_ID}\">[/].")

	counts = {}
	for name, rule in REWRITE_RULES:
		counts[name] = rule(context)

	return counts
