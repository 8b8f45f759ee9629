#!/usr/bin/env python3
"""
Defines the EasyHtmlTree class, which is a convenience wrapper around lxml.html.
The class exposes some helpful functions like css_select() and xpath().
"""

from typing import Dict, List, Optional, Union

import regex
from lxml import cssselect, etree
import lxml.html
from cssselect import parser

import fixup

CSS_SELECTOR_CACHE: Dict[str, cssselect.CSSSelector] = {}

def _get_selector(selector: str) -> cssselect.CSSSelector:
	"""
	Return a compiled selector for the HTML translator, compiling it only once.
	"""

	try:
		sel = CSS_SELECTOR_CACHE.get(selector)
		if not sel:
			sel = cssselect.CSSSelector(selector, translator="html")
			CSS_SELECTOR_CACHE[selector] = sel

		return sel
	except parser.SelectorSyntaxError as ex:
		raise fixup.InvalidCssException(f"Invalid selector: [css]{selector}[/]") from ex

def _wrap_results(query_result) -> List:
	"""
	Convert raw lxml xpath results into strings, floats, or EasyHtmlElements.
	"""

	result: List[Union[str, EasyHtmlElement, float]] = []

	if isinstance(query_result, etree._ElementUnicodeResult): # pylint: disable=protected-access
		result.append(str(query_result))
	elif isinstance(query_result, (float, bool)):
		result.append(query_result)
	else:
		for element in query_result:
			if isinstance(element, str):
				result.append(str(element))
			elif isinstance(element, etree._Element): # pylint: disable=protected-access
				# Skip comments and processing instructions, we only ever want real elements
				if isinstance(element.tag, str):
					result.append(EasyHtmlElement(element))
			else:
				result.append(element)

	return result

class EasyHtmlTree:
	"""
	A helper class to make some lxml.html operations a little less painful.
	Represents an entire HTML document.
	"""

	def __init__(self, html: str):
		self.doctype = None
		self.xml_declaration = None

		# lxml refuses to parse unicode strings that carry an encoding declaration
		match = regex.match(r"^\s*(<\?xml[^>]*?\?>)\s*", html)
		if match:
			self.xml_declaration = match.group(1)
			html = html[match.end():]

		if not html.strip():
			raise fixup.InvalidHtmlException("Couldn’t parse HTML. Document is empty.")

		try:
			# huge_tree allows documents of arbitrary size, which whole books usually are
			custom_parser = lxml.html.HTMLParser(huge_tree=True, default_doctype=False)
			self.etree = lxml.html.document_fromstring(html, parser=custom_parser)
		except (etree.ParserError, etree.XMLSyntaxError, ValueError) as ex:
			raise fixup.InvalidHtmlException(f"Couldn’t parse HTML. Exception: {ex}") from ex

		self.doctype = self.etree.getroottree().docinfo.doctype or None

	@property
	def root(self):
		"""
		Return an EasyHtmlElement representing the root `<html>` element
		"""

		return EasyHtmlElement(self.etree)

	@property
	def head(self):
		"""
		Return the `<head>` element, or raise if the document doesn't have one.
		"""

		nodes = self.xpath("/html/head")
		if not nodes:
			raise fixup.InvalidHtmlException("Document has no [html]<head>[/] element.")

		return nodes[0]

	@property
	def body(self):
		"""
		Return the `<body>` element, or raise if the document doesn't have one.
		"""

		nodes = self.xpath("/html/body")
		if not nodes:
			raise fixup.InvalidHtmlException("Document has no [html]<body>[/] element.")

		return nodes[0]

	def css_select(self, selector: str) -> List:
		"""
		Shortcut to select elements based on CSS selector.
		"""

		return self.xpath(_get_selector(selector).path)

	def xpath(self, selector: str) -> List:
		"""
		Shortcut to select elements based on xpath selector.
		"""

		try:
			return _wrap_results(self.etree.xpath(selector))
		except etree.XPathError as ex:
			raise fixup.InvalidInputException(f"Invalid xpath: [text]{selector}[/]. Exception: {ex}") from ex

	def set_charset(self, charset: str = "utf-8") -> None:
		"""
		Declare the document's character encoding in its `<head>`.

		Existing `<meta charset>` and `<meta http-equiv="Content-Type">` declarations are
		rewritten to the new encoding. If there are none, one is added.
		"""

		head = self.head
		declarations = self.xpath("/html/head/meta[@charset or translate(@http-equiv, 'ABCDEFGHIJKLMNOPQRSTUVWXYZ', 'abcdefghijklmnopqrstuvwxyz') = 'content-type']")

		for node in declarations:
			if node.get_attr("charset") is not None:
				node.set_attr("charset", charset)
			else:
				node.set_attr("content", f"text/html; charset={charset}")

		if not declarations:
			head.prepend(create_element("meta", {"http-equiv": "Content-Type", "content": f"text/html; charset={charset}"}))

	def to_bytes(self, encoding: str = "utf-8") -> bytes:
		"""
		Serialize the tree to bytes in the given encoding.

		Call set_charset() first so that the `<head>` declares the same encoding.
		"""

		html = lxml.html.tostring(self.etree, encoding=encoding, doctype=self.doctype)

		if self.xml_declaration:
			declaration = regex.sub(r"""encoding=(["'])[^"']*\1""", f"encoding=\"{encoding}\"", self.xml_declaration)
			html = declaration.encode(encoding) + b"\n" + html

		return html + b"\n"

	def to_string(self) -> str:
		"""
		Serialize the tree to a string.
		"""

		return self.to_bytes().decode("utf-8")

def create_element(tag: str, attrs: Optional[Dict[str, str]] = None, text: Optional[str] = None):
	"""
	Create a new, detached EasyHtmlElement.

	Example:
	create_element("script", {"type": "text/javascript", "src": "js/fixup.js"})
	"""

	element = lxml.html.Element(tag)

	if attrs:
		for name, value in attrs.items():
			element.set(name, value)

	if text is not None:
		element.text = text

	return EasyHtmlElement(element)

class EasyHtmlElement:
	"""
	Represents an lxml.html element.
	"""

	def __init__(self, lxml_element: etree._Element):
		self.lxml_element = lxml_element

	def __eq__(self, other) -> bool:
		return isinstance(other, EasyHtmlElement) and self.lxml_element is other.lxml_element

	def __hash__(self) -> int:
		return hash(id(self.lxml_element))

	def css_select(self, selector: str) -> List:
		"""
		Select descendants of this element (or the element itself) matching a CSS selector.

		This works on detached subtrees too, because the compiled selector is a relative xpath.
		"""

		return self.xpath(_get_selector(selector).path)

	def xpath(self, selector: str) -> List:
		"""
		Shortcut to select elements based on xpath selector.
		"""

		return _wrap_results(self.lxml_element.xpath(selector))

	def closest(self, tag: str):
		"""
		Return the nearest element with the given tag, starting with this element
		and walking up its ancestors, or None if there isn't one.
		"""

		nodes = self.xpath(f"ancestor-or-self::{tag}[1]")

		return nodes[0] if nodes else None

	def remove_attr(self, attribute: str) -> None:
		"""
		Remove an attribute from this node.
		"""

		try:
			self.lxml_element.attrib.pop(attribute)
		except KeyError:
			# If the attribute doesn't exist, just continue
			pass

	def has_attr_value(self, attribute: str, value: str) -> bool:
		"""
		Return True if the space-separated attribute contains the given value.
		"""

		return value in (self.get_attr(attribute) or "").split()

	def add_attr_value(self, attribute: str, value: str) -> None:
		"""
		Add a space-separated attribute value to the target attribute.
		If the attribute doesn't exist, add it. If the value is already present, do nothing.

		Mainly useful for HTML `class` attributes.

		Example adding value `bar` to the `class` attribute:
		<p class="foo"> -> <p class="foo bar">
		"""

		if self.has_attr_value(attribute, value):
			return

		existing_value = self.get_attr(attribute) or ""

		self.set_attr(attribute, (existing_value + " " + value).strip())

	def get_attr(self, attribute: str) -> Optional[str]:
		"""
		Return the value of an attribute on this element.
		"""

		return self.lxml_element.get(attribute)

	def set_attr(self, attribute: str, value: str) -> None:
		"""
		Set the value of an attribute on this element.
		"""

		self.lxml_element.set(attribute, value)

	def inner_text(self) -> str:
		"""
		Return the text portion of this element, without any tags.

		Example:
		`<p>Hello there, <abbr>Mr.</abbr> Smith!</p>` -> `Hello there, Mr. Smith!`
		"""

		return self.lxml_element.text_content().strip()

	def remove(self) -> None:
		"""
		Remove this element from its dom tree, leaving any text that followed it in place.
		"""

		# lxml_element.remove() removes both the element AND the text following it.
		# So, we have to move the tail to the previous sibling or the parent first.
		parent = self.lxml_element.getparent()
		if parent is None:
			return

		if self.lxml_element.tail:
			prev = self.lxml_element.getprevious()
			if prev is not None: # We can't do `if prev` because we get a FutureWarning from lxml
				prev.tail = (prev.tail or "") + self.lxml_element.tail
			else:
				parent.text = (parent.text or "") + self.lxml_element.tail

		self.lxml_element.tail = None
		parent.remove(self.lxml_element)

	def unwrap(self) -> None:
		"""
		Remove the element's wrapping tag and replace it with the element's contents.

		Example:
		<p>a <b>bold <i>it</i> x</b> tail</p> -> <p>a bold <i>it</i> x tail</p>
		"""

		# In lxml, there are no "text nodes" like in a classic DOM. There are only element nodes.
		# An element has a `.text` property which is the child text UP TO THE FIRST CHILD ELEMENT.
		# An element's `.tail` property contains text *after* the element, up to its first element sibling.

		parent = self.lxml_element.getparent()
		if parent is None:
			return

		# Text before any child elements belongs right where this element starts
		if self.lxml_element.text:
			prev = self.lxml_element.getprevious()
			if prev is None:
				parent.text = (parent.text or "") + self.lxml_element.text
			else:
				prev.tail = (prev.tail or "") + self.lxml_element.text

			self.lxml_element.text = None

		# Inserting at our own index places each child directly before us.
		# Children carry their .tail with them, so the text between them moves too.
		index = parent.index(self.lxml_element)
		for offset, child in enumerate(list(self.lxml_element)):
			parent.insert(index + offset, child)

		# remove() hands our own .tail to whatever now precedes us, which is the last moved child
		self.remove()

	def append(self, node) -> None:
		"""
		Place node as the last child of this node.
		"""

		if isinstance(node, EasyHtmlElement):
			self.lxml_element.append(node.lxml_element)
		else:
			self.lxml_element.append(node)

	def prepend(self, node) -> None:
		"""
		Place node as the first child of this node.
		"""

		# If the node we're inserting in to has text, lxml will insert the new
		# node *after* the text. So, we have to make the node's lxml `.text`
		# the new node's lxml `.tail`.
		target = node
		if isinstance(node, EasyHtmlElement):
			target = node.lxml_element

		if self.lxml_element.text:
			target.tail = (target.tail or "") + self.lxml_element.text

		self.lxml_element.insert(0, target)
		self.lxml_element.text = None

	def wrap_children_with(self, node) -> None:
		"""
		Move all of this node's contents, including text, into the passed node,
		and make the passed node this node's only child.

		Example:
		<body>foo <p>bar</p></body> -> <body><div>foo <p>bar</p></div></body>
		"""

		wrapper = node.lxml_element if isinstance(node, EasyHtmlElement) else node

		wrapper.text = self.lxml_element.text
		self.lxml_element.text = None

		for child in list(self.lxml_element):
			wrapper.append(child)

		self.lxml_element.append(wrapper)

	@property
	def children(self) -> List:
		"""
		Return a list representing of this node's direct element children
		"""

		return [EasyHtmlElement(child) for child in self.lxml_element if isinstance(child.tag, str)]

	@property
	def tag(self) -> str:
		"""
		Return a string representing this node's tag name, like `body` or `div`
		"""

		return self.lxml_element.tag

	@property
	def parent(self): # This returns an EasyHtmlElement but we can't type hint this until Python 3.10
		"""
		Return an EasyHtmlElement representing this node's parent node, or None if it is detached
		"""

		parent = self.lxml_element.getparent()

		return EasyHtmlElement(parent) if parent is not None else None

	@property
	def text(self) -> Optional[str]:
		"""
		Return only the text up to the first element node

		Example:
		`<p>Hello there, <abbr>Mr.</abbr> Smith!</p>` -> `Hello there, `
		"""

		return self.lxml_element.text
