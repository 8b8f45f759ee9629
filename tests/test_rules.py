"""
Tests for the individual rewrite rules.
"""

import pytest

import fixup
import fixup.rules
from fixup.rules import ReflowContext
from helpers import make_dom, class_of


def _context(body: str) -> ReflowContext:
	"""
	Return a context for a document whose body is a single content container holding the given markup.
	"""
	dom = make_dom(f"<div id=\"content\">{body}</div>")
	return ReflowContext(dom, dom.css_select("#content")[0])

def test_inject_stylesheet():
	"""
	Verify that the reading stylesheet is appended to the head.
	"""
	context = _context("<p>x</p>")
	fixup.rules.inject_stylesheet(context)

	styles = context.dom.xpath("/html/head/style")
	assert len(styles) == 1
	assert styles[0].get_attr("type") == "text/css"
	assert ".tip  { background-color: #E0FFE0; }" in styles[0].text

def test_unwrap_inline_code():
	"""
	Verify that code elements inside tt elements are replaced by their text.
	"""
	context = _context("<p>Run <tt><code>x=1</code></tt> now, but keep <code>y</code>.</p>")

	assert fixup.rules.unwrap_inline_code(context) == 1

	tt = context.content.css_select("tt")[0]
	assert tt.text == "x=1"
	assert not tt.children
	assert len(context.content.css_select("code")) == 1

def test_unwrap_rules_are_idempotent():
	"""
	Verify that a second pass of either unwrap rule finds nothing and changes nothing.
	"""
	context = _context("<p><tt>a <code>b</code> <code><b>c</b></code></tt></p><table><tr><td><p><font>d</font><font>e</font></p></td></tr></table>")

	assert fixup.rules.unwrap_inline_code(context) == 2
	assert fixup.rules.unwrap_table_cell_paragraphs(context) == 1
	first_pass = context.dom.to_string()

	assert fixup.rules.unwrap_inline_code(context) == 0
	assert fixup.rules.unwrap_table_cell_paragraphs(context) == 0
	assert context.dom.to_string() == first_pass

def test_unwrap_table_cell_paragraphs():
	"""
	Verify that the paragraph around a font element in a table cell is removed, and the font element kept.
	"""
	context = _context("<table><tr><td><p><font size=\"2\">cell</font></p></td><td><p>plain</p></td></tr></table>")

	assert fixup.rules.unwrap_table_cell_paragraphs(context) == 1
	assert len(context.content.css_select("td > font")) == 1
	assert len(context.content.css_select("td > p")) == 1

def test_strip_size_attributes():
	"""
	Verify that every size attribute is removed, whatever element carries it.
	"""
	context = _context("<p><font size=\"2\" face=\"arial\">a</font></p><hr size=\"1\"><form><input type=\"text\" size=\"3\"></form>")

	assert fixup.rules.strip_size_attributes(context) == 3
	assert not context.content.xpath(".//*[@size]")
	assert context.content.css_select("font")[0].get_attr("face") == "arial"

def test_strip_size_attributes_outside_container():
	"""
	Verify that size attributes outside the content container are removed too, even
	while the container is detached from the document.
	"""
	dom = make_dom("<div id=\"content\"><p><font size=\"2\">a</font></p></div>", head="<title>t</title><basefont size=\"3\">")
	dom.body.set_attr("size", "4")
	content = dom.css_select("#content")[0]
	content.remove()

	assert fixup.rules.strip_size_attributes(ReflowContext(dom, content)) == 3
	assert not dom.xpath("//*[@size]")
	assert not content.xpath(".//*[@size]")

def test_strip_size_attributes_without_any():

	"""
	Verify that stripping size attributes from a document without any changes nothing.
	"""
	context = _context("<p><font face=\"arial\">a</font></p>")
	before = context.dom.to_string()

	assert fixup.rules.strip_size_attributes(context) == 0
	assert context.dom.to_string() == before

def test_mark_code_blocks():
	"""
	Verify that the nearest div around a tt element is marked as a code block.
	"""
	context = _context("<div id=\"example\"><p><tt>x=1</tt></p></div><div id=\"prose\"><p>text</p></div>")

	assert fixup.rules.mark_code_blocks(context) == 1
	assert class_of(context.dom, "example") == "code-block"
	assert class_of(context.dom, "prose") == ""
	assert class_of(context.dom, "content") == ""

def test_classify_callouts():
	"""
	Verify that blocks headed by each label get exactly one matching callout class,
	and that other blocks get none.
	"""
	context = _context(
		"<div id=\"tip\"><h3>Tip: careful</h3><p>x</p></div>"
		"<div id=\"note\"><h2>Note</h2></div>"
		"<div id=\"warning\"><h4>Warning!</h4></div>"
		"<div id=\"caution\"><h3>Caution: hot</h3></div>"
		"<div id=\"both\"><h3>Note and Warning</h3></div>"
		"<div id=\"plain\"><h3>Introduction</h3></div>"
		"<div id=\"paragraph\"><p>Tip of the day</p></div>"
	)

	assert fixup.rules.classify_callouts(context) == 5

	assert class_of(context.dom, "tip") == "tip"
	assert class_of(context.dom, "note") == "note"
	assert class_of(context.dom, "warning") == "warn"
	assert class_of(context.dom, "caution") == "warn"
	assert class_of(context.dom, "both") == "note"
	assert class_of(context.dom, "plain") == ""
	assert class_of(context.dom, "paragraph") == ""
	assert class_of(context.dom, "content") == ""

@pytest.mark.parametrize("label, callout_class", [("Tip", "tip"), ("Note", "note"), ("Warning", "warn"), ("Caution", "warn")])
def test_classify_callouts_keeps_existing_classes(label: str, callout_class: str):
	"""
	Verify that a callout class is added alongside a block's existing classes.
	"""
	context = _context(f"<div id=\"block\" class=\"section\"><h3>{label}</h3></div>")
	fixup.rules.classify_callouts(context)

	assert class_of(context.dom, "block") == f"section {callout_class}"

def test_move_cover_image():
	"""
	Verify that the last image in document order becomes the first child of the content container.
	"""
	context = _context("Lead <p><img src=\"figure.png\"></p><div><p><img src=\"cover.jpg\"></p></div>")

	assert fixup.rules.move_cover_image(context) == 1

	first = context.content.children[0]
	assert first.tag == "img"
	assert first.get_attr("src") == "cover.jpg"
	assert not context.content.text
	assert len(context.content.css_select("p > img")) == 1

def test_move_cover_image_without_images():
	"""
	Verify that moving the cover image of a book without images does nothing.
	"""
	context = _context("<p>No pictures here.</p>")
	before = context.dom.to_string()

	assert fixup.rules.move_cover_image(context) == 0
	assert context.dom.to_string() == before

def test_apply_rules_reports_every_rule():
	"""
	Verify that apply_rules() runs every rule, in order, and reports each one.
	"""
	context = _context("<p>Nothing to do.</p>")
	counts = fixup.rules.apply_rules(context)

	assert list(counts) == [name for name, _ in fixup.rules.REWRITE_RULES]
	assert counts["inject-stylesheet"] == 1
	assert counts["move-cover-image"] == 0

def test_apply_rules_needs_a_container():
	"""
	Verify that a missing content container is an error, not a silent no-op.
	"""
	dom = make_dom("<p>x</p>")

	with pytest.raises(fixup.InvalidHtmlException):
		fixup.rules.apply_rules(ReflowContext(dom, None))
