"""
Common helper functions for tests.
"""

import os
import shlex
import subprocess

import lxml.html
import pytest

from fixup.easy_html import EasyHtmlTree, EasyHtmlElement

def run(cmd: str) -> subprocess.CompletedProcess:
	"""
	Run the provided shell string as a command in a subprocess. Returns a
	status object when the command completes.
	"""
	args = shlex.split(cmd)
	current_environment = os.environ.copy()
	current_environment["COLUMNS"] = "1000000"
	return subprocess.run(args, stdout=subprocess.PIPE, stderr=subprocess.PIPE, check=False, env=current_environment)

def must_run(cmd: str) -> str:
	"""
	Run the provided shell string as a command in a subprocess. Forces a
	test failure if the command fails. Returns the command's stdout.
	"""
	result = run(cmd)
	if result.returncode == 0:
		if not result.stderr:
			return result.stdout.decode()
		pytest.fail(f"stderr was not empty after command '{cmd}'\n{result.stderr.decode()}")
	else:
		fail_msg = f"error code {result.returncode} from command '{cmd}'"
		if result.stderr:
			fail_msg += "\n" + result.stderr.decode()
		pytest.fail(fail_msg)

	return ""

def make_dom(body: str, head: str = "<title>Test</title>", html_attrs: str = "") -> EasyHtmlTree:
	"""
	Return a dom for a document with the given head and body markup.
	"""
	return EasyHtmlTree(f"<html{html_attrs}><head>{head}</head><body>{body}</body></html>")

def class_of(dom: EasyHtmlTree, element_id: str) -> str:
	"""
	Return the class attribute of the element with the given id, or an empty string.
	"""
	return dom.css_select(f"#{element_id}")[0].get_attr("class") or ""

def markup_of(element: EasyHtmlElement) -> str:
	"""
	Return the markup of an element, without the text that follows it.
	"""
	return lxml.html.tostring(element.lxml_element, encoding="unicode", with_tail=False)
