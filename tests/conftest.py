"""
Customization functions for pytest.
"""

import os
from pathlib import Path
from typing import Generator

import pytest

pytest.register_assert_rewrite("helpers")

@pytest.fixture(name="data_dir", scope="session")
def fixture_data_dir() -> Path:
	"""
	Return the directory holding the test input files.
	"""
	return Path(__file__).parent / "data"

@pytest.fixture
def book__html(data_dir: Path) -> str:
	"""
	Return the contents of the sample converter output.
	"""
	with open(data_dir / "book.html", "r", encoding="utf-8") as file:
		return file.read()

@pytest.fixture
def work__directory(tmp_path: Path) -> Generator:
	"""Return the Path object for a temporary working directory. The current working
	directory is updated to this temporary directory until the test returns.
	"""
	old_working_directory = os.getcwd()
	os.chdir(tmp_path)
	yield tmp_path
	os.chdir(old_working_directory)

@pytest.fixture
def book__file(work__directory: Path, book__html: str) -> Path:
	"""
	Return the path to a copy of the sample book in the working directory.
	"""
	book_path = work__directory / "book.html"
	book_path.write_text(book__html, encoding="utf-8")
	return book_path

@pytest.fixture
def library__file(work__directory: Path) -> Path:
	"""
	Return the path to a stand-in for the jQuery library in the working directory.
	"""
	library_path = work__directory / "jquery-1.6.2.min.js"
	library_path.write_text("/* jQuery stand-in */\n", encoding="utf-8")
	return library_path
