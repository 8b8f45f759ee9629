"""
Tests for running HTML Tidy, with the executable faked out.
"""

import subprocess
from pathlib import Path

import pytest

import fixup
import fixup.tidy


@pytest.fixture(name="fake_tidy")
def fixture_fake_tidy(monkeypatch) -> list:
	"""
	Pretend tidy is installed and exits with a warning code. Return the list of recorded calls.
	"""
	calls = []

	def fake_run(args, **kwargs):
		calls.append((args, kwargs))
		return subprocess.CompletedProcess(args, 1, stdout=b"<html>\n  <body>tidied " + kwargs["input"] + b"</body>\n</html>\n")

	monkeypatch.setattr(fixup.tidy.shutil, "which", lambda name: f"/usr/bin/{name}")
	monkeypatch.setattr(fixup.tidy.subprocess, "run", fake_run)

	return calls

def test_run_tidy_ignores_exit_code(fake_tidy: list, work__directory: Path):
	"""
	Verify that tidy's output is written even though it exited with a non-zero code,
	and that it was asked to indent, wrap, and use UTF-8.
	"""
	input_path = work__directory / "dummy.html"
	output_path = work__directory / "book.html"
	input_path.write_bytes(b"raw")

	assert fixup.tidy.run_tidy(input_path, output_path) == 1

	assert output_path.read_bytes() == b"<html>\n  <body>tidied raw</body>\n</html>\n"
	assert input_path.read_bytes() == b"raw"

	args, kwargs = fake_tidy[0]
	assert args == [str(Path("/usr/bin/tidy")), "-i", "-wrap", "120", "-utf8"]
	assert kwargs["check"] is False
	assert kwargs["stderr"] == subprocess.DEVNULL

def test_run_tidy_in_place(fake_tidy: list, work__directory: Path):
	"""
	Verify that tidying a file onto itself reads it before overwriting it.
	"""
	path = work__directory / "book.html"
	path.write_bytes(b"raw")

	fixup.tidy.run_tidy(path, path, wrap=80)

	assert path.read_bytes() == b"<html>\n  <body>tidied raw</body>\n</html>\n"
	assert fake_tidy[0][0][3] == "80"

def test_run_tidy_missing_input(fake_tidy: list, work__directory: Path):
	"""
	Verify that a missing input file is fatal.
	"""
	with pytest.raises(FileNotFoundError):
		fixup.tidy.run_tidy(work__directory / "missing.html", work__directory / "book.html")

	assert not fake_tidy

def test_run_tidy_not_installed(monkeypatch, work__directory: Path):
	"""
	Verify that a missing tidy executable is reported as a missing dependency.
	"""
	monkeypatch.setattr(fixup.tidy.shutil, "which", lambda name: None)

	with pytest.raises(fixup.MissingDependencyException):
		fixup.tidy.run_tidy(work__directory / "dummy.html", work__directory / "book.html")
