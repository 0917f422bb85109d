from __future__ import annotations

import pytest

from textflow.components import ErrorHandler, FileHandler
from textflow.variables import PATH_OUTPUT_DIR, CONST_OUTPUT_PREFIX_DEFAULT


def test_timestamped_output_default_prefix(monkeypatch):
    # 固定时间戳，避免不稳定性
    monkeypatch.setattr("time.strftime", lambda fmt: "20250101_120000")
    out = FileHandler.timestamped_output_path(".svg")
    assert out.parent == PATH_OUTPUT_DIR
    assert out.name == f"{CONST_OUTPUT_PREFIX_DEFAULT}_20250101_120000.svg"


def test_timestamped_output_prefix_and_dir(monkeypatch, tmp_path):
    monkeypatch.setattr("time.strftime", lambda fmt: "20250101_120000")
    out = FileHandler.timestamped_output_path(".pdf", prefix="note", output_dir=tmp_path)
    assert out == tmp_path / "note_20250101_120000.pdf"


def test_blank_prefix_falls_back(monkeypatch, tmp_path):
    monkeypatch.setattr("time.strftime", lambda fmt: "20250101_120000")
    out = FileHandler.timestamped_output_path(".png", prefix="  ", output_dir=tmp_path)
    assert out.name == f"{CONST_OUTPUT_PREFIX_DEFAULT}_20250101_120000.png"


def test_missing_file_has_error_code(tmp_path):
    with pytest.raises(FileNotFoundError, match=r"\[1001\]"):
        FileHandler.validate_readable_file(tmp_path / "nope.json")


def test_parent_created_when_writable(tmp_path):
    target = tmp_path / "a" / "b" / "out.pdf"
    FileHandler.ensure_parent_writable(target)
    assert target.parent.is_dir()
    assert list(target.parent.iterdir()) == []


def test_format_error():
    assert ErrorHandler.format_error(3001, "x") == "[3001] x"
