"""
Unit tests for the command line interface.
"""
import io
import json
import logging

import pytest

from toon_intent import cli
from toon_intent.config import get_settings
from toon_intent.utils.logging import logger


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    """Fresh settings and no leftover stderr handlers between runs."""
    for name in ("TOON_INTENT_LOG_LEVEL", "TOON_INTENT_CHARS_PER_TOKEN", "TOON_INTENT_DEFAULT_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def json_file(tmp_path):
    path = tmp_path / "order.json"
    path.write_text('{"order":{"id":1,"status":"paid"}}', encoding="utf-8")
    return path


def test_convert_file_to_stdout(json_file, capsys):
    assert cli.main([str(json_file)]) == 0
    assert capsys.readouterr().out == "ORDER OBJECT\n  ID 1\n  STATUS paid\n"


def test_detect_only(json_file, capsys):
    assert cli.main([str(json_file), "--detect"]) == 0
    assert capsys.readouterr().out.strip() == "json"


def test_output_file(json_file, tmp_path, capsys):
    out = tmp_path / "order.toon"
    assert cli.main([str(json_file), "-o", str(out)]) == 0
    assert out.read_text(encoding="utf-8") == "ORDER OBJECT\n  ID 1\n  STATUS paid\n"
    assert capsys.readouterr().out == ""


def test_json_record_with_benchmark(json_file, capsys):
    assert cli.main([str(json_file), "--json", "-b"]) == 0
    record = json.loads(capsys.readouterr().out)
    assert record["format"] == "json"
    assert record["tokens"].startswith("ORDER OBJECT")
    assert set(record["benchmark"]) == {"inputTokens", "outputTokens", "savings", "savingsPercentage"}


def test_benchmark_line_on_stderr(json_file, capsys):
    assert cli.main([str(json_file), "-b"]) == 0
    err = capsys.readouterr().err
    assert err.startswith("Tokens: ")
    assert "json)" in err


def test_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("- first\n- second"))
    assert cli.main([]) == 0
    assert capsys.readouterr().out == "ITEM first\nITEM second\n"


def test_forced_format(tmp_path, capsys):
    path = tmp_path / "data.txt"
    path.write_text("{bad", encoding="utf-8")
    assert cli.main([str(path), "-f", "json"]) == 1
    assert capsys.readouterr().out.startswith("ERROR Invalid JSON:")


def test_default_format_from_environment(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("TOON_INTENT_DEFAULT_FORMAT", "text")
    path = tmp_path / "data.json"
    path.write_text('{"a": 1}', encoding="utf-8")
    assert cli.main([str(path), "--json"]) == 0
    assert json.loads(capsys.readouterr().out)["format"] == "text"


def test_batch(tmp_path, capsys):
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.json").write_text('{"a": 1}', encoding="utf-8")
    (src / "b.html").write_text("<p>hi</p>", encoding="utf-8")
    out = tmp_path / "out"

    assert cli.main(["--batch", str(src), "--output-dir", str(out)]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["processed"] == 2
    assert summary["successful"] == 2
    assert summary["failed"] == 0
    assert (out / "a.toon").read_text(encoding="utf-8") == "A 1\n"
    assert (out / "b.toon").read_text(encoding="utf-8") == "ELEMENT P\n  TEXT hi\n"


def test_batch_with_failures(tmp_path, capsys):
    (tmp_path / "good.json").write_text('{"a": 1}', encoding="utf-8")
    (tmp_path / "bad.json").write_text('{"a": }', encoding="utf-8")

    assert cli.main(["--batch", str(tmp_path), "--glob", "*.json", "-f", "json"]) == 1
    summary = json.loads(capsys.readouterr().out)
    assert summary["successful"] == 1
    assert summary["failed"] == 1
    failed = [f for f in summary["files"] if f["status"] == "error"]
    assert failed[0]["file"].endswith("bad.json")


def test_batch_without_matches(tmp_path, capsys):
    assert cli.main(["--batch", str(tmp_path), "--glob", "*.yaml"]) == 1
    assert "No files matching" in capsys.readouterr().err


def test_convert_batch_aggregate(tmp_path, converter):
    (tmp_path / "a.json").write_text('{"alpha": "beta", "gamma": [1, 2, 3]}', encoding="utf-8")
    summary = cli.convert_batch(tmp_path, converter=converter)
    aggregate = summary["aggregate"]
    assert aggregate["total_input_tokens"] == summary["files"][0]["benchmark"]["inputTokens"]
    assert aggregate["savings"].endswith("%")


def test_batch_keeps_relative_paths(tmp_path, converter):
    src = tmp_path / "src"
    (src / "api").mkdir(parents=True)
    (src / "web").mkdir()
    (src / "api" / "config.json").write_text('{"port": 80}', encoding="utf-8")
    (src / "web" / "config.json").write_text('{"port": 443}', encoding="utf-8")
    out = tmp_path / "out"

    summary = cli.convert_batch(src, converter=converter, pattern="*.json", output_dir=out)
    assert summary["successful"] == 2
    assert (out / "api" / "config.toon").read_text(encoding="utf-8") == "PORT 80\n"
    assert (out / "web" / "config.toon").read_text(encoding="utf-8") == "PORT 443\n"
