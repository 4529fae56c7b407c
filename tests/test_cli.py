import json

import pytest

import municourt
from conftest import build_pdf
from municourt import main


def test_cli_writes_json_next_to_pdf(report_pdf, capsys):
    assert main([str(report_pdf)]) == 0

    out = report_pdf.with_suffix(".json")
    records = json.loads(out.read_text(encoding="utf-8"))
    assert len(records) == 1
    assert records[0]["municipality"] == "ABSECON"
    assert records[0]["backlog"]["pctChange"]["indictables"] == "- -"

    err = capsys.readouterr().err
    assert "report.pdf: 2 pages, 1 successful, 0 errors → report.json" in err


def test_cli_explicit_json_path(report_pdf, tmp_path):
    target = tmp_path / "out" / "stats.json"
    target.parent.mkdir()
    assert main([str(report_pdf), "--json", str(target)]) == 0
    assert json.loads(target.read_text(encoding="utf-8"))[0]["county"] == "ATLANTIC"


def test_cli_directory_mode_reports_page_errors(tmp_path, absecon_stream, capsys):
    broken = absecon_stream.replace(b"(Backlog)Tj", b"(Backlogs)Tj")
    (tmp_path / "a.pdf").write_bytes(build_pdf([[absecon_stream]]))
    (tmp_path / "b.pdf").write_bytes(build_pdf([[broken]]))

    assert main([str(tmp_path)]) == 0

    assert len(json.loads((tmp_path / "a.json").read_text(encoding="utf-8"))) == 1
    assert json.loads((tmp_path / "b.json").read_text(encoding="utf-8")) == []
    err = capsys.readouterr().err
    assert "b.pdf: 1 pages, 0 successful, 1 errors" in err
    assert "page 1: expected section 'Backlog', got 'Backlogs'" in err


def test_cli_missing_input(tmp_path, capsys):
    assert main([str(tmp_path / "nope.pdf")]) == 1
    assert "file not found" in capsys.readouterr().err


def test_cli_empty_directory(tmp_path, capsys):
    assert main([str(tmp_path)]) == 1
    assert "no PDF files found" in capsys.readouterr().err


def test_cli_reports_unreadable_pdf_and_continues(tmp_path, absecon_stream, capsys):
    (tmp_path / "a.pdf").write_bytes(b"this is not a pdf")
    (tmp_path / "b.pdf").write_bytes(build_pdf([[absecon_stream]]))

    assert main([str(tmp_path)]) == 0

    assert not (tmp_path / "a.json").exists()
    assert len(json.loads((tmp_path / "b.json").read_text(encoding="utf-8"))) == 1
    assert "a.pdf: error extracting PDF streams" in capsys.readouterr().err


def test_cli_unreadable_single_file_exits_nonzero(tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"%PDF-1.4\ngarbage")
    assert main([str(path)]) == 1


def test_cli_does_not_hide_programming_errors(report_pdf, monkeypatch):
    def boom(*args, **kwargs):
        raise TypeError("bad call")

    monkeypatch.setattr(municourt, "parse_document", boom)
    with pytest.raises(TypeError, match="bad call"):
        main([str(report_pdf)])
