"""tests/test_engine.py — End-to-end tests for the ForensicEngine orchestrator"""
import json
import re

import pytest

from engine import BufferUnavailableError, ForensicEngine, InputRejectedError, Severity
from engine import structure

from conftest import build_pdf, make_pdf


def _assert_invariants(report):
    ranks = [f.severity.rank for f in report.findings]
    assert ranks == sorted(ranks)
    assert sum(report.severity_counts.values()) == len(report.findings)
    assert set(report.severity_counts) == {s.value for s in Severity}
    assert report.revision_count >= 1
    json.dumps(report.to_dict())


@pytest.mark.parametrize("buffer", [b"", b"GIF89a not a pdf"])
def test_unusable_buffer_still_reported(engine_config, buffer):
    report = ForensicEngine(engine_config).analyze(buffer, "upload.pdf")
    _assert_invariants(report)
    assert report.page_count == 0
    assert dict(report.metadata) == {}
    assert report.file_size == len(buffer)
    titles = [f.title for f in report.findings]
    assert "PDF text extraction incomplete" in titles
    assert "Could not load PDF for page analysis" in titles


def test_hashes_ignore_filename(engine_config):
    engine = ForensicEngine(engine_config)
    a = engine.analyze(make_pdf(), "a.pdf")
    b = engine.analyze(make_pdf(), "renamed-exhibit.pdf")
    assert (a.md5, a.sha256) == (b.md5, b.sha256)
    assert a.id != b.id


def test_two_eof_markers(engine_config, multi_eof_pdf_bytes):
    report = ForensicEngine(engine_config).analyze(multi_eof_pdf_bytes, "incremental.pdf")
    _assert_invariants(report)
    assert report.revision_count == 2
    assert any(f.category == "Structure" and "Multiple cross-reference tables" in f.title
               for f in report.findings)


def test_mixed_page_sizes(engine_config, mixed_page_pdf_bytes):
    report = ForensicEngine(engine_config).analyze(mixed_page_pdf_bytes, "filing.pdf")
    _assert_invariants(report)
    assert report.page_count == 3
    assert report.page_analysis.total_pages == 3
    assert len(report.page_analysis.inconsistent_pages) == 1
    assert report.page_analysis.inconsistent_pages[0].startswith("Page 3:")
    assert len([f for f in report.findings if f.category == "Pages"]) == 1


def test_tampered_document(engine_config):
    original = build_pdf(
        page_sizes=[(612, 792)],
        docinfo={"/Producer": "iText 5.5.13", "/Creator": "pikepdf 8.4.0"},
        contents=b"BT /F1 12 Tf 1 1 1 rg 72 700 Td (hidden) Tj ET",
        compress=False,
    )
    # second save session pointing back at the original xref, then appended junk
    xref_offset = int(re.findall(rb"startxref\s+(\d+)", original)[-1])
    buffer = original + b"startxref\n%d\n%%%%EOF\ntrailing payload goes here" % xref_offset
    report = ForensicEngine(engine_config).analyze(buffer, "tampered.pdf")
    _assert_invariants(report)

    assert report.findings[0].severity is Severity.CRITICAL
    assert report.severity_counts["critical"] == 1
    assert report.revision_count == 2
    titles = [f.title for f in report.findings]
    assert "Multiple PDF creation tools detected" in titles
    assert "Creator and Producer mismatch" in titles
    assert "Data found after final %%EOF" in titles
    assert report.metadata["/Producer"] == "iText 5.5.13"


def test_decoded_content_source(engine_config):
    buffer = build_pdf(contents=b"0 0 0 rg 70 595 150 14 re f", compress=True)
    raw_report = ForensicEngine(engine_config).analyze(buffer, "r.pdf")
    assert raw_report.severity_counts["critical"] == 0

    engine_config["CONTENT_SOURCE"] = "decoded"
    decoded_report = ForensicEngine(engine_config).analyze(buffer, "r.pdf")
    assert decoded_report.severity_counts["critical"] == 1
    assert decoded_report.findings[0].category == "Redactions"


def test_module_failure_becomes_finding(engine_config, monkeypatch, sample_pdf_bytes):
    def boom(buffer, config):
        raise RuntimeError("scanner exploded")

    monkeypatch.setattr(structure, "inspect", boom)
    report = ForensicEngine(engine_config).analyze(sample_pdf_bytes, "x.pdf")
    _assert_invariants(report)
    errors = [f for f in report.findings if f.title == "Structure Module Error"]
    assert len(errors) == 1
    assert errors[0].severity is Severity.INFO
    assert errors[0].detail == "scanner exploded"
    assert report.revision_count == 1


def test_module_error_detail_is_bounded(engine_config, monkeypatch, sample_pdf_bytes):
    def boom(buffer, config):
        raise RuntimeError("x" * 5000)

    monkeypatch.setattr(structure, "inspect", boom)
    report = ForensicEngine(engine_config).analyze(sample_pdf_bytes, "x.pdf")
    [error] = [f for f in report.findings if f.title == "Structure Module Error"]
    assert len(error.detail) == 300


def test_default_engine_uses_builtin_catalog():
    buffer = build_pdf(docinfo={"/Producer": "iText 5.5.13", "/Creator": "pikepdf 8.4.0"})
    report = ForensicEngine().analyze(buffer, "x.pdf")
    titles = [f.title for f in report.findings]
    assert "PDF manipulation tool detected: itext" in titles
    assert "PDF manipulation tool detected: pikepdf" in titles
    assert "Multiple PDF creation tools detected" in titles
    assert report.severity_counts["high"] == 1


def test_engine_accepts_mismatch_check(engine_config):
    buffer = build_pdf(docinfo={"/Creator": "Writer", "/Producer": "Scanner Suite 4"})
    seen = []

    def never_mismatched(creator, producer):
        seen.append((creator, producer))
        return False

    default = ForensicEngine(engine_config).analyze(buffer, "a.pdf")
    assert "Creator and Producer mismatch" in [f.title for f in default.findings]

    report = ForensicEngine(engine_config, mismatch_check=never_mismatched).analyze(buffer, "a.pdf")
    assert "Creator and Producer mismatch" not in [f.title for f in report.findings]
    assert seen == [("Writer", "Scanner Suite 4")]


def test_oversized_buffer_rejected(engine_config):
    engine_config["MAX_ANALYSIS_BYTES"] = 16
    with pytest.raises(InputRejectedError):
        ForensicEngine(engine_config).analyze(b"%PDF-" + b"0" * 64, "big.pdf")


def test_missing_buffer_is_fatal(engine_config, tmp_path):
    engine = ForensicEngine(engine_config)
    with pytest.raises(BufferUnavailableError):
        engine.analyze(None, "none.pdf")
    with pytest.raises(BufferUnavailableError):
        engine.analyze_file(str(tmp_path / "missing.pdf"))


def test_analyze_file(engine_config, tmp_path, sample_pdf_bytes):
    path = tmp_path / "on-disk.pdf"
    path.write_bytes(sample_pdf_bytes)
    report = ForensicEngine(engine_config).analyze_file(str(path))
    assert report.filename == "on-disk.pdf"
    assert report.file_size == len(sample_pdf_bytes)
