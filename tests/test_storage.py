"""tests/test_storage.py — Report store persistence boundary"""
import pytest

from engine import ForensicEngine
from storage import ReportStore

from conftest import make_pdf


def test_put_get_round_trip(app, engine_config):
    report = ForensicEngine(engine_config).analyze(make_pdf(b"%%EOF\n"), "stored.pdf")
    store = ReportStore()
    store.put(report, association="matter-store")

    loaded = store.get(report.id)
    assert loaded == report
    assert [f.severity for f in loaded.findings] == [f.severity for f in report.findings]


def test_get_missing(app):
    assert ReportStore().get("FR-00000000") is None


def test_put_is_append_only(app, engine_config):
    report = ForensicEngine(engine_config).analyze(make_pdf(), "once.pdf")
    store = ReportStore()
    store.put(report)
    with pytest.raises(ValueError):
        store.put(report)


def test_list_by_association(app, engine_config):
    engine = ForensicEngine(engine_config)
    store = ReportStore()
    reports = [engine.analyze(make_pdf(b"%% %d" % i), f"{i}.pdf") for i in range(3)]
    for report in reports:
        store.put(report, association="matter-list")
    store.put(engine.analyze(make_pdf(), "elsewhere.pdf"), association="matter-other")

    listed = store.list_by_association("matter-list")
    assert {r.id for r in listed} == {r.id for r in reports}
