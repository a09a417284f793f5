import pytest

from app.services.fixed_point import SECONDS_PER_YEAR
from app.services.reports import build_holder_report

from conftest import R0


def test_holder_report_keeps_unit_amounts_exact(tmp_path, vault, ledger, clock):
    pytest.importorskip("openpyxl")
    from openpyxl import load_workbook

    big = 10**24 + 3
    vault.deposit("alice", big)
    vault.deposit("bob", 100_000)
    clock.advance(SECONDS_PER_YEAR)
    now = clock.now()

    out = tmp_path / "holders.xlsx"
    assert build_holder_report(ledger, vault, now, str(out)) == 2

    wb = load_workbook(out)
    ws = wb["Holders"]

    assert ws["A5"].value == "alice"
    assert ws["B5"].value == str(big)
    assert ws["C5"].value == str(ledger.live_balance("alice", now))
    assert ws["E5"].value == str(R0)
    assert ws["F5"].value == pytest.approx(5.0)
    assert ws["A6"].value == "bob"
    assert ws["C6"].value == str(ledger.live_balance("bob", now))

    summary = wb["Summary"]
    labels = {summary.cell(row=r, column=1).value: summary.cell(row=r, column=2).value for r in range(3, 10)}
    assert labels["Holders"] == "2"
    assert labels["Held Assets"] == str(big + 100_000)
    assert labels["Shortfall"] == str(vault.solvency(now).shortfall)


def test_empty_ledger_still_produces_a_report(tmp_path, vault, ledger, clock):
    out = tmp_path / "empty.xlsx"
    assert build_holder_report(ledger, vault, clock.now(), str(out)) == 0
    assert out.read_bytes()[:2] == b"PK"
