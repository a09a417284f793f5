from __future__ import annotations

from datetime import datetime

import xlsxwriter

from app.services.fixed_point import annual_percent
from app.services.ledger import Ledger
from app.services.vault import Vault
from app.utils.clock import to_datetime

HOLDER_HEADERS = [
    "Holder",
    "Principal",
    "Live Balance",
    "Accrued",
    "Locked Rate",
    "Annual %",
    "Last Settled (UTC)",
]


def build_holder_report(ledger: Ledger, vault: Vault, now: int, out_file):
    """Write an xlsx statement of every holder, all valued at the same instant.

    Unit amounts go in as text: they are exact integers far beyond what a
    spreadsheet float can hold.
    """
    snaps = [ledger.snapshot(a.holder, now) for a in ledger.holders()]
    solvency = vault.solvency(now)

    wb = xlsxwriter.Workbook(out_file, {"in_memory": True})
    base_font = "Calibri"

    meta_label = wb.add_format({"bold": True, "font_name": base_font, "font_size": 11, "font_color": "#334155"})
    meta_value = wb.add_format({"font_name": base_font, "font_size": 11, "font_color": "#0f172a"})
    subtle = wb.add_format({"font_name": base_font, "font_size": 10, "font_color": "#64748b"})
    header = wb.add_format(
        {
            "bold": True,
            "font_name": base_font,
            "font_size": 11,
            "bg_color": "#F1F5F9",
            "border": 1,
            "align": "center",
            "valign": "vcenter",
        }
    )
    units = wb.add_format({"font_name": base_font, "font_size": 11, "border": 1, "align": "right"})
    rate4 = wb.add_format(
        {"font_name": base_font, "font_size": 11, "num_format": "0.0000", "border": 1, "align": "right"}
    )
    ts_fmt = wb.add_format(
        {"font_name": base_font, "font_size": 11, "num_format": "yyyy-mm-dd hh:mm:ss", "border": 1}
    )
    text_cell = wb.add_format({"font_name": base_font, "font_size": 11, "border": 1, "align": "left"})

    # ----------------------------
    # Sheet 1: Holders
    # ----------------------------
    ws = wb.add_worksheet("Holders")
    ws.set_column(0, 0, 24)
    ws.set_column(1, 4, 30)
    ws.set_column(5, 5, 10)
    ws.set_column(6, 6, 20)

    ws.write(0, 0, "Ledger", meta_label)
    ws.write(0, 1, ledger.address, meta_value)
    ws.write(1, 0, "As of (UTC)", meta_label)
    ws.write(1, 1, to_datetime(now).strftime("%Y-%m-%d %H:%M:%S"), subtle)
    ws.write(1, 3, "Generated", meta_label)
    ws.write(1, 4, datetime.now().strftime("%Y-%m-%d %H:%M"), subtle)

    ws.set_row(3, 18)
    for c, h in enumerate(HOLDER_HEADERS):
        ws.write(3, c, h, header)
    ws.freeze_panes(4, 1)

    r = 4
    for snap in snaps:
        ws.write_string(r, 0, snap.holder, text_cell)
        ws.write_string(r, 1, str(snap.principal), units)
        ws.write_string(r, 2, str(snap.live_balance), units)
        ws.write_string(r, 3, str(snap.accrued), units)
        ws.write_string(r, 4, str(snap.rate), units)
        ws.write_number(r, 5, float(annual_percent(snap.rate)), rate4)
        if snap.last_settled:
            ws.write_datetime(r, 6, to_datetime(snap.last_settled).replace(tzinfo=None), ts_fmt)
        else:
            ws.write_string(r, 6, "", text_cell)
        r += 1

    if r > 4:
        ws.autofilter(3, 0, r - 1, len(HOLDER_HEADERS) - 1)

    # ----------------------------
    # Sheet 2: Summary
    # ----------------------------
    summary = wb.add_worksheet("Summary")
    summary.set_column(0, 0, 22)
    summary.set_column(1, 1, 44)

    title = wb.add_format({"bold": True, "font_name": base_font, "font_size": 14, "font_color": "#0f172a"})
    summary.write(0, 0, "Vault Summary", title)

    rows = [
        ("Holders", str(len(snaps))),
        ("Global Rate", str(ledger.global_rate())),
        ("Global Annual %", str(annual_percent(ledger.global_rate()))),
        ("Total Supply (settled)", str(ledger.total_supply())),
        ("Liabilities (live)", str(solvency.liabilities)),
        ("Held Assets", str(solvency.held_assets)),
        ("Shortfall", str(solvency.shortfall)),
    ]
    for i, (label, value) in enumerate(rows, start=2):
        summary.write(i, 0, label, meta_label)
        summary.write_string(i, 1, value, meta_value)

    wb.close()
    return len(snaps)
