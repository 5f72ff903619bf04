"""
Spreadsheet rendering of reports (trial balance, P&L, GST, day book).

Each builder returns an openpyxl Workbook; ``workbook_bytes`` serialises it
for a streaming download.
"""
from __future__ import annotations

import io
from typing import Any, Iterable, Sequence

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from erp.schemas.responses import GSTReport, ProfitAndLossReport, TrialBalanceReport

HEADER_FILL = PatternFill(start_color="1F3864", end_color="1F3864", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF", size=10)
ROW_FONT = Font(size=10)
TOTAL_FONT = Font(bold=True, size=10)
CENTER = Alignment(horizontal="center", vertical="center")

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _money(v: float) -> float:
    return round(v, 2)


def _write_sheet(
    ws,
    headers: Sequence[str],
    rows: Iterable[Sequence[Any]],
    bold_rows: frozenset[int] = frozenset(),
) -> None:
    for col_idx, h in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col_idx, value=h)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = CENTER

    row_count = 1
    for row_idx, data in enumerate(rows, 2):
        row_count = row_idx
        for col_idx, val in enumerate(data, 1):
            cell = ws.cell(row=row_idx, column=col_idx, value=val)
            cell.font = TOTAL_FONT if row_idx in bold_rows else ROW_FONT

    # Auto column widths
    for col_idx in range(1, len(headers) + 1):
        col_letter = get_column_letter(col_idx)
        max_len = max(
            len(str(ws.cell(row=r, column=col_idx).value or ""))
            for r in range(1, row_count + 1)
        )
        ws.column_dimensions[col_letter].width = min(max_len + 4, 45)


def trial_balance_workbook(report: TrialBalanceReport) -> openpyxl.Workbook:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Trial Balance"

    rows: list[list[Any]] = [
        [
            r.account_name,
            r.account_type,
            _money(r.debit) if r.debit > 0 else "",
            _money(r.credit) if r.credit > 0 else "",
        ]
        for r in report.rows
    ]
    rows.append(["TOTAL", "", _money(report.total_debit), _money(report.total_credit)])
    _write_sheet(
        ws,
        ["Account Name", "Account Type", "Debit", "Credit"],
        rows,
        bold_rows=frozenset({len(rows) + 1}),
    )
    return wb


def profit_and_loss_workbook(report: ProfitAndLossReport) -> openpyxl.Workbook:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "P&L Statement"

    rows: list[list[Any]] = [["INCOME", "", ""]]
    rows += [["", r.account_name, _money(r.amount)] for r in report.income_rows]
    rows.append(["", "Total Income", _money(report.total_income)])
    rows.append(["", "", ""])
    rows.append(["EXPENSES", "", ""])
    rows += [["", r.account_name, _money(r.amount)] for r in report.expense_rows]
    rows.append(["", "Total Expenses", _money(report.total_expenses)])
    rows.append(["", "", ""])
    rows.append([
        "",
        "Net Profit" if report.net_profit >= 0 else "Net Loss",
        _money(abs(report.net_profit)),
    ])
    _write_sheet(
        ws,
        ["Type", "Account", "Amount"],
        rows,
        bold_rows=frozenset({len(rows) + 1}),
    )
    return wb


def gst_workbook(report: GSTReport) -> openpyxl.Workbook:
    wb = openpyxl.Workbook()

    ws = wb.active
    ws.title = "Summary"
    _write_sheet(
        ws,
        ["Description", "Value"],
        [
            ["Month", f"{report.month}/{report.year}"],
            ["Output GST (Sales)", _money(report.output_tax)],
            ["Input GST (Purchases)", _money(report.input_tax)],
            ["Net GST", _money(report.net_tax)],
            ["Status", report.status],
        ],
    )

    headers = ["Voucher No", "Date", "Party", "GSTIN", "Amount", "GST", "Total"]
    for title, voucher_rows in (
        ("Sales", report.sales_rows),
        ("Purchases", report.purchase_rows),
    ):
        _write_sheet(
            wb.create_sheet(title),
            headers,
            [
                [
                    r.voucher_number,
                    r.voucher_date.isoformat(),
                    r.party_name or "",
                    r.gst_number or "",
                    _money(r.amount),
                    _money(r.gst),
                    _money(r.total),
                ]
                for r in voucher_rows
            ],
        )
    return wb


def day_book_workbook(vouchers: Iterable) -> openpyxl.Workbook:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Day Book"
    _write_sheet(
        ws,
        ["Voucher No", "Type", "Date", "Party", "Amount", "Narration"],
        [
            [
                v.voucher_number,
                v.voucher_type,
                v.voucher_date.isoformat(),
                v.party.name if v.party else "",
                _money(v.total_amount),
                v.narration or "",
            ]
            for v in vouchers
        ],
    )
    return wb


def workbook_bytes(wb: openpyxl.Workbook) -> io.BytesIO:
    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf
