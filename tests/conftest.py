"""Shared builders for synthetic EDINET instance documents."""

from __future__ import annotations

import html

import pytest


NAMESPACES = (
    'xmlns:xbrli="http://www.xbrl.org/2003/instance" '
    'xmlns:jpcrp_cor="http://disclosure.edinet-fsa.go.jp/taxonomy/jpcrp/2023-12-01/jpcrp_cor" '
    'xmlns:jpigp_cor="http://disclosure.edinet-fsa.go.jp/taxonomy/jpigp/2023-12-01/jpigp_cor"'
)

BALANCE_SHEET_ROWS = [
    ("流動資産合計", "※1 1,200", "1,500"),
    ("有形固定資産合計", "800", "850"),
    ("無形固定資産合計", "120", "110"),
    ("投資その他の資産合計", "300", "320"),
    ("流動負債合計", "600", "650"),
    ("固定負債合計", "400", "380"),
    ("負債合計", "1,000", "1,030"),
    ("純資産合計", "1,420", "1,750"),
    ("負債純資産合計", "2,420", "2,780"),
]

INCOME_STATEMENT_ROWS = [
    ("売上高", "10,897,603", "11,200,000"),
    ("売上原価", "※1,※2 7,000,000", "7,100,000"),
    ("売上総利益", "3,897,603", "4,100,000"),
    ("販売費及び一般管理費", "2,500,000", "2,600,000"),
    ("営業利益", "1,397,603", "1,500,000"),
]

CASH_FLOW_ROWS = [
    ("営業活動によるキャッシュ・フロー", "900", "1,100"),
    ("投資活動によるキャッシュ・フロー", "△400", "△350"),
    ("財務活動によるキャッシュ・フロー", "△200", "△150"),
    ("現金及び現金同等物の期首残高", "1,000", "1,300"),
    ("現金及び現金同等物の期末残高", "1,300", "1,900"),
]


def build_statement_html(rows, unit="百万円"):
    parts = [
        '<table style="width: 520px; border: 0;">',
        '<colgroup><col style="width: 300px;"/><col/><col/></colgroup>',
        f"<tr><td><p>(単位：{unit})</p></td></tr>",
        "<tr><td></td><td><p>前連結会計年度</p></td><td><p>当連結会計年度</p></td></tr>",
    ]
    for label, previous, current in rows:
        parts.append(
            f"<tr><td><p>{label}</p></td><td><p>{previous}</p></td>"
            f"<td><p>{current}</p></td></tr>"
        )
    parts.append("</table>")
    return "".join(parts)


def build_instance(blocks):
    """Wrap ``{tag: html}`` text blocks into an escaped XBRL instance."""
    body = "".join(
        f'<{tag} contextRef="CurrentYearDuration">{html.escape(content)}</{tag}>'
        for tag, content in blocks.items()
    )
    document = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<xbrli:xbrl {NAMESPACES}>{body}</xbrli:xbrl>"
    )
    return document.encode("utf-8")


def full_instance():
    return build_instance(
        {
            "jpcrp_cor:ConsolidatedBalanceSheetTextBlock": build_statement_html(BALANCE_SHEET_ROWS),
            "jpcrp_cor:ConsolidatedStatementOfIncomeTextBlock": build_statement_html(
                INCOME_STATEMENT_ROWS
            ),
            "jpcrp_cor:ConsolidatedStatementOfCashFlowsTextBlock": build_statement_html(
                CASH_FLOW_ROWS
            ),
        }
    )


@pytest.fixture
def statement_html():
    return build_statement_html


@pytest.fixture
def instance_builder():
    return build_instance


@pytest.fixture
def full_instance_bytes():
    return full_instance()
