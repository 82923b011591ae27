"""Routes for browsing bills held by the in-memory repository."""
from __future__ import annotations

import html
import json
from typing import Any, Dict, Iterable, List, Mapping

from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse

from boutique.billing.money import format_currency
from boutique.services.mock_store import get_mock_store

router = APIRouter()

_BILL_COLUMNS = (
    "bill_id",
    "customer_name",
    "customer_phone",
    "total_amount",
    "paid_amount",
    "balance",
    "status",
    "date",
    "upi_link",
)
_MONEY_COLUMNS = {"total_amount", "paid_amount", "balance"}


def _stringify(value: Any) -> str:
    """Return a JSON-friendly string representation for table cells."""
    if value is None:
        return ""
    if isinstance(value, (str, int, float, bool)):
        return str(value)
    return json.dumps(value, default=str)


def _build_table(title: str, rows: Iterable[Mapping[str, Any]]) -> str:
    row_list: List[Dict[str, Any]] = [dict(row) for row in rows]
    section_parts = [f"<section><h2>{html.escape(title)}</h2>"]
    if not row_list:
        section_parts.append("<p>No records found.</p></section>")
        return "".join(section_parts)

    columns: List[str] = []
    for row in row_list:
        for key in row.keys():
            if key not in columns:
                columns.append(key)

    header = "".join(f"<th>{html.escape(column)}</th>" for column in columns)
    body_rows: List[str] = []
    for row in row_list:
        cells = []
        for column in columns:
            value = _stringify(row.get(column))
            cells.append(f"<td>{html.escape(value)}</td>")
        body_rows.append("<tr>" + "".join(cells) + "</tr>")
    table_html = (
        "<table><thead><tr>"
        + header
        + "</tr></thead><tbody>"
        + "".join(body_rows)
        + "</tbody></table>"
    )
    section_parts.append(table_html)
    section_parts.append("</section>")
    return "".join(section_parts)


def _bill_rows(records: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for record in records:
        row: Dict[str, Any] = {"id": record.get("id")}
        for column in _BILL_COLUMNS:
            value = record.get(column)
            if column in _MONEY_COLUMNS and value is not None:
                value = format_currency(float(value))
            row[column] = value
        rows.append(row)
    return rows


def _item_rows(records: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for record in records:
        for item in record.get("items") or []:
            rows.append(
                {
                    "bill_id": record.get("bill_id"),
                    "description": item.get("description"),
                    "quantity": item.get("quantity"),
                    "rate": item.get("rate"),
                    "amount": item.get("amount"),
                }
            )
    return rows


@router.get("/mock-data", response_class=HTMLResponse)
async def view_mock_data() -> HTMLResponse:
    """Render all stored bills from the shared in-memory store as HTML tables."""
    store = get_mock_store()

    records = store.bills.rows()
    sections = [
        _build_table("Bills", _bill_rows(records)),
        _build_table("Line Items", _item_rows(records)),
    ]

    sections_html = "".join(sections)
    html_content = f"""
    <html>
        <head>
            <title>Stored Bills</title>
            <style>
                body {{ font-family: Arial, sans-serif; margin: 2rem; }}
                h1 {{ text-align: center; }}
                section {{ margin-bottom: 2rem; }}
                table {{ border-collapse: collapse; width: 100%; }}
                th, td {{ border: 1px solid #ccc; padding: 0.5rem; text-align: left; }}
                th {{ background-color: #f0f0f0; }}
                tbody tr:nth-child(even) {{ background-color: #fafafa; }}
            </style>
        </head>
        <body>
            <h1>Stored Bills</h1>
            {sections_html}
        </body>
    </html>
    """

    return HTMLResponse(content=html_content)


@router.delete("/mock-data/{collection}/{record_id}")
async def delete_mock_record(collection: str, record_id: str) -> Dict[str, str]:
    """Remove a record from the in-memory bill repository."""

    store = get_mock_store()
    normalized = collection.strip().lower()

    if normalized not in {"bill", "bills"}:
        raise HTTPException(status_code=404, detail="Unsupported mock data collection")

    deleted = await store.bills.delete(record_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Record not found")

    return {"status": "deleted", "collection": "bills", "record_id": record_id}
