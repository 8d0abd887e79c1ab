"""
Delimited-text parsing and CSV IO.

The parser is deliberately lenient: ragged rows are padded or truncated to
the header width, and an unterminated quote swallows the rest of the input
into the current field instead of raising.
"""

from __future__ import annotations

import re
from pathlib import Path

from review_processor.logconf import logger
from review_processor.utils.async_utils import run_sync

Record = dict[str, str]

TEMPLATE_CSV = "reviews,sentiment,confidence_score\n"

_WS_RUN = re.compile(r"\s+")


def normalize_header(name: str) -> str:
    """'  Confidence  Score ' -> 'confidence_score'"""
    return _WS_RUN.sub("_", name.strip().lower())


def _split_rows(text: str) -> list[list[str]]:
    rows: list[list[str]] = []
    row: list[str] = []
    field: list[str] = []
    in_quotes = False

    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < n and text[i + 1] == '"':
                    field.append('"')
                    i += 1
                else:
                    in_quotes = False
            else:
                field.append(ch)
        elif ch == '"':
            in_quotes = True
        elif ch == ",":
            row.append("".join(field))
            field = []
        elif ch == "\n":
            row.append("".join(field))
            rows.append(row)
            row, field = [], []
        elif ch != "\r":
            field.append(ch)
        i += 1

    # no trailing newline (or an unterminated quote)
    if field or row:
        row.append("".join(field))
        rows.append(row)
    return rows


def parse_csv(text: str) -> list[Record]:
    """
    Turn comma-separated text into header-keyed records.

    The first row is the header row. Missing trailing cells map to "",
    extra cells are dropped, and a repeated header keeps the later column.
    A header-only (or empty) input yields no records.
    """
    rows = _split_rows(text)
    if not rows:
        return []

    headers = [normalize_header(h) for h in rows[0]]
    records: list[Record] = []
    for raw in rows[1:]:
        record: Record = {}
        for idx, header in enumerate(headers):
            record[header] = raw[idx] if idx < len(raw) else ""
        records.append(record)
    return records


def read_csv_text(path: str | Path) -> str:
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return path.read_text(encoding="latin-1")
    except Exception as exc:
        logger.error("CSV read failed: %s", exc, exc_info=False)
        raise


@run_sync
def write_csv(df, path: str | Path) -> None:
    """
    Write DataFrame to CSV on a thread pool so it doesn't block the event loop.
    """
    df.to_csv(path, index=False, lineterminator="\n")
