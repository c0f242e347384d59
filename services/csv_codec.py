from __future__ import annotations

import csv
import io
from typing import Iterable, List, Sequence


def decode_csv(text: str) -> List[List[str]]:
    """Split exported sheet text into rows of string cells.

    Single pass with one in-quote flag. A doubled quote inside a quoted cell
    is a literal quote; a delimiter or line break inside quotes is kept. Row
    ends are ``\\n``, ``\\r\\n`` or a lone ``\\r``. An unbalanced quote never
    raises: everything up to the next quote (or end of input) is cell text.
    A final row without a trailing newline is still returned, including a
    lone quoted empty cell; empty input returns no rows.
    """
    rows: List[List[str]] = []
    row: List[str] = []
    cell: List[str] = []
    in_quotes = False
    field_started = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if ch == '"':
            field_started = True
            if in_quotes and i + 1 < n and text[i + 1] == '"':
                cell.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            field_started = True
            row.append("".join(cell))
            cell = []
        elif ch in ("\n", "\r") and not in_quotes:
            if ch == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
            row.append("".join(cell))
            rows.append(row)
            row = []
            cell = []
            field_started = False
        else:
            field_started = True
            cell.append(ch)
        i += 1

    if field_started:
        row.append("".join(cell))
        rows.append(row)
    return rows


def encode_csv(rows: Iterable[Sequence[str]]) -> str:
    """Write rows with minimal quoting, ``\\n`` between rows and no trailing newline."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    for row in rows:
        writer.writerow(["" if value is None else str(value) for value in row])
    text = buf.getvalue()
    return text[:-1] if text.endswith("\n") else text


def is_blank_row(row: Sequence[str]) -> bool:
    return all(not (cell or "").strip() for cell in row)
