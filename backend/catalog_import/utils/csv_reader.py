"""Turn uploaded catalog bytes into loosely-typed rows."""

from __future__ import annotations

import csv
import io

from catalog_import.api.schemas.catalog_import import RawRow


class CatalogParseError(ValueError):
    """The upload is not a readable CSV file."""


def parse_catalog_file(data: bytes) -> list[RawRow]:
    """Parse a header + data rows CSV into one dict per non-blank line.

    Header names are trimmed. Rows with too few cells read the missing ones
    as blank; surplus cells are dropped. Only a file that cannot be read as
    CSV at all raises CatalogParseError.
    """
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise CatalogParseError(f"File encoding error: {e}") from e

    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    try:
        header = next(reader, None)
        if not header or not any(name.strip() for name in header):
            raise CatalogParseError("CSV file appears to be empty or has no header row")
        fieldnames = [name.strip() for name in header]

        rows: list[RawRow] = []
        for cells in reader:
            if not any(cell.strip() for cell in cells):
                continue
            row: RawRow = {}
            for position, name in enumerate(fieldnames):
                # Repeated header names keep the first non-blank cell
                if not name or (name in row and row[name]):
                    continue
                row[name] = cells[position] if position < len(cells) else ""
            rows.append(row)
    except csv.Error as e:
        raise CatalogParseError(f"CSV parsing error on line {reader.line_num}: {e}") from e

    return rows
