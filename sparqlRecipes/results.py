"""Parsing of the CSV result sets Fuseki returns for ``output=csv``."""

from __future__ import annotations

from typing import List


def _split(text: str, sep: str) -> List[str]:
    # Trailing empty fields are dropped; a trailing newline does not add a row.
    parts = text.split(sep)
    if parts == [""]:
        return parts
    while parts and parts[-1] == "":
        parts.pop()
    return parts


class FusekiResponse:
    """A SPARQL result table; row 0 holds the variable names.

    Cells are split on plain commas, so values that themselves contain a
    comma are not supported.
    """

    def __init__(self, csv_response: str) -> None:
        self.rows: List[List[str]] = [
            [cell.strip() for cell in _split(row, ",")]
            for row in _split(csv_response, "\n")
        ]

    @property
    def header(self) -> List[str]:
        return self.rows[0] if self.rows else []

    def values(self, header: str) -> List[str]:
        """Return the cells of column ``header`` below the header row.

        Rows cut short by a trailing unbound variable give ``""``.
        """

        column = -1
        for index, name in enumerate(self.header):
            if name == header:
                column = index
        if column == -1:
            return []
        return [row[column] if column < len(row) else "" for row in self.rows[1:]]

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"FusekiResponse(rows={self.rows!r})"


__all__ = ["FusekiResponse"]
