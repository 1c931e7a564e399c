"""
remote_panel/domain/sheet_source.py

Registry entries and raw sheet data.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceConfig:
    """
    One registered remote spreadsheet.
    """

    source_name: str
    document_id: str
    sponsor_name: str
    label_name: str
    tab_name: str | None = None


@dataclass(frozen=True)
class RawSheetBlock:
    """
    Rectangular grid of cell values; the first row holds the headers.
    """

    values: tuple[tuple[str, ...], ...]

    @classmethod
    def from_values(cls, values: list[list[object]]) -> RawSheetBlock:
        """
        Build a block from ragged API rows, padding short rows with empty cells.
        """

        width = max((len(row) for row in values), default=0)
        rows = tuple(
            tuple("" if cell is None else str(cell) for cell in row) + ("",) * (width - len(row))
            for row in values
        )
        return cls(values=rows)

    @property
    def headers(self) -> tuple[str, ...]:
        return self.values[0] if self.values else ()

    @property
    def rows(self) -> tuple[tuple[str, ...], ...]:
        return self.values[1:]

    @property
    def width(self) -> int:
        return len(self.headers)


@dataclass(frozen=True)
class SheetDocumentDescriptor:
    """
    Minimal spreadsheet metadata returned by a metadata read.
    """

    document_id: str
    title: str
