"""Data models used across the package."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time
from numbers import Integral
from pathlib import Path
from typing import Any, NamedTuple, Union

CellValue = Union[str, int, float, bool, datetime, date, time]


def _to_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{field_name} must be an integer")
    result = int(value)
    if result < 1:
        raise ValueError(f"{field_name} must be >= 1")
    return result


def _to_string_list(values: Sequence[Any] | None, field_name: str) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        raise TypeError(f"{field_name} must be a sequence of strings")
    normalized: list[str] = []
    for item in values:
        if not isinstance(item, str):
            raise TypeError(f"{field_name} items must be strings")
        normalized.append(item)
    return normalized


class CellAddress(NamedTuple):
    """A cell address split into its column letters and row digits."""

    column: str
    row: str


@dataclass(frozen=True)
class SheetBounds:
    """Largest populated row (1-based) and column count of a worksheet."""

    max_row: int
    max_column: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "max_row", _to_positive_int(self.max_row, "max_row"))
        object.__setattr__(self, "max_column", _to_positive_int(self.max_column, "max_column"))


@dataclass
class Worksheet:
    """Sparse grid of cell values keyed by address (``"B12"``).

    ``ref`` is the bounding reference (``"A1:C10"``), ``None`` for an empty
    sheet.
    """

    cells: dict[str, CellValue] = field(default_factory=dict)
    ref: str | None = None

    def __contains__(self, address: object) -> bool:
        return address in self.cells


@dataclass
class Workbook:
    """Ordered collection of named worksheets."""

    sheet_names: list[str] = field(default_factory=list)
    sheets: dict[str, Worksheet] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.sheet_names = _to_string_list(self.sheet_names, "sheet_names")
        missing = [name for name in self.sheet_names if name not in self.sheets]
        if missing:
            raise ValueError(f"sheets missing for names: {', '.join(missing)}")

    @classmethod
    def from_mapping(cls, sheets: Mapping[str, Worksheet]) -> Workbook:
        return cls(sheet_names=list(sheets), sheets=dict(sheets))

    def __iter__(self) -> Iterator[tuple[str, Worksheet]]:
        for name in self.sheet_names:
            yield name, self.sheets[name]

    def __len__(self) -> int:
        return len(self.sheet_names)


@dataclass
class SheetResult:
    """Everything derived from one worksheet during rendering."""

    sheet_name: str
    headers: list[str] = field(default_factory=list)
    numeric_columns: frozenset[int] = frozenset()
    banner: list[str] = field(default_factory=list)
    statements: list[str] = field(default_factory=list)

    def to_text(self) -> str:
        """Banner, a blank separator, the statements, then a blank line."""
        lines = [*self.banner, "", *self.statements]
        return "\n".join(lines) + "\n\n"


@dataclass(frozen=True)
class RunConfig:
    """Options for a single ``exql run`` invocation."""

    input_path: Path
    output_path: Path | None = None
    quiet: bool = False
    force: bool = False
    skip_trailing_row: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_path", Path(self.input_path))
        if self.output_path is not None:
            object.__setattr__(self, "output_path", Path(self.output_path))
        for name in ("quiet", "force", "skip_trailing_row"):
            if not isinstance(getattr(self, name), bool):
                raise TypeError(f"{name} must be a bool")

    @property
    def has_output(self) -> bool:
        return self.output_path is not None
