"""Sheet → INSERT statement transformation — pure functions, no side effects."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime, time

from openpyxl.utils import column_index_from_string, get_column_letter

from exql import BANNER_WIDTH, NULL_TOKEN, NUMERIC_MARKER
from exql.errors import InvalidAddressError, InvalidSheetError
from exql.models import CellAddress, CellValue, SheetBounds, SheetResult, Workbook, Worksheet

_ADDRESS_RE = re.compile(r"(\D+)(\d+)")

# ── Cell helpers ─────────────────────────────────────────────────


def split_address(address: str) -> CellAddress:
    """Split ``"AB12"`` into ``CellAddress(column="AB", row="12")``.

    Raises
    ------
    InvalidAddressError
        If *address* is not a run of non-digits followed by digits.
    """
    match = _ADDRESS_RE.fullmatch(address or "")
    if match is None:
        raise InvalidAddressError(address)
    return CellAddress(column=match.group(1), row=match.group(2))


def render_value(value: CellValue) -> str:
    """Render a raw cell value the way it should appear inside a statement."""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def get_row(
    worksheet: Worksheet,
    columns_count: int,
    row_index: int,
    wrap_in_quotes: bool = False,
    numeric_columns: frozenset[int] = frozenset(),
) -> list[str]:
    """Return the rendered values of *row_index* for the first *columns_count* columns.

    Absent cells render as ``NULL``. With *wrap_in_quotes*, values outside
    *numeric_columns* are wrapped in single quotes (``NULL`` never is).
    """
    result: list[str] = []
    for column_index in range(columns_count):
        address = f"{get_column_letter(column_index + 1)}{row_index}"
        if address not in worksheet:
            result.append(NULL_TOKEN)
            continue
        rendered = render_value(worksheet.cells[address])
        if wrap_in_quotes and column_index not in numeric_columns and rendered != NULL_TOKEN:
            rendered = f"'{rendered}'"
        result.append(rendered)
    return result


# ── Sheet structure ──────────────────────────────────────────────


def resolve_bounds(worksheet: Worksheet, sheet_name: str = "") -> SheetBounds:
    """Derive the last populated row and the column count from ``worksheet.ref``.

    Raises
    ------
    InvalidSheetError
        If the sheet has no bounding reference or no ``A1`` cell.
    InvalidAddressError
        If the last cell of the reference cannot be parsed.
    """
    if not worksheet.ref or "A1" not in worksheet:
        raise InvalidSheetError(sheet_name)

    last_cell = worksheet.ref.split(":")[-1]
    address = split_address(last_cell)
    try:
        return SheetBounds(
            max_row=int(address.row),
            max_column=column_index_from_string(address.column),
        )
    except ValueError as exc:
        raise InvalidAddressError(last_cell) from exc


def classify_headers(
    worksheet: Worksheet, columns_count: int
) -> tuple[list[str], frozenset[int]]:
    """Read row 1, strip numeric markers and collect the numeric column indices."""
    headers = get_row(worksheet, columns_count, 1)
    numeric: set[int] = set()
    for index, header in enumerate(headers):
        if header.startswith(NUMERIC_MARKER):
            headers[index] = header[len(NUMERIC_MARKER):]
            numeric.add(index)
    return headers, frozenset(numeric)


# ── Rows ─────────────────────────────────────────────────────────


def materialize_rows(
    worksheet: Worksheet,
    bounds: SheetBounds,
    numeric_columns: frozenset[int],
    *,
    skip_trailing_row: bool = False,
) -> list[list[str]]:
    """Extract data rows 2..max_row as quoted row records.

    With *skip_trailing_row* the last populated row is left out.
    """
    last_row = bounds.max_row - 1 if skip_trailing_row else bounds.max_row
    return [
        get_row(worksheet, bounds.max_column, row_index, True, numeric_columns)
        for row_index in range(2, last_row + 1)
    ]


def column_widths(rows: Iterable[Sequence[str]], columns_count: int) -> list[int]:
    widths = [0] * columns_count
    for row in rows:
        for index, value in enumerate(row):
            if len(value) > widths[index]:
                widths[index] = len(value)
    return widths


def pad_rows(rows: Iterable[Sequence[str]], widths: Sequence[int]) -> list[list[str]]:
    """Right-pad every value with spaces to its column width."""
    return [[value.ljust(widths[index]) for index, value in enumerate(row)] for row in rows]


# ── Formatting ───────────────────────────────────────────────────


def format_inserts(
    sheet_name: str, headers: Sequence[str], rows: Iterable[Sequence[str]]
) -> list[str]:
    prefix = f"INSERT INTO {sheet_name} ({', '.join(headers)}) VALUES "
    return [f"{prefix}({', '.join(row)});" for row in rows]


def format_banner(sheet_name: str, width: int = BANNER_WIDTH) -> list[str]:
    """Three ``=`` lines with *sheet_name* centred on the middle one."""
    title_run = "=" * (width // 2 - 1)
    full_run = "=" * (width + len(sheet_name))
    return [full_run, f"{title_run} {sheet_name} {title_run}", full_run]


# ── Orchestration ────────────────────────────────────────────────


def render_sheet(
    sheet_name: str, worksheet: Worksheet, *, skip_trailing_row: bool = False
) -> SheetResult:
    """Run the full transformation for one worksheet."""
    bounds = resolve_bounds(worksheet, sheet_name)
    headers, numeric_columns = classify_headers(worksheet, bounds.max_column)
    rows = materialize_rows(
        worksheet, bounds, numeric_columns, skip_trailing_row=skip_trailing_row
    )
    padded = pad_rows(rows, column_widths(rows, bounds.max_column))
    return SheetResult(
        sheet_name=sheet_name,
        headers=headers,
        numeric_columns=numeric_columns,
        banner=format_banner(sheet_name),
        statements=format_inserts(sheet_name, headers, padded),
    )


def render_workbook(
    workbook: Workbook,
    *,
    skip_trailing_row: bool = False,
    echo: Callable[[str], None] | None = None,
    on_sheet: Callable[[str], None] | None = None,
) -> str:
    """Render every sheet in workbook order into one output buffer.

    Any error raised for a sheet propagates and aborts the whole workbook.
    """
    chunks: list[str] = []
    for sheet_name, worksheet in workbook:
        if on_sheet is not None:
            on_sheet(sheet_name)
        result = render_sheet(sheet_name, worksheet, skip_trailing_row=skip_trailing_row)
        if echo is not None:
            for statement in result.statements:
                echo(statement)
        chunks.append(result.to_text())
    return "".join(chunks)
