"""I/O helpers — input/output checks, workbook loading, writing the SQL file."""

from __future__ import annotations

import csv
import zipfile
from io import StringIO
from pathlib import Path
from typing import Any, Callable, cast

import openpyxl
import pandas as pd
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from exql.errors import (
    InputNotFoundError,
    OutputExistsError,
    OutputWriteError,
    UnsupportedFormatError,
)
from exql.models import CellValue, Workbook, Worksheet

OPENPYXL_SUFFIXES = (".xlsx", ".xlsm", ".xltx", ".xltm")

# ── Checks ───────────────────────────────────────────────────────


def check_input(path: Path) -> Path:
    path = Path(path)
    if not path.is_file():
        raise InputNotFoundError(path)
    return path


def check_output(path: Path | None, *, force: bool = False) -> Path | None:
    """Refuse to clobber an existing *path* unless *force* is set."""
    if path is None:
        return None
    path = Path(path)
    if path.is_dir():
        raise OutputWriteError(f"Output path is a directory, not a file: {path}")
    if path.exists() and not force:
        raise OutputExistsError(path)
    return path


# ── Loading ──────────────────────────────────────────────────────


def _bounding_ref(coords: list[tuple[int, int]]) -> str | None:
    if not coords:
        return None
    min_row = min(r for r, _ in coords)
    min_col = min(c for _, c in coords)
    max_row = max(r for r, _ in coords)
    max_col = max(c for _, c in coords)
    return f"{get_column_letter(min_col)}{min_row}:{get_column_letter(max_col)}{max_row}"


def _worksheet_from_cells(values: dict[tuple[int, int], CellValue]) -> Worksheet:
    cells = {f"{get_column_letter(c)}{r}": v for (r, c), v in values.items()}
    return Worksheet(cells=cells, ref=_bounding_ref(list(values)))


def frame_to_worksheet(df: pd.DataFrame) -> Worksheet:
    """Convert a header-less DataFrame into a sparse worksheet (NA cells are absent)."""
    values: dict[tuple[int, int], CellValue] = {}
    for row_index, row in enumerate(df.itertuples(index=False, name=None), start=1):
        for col_index, value in enumerate(row, start=1):
            if pd.isna(value):
                continue
            values[(row_index, col_index)] = value
    return _worksheet_from_cells(values)


def _load_openpyxl(path: Path) -> Workbook:
    book = openpyxl.load_workbook(path, data_only=True)
    sheets: dict[str, Worksheet] = {}
    for ws in book.worksheets:
        values: dict[tuple[int, int], CellValue] = {}
        for row in ws.iter_rows():
            for cell in row:
                if cell.value is None:
                    continue
                values[(cell.row, cell.column)] = cell.value
        sheets[ws.title] = _worksheet_from_cells(values)
    return Workbook.from_mapping(sheets)


def _read_csv_frame(text: str) -> pd.DataFrame:
    """Parse *text* header-less, widened to its longest row (short rows pad with NA)."""
    width = max((len(row) for row in csv.reader(StringIO(text))), default=0)
    if width == 0:
        return pd.DataFrame()
    return pd.read_csv(
        StringIO(text),
        header=None,
        names=list(range(width)),
        dtype="string",
        sep=",",
        engine="c",
        keep_default_na=False,
        na_values=[""],
    )


def _load_csv(path: Path) -> Workbook:
    last_exc: Exception | None = None
    for encoding in ("utf-8-sig", "utf-8", "latin-1"):
        try:
            text = path.read_text(encoding=encoding, errors="strict")
            df = _read_csv_frame(text)
        except (UnicodeDecodeError, csv.Error, pd.errors.ParserError) as exc:
            last_exc = exc
            continue
        return Workbook.from_mapping({path.stem: frame_to_worksheet(df)})
    raise UnsupportedFormatError(
        f"Could not read CSV {path} (decode or parse failed)"
    ) from last_exc


def _load_xls(path: Path) -> Workbook:
    read_excel = cast(Callable[..., Any], getattr(pd, "read_excel"))
    try:
        frames = read_excel(path, engine="xlrd", sheet_name=None, header=None, dtype=object)
    except ImportError as exc:
        raise UnsupportedFormatError(
            "Unsupported .xls input unless 'xlrd' is installed. "
            "Either convert to .xlsx or add dependency: pip install 'exql[xls]'"
        ) from exc
    return Workbook.from_mapping({name: frame_to_worksheet(df) for name, df in frames.items()})


def load_workbook(path: Path) -> Workbook:
    """Load a spreadsheet file into a :class:`Workbook`.

    Raises
    ------
    InputNotFoundError
        If *path* does not exist.
    UnsupportedFormatError
        If the extension is not supported, or the file cannot be parsed.
    """
    path = check_input(path)
    suffix = path.suffix.lower()
    if suffix in OPENPYXL_SUFFIXES:
        try:
            return _load_openpyxl(path)
        except (
            OSError, KeyError, ValueError, zipfile.BadZipFile, InvalidFileException
        ) as exc:
            raise UnsupportedFormatError(f"Could not read workbook {path}: {exc}") from exc
    if suffix == ".csv":
        return _load_csv(path)
    if suffix == ".xls":
        return _load_xls(path)
    raise UnsupportedFormatError(
        f"Unsupported file type: {suffix!r}. Use .xlsx, .xlsm, .csv, or .xls"
    )


# ── Writing ──────────────────────────────────────────────────────


def write_sql(path: Path, text: str) -> Path:
    """Write *text* to *path* atomically (temp file + replace)."""
    path = Path(path)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)
    except OSError as exc:
        raise OutputWriteError(f"Failed to write output to {path} - {exc}") from exc
    return path
