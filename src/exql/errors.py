"""Error kinds raised by exql, each mapped to its own process exit code.

Hierarchy::

    ExqlError
    ├── InputNotFoundError      (3)
    ├── OutputExistsError       (4)
    ├── InvalidSheetError       (5)
    ├── InvalidAddressError     (6)
    ├── UnsupportedFormatError  (7)
    └── OutputWriteError        (8)
"""

from __future__ import annotations

from pathlib import Path


class ExqlError(Exception):
    """Base class for every failure that aborts a run."""

    exit_code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputNotFoundError(ExqlError):
    exit_code = 3

    def __init__(self, path: Path) -> None:
        super().__init__(f"{path} is not a valid file path")
        self.path = path


class OutputExistsError(ExqlError):
    exit_code = 4

    def __init__(self, path: Path) -> None:
        super().__init__(f"{path} already exists. Provide the --force (-f) flag to overwrite")
        self.path = path


class InvalidSheetError(ExqlError):
    exit_code = 5

    def __init__(self, sheet_name: str) -> None:
        super().__init__(
            f"{sheet_name} is invalid. Please ensure the spreadsheet begins at A1, "
            "with column headers along row 1"
        )
        self.sheet_name = sheet_name


class InvalidAddressError(ExqlError):
    exit_code = 6

    def __init__(self, address: str) -> None:
        super().__init__(f"Invalid cell address: {address!r} (expected letters then digits, e.g. AB12)")
        self.address = address


class UnsupportedFormatError(ExqlError):
    exit_code = 7


class OutputWriteError(ExqlError):
    exit_code = 8
