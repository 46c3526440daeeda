"""exql — Turn spreadsheet sheets into aligned SQL INSERT statements."""

__version__ = "0.2.0"

NUMERIC_MARKER: str = "#"
NULL_TOKEN: str = "NULL"
BANNER_WIDTH: int = 100
