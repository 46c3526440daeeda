from __future__ import annotations

from pathlib import Path

import pytest
from openpyxl import Workbook

from exql.models import Worksheet


@pytest.fixture
def users_sheet() -> Worksheet:
    return Worksheet(
        cells={"A1": "#id", "B1": "name", "A2": 1, "B2": "Alice", "A3": 2, "B3": "Bob"},
        ref="A1:B3",
    )


@pytest.fixture
def users_xlsx(tmp_path: Path) -> Path:
    wb = Workbook()
    ws = wb.active
    ws.title = "Users"
    ws.append(["#id", "name"])
    ws.append([1, "Alice"])
    ws.append([2, "Bob"])

    orders = wb.create_sheet("Orders")
    orders.append(["#order_id", "#user_id", "note"])
    orders.append([10, 1, "first"])
    orders.append([11, 2, None])

    path = tmp_path / "users.xlsx"
    wb.save(path)
    return path
