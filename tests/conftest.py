"""Shared fixtures for the expense tracker tests.

Log files and charts must not touch the working tree or need a display, so
the environment is prepared before any project module is imported.
"""

import os
import tempfile
from datetime import datetime

os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="expense-tracker-logs-"))
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from db import Database  # noqa: E402
from models import Expense  # noqa: E402

# Friday
REFERENCE_NOW = datetime(2024, 3, 15, 10, 30)


class FakeStore:
    """In-memory stand-in for ``Database`` with the same call contract."""

    def __init__(self):
        self.rows: dict[int, Expense] = {}
        self.next_id = 1
        self.calls: list[str] = []
        self.fail_with: Exception | None = None

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            raise self.fail_with

    async def create(self, amount, category, note, date):
        self._record("create")
        expense_id = self.next_id
        self.next_id += 1
        self.rows[expense_id] = Expense(
            id=expense_id, amount=amount, category=category, note=note, date=date
        )
        return expense_id

    async def list_all(self):
        self._record("list_all")
        return sorted(self.rows.values(), key=lambda e: e.id, reverse=True)

    async def update(self, expense_id, amount, category, note, date):
        self._record("update")
        if expense_id in self.rows:
            self.rows[expense_id] = Expense(
                id=expense_id, amount=amount, category=category, note=note, date=date
            )

    async def delete(self, expense_id):
        self._record("delete")
        self.rows.pop(expense_id, None)


def make_expense(expense_id=1, amount=10.0, category="Food", note=None, date="2024-03-15"):
    return Expense(id=expense_id, amount=amount, category=category, note=note, date=date)


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def clock():
    return lambda: REFERENCE_NOW


@pytest_asyncio.fixture
async def store(tmp_path):
    database = Database(str(tmp_path / "expenses.db"))
    await database.initialize()
    yield database
    await database.close()
