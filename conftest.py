import itertools
from datetime import datetime, timedelta
from typing import List, Optional

import pytest

from catalog.book import BookRecord
from catalog.gateway import RemoteError


class FakeGateway:
    """In-memory stand-in for the remote ``books`` table.

    Records every call in ``calls`` and raises ``RemoteError`` for any
    operation named in ``fail``.
    """

    def __init__(self, rows: Optional[List[dict]] = None) -> None:
        self.rows: List[dict] = []
        self.calls: List[tuple] = []
        self.fail: dict = {}
        self._ids = itertools.count(1)
        self._clock = datetime(2024, 1, 1)
        for row in rows or []:
            self._add(row["name"], row["pages"])

    def _add(self, name: str, pages: int) -> None:
        self._clock += timedelta(seconds=1)
        self.rows.append({
            "id": next(self._ids),
            "name": name,
            "pages": pages,
            "created_at": self._clock.isoformat(),
        })

    def _check(self, op: str) -> None:
        if op in self.fail:
            raise RemoteError(self.fail[op])

    def list_all(self) -> List[BookRecord]:
        self.calls.append(("list_all",))
        self._check("list_all")
        ordered = sorted(self.rows, key=lambda r: r["created_at"], reverse=True)
        return [BookRecord.from_dict(r) for r in ordered]

    def insert(self, name: str, pages: int) -> None:
        self.calls.append(("insert", name, pages))
        self._check("insert")
        self._add(name, pages)

    def update(self, book_id, name: str, pages: int) -> None:
        self.calls.append(("update", book_id, name, pages))
        self._check("update")
        for row in self.rows:
            if str(row["id"]) == str(book_id):
                row["name"] = name
                row["pages"] = pages

    def delete(self, book_id) -> None:
        self.calls.append(("delete", book_id))
        self._check("delete")
        self.rows = [r for r in self.rows if str(r["id"]) != str(book_id)]

    def mutations(self) -> List[tuple]:
        return [c for c in self.calls if c[0] != "list_all"]


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def seeded_gateway():
    return FakeGateway([
        {"name": "Dune", "pages": 412},
        {"name": "Neuromancer", "pages": 271},
    ])
