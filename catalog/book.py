from __future__ import annotations


class BookRecord:
    """A single row of the remote ``books`` table."""

    def __init__(self, id: int | str, name: str, pages: int, created_at: str | None = None) -> None:
        self.id = id
        self.name = name
        self.pages = int(pages)
        self.created_at = created_at

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.name} ({self.pages} pages)"

    def __repr__(self) -> str:
        return f"BookRecord(id={self.id!r}, name={self.name!r}, pages={self.pages!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BookRecord):
            return NotImplemented
        return (self.id, self.name, self.pages, self.created_at) == (
            other.id, other.name, other.pages, other.created_at
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "pages": self.pages,
            "created_at": self.created_at,
        }

    @staticmethod
    def from_dict(data: dict) -> "BookRecord":
        return BookRecord(
            id=data["id"],
            name=data["name"],
            pages=data["pages"],
            created_at=data.get("created_at"),
        )
