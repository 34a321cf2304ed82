import logging
from typing import List, Optional, Union

import httpx

from catalog.book import BookRecord
from catalog.services.http_client import StoreHTTPClient, get_http_client
from config import settings

logger = logging.getLogger(__name__)

BookId = Union[int, str]


class RemoteError(Exception):
    """Any failure reported by (or while reaching) the remote store."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BooksGateway:
    """Thin proxy over the PostgREST ``books`` collection.

    Four calls, no retries, no transformation beyond turning rows into
    ``BookRecord`` objects.
    """

    def __init__(self, client: Optional[StoreHTTPClient] = None, table: Optional[str] = None) -> None:
        self._client = client
        self.table = table or settings.books_table

    @property
    def path(self) -> str:
        return f"/{self.table}"

    # ------------------------- Operations ------------------------- #
    def list_all(self) -> List[BookRecord]:
        """Return every record, newest first."""
        response = self._send("GET", params={"select": "*", "order": "created_at.desc"})
        try:
            rows = response.json()
            return [BookRecord.from_dict(row) for row in rows or []]
        except (ValueError, KeyError, TypeError) as exc:
            raise RemoteError(f"Unexpected response from store: {exc}") from exc

    def insert(self, name: str, pages: int) -> None:
        self._send(
            "POST",
            json=[{"name": name, "pages": pages}],
            headers={"Prefer": "return=minimal"},
        )

    def update(self, book_id: BookId, name: str, pages: int) -> None:
        self._send(
            "PATCH",
            params={"id": f"eq.{book_id}"},
            json={"name": name, "pages": pages},
            headers={"Prefer": "return=minimal"},
        )

    def delete(self, book_id: BookId) -> None:
        self._send("DELETE", params={"id": f"eq.{book_id}"})

    # ------------------------- Helpers ------------------------- #
    def _get_client(self) -> StoreHTTPClient:
        if self._client is None:
            if not settings.supabase_url or not settings.supabase_key:
                raise RemoteError("Supabase URL and key must be configured")
            self._client = get_http_client()
        return self._client

    def _send(self, method: str, **kwargs) -> httpx.Response:
        client = self._get_client()
        try:
            response = client.request(method, self.path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, self.path, exc)
            raise RemoteError(str(exc) or exc.__class__.__name__) from exc

        if response.is_success:
            return response

        message = self._error_message(response)
        logger.warning("%s %s returned %s: %s", method, self.path, response.status_code, message)
        raise RemoteError(message, status_code=response.status_code)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("message", "error_description", "error", "msg"):
                if body.get(key):
                    return str(body[key])
        text = response.text.strip()
        return text or f"HTTP {response.status_code}"
