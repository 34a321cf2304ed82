import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Callable, List, Optional

from catalog.book import BookRecord
from catalog.gateway import BookId, BooksGateway, RemoteError
from utils.validators import BookFormValidator

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this book?"


@dataclass
class CatalogState:
    """Everything the single catalog view renders."""
    books: List[BookRecord] = field(default_factory=list)
    name: str = ""
    pages: str = ""
    editing_id: Optional[BookId] = None
    loading: bool = False
    message: Optional[str] = None

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None


class CatalogController:
    """Holds the view state and turns user actions into gateway calls.

    The book list is only ever replaced by a fresh ``list_all()`` snapshot;
    it is never patched locally.
    """

    def __init__(
        self,
        gateway: BooksGateway,
        notify: Optional[Callable[[str], None]] = None,
        confirm: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self.gateway = gateway
        self.state = CatalogState()
        self._notify = notify
        self._confirm = confirm
        self._lock = RLock()

    # ------------------------- Core operations ------------------------- #
    def load_all(self) -> bool:
        """Replace the list with the store's current contents, newest first."""
        with self._lock:
            self.state.loading = True
            try:
                books = self.gateway.list_all()
            except RemoteError as e:
                logger.error("Error fetching books: %s", e)
                self._show(f"Error loading books: {e}")
                return False
            finally:
                self.state.loading = False
            self.state.books = list(books)
            return True

    def submit(self, name: Optional[str] = None, pages=None) -> bool:
        """Create or update a book from the form values.

        Values passed in overwrite the current form fields first. Routes to
        update when an edit target is set, otherwise inserts.
        """
        with self._lock:
            if name is not None:
                self.state.name = name
            if pages is not None:
                self.state.pages = str(pages)

            values, error = BookFormValidator.validate(self.state.name, self.state.pages)
            if error:
                self._show(error)
                return False
            clean_name, page_count = values

            editing_id = self.state.editing_id
            self.state.loading = True
            try:
                if editing_id is not None:
                    self.gateway.update(editing_id, clean_name, page_count)
                else:
                    self.gateway.insert(clean_name, page_count)
            except RemoteError as e:
                action = "updating" if editing_id is not None else "creating"
                logger.error("Error %s book: %s", action, e)
                self._show(f"Error {action}: {e}")
                return False
            finally:
                self.state.loading = False

            self._show("Book updated successfully!" if editing_id is not None else "Book added successfully!")
            self._clear_form()
            self.load_all()
            return True

    def begin_edit(self, record: BookRecord) -> None:
        with self._lock:
            self.state.name = record.name
            self.state.pages = str(record.pages)
            self.state.editing_id = record.id

    def cancel_edit(self) -> None:
        with self._lock:
            self._clear_form()

    def remove(self, book_id: BookId, confirmed: bool = False) -> bool:
        """Delete a book after confirmation, then reload.

        ``confirmed`` skips the prompt for callers that already asked.
        """
        with self._lock:
            if not confirmed and not self._ask(DELETE_PROMPT):
                return False

            self.state.loading = True
            try:
                self.gateway.delete(book_id)
            except RemoteError as e:
                logger.error("Error deleting book: %s", e)
                self._show(f"Error deleting: {e}")
                return False
            finally:
                self.state.loading = False

            if self.state.editing_id is not None and str(self.state.editing_id) == str(book_id):
                self._clear_form()
            self._show("Book deleted successfully!")
            self.load_all()
            return True

    # ------------------------- Utilities ------------------------- #
    def find(self, book_id: BookId) -> Optional[BookRecord]:
        """Look a record up in the last fetched snapshot."""
        for book in self.state.books:
            if str(book.id) == str(book_id):
                return book
        return None

    def pop_message(self) -> Optional[str]:
        message = self.state.message
        self.state.message = None
        return message

    def _clear_form(self) -> None:
        self.state.name = ""
        self.state.pages = ""
        self.state.editing_id = None

    def _show(self, message: str) -> None:
        self.state.message = message
        if self._notify:
            self._notify(message)

    def _ask(self, prompt: str) -> bool:
        if self._confirm is None:
            return True
        return bool(self._confirm(prompt))
