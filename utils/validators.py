from typing import Optional, Tuple, Union


class BookFormValidator:
    """Required-field checks for the book form: a non-empty name and a positive integer page count."""

    EMPTY_FIELDS_MESSAGE = "Please fill all fields"
    INVALID_PAGES_MESSAGE = "Number of pages must be a positive whole number"

    @staticmethod
    def normalize_name(raw: Optional[str]) -> str:
        if raw is None:
            return ""
        return raw.strip()

    @staticmethod
    def parse_pages(raw: Union[str, int, None]) -> Optional[int]:
        """Return the page count as an int, or None if it is not a positive integer."""
        if raw is None or isinstance(raw, bool):
            return None
        if isinstance(raw, int):
            return raw if raw > 0 else None
        s = str(raw).strip()
        # only ASCII decimal digits; rejects "-3", "1.5", "12abc", "²"
        if not (s.isascii() and s.isdigit()):
            return None
        value = int(s)
        return value if value > 0 else None

    @staticmethod
    def validate(name: Optional[str], pages: Union[str, int, None]) -> Tuple[Optional[Tuple[str, int]], Optional[str]]:
        """Validate raw form values.

        Returns ``((name, pages), None)`` on success or ``(None, message)``
        with the user-facing reason on failure.
        """
        clean_name = BookFormValidator.normalize_name(name)
        raw_pages = "" if pages is None else str(pages).strip()
        if not clean_name or not raw_pages:
            return None, BookFormValidator.EMPTY_FIELDS_MESSAGE
        page_count = BookFormValidator.parse_pages(pages)
        if page_count is None:
            return None, BookFormValidator.INVALID_PAGES_MESSAGE
        return (clean_name, page_count), None
