import os
import json
from typing import List, Any
from rich.console import Console
from rich.table import Table

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "CATALOG_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def build_books_table(books: List[Any], title: str = "📖 Books List") -> Table:
    table = Table(title=f"{title} ({len(books)})", show_lines=True, header_style="bold cyan")
    table.add_column("ID", style="magenta", no_wrap=True)
    table.add_column("Book Name", style="white")
    table.add_column("Pages", style="green", justify="right")
    for b in books:
        table.add_row(str(b.id), b.name, str(b.pages))
    return table

def print_list_result(books: List[Any]) -> None:
    """Print the book list in the current output mode.
    - plain: 'ID - Name (N pages)' lines, or 'No books found.'
    - json: JSON array of id, name, pages
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print("[]" if mode == "json" else "No books found. Add your first book!")
        return

    if mode == "json":
        payload = [{"id": b.id, "name": b.name, "pages": b.pages} for b in books]
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        _console.print(build_books_table(books))
    else:
        for b in books:
            print(f"{b.id} - {b.name} ({b.pages} pages)")
