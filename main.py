import subprocess
import sys
import webbrowser
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from catalog.gateway import BooksGateway
from catalog.library import CatalogController
from catalog.services.http_client import cleanup_http_client
from config import configure_logging, settings
from utils.ui_helpers import build_books_table, print_list_result, set_output_mode

APP_NAME = "📚 Books CRUD"

console = Console()


def create_gateway() -> BooksGateway:
    return BooksGateway()


def _print_message(message: str) -> None:
    print(message)


def _confirm_prompt(prompt: str) -> bool:
    return typer.confirm(prompt, default=False)


# Single catalog controller for the CLI process
class CatalogManager:
    _instance: Optional[CatalogController] = None

    @classmethod
    def get_instance(cls) -> CatalogController:
        """Get or create the CLI controller."""
        if cls._instance is None:
            cls._instance = CatalogController(
                create_gateway(),
                notify=_print_message,
                confirm=_confirm_prompt,
            )
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


# --- Typer CLI ---
app = typer.Typer(help="Books catalog CLI")

@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global CLI options (e.g. output mode)."""
    if output:
        set_output_mode(output)

@app.command("list")
def cli_list():
    """List all books, newest first."""
    controller = CatalogManager.get_instance()
    if controller.load_all():
        print_list_result(controller.state.books)

@app.command("add")
def cli_add(name: str, pages: str):
    """Add a book with a name and page count."""
    controller = CatalogManager.get_instance()
    controller.cancel_edit()
    controller.submit(name, pages)

@app.command("edit")
def cli_edit(
    book_id: str = typer.Argument(..., help="ID of the book to edit"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New book name"),
    pages: Optional[str] = typer.Option(None, "--pages", "-p", help="New number of pages"),
):
    """Edit a book's name and/or page count."""
    controller = CatalogManager.get_instance()
    if not controller.load_all():
        return
    book = controller.find(book_id)
    if not book:
        print(f"Book with ID {book_id} not found.")
        return
    controller.begin_edit(book)
    controller.submit(name, pages)

@app.command("remove")
def cli_remove(
    book_id: str = typer.Argument(..., help="ID of the book to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
):
    """Delete a book by ID."""
    controller = CatalogManager.get_instance()
    controller.pop_message()
    removed = controller.remove(book_id, confirmed=yes)
    if not removed and controller.state.message is None:
        print("Deletion cancelled.")

@app.command("ui")
def cli_ui():
    """Start the interactive catalog view."""
    run_menu()

@app.command("serve")
def cli_serve():
    """Start the web view with Uvicorn."""
    host = settings.api_host
    port = int(settings.api_port)
    url = f"http://{host}:{port}/"
    print(f"Starting web UI on {url}")
    try:
        webbrowser.open(url)
    except webbrowser.Error:
        pass
    args = [
        sys.executable,
        "-m", "uvicorn",
        "api:app",
        "--host", host,
        "--port", str(port),
    ]
    if settings.debug:
        args.append("--reload")
    try:
        subprocess.run(args)
    except FileNotFoundError:
        print("Error: `uvicorn` could not be started. Make sure it is installed.")


# --- Interactive view ---
def _alert(message: str) -> None:
    if message.startswith("Error"):
        style = "red"
    elif "successfully" in message:
        style = "green"
    else:
        style = "yellow"
    console.print(Panel.fit(escape(message), border_style=style))
    Prompt.ask("[dim]Press Enter to continue[/]", default="", show_default=False)


def _confirm_rich(prompt: str) -> bool:
    return Confirm.ask(f"🗑️ {prompt}", default=False)


def render_view(controller: CatalogController) -> None:
    """Draw the form header and the book list."""
    state = controller.state
    if state.is_editing:
        form = f"[bold]Book Name:[/] {escape(state.name)}\n[bold]Number of Pages:[/] {escape(state.pages)}"
        console.print(Panel(form, title=f"✏️ Edit Book (ID {state.editing_id})", border_style="yellow"))
    else:
        console.print(Panel("[dim]Use 'Add book' to create a new record.[/]", title="➕ Add New Book", border_style="cyan"))

    if state.loading:
        console.print("[dim]Loading books...[/]")
    elif not state.books:
        console.print("[yellow]No books found. Add your first book![/]")
    else:
        console.print(build_books_table(state.books))


def run_menu(controller: Optional[CatalogController] = None):
    """Interactive single-view catalog: list on top, form actions below."""
    controller = controller or CatalogController(create_gateway(), notify=_alert, confirm=_confirm_rich)

    def render_menu() -> None:
        submit_label = "Update book" if controller.state.is_editing else "Add book"
        menu_items = [
            ("1", "Refresh list", "🔄"),
            ("2", submit_label, "📥"),
            ("3", "Edit book", "✏️"),
            ("4", "Cancel edit", "❌"),
            ("5", "Delete book", "🗑️"),
            ("0", "Quit", "🚪"),
        ]

        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, icon in menu_items:
            table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

        console.print(Panel(table, title=APP_NAME, border_style="cyan", box=box.HEAVY, padding=(1, 2)))

    with console.status("[bold green]Loading books..."):
        controller.load_all()

    try:
        while True:
            console.clear()
            render_view(controller)
            render_menu()
            choice = Prompt.ask("Choose an option", choices=["1", "2", "3", "4", "5", "0"], default="1").strip()

            if choice == "1":
                with console.status("[bold green]Loading books..."):
                    controller.load_all()
            elif choice == "2":
                name = Prompt.ask("Book Name", default=controller.state.name or None)
                pages = Prompt.ask("Number of Pages", default=controller.state.pages or None)
                controller.submit(name or "", pages or "")
            elif choice == "3":
                book_id = Prompt.ask("ID of the book to edit").strip()
                book = controller.find(book_id)
                if book:
                    controller.begin_edit(book)
                else:
                    _alert(f"Book with ID {book_id} not found.")
            elif choice == "4":
                controller.cancel_edit()
            elif choice == "5":
                book_id = Prompt.ask("ID of the book to delete").strip()
                if controller.find(book_id):
                    controller.remove(book_id)
                else:
                    _alert(f"Book with ID {book_id} not found.")
            elif choice == "0":
                console.print("[green]Goodbye![/]")
                break
    finally:
        cleanup_http_client()


def cli_entry():
    configure_logging()
    if len(sys.argv) > 1:
        try:
            app()
        finally:
            cleanup_http_client()
    else:
        run_menu()


if __name__ == "__main__":
    cli_entry()
