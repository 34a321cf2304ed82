import html
import json
import logging
import uuid
from collections import OrderedDict
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from threading import RLock
from typing import List, Optional

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import BaseModel

from catalog.gateway import BooksGateway
from catalog.library import CatalogController
from catalog.services.http_client import cleanup_http_client
from config import configure_logging, settings

logger = logging.getLogger(__name__)


def create_gateway() -> BooksGateway:
    return BooksGateway()


# One controller per browser session; each keeps its own copy of the list.
# Least recently used sessions are dropped past settings.max_sessions.
sessions: "OrderedDict[str, CatalogController]" = OrderedDict()
_sessions_lock = RLock()


def _deny_prompt(prompt: str) -> bool:
    # The server cannot ask; deletions arrive already confirmed by the browser.
    return False


def get_controller(session_id: Optional[str]) -> tuple[str, CatalogController]:
    with _sessions_lock:
        if session_id and session_id in sessions:
            sessions.move_to_end(session_id)
            return session_id, sessions[session_id]
        new_id = uuid.uuid4().hex
        controller = CatalogController(create_gateway(), confirm=_deny_prompt)
        sessions[new_id] = controller
        while len(sessions) > settings.max_sessions:
            expired_id, _ = sessions.popitem(last=False)
            logger.debug("Dropped catalog session %s", expired_id)
        logger.debug("Started catalog session %s", new_id)
        return new_id, controller


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    try:
        yield
    finally:
        cleanup_http_client()

app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)


# --- Models ---
class BookModel(BaseModel):
    id: int | str
    name: str
    pages: int
    created_at: str | None = None


# --- Rendering ---
PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ font-family: sans-serif; max-width: 860px; margin: 2rem auto; }}
.form-container, .books-list {{ border: 1px solid #ddd; border-radius: 8px; padding: 1rem 1.5rem; margin-bottom: 1.5rem; }}
.form-group {{ margin-bottom: .75rem; }}
.form-group label {{ display: block; font-weight: bold; }}
.books-table {{ width: 100%; border-collapse: collapse; }}
.books-table th, .books-table td {{ border-bottom: 1px solid #eee; padding: .4rem; text-align: left; }}
.pages-badge {{ background: #e0f2fe; border-radius: 4px; padding: 0 .4rem; }}
.actions form {{ display: inline; }}
.message {{ padding: .5rem 1rem; background: #fef9c3; border-radius: 6px; }}
</style>
</head>
<body>
<h1>📚 {title}</h1>
{message}
<div class="form-container">
<h2>{form_title}</h2>
<form method="post" action="/books">
<div class="form-group">
<label for="name">Book Name:</label>
<input id="name" type="text" name="name" value="{name}" placeholder="Enter book name" required>
</div>
<div class="form-group">
<label for="pages">Number of Pages:</label>
<input id="pages" type="number" name="pages" value="{pages}" placeholder="Enter number of pages" min="1" required>
</div>
<button type="submit" class="btn btn-primary">{submit_label}</button>
</form>
{cancel_button}
</div>
<div class="books-list">
<h2>📖 Books List ({count})</h2>
{books}
</div>
</body>
</html>
"""

CANCEL_BUTTON = """<form method="post" action="/edit/cancel" style="display:inline">
<button type="submit" class="btn btn-secondary">❌ Cancel Edit</button>
</form>"""

ROW_TEMPLATE = """<tr>
<td>{id}</td>
<td class="book-name">{name}</td>
<td><span class="pages-badge">{pages}</span></td>
<td class="actions">
<form method="post" action="/books/{id}/edit"><button type="submit" class="btn-edit">✏️ Edit</button></form>
<form method="post" action="/books/{id}/delete" onsubmit="return confirm('Are you sure you want to delete this book?')">
<input type="hidden" name="confirm" value="yes">
<button type="submit" class="btn-delete">🗑️ Delete</button>
</form>
</td>
</tr>"""


def render_page(controller: CatalogController) -> str:
    state = controller.state
    message = controller.pop_message()
    message_html = ""
    if message:
        # Blocking notification, like the browser alert of a single-page app
        script_message = json.dumps(message).replace("<", "\\u003c")
        message_html = (
            f'<p class="message">{html.escape(message)}</p>'
            f"<script>alert({script_message});</script>"
        )

    if state.loading:
        books_html = '<p class="loading">Loading books...</p>'
    elif not state.books:
        books_html = '<p class="no-books">No books found. Add your first book!</p>'
    else:
        rows = "\n".join(
            ROW_TEMPLATE.format(id=html.escape(str(b.id)), name=html.escape(b.name), pages=b.pages)
            for b in state.books
        )
        books_html = (
            '<table class="books-table"><thead><tr><th>ID</th><th>Book Name</th>'
            f"<th>Pages</th><th>Actions</th></tr></thead><tbody>{rows}</tbody></table>"
        )

    return PAGE_TEMPLATE.format(
        title=html.escape(settings.app_name),
        message=message_html,
        form_title="✏️ Edit Book" if state.is_editing else "➕ Add New Book",
        name=html.escape(state.name),
        pages=html.escape(state.pages),
        submit_label="📝 Update Book" if state.is_editing else "📥 Add Book",
        cancel_button=CANCEL_BUTTON if state.is_editing else "",
        count=len(state.books),
        books=books_html,
    )


def _with_session(response: Response, session_id: str) -> Response:
    response.set_cookie(settings.session_cookie, session_id, httponly=True, samesite="lax")
    return response


def _back_to_view(session_id: str) -> Response:
    return _with_session(RedirectResponse("/", status_code=303), session_id)


# --- Health ---
@app.get("/health")
def health():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.app_version,
        "store_configured": bool(settings.supabase_url and settings.supabase_key),
        "sessions": len(sessions),
    }


# --- Catalog view ---
@app.get("/", response_class=HTMLResponse)
def index(request: Request):
    """Render the single catalog view, reloading the list as the page mounts."""
    session_id, controller = get_controller(request.cookies.get(settings.session_cookie))
    controller.load_all()
    return _with_session(HTMLResponse(render_page(controller)), session_id)


@app.post("/books")
def submit_book(request: Request, name: str = Form(""), pages: str = Form("")):
    """Create a book, or update the one being edited."""
    session_id, controller = get_controller(request.cookies.get(settings.session_cookie))
    controller.submit(name, pages)
    return _back_to_view(session_id)


@app.post("/books/{book_id}/edit")
def begin_edit(book_id: str, request: Request):
    session_id, controller = get_controller(request.cookies.get(settings.session_cookie))
    book = controller.find(book_id)
    if not book:
        raise HTTPException(status_code=404, detail=f"Book with ID {book_id} not found")
    controller.begin_edit(book)
    return _back_to_view(session_id)


@app.post("/edit/cancel")
def cancel_edit(request: Request):
    session_id, controller = get_controller(request.cookies.get(settings.session_cookie))
    controller.cancel_edit()
    return _back_to_view(session_id)


@app.post("/books/{book_id}/delete")
def delete_book(book_id: str, request: Request, confirm: str = Form("")):
    session_id, controller = get_controller(request.cookies.get(settings.session_cookie))
    controller.remove(book_id, confirmed=confirm.lower() == "yes")
    return _back_to_view(session_id)


@app.get("/api/books", response_model=List[BookModel])
def list_books():
    """Fresh JSON snapshot of the collection. Read-only, so no session is kept."""
    controller = CatalogController(create_gateway())
    if not controller.load_all():
        raise HTTPException(status_code=502, detail=controller.pop_message())
    return [BookModel(**b.to_dict()) for b in controller.state.books]
