import json

import pytest
from typer.testing import CliRunner
from unittest.mock import MagicMock, patch

import main
from main import app, CatalogManager
from utils.ui_helpers import OUTPUT_MODE_ENV

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_gateway(seeded_gateway, monkeypatch):
    CatalogManager.reset()
    monkeypatch.setattr(main, "create_gateway", lambda: seeded_gateway)
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")
    yield seeded_gateway
    CatalogManager.reset()


def test_list_books():
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    lines = result.stdout.strip().splitlines()
    assert lines == ["2 - Neuromancer (271 pages)", "1 - Dune (412 pages)"]


def test_list_no_books(cli_gateway):
    cli_gateway.rows.clear()
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "No books found. Add your first book!" in result.stdout


def test_list_json_output():
    result = runner.invoke(app, ["--output", "json", "list"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload[1] == {"id": 1, "name": "Dune", "pages": 412}


def test_list_remote_error(cli_gateway):
    cli_gateway.fail["list_all"] = "could not connect"
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "Error loading books: could not connect" in result.stdout


def test_add_book_success(cli_gateway):
    result = runner.invoke(app, ["add", "Snow Crash", "480"])
    assert result.exit_code == 0
    assert "Book added successfully!" in result.stdout
    assert ("insert", "Snow Crash", 480) in cli_gateway.calls


def test_add_book_invalid_pages(cli_gateway):
    result = runner.invoke(app, ["add", "Snow Crash", "zero"])
    assert result.exit_code == 0
    assert "positive whole number" in result.stdout
    assert cli_gateway.mutations() == []


def test_edit_book(cli_gateway):
    result = runner.invoke(app, ["edit", "1", "--pages", "688"])
    assert result.exit_code == 0
    assert "Book updated successfully!" in result.stdout
    assert ("update", 1, "Dune", 688) in cli_gateway.calls


def test_edit_book_not_found(cli_gateway):
    result = runner.invoke(app, ["edit", "99", "--name", "Nope"])
    assert result.exit_code == 0
    assert "Book with ID 99 not found." in result.stdout
    assert cli_gateway.mutations() == []


def test_remove_book_confirmed(cli_gateway):
    result = runner.invoke(app, ["remove", "2"], input="y\n")
    assert result.exit_code == 0
    assert "Book deleted successfully!" in result.stdout
    assert ("delete", "2") in cli_gateway.calls


def test_remove_book_declined(cli_gateway):
    result = runner.invoke(app, ["remove", "2"], input="n\n")
    assert result.exit_code == 0
    assert "Deletion cancelled." in result.stdout
    assert cli_gateway.mutations() == []


def test_remove_book_yes_flag(cli_gateway):
    result = runner.invoke(app, ["remove", "1", "--yes"])
    assert result.exit_code == 0
    assert "Book deleted successfully!" in result.stdout
    assert [r["id"] for r in cli_gateway.rows] == [2]


@patch("subprocess.run")
@patch("webbrowser.open")
def test_serve_command(mock_webbrowser_open, mock_subprocess_run):
    result = runner.invoke(app, ["serve"])
    assert result.exit_code == 0
    assert "Starting web UI on" in result.stdout
    mock_webbrowser_open.assert_called_once()
    mock_subprocess_run.assert_called_once()
    args = mock_subprocess_run.call_args[0][0]
    assert "uvicorn" in args
    assert "api:app" in args
    assert "--host" in args
    assert "--port" in args


def test_interactive_menu_add_edit_delete(cli_gateway, monkeypatch):
    answers = iter([
        "2", "Snow Crash", "480", "",   # add, then dismiss the notification
        "3", "1",                       # begin editing Dune
        "2", "Dune", "688", "",         # save the edit
        "5", "2", "",                   # delete Neuromancer
        "0",
    ])
    monkeypatch.setattr(main.Prompt, "ask", MagicMock(side_effect=lambda *a, **k: next(answers)))
    monkeypatch.setattr(main.Confirm, "ask", MagicMock(return_value=True))
    controller = main.CatalogController(cli_gateway, notify=main._alert, confirm=main._confirm_rich)

    main.run_menu(controller)

    assert ("insert", "Snow Crash", 480) in cli_gateway.calls
    assert ("update", 1, "Dune", 688) in cli_gateway.calls
    assert ("delete", "2") in cli_gateway.calls
    assert sorted((b.name, b.pages) for b in controller.state.books) == [("Dune", 688), ("Snow Crash", 480)]


def test_interactive_menu_cancel_edit(cli_gateway, monkeypatch):
    answers = iter(["3", "2", "4", "0"])
    monkeypatch.setattr(main.Prompt, "ask", MagicMock(side_effect=lambda *a, **k: next(answers)))
    controller = main.CatalogController(cli_gateway, notify=main._alert, confirm=main._confirm_rich)

    main.run_menu(controller)

    assert controller.state.editing_id is None
    assert cli_gateway.mutations() == []


def test_list_json_output_empty(cli_gateway):
    cli_gateway.rows.clear()
    result = runner.invoke(app, ["--output", "json", "list"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == []
