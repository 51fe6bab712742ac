"""Tests for history and undo commands."""

import pytest
from taxfiler.cli.main import cli
from taxfiler.domain.enums import ImportAuditStatus


def invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


@pytest.fixture
def imported(cli_runner, temp_db, business_id, fixtures_dir):
    """Import the Barclays statement through the CLI and return its audit."""
    invoke(cli_runner, temp_db, "import", str(fixtures_dir / "barclays_statement.csv"), "--business", business_id)
    return temp_db.list_import_audits(business_id)[0]


def test_history_empty(cli_runner, temp_db, business_id):
    result = invoke(cli_runner, temp_db, "history", "--business", business_id)
    assert result.exit_code == 0
    assert "No imports found." in result.output


def test_history_lists_imports(cli_runner, temp_db, business_id, imported):
    result = invoke(cli_runner, temp_db, "history", "--business", business_id)

    assert result.exit_code == 0
    assert imported.id in result.output
    assert "barclays_statement.csv" in result.output
    assert "imported=4 skipped=1" in result.output


def test_undo(cli_runner, temp_db, business_id, imported):
    result = invoke(cli_runner, temp_db, "undo", imported.id, "--reason", "Wrong account", "--user", "alice")

    assert result.exit_code == 0
    assert f"Undid import {imported.id}: 4 records removed" in result.output
    temp_db.rollback()
    audit = temp_db.get_import_audit(imported.id)
    assert audit.status == ImportAuditStatus.UNDONE
    assert audit.undone_by == "alice"


def test_undo_twice_fails(cli_runner, temp_db, business_id, imported):
    invoke(cli_runner, temp_db, "undo", imported.id)

    result = invoke(cli_runner, temp_db, "undo", imported.id)

    assert result.exit_code == 1
    assert "Error: Import has already been undone" in result.output


def test_undoable_excludes_undone(cli_runner, temp_db, business_id, imported):
    invoke(cli_runner, temp_db, "undo", imported.id)

    result = invoke(cli_runner, temp_db, "history", "--business", business_id, "--undoable")

    assert "No imports found." in result.output


def test_undo_missing(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "undo", "does-not-exist")
    assert result.exit_code == 1
    assert "Import audit does-not-exist not found" in result.output
