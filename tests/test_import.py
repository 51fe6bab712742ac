"""Tests for CSV import and preview commands."""

import pytest
from datetime import date
from taxfiler.cli.main import cli


def invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def test_import_successful(cli_runner, temp_db, business_id, fixtures_dir):
    """Test successful CSV import."""
    result = invoke(
        cli_runner, temp_db, "import", str(fixtures_dir / "barclays_statement.csv"), "--business", business_id
    )

    assert result.exit_code == 0
    assert "Import complete (Barclays):" in result.output
    assert "Parsed: 5 transactions" in result.output
    assert "Imported: 4 (2 income, 2 expenses)" in result.output
    assert "Skipped: 0 duplicates, 1 excluded" in result.output
    assert "Audit ID:" in result.output


def test_import_duplicate_detection(cli_runner, temp_db, business_id, fixtures_dir):
    """Test duplicate detection during import."""
    csv_file = str(fixtures_dir / "barclays_single.csv")
    invoke(cli_runner, temp_db, "import", csv_file, "--business", business_id)

    result = invoke(cli_runner, temp_db, "import", csv_file, "--business", business_id)

    assert result.exit_code == 0
    assert "Imported: 0 (0 income, 0 expenses)" in result.output
    assert "Skipped: 1 duplicates, 0 excluded" in result.output


def test_import_skip_likely(cli_runner, temp_db, business_id, fixtures_dir, write_csv):
    """Rows closely matching an existing record are skipped with --skip-likely."""
    invoke(cli_runner, temp_db, "import", str(fixtures_dir / "barclays_single.csv"), "--business", business_id)
    csv_file = write_csv(
        "Date,Description,Money Out,Money In,Balance\n15/01/2025,TEST TRANSACTIONS,10.00,,990.00\n"
    )

    result = invoke(cli_runner, temp_db, "import", str(csv_file), "--business", business_id, "--skip-likely")

    assert result.exit_code == 0
    assert "Skipped: 1 duplicates" in result.output


def test_import_unknown_format(cli_runner, temp_db, business_id, fixtures_dir):
    """Unrecognised headers point the user at manual mapping."""
    result = invoke(
        cli_runner, temp_db, "import", str(fixtures_dir / "unknown_format.csv"), "--business", business_id
    )

    assert result.exit_code == 1
    assert "Error: Unknown CSV format" in result.output


def test_import_with_manual_mapping(cli_runner, temp_db, business_id, fixtures_dir):
    """Test import of an unrecognised file with explicit columns."""
    result = invoke(
        cli_runner,
        temp_db,
        "import",
        str(fixtures_dir / "unknown_format.csv"),
        "--business",
        business_id,
        "--date-column",
        "Posted",
        "--description-column",
        "Details",
        "--amount-column",
        "Value",
        "--date-format",
        "%Y-%m-%d",
    )

    assert result.exit_code == 0
    assert "Import complete (Manual mapping):" in result.output
    assert "Imported: 2 (1 income, 1 expenses)" in result.output


def test_import_mapping_requires_amount(cli_runner, temp_db, business_id, fixtures_dir):
    result = invoke(
        cli_runner,
        temp_db,
        "import",
        str(fixtures_dir / "unknown_format.csv"),
        "--business",
        business_id,
        "--date-column",
        "Posted",
        "--description-column",
        "Details",
    )

    assert result.exit_code == 1
    assert "amount column" in result.output


def test_import_parse_error(cli_runner, temp_db, business_id, write_csv):
    """A malformed row aborts the import with the line number."""
    csv_file = write_csv(
        "Date,Description,Money Out,Money In,Balance\n15/01/2025,TEST,,,990.00\n"
    )

    result = invoke(cli_runner, temp_db, "import", str(csv_file), "--business", business_id)

    assert result.exit_code == 1
    assert "statement.csv:2" in result.output
    assert temp_db.find_expenses_by_date_range(business_id, date(2025, 1, 1), date(2025, 1, 31)) == []


def test_import_requires_business(cli_runner, temp_db, fixtures_dir):
    result = invoke(cli_runner, temp_db, "import", str(fixtures_dir / "barclays_single.csv"))
    assert result.exit_code != 0


def test_preview(cli_runner, temp_db, business_id, fixtures_dir):
    """Preview lists every row with its match and suggestion."""
    result = invoke(
        cli_runner, temp_db, "preview", str(fixtures_dir / "barclays_statement.csv"), "--business", business_id
    )

    assert result.exit_code == 0
    assert "Bank: Barclays" in result.output
    assert "5 transactions: 5 new, 0 duplicates, 1 to exclude" in result.output
    assert "GOOGLE ADS CAMPAIGN  -> ADVERTISING (Box 24)" in result.output
    assert "TRANSFER HMRC ACCOUNT  -> exclude (TRANSFER)" in result.output
    assert "ACME LTD INVOICE 1042  -> SALES" in result.output
    assert temp_db.list_import_audits(business_id) == []
