"""CSV import and preview commands."""

import click
from taxfiler.cli.error_handling import handle_domain_error
from taxfiler.domain.csv_import import CSVImportService
from taxfiler.domain.errors import DomainError
from taxfiler.parsers.manual_mapping import ColumnMapping


def _format_amount(amount) -> str:
    return f"{amount:,.2f}"


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--business", required=True, help="Business ID to import into")
@click.option("--charset", default="utf-8", show_default=True, help="File character set")
@click.option("--user", "imported_by", help="User name recorded on the import audit")
@click.option(
    "--skip-likely",
    is_flag=True,
    help="Skip rows that closely match an existing record instead of importing them",
)
@click.option("--date-column", help="Manual mapping: date column header")
@click.option("--description-column", help="Manual mapping: description column header")
@click.option("--amount-column", help="Manual mapping: signed amount column header")
@click.option("--money-in-column", help="Manual mapping: money in column header")
@click.option("--money-out-column", help="Manual mapping: money out column header")
@click.option("--date-format", help="Manual mapping: strptime date format, e.g. %d/%m/%Y")
@click.pass_context
def import_csv(
    ctx,
    csv_file: str,
    business: str,
    charset: str,
    imported_by: str | None,
    skip_likely: bool,
    date_column: str | None,
    description_column: str | None,
    amount_column: str | None,
    money_in_column: str | None,
    money_out_column: str | None,
    date_format: str | None,
):
    """Import a bank statement CSV as income and expense records.

    The bank is detected from the header row. For exports no built-in bank
    format recognises, give --date-column, --description-column and either
    --amount-column or the money in/out columns.

    Examples:
        taxfiler import statement.csv --business 6f1c...
        taxfiler import export.csv --business 6f1c... --date-column "Posted" \\
            --description-column "Details" --amount-column "Value"
    """
    db = ctx.obj["db"]
    service = CSVImportService(db)
    resolver = (lambda match: match.default_action) if skip_likely else None

    try:
        if date_column or description_column:
            mapping = ColumnMapping(
                date_column=date_column or "",
                description_column=description_column or "",
                amount_column=amount_column,
                money_in_column=money_in_column,
                money_out_column=money_out_column,
                date_format=date_format,
            )
            result = service.import_csv_with_mapping(
                business, csv_file, mapping, encoding=charset, imported_by=imported_by, resolver=resolver
            )
        else:
            result = service.import_csv(
                business, csv_file, encoding=charset, imported_by=imported_by, resolver=resolver
            )
    except (DomainError, FileNotFoundError, LookupError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nImport complete ({result.bank_name}):")
    click.echo(f"  Parsed: {result.total_parsed} transactions")
    click.echo(
        f"  Imported: {result.imported_count} "
        f"({result.income_count} income, {result.expense_count} expenses)"
    )
    click.echo(f"  Skipped: {result.duplicate_count} duplicates, {result.excluded_count} excluded")
    click.echo(f"  Audit ID: {result.audit_id}")


@click.command("preview")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--business", required=True, help="Business ID to check duplicates against")
@click.option("--charset", default="utf-8", show_default=True, help="File character set")
@click.pass_context
def preview(ctx, csv_file: str, business: str, charset: str):
    """Show what an import would do without saving anything."""
    db = ctx.obj["db"]
    service = CSVImportService(db)

    try:
        result = service.preview_import(business, csv_file, encoding=charset)
    except (DomainError, FileNotFoundError, LookupError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Bank: {result.bank_name}")
    click.echo(
        f"{len(result.transactions)} transactions: {len(result.unique_transactions)} new, "
        f"{len(result.duplicate_transactions)} duplicates, {result.excluded_count} to exclude"
    )
    for match, rec in zip(result.matches, result.recommendations):
        txn = match.transaction
        if rec.should_exclude:
            suggestion = f"exclude ({rec.exclusion_reason})"
        elif rec.is_income:
            suggestion = rec.income_category.value
        else:
            suggestion = f"{rec.expense_category.value} ({rec.sa103_label})"
        click.echo(
            f"  [{match.match_type.value:<7}] {txn.date.isoformat()} "
            f"{_format_amount(txn.amount):>12}  {txn.description}  -> {suggestion}"
        )


def register_commands(cli):
    """Register import commands with main CLI."""
    cli.add_command(import_csv)
    cli.add_command(preview)
