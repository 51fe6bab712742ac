"""Import history and undo commands."""

import click
from taxfiler.cli.error_handling import handle_domain_error
from taxfiler.domain.errors import DomainError
from taxfiler.domain.import_audit import ImportAuditService, LOCAL_USER_IDENTITY


@click.command("history")
@click.option("--business", required=True, help="Business ID")
@click.option("--undoable", is_flag=True, help="Only show imports that can still be undone")
@click.pass_context
def history(ctx, business: str, undoable: bool):
    """List imports for a business, newest first."""
    db = ctx.obj["db"]
    service = ImportAuditService(db)

    audits = service.list_undoable_imports(business) if undoable else service.list_history(business)
    if not audits:
        click.echo("No imports found.")
        return

    for audit in audits:
        click.echo(
            f"{audit.id}  {audit.import_timestamp:%Y-%m-%d %H:%M}  {audit.status.value:<6}  "
            f"{audit.file_name}  imported={audit.imported_count} skipped={audit.skipped_count}"
        )


@click.command("undo")
@click.argument("audit_id")
@click.option("--reason", help="Why the import is being undone")
@click.option("--user", "undone_by", default=LOCAL_USER_IDENTITY, show_default=True, help="User undoing the import")
@click.pass_context
def undo(ctx, audit_id: str, reason: str | None, undone_by: str):
    """Undo an import made within the last 7 days."""
    db = ctx.obj["db"]
    service = ImportAuditService(db)

    try:
        result = service.undo_import(audit_id, reason=reason, undone_by=undone_by)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Undid import {audit_id}: {result.records_undone} records removed")
    if result.records_skipped:
        click.echo(f"  {result.records_skipped} records were already removed")
    if result.records_promoted:
        click.echo(f"  {result.records_promoted} records promoted from staging were also removed")


def register_commands(cli):
    """Register history commands with main CLI."""
    cli.add_command(history)
    cli.add_command(undo)
