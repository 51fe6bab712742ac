"""Bank transaction review commands."""

import click
from taxfiler.cli.error_handling import handle_domain_error
from taxfiler.domain.bank_transaction import BankTransactionService
from taxfiler.domain.enums import BusinessFlag, ReviewStatus
from taxfiler.domain.errors import DomainError


@click.group("review")
def review_group():
    """Stage bank statements and review the transactions."""
    pass


@review_group.command("stage")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--business", required=True, help="Business ID")
@click.option("--charset", default="utf-8", show_default=True, help="File character set")
@click.option("--user", "imported_by", help="User name recorded on the import audit")
@click.pass_context
def stage(ctx, csv_file: str, business: str, charset: str, imported_by: str | None):
    """Stage a bank statement for review."""
    service = BankTransactionService(ctx.obj["db"])
    try:
        result = service.stage_statement(business, csv_file, encoding=charset, imported_by=imported_by)
    except (DomainError, FileNotFoundError, LookupError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Staged {result.staged_count} of {result.total_parsed} transactions ({result.bank_name})")
    click.echo(f"  Duplicates: {result.duplicate_count}")
    click.echo(f"  Auto-excluded: {result.excluded_count}")
    click.echo(f"  Audit ID: {result.audit_id}")


@review_group.command("list")
@click.option("--business", required=True, help="Business ID")
@click.option(
    "--status",
    type=click.Choice([s.value for s in ReviewStatus], case_sensitive=False),
    help="Only show transactions with this review status",
)
@click.pass_context
def list_transactions(ctx, business: str, status: str | None):
    """List staged transactions."""
    service = BankTransactionService(ctx.obj["db"])
    review_status = ReviewStatus(status.upper()) if status else None
    transactions = service.list_transactions(business, review_status)
    if not transactions:
        click.echo("No transactions found.")
        return

    for txn in transactions:
        suggestion = txn.suggested_category.value if txn.suggested_category else "-"
        score = f"{txn.confidence_score:.2f}" if txn.confidence_score is not None else "-"
        click.echo(
            f"{txn.id}  {txn.date.isoformat()}  {txn.amount:>12,.2f}  {txn.review_status.value:<11}  "
            f"{txn.business_flag.value:<8}  {suggestion} ({score})  {txn.description}"
        )


@review_group.command("summary")
@click.option("--business", required=True, help="Business ID")
@click.pass_context
def summary(ctx, business: str):
    """Count staged transactions by review status."""
    service = BankTransactionService(ctx.obj["db"])
    counts = service.review_summary(business)
    for status in ReviewStatus:
        click.echo(f"{status.value:<11} {counts[status.value]}")
    click.echo(f"{'TOTAL':<11} {counts['total']}")


@review_group.command("promote")
@click.argument("transaction_id")
@click.option("--category", help="Income or expense category name (defaults to the suggestion)")
@click.pass_context
def promote(ctx, transaction_id: str, category: str | None):
    """Create the income or expense record for a transaction."""
    service = BankTransactionService(ctx.obj["db"])
    try:
        txn = service.promote(transaction_id, category)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    record_id = txn.income_id or txn.expense_id
    kind = "income" if txn.income_id else "expense"
    click.echo(f"Promoted {transaction_id} to {kind} {record_id}")


@review_group.command("exclude")
@click.argument("transaction_id")
@click.option("--reason", required=True, help="Why the transaction is not business income or expense")
@click.pass_context
def exclude(ctx, transaction_id: str, reason: str):
    """Exclude a transaction from the tax figures."""
    service = BankTransactionService(ctx.obj["db"])
    try:
        service.exclude(transaction_id, reason)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Excluded {transaction_id}")


@review_group.command("skip")
@click.argument("transaction_id")
@click.pass_context
def skip(ctx, transaction_id: str):
    """Skip a transaction."""
    service = BankTransactionService(ctx.obj["db"])
    try:
        service.skip(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Skipped {transaction_id}")


@review_group.command("flag")
@click.argument("transaction_id")
@click.argument("flag", type=click.Choice(["business", "personal", "unset"], case_sensitive=False))
@click.pass_context
def flag(ctx, transaction_id: str, flag: str):
    """Mark a transaction as business, personal or unset."""
    service = BankTransactionService(ctx.obj["db"])
    try:
        service.flag_business(transaction_id, BusinessFlag(flag.upper()))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Flagged {transaction_id} as {flag.lower()}")


def register_commands(cli):
    """Register review commands with main CLI."""
    cli.add_command(review_group)
