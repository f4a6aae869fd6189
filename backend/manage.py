"""Management commands for the library lending backend."""

from __future__ import annotations

import logging
from typing import Optional

import click

from lending.core import config
from lending.core.exceptions import LendingError
from lending.db.seed import seed_sample_data
from lending.db.session import SessionLocal, create_tables
from lending.main import build_ledger
from lending.repositories.book_repo import BookRepository
from lending.services.book_service import BookService
from lending.services.stock_audit_service import StockAuditService

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@click.group()
def cli() -> None:
    """Entry point for management commands."""


@cli.command("init-db")
def init_db() -> None:
    """Create all tables (idempotent)."""
    create_tables()
    click.echo("Database tables created.")


@cli.command("seed")
def seed() -> None:
    """Insert a small sample catalog and two members."""
    create_tables()
    created = seed_sample_data()
    click.echo(f"Seeded {created['books']} book(s) and {created['users']} user(s).")


@cli.command("borrow")
@click.argument("email")
@click.argument("isbn")
@click.option(
    "--days",
    "loan_days",
    type=int,
    default=None,
    help="Loan duration in days. Defaults to DEFAULT_LOAN_DAYS.",
)
def borrow(email: str, isbn: str, loan_days: Optional[int]) -> None:
    """Lend the book ISBN to the member with EMAIL."""
    create_tables()
    ledger = build_ledger()
    days = loan_days if loan_days is not None else config.get_default_loan_days()
    try:
        record_id = ledger.borrow(email, isbn, days)
    except LendingError as e:
        raise click.ClickException(e.message)
    record = ledger.find_record(record_id)
    click.echo(f"Borrowed {isbn}; record {record_id}, due {record.due_date}.")


@cli.command("return")
@click.argument("email")
@click.argument("isbn")
def return_book(email: str, isbn: str) -> None:
    """Return the book ISBN borrowed by the member with EMAIL."""
    create_tables()
    ledger = build_ledger()
    try:
        record_id = ledger.return_book(isbn, email)
    except LendingError as e:
        raise click.ClickException(e.message)
    click.echo(f"Returned {isbn}; record {record_id} closed.")


@cli.command("overdue")
def overdue() -> None:
    """List loans past their due date."""
    create_tables()
    ledger = build_ledger()
    today = ledger.today()
    records = ledger.overdue_loans()
    if not records:
        click.echo("No overdue loans.")
        return
    for record in records:
        days_late = (today - record.due_date).days
        click.echo(
            f"{record.record_id}  isbn={record.book_isbn}  user={record.user_id}  "
            f"due={record.due_date}  ({days_late} day(s) late)"
        )


@cli.command("audit")
def audit() -> None:
    """Compare catalog stock with active loans and report mismatches."""
    create_tables()
    ledger = build_ledger()
    with SessionLocal() as db:
        discrepancies = StockAuditService(
            BookService(BookRepository(db)), ledger
        ).audit()
    if not discrepancies:
        click.echo("Stock is consistent with active loans.")
        return
    for d in discrepancies:
        where = "" if d.book_exists else " (book missing from catalog)"
        click.echo(
            f"{d.isbn}: catalog shows {d.copies_out_per_catalog} out, "
            f"ledger shows {d.active_loans} active{where}"
        )
    raise SystemExit(1)


if __name__ == "__main__":
    cli()
