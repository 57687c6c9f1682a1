"""List all bills and regenerate their invoice PDFs with the current template.

Usage:
    python -m printbill.scripts.regenerate_pdfs
    python -m printbill.scripts.regenerate_pdfs --dry-run
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.table import Table

from printbill.constants import format_date
from printbill.db import initialize_db
from printbill.errors import PrintbillError
from printbill.logging import configure_logging
from printbill.models import format_inr
from printbill.pdf.invoice import InvoicePDF
from printbill.repositories.factory import get_bill_repository
from printbill.services.bill_service import BillService
from printbill.storage.assets import AssetStore
from printbill.storage.factory import get_storage

console = Console()


def main() -> None:
    dry_run = "--dry-run" in sys.argv

    configure_logging()
    initialize_db()

    bill_service = BillService(get_bill_repository(), AssetStore(get_storage()), InvoicePDF())
    bills = bill_service.list_bills()

    if not bills:
        console.print("[yellow]No bills found.[/yellow]")
        return

    table = Table(title="Bills found")
    table.add_column("Invoice", style="dim")
    table.add_column("Customer", style="bold")
    table.add_column("Date")
    table.add_column("Total", justify="right")
    table.add_column("Link", style="dim")

    for bill in bills:
        table.add_row(
            bill.invoice_number,
            bill.customer_name,
            format_date(bill.created_at),
            format_inr(bill.total_amount),
            bill.pdf_url or "-",
        )

    console.print(table)
    console.print(f"\nTotal bills: [bold]{len(bills)}[/bold]")

    if dry_run:
        console.print("\n[yellow]--dry-run: no PDF was regenerated.[/yellow]")
        return

    console.print("\n[cyan]Regenerating PDFs...[/cyan]\n")

    failed = 0
    for bill in bills:
        try:
            updated = bill_service.generate_invoice(bill)
        except PrintbillError as exc:
            failed += 1
            console.print(f"  [red]✗[/red] {bill.invoice_number} {bill.customer_name}: {exc.user_message}")
            continue
        console.print(f"  [green]✓[/green] {bill.invoice_number} {bill.customer_name} → {updated.pdf_url}")

    done = len(bills) - failed
    console.print(f"\n[green bold]{done} invoice(s) regenerated successfully![/green bold]")
    if failed:
        console.print(f"[red]{failed} invoice(s) failed.[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
