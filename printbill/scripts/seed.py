"""Seed the bill store with demo data for local development.

Usage:
    python -m printbill.scripts.seed
    python -m printbill.scripts.seed --reset
    python -m printbill.scripts.seed --extra 20
"""

from __future__ import annotations

import random
import sys
from decimal import Decimal

from faker import Faker
from rich.console import Console
from rich.table import Table

from printbill.db import initialize_db
from printbill.logging import configure_logging
from printbill.models import format_inr
from printbill.models.bill import Bill, BillDraft
from printbill.repositories.factory import get_bill_repository
from printbill.services.bill_service import BillService
from printbill.storage.assets import AssetStore
from printbill.storage.factory import get_storage

console = Console()
fake = Faker("en_IN")

DEFAULT_EXTRA_BILLS = 5

# (customer_name, print_name, quantity, price_per_piece)
SAMPLE_BILLS = [
    ("Acme Corp", "Logo Design 1", 100, Decimal("250")),
    ("TechStart", "Startup Logo", 50, Decimal("300")),
    ("Green Leaf", "Eco Friendly Design", 200, Decimal("175")),
]

PRINT_JOBS = [
    "Business Cards",
    "Letterhead",
    "Brochure",
    "Banner",
    "Sticker Sheet",
    "T-Shirt Print",
    "Packaging Label",
    "Visiting Card Deluxe",
]


def _parse_extra(argv: list[str]) -> int:
    if "--extra" not in argv:
        return DEFAULT_EXTRA_BILLS
    idx = argv.index("--extra")
    try:
        return max(0, int(argv[idx + 1]))
    except (IndexError, ValueError):
        console.print("[red]--extra expects a number, using the default.[/red]")
        return DEFAULT_EXTRA_BILLS


def _fake_draft() -> BillDraft:
    return BillDraft(
        customer_name=fake.company(),
        print_name=random.choice(PRINT_JOBS),
        quantity=random.choice([25, 50, 100, 250, 500, 1000]),
        price_per_piece=Decimal(random.randint(500, 50000)) / 100,
    )


def _reset(bill_service: BillService) -> None:
    console.print("\n[yellow]Removing existing bills...[/yellow]")
    bills = bill_service.list_bills()
    for bill in bills:
        bill_service.delete_bill(bill.id)
    console.print(f"[green]{len(bills)} bill(s) removed.[/green]\n")


def _create_bills(bill_service: BillService, drafts: list[BillDraft]) -> list[Bill]:
    console.print("[cyan]Creating bills with PDFs...[/cyan]")

    table = Table(title="Bills created")
    table.add_column("Invoice", style="dim")
    table.add_column("Customer", style="bold")
    table.add_column("Print")
    table.add_column("Qty", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("PDF")

    created = []
    for draft in drafts:
        bill = bill_service.create_bill(draft)
        created.append(bill)
        table.add_row(
            bill.invoice_number,
            bill.customer_name,
            bill.print_name,
            str(bill.quantity),
            format_inr(bill.total_amount),
            "[green]yes[/green]" if bill.pdf_url else "[red]no[/red]",
        )

    console.print(table)
    return created


def main() -> None:
    configure_logging()
    initialize_db()

    bill_service = BillService(get_bill_repository(), AssetStore(get_storage()))

    if "--reset" in sys.argv:
        _reset(bill_service)

    drafts = [
        BillDraft(customer_name=customer, print_name=job, quantity=qty, price_per_piece=price)
        for customer, job, qty, price in SAMPLE_BILLS
    ]
    drafts.extend(_fake_draft() for _ in range(_parse_extra(sys.argv)))

    created = _create_bills(bill_service, drafts)
    console.print(f"\n[green bold]{len(created)} bill(s) seeded.[/green bold]")


if __name__ == "__main__":
    main()
