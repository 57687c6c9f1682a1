from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

import questionary
from rich.console import Console
from rich.table import Table

from printbill.constants import format_date
from printbill.errors import BillNotFoundError, FormValidationError, PrintbillError
from printbill.forms import EDITABLE_FIELDS, BillForm
from printbill.models import format_inr
from printbill.models.bill import Bill
from printbill.qr import generate_qrcode_ascii
from printbill.services.bill_list import BillListView
from printbill.services.bill_service import BillService

logger = logging.getLogger(__name__)

console = Console()

FIELD_LABELS = {
    "customer_name": "Customer name",
    "print_name": "Print name",
    "quantity": "Quantity",
    "price_per_piece": "Price per piece",
}


def _bills_table(bills: list[Bill], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Invoice", style="dim")
    table.add_column("Customer")
    table.add_column("Print")
    table.add_column("Qty", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Date")
    table.add_column("PDF", justify="center")
    for b in bills:
        table.add_row(
            b.invoice_number,
            b.customer_name,
            b.print_name,
            str(b.quantity),
            format_inr(b.total_amount),
            format_date(b.created_at),
            "yes" if b.pdf_url else "-",
        )
    return table


def _show_bill_detail(bill: Bill) -> None:
    console.print(f"  Customer: {bill.customer_name}")
    console.print(f"  Print: {bill.print_name}")
    console.print(f"  Quantity: {bill.quantity}")
    console.print(f"  Price per piece: {format_inr(bill.price_per_piece)}")
    console.print(f"  [bold]Total: {format_inr(bill.total_amount)}[/bold]")
    console.print(f"  Date: {format_date(bill.created_at)}")
    if bill.logo_url:
        console.print(f"  Logo: {bill.logo_url}")
    if bill.pdf_url:
        console.print(f"  Invoice: {bill.pdf_url}")


def _ask_logo(form: BillForm) -> bool:
    """Optionally pick a logo file. Returns False if the user cancelled."""
    while True:
        raw = questionary.text("Logo image path (optional):", default="").ask()
        if raw is None:
            return False
        if not raw.strip():
            return True
        path = Path(raw.strip()).expanduser()
        try:
            data = path.read_bytes()
        except OSError as exc:
            console.print(f"[red]Cannot read {path}: {exc.strerror}[/red]")
            continue
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        if form.select_logo(data, path.name, content_type):
            console.print(f"  [green]Logo selected: {path.name}[/green]")
            return True
        console.print(f"[red]{form.errors['logo']}[/red]")
        form.reset_logo()


def _fill_form(form: BillForm) -> bool:
    """Prompt for every field until the form is valid. Returns False if cancelled."""
    for name in EDITABLE_FIELDS:
        while True:
            val = questionary.text(f"{FIELD_LABELS[name]}:", default=str(form.values[name])).ask()
            if val is None:
                return False
            form.set_field(name, val)
            if name not in form.errors:
                break
            console.print(f"[red]{form.errors[name]}[/red]")
    console.print(f"  Total amount: [bold]{format_inr(form.total_amount)}[/bold]")
    return _ask_logo(form)


def _submit_form(form: BillForm, on_submit) -> Bill | None:
    try:
        bill = form.submit(on_submit)
    except FormValidationError as exc:
        for name, message in exc.errors.items():
            console.print(f"[red]{FIELD_LABELS.get(name, name)}: {message}[/red]")
        return None
    except PrintbillError:
        console.print(f"[red]{form.message}[/red]")
        return None
    console.print(f"[green bold]{form.message}[/green bold]")
    if bill.pdf_url:
        console.print(f"  Invoice: {bill.pdf_url}")
    else:
        console.print("[yellow]Invoice PDF was not generated. Use 'Generate PDF' to retry.[/yellow]")
    return bill


def create_bill_menu(bill_service: BillService) -> Bill | None:
    console.print()
    console.print("[bold]Create New Bill[/bold]", style="cyan")

    form = BillForm(bill_service.assets)
    while True:
        if not _fill_form(form):
            return None
        bill = _submit_form(form, bill_service.create_bill)
        if bill is not None:
            return bill
        retry = questionary.confirm("Try again?", default=True).ask()
        if not retry:
            return None


def edit_bill_menu(bill: Bill, bill_service: BillService) -> Bill:
    console.print()
    console.print("[bold]Edit Bill[/bold]", style="cyan")
    console.print(f"  Invoice: {bill.invoice_number}")

    form = BillForm(bill_service.assets, bill)
    if not _fill_form(form):
        return bill
    updated = _submit_form(form, lambda patch: bill_service.update_bill(bill.id, patch))
    return updated or bill


def _download_pdf(bill: Bill, bill_service: BillService) -> None:
    target = questionary.text("Save to:", default=bill.invoice_filename).ask()
    if not target:
        return
    try:
        rendered = bill_service.render_invoice(bill)
        Path(target).expanduser().write_bytes(rendered.content)
    except OSError as exc:
        console.print(f"[red]Could not write {target}: {exc.strerror}[/red]")
        return
    except PrintbillError as exc:
        console.print(f"[red]{exc.user_message}[/red]")
        return
    for problem in rendered.diagnostics:
        console.print(f"[yellow]{problem}[/yellow]")
    console.print(f"[green]Invoice saved to {target}[/green]")


def _generate_pdf(bill: Bill, bill_service: BillService) -> Bill:
    try:
        bill = bill_service.generate_invoice(bill)
    except PrintbillError as exc:
        logger.warning("Generate invoice failed for bill %s: %s", bill.id, exc)
        console.print(f"[red]{exc.user_message}[/red]")
        return bill
    console.print("[green]Invoice generated![/green]")
    console.print(f"  Invoice: {bill.pdf_url}")
    return bill


def _show_qrcode(bill: Bill) -> None:
    if not bill.pdf_url:
        console.print("[yellow]No invoice yet. Generate the PDF first.[/yellow]")
        return
    console.print(generate_qrcode_ascii(bill.pdf_url), highlight=False)
    console.print(f"  {bill.pdf_url}")


def _bill_detail_menu(bill: Bill, bill_service: BillService) -> None:
    while True:
        console.print()
        console.print(f"[bold cyan]Bill {bill.invoice_number}[/bold cyan]")
        _show_bill_detail(bill)
        console.print()

        pdf_action = "Show QR Code" if bill.pdf_url else "Generate PDF"
        action = questionary.select(
            "Actions:",
            choices=[
                "Edit Bill",
                "Download PDF",
                pdf_action,
                "Delete Bill",
                "Back",
            ],
        ).ask()

        if action is None or action == "Back":
            break
        elif action == "Edit Bill":
            bill = edit_bill_menu(bill, bill_service)
        elif action == "Download PDF":
            _download_pdf(bill, bill_service)
        elif action == "Generate PDF":
            bill = _generate_pdf(bill, bill_service)
        elif action == "Show QR Code":
            _show_qrcode(bill)
        elif action == "Delete Bill":
            confirm = questionary.confirm(
                f"Delete the bill for {bill.customer_name}? This cannot be undone.",
                default=False,
            ).ask()
            if not confirm:
                continue
            try:
                bill_service.delete_bill(bill.id)
            except BillNotFoundError:
                console.print("[yellow]Bill was already deleted.[/yellow]")
            except PrintbillError as exc:
                console.print(f"[red]{exc.user_message}[/red]")
                continue
            else:
                console.print("[green]Bill deleted.[/green]")
            return


def list_bills_menu(view: BillListView) -> None:
    while True:
        bills = view.refresh()
        if view.error:
            console.print(f"[red]{view.error}[/red]")

        title = f"Bills matching '{view.search_text}'" if view.search_text.strip() else "Bills"
        if not bills:
            message = "No bills match your search." if view.search_text.strip() else "No bills yet."
            console.print(f"[yellow]{message}[/yellow]")
            return

        console.print()
        console.print(_bills_table(bills, title))

        bill_choices = {f"{b.invoice_number} - {b.customer_name} / {b.print_name}": b for b in bills}
        choices = list(bill_choices.keys()) + ["Back"]
        choice = questionary.select("Select a bill:", choices=choices).ask()

        if choice is None or choice == "Back":
            return

        selected = bill_choices[choice]
        try:
            bill = view.service.get_bill(selected.id)
        except BillNotFoundError:
            console.print("[red]Bill not found.[/red]")
            continue
        except PrintbillError as exc:
            console.print(f"[red]{exc.user_message}[/red]")
            return

        _bill_detail_menu(bill, view.service)


def search_bills_menu(view: BillListView) -> None:
    term = questionary.text("Search by customer or print name:", default=view.search_text).ask()
    if term is None:
        return
    view.search_now(term)
    list_bills_menu(view)
