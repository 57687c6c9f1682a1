import questionary
from rich.console import Console

from printbill.cli.bill_menu import create_bill_menu, list_bills_menu, search_bills_menu
from printbill.repositories.factory import get_bill_repository
from printbill.services.bill_list import BillListView
from printbill.services.bill_service import BillService
from printbill.settings import settings
from printbill.storage.assets import AssetStore
from printbill.storage.factory import get_storage

console = Console()


def _build_service() -> BillService:
    return BillService(get_bill_repository(), AssetStore(get_storage()))


def main_menu() -> None:
    bill_service = _build_service()
    view = BillListView(bill_service)

    console.print()
    console.print(f"[bold]{settings.company_name} - Billing[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Main Menu",
            choices=[
                "List Bills",
                "Search Bills",
                "Create New Bill",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Goodbye![/bold]")
            break
        elif choice == "List Bills":
            view.clear_search()
            list_bills_menu(view)
        elif choice == "Search Bills":
            search_bills_menu(view)
        elif choice == "Create New Bill":
            create_bill_menu(bill_service)
