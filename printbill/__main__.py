from printbill.cli.app import main_menu
from printbill.db import initialize_db
from printbill.logging import configure_logging


def main() -> None:
    """Entry point of the ``printbill`` console script."""
    configure_logging()
    initialize_db()
    main_menu()


if __name__ == "__main__":
    main()
