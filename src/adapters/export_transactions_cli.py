"""CLI adapter exporting a user's transactions to CSV.

Credentials come from ``FINANCE_EMAIL`` and ``FINANCE_PASSWORD``; the file
is written into the configured export directory.
"""

import os

import dotenv

from src.infrastructure.container import (
    build_auth_provider,
    build_database_adapter,
    build_export_use_case,
    build_identity_backend,
    build_transaction_store,
)
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import FinanceSettings


def main() -> None:
    """Sign in with environment credentials and export transactions."""
    dotenv.load_dotenv()
    logger = get_app_logger()
    email = os.getenv("FINANCE_EMAIL")
    password = os.getenv("FINANCE_PASSWORD")
    if not email or not password:
        raise RuntimeError(
            "Export requires FINANCE_EMAIL and FINANCE_PASSWORD values."
        )

    settings = FinanceSettings.from_env()
    db_adapter = build_database_adapter()
    auth_provider = build_auth_provider(
        build_identity_backend(db_adapter, settings)
    )
    result = auth_provider.sign_in(email, password)
    if not result.ok:
        logger.error(f"Export aborted: {result.error}")
        print(f"Login failed: {result.error}")
        return

    store = build_transaction_store(db_adapter, settings)
    use_case = build_export_use_case(store, settings)
    try:
        export = use_case.execute(result.owner.id)
    finally:
        auth_provider.sign_out()

    if export.row_count == 0:
        print("No transactions to export")
        return
    print(f"Exported {export.row_count} transactions to {export.path}")


if __name__ == "__main__":  # pragma: no cover
    main()
