"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from immotax.backend.app import create_app  # noqa: E402
from immotax.backend.app.services.autofill import (  # noqa: E402
    LedgerTransaction,
    TransactionLedger,
)


@pytest.fixture()
def ledger() -> TransactionLedger:
    """Return a ledger holding one year of activity for user ``alice``."""

    return TransactionLedger(
        {
            "alice": [
                LedgerTransaction(
                    amount=6000, year=2024, property_id="flat-1", category="Loyer"
                ),
                LedgerTransaction(
                    amount=6000, year=2024, property_id="flat-1", category="Loyer"
                ),
                LedgerTransaction(
                    amount=1500, year=2024, property_id="flat-1", category="Travaux"
                ),
                LedgerTransaction(
                    amount=500,
                    year=2024,
                    property_id="flat-1",
                    description="Taxe foncière",
                    deductible=True,
                ),
                LedgerTransaction(
                    amount=9000, year=2023, property_id="flat-1", category="Loyer"
                ),
            ]
        },
        management_fees={"flat-1": 8.0},
    )


@pytest.fixture()
def app(ledger: TransactionLedger) -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app(ledger=ledger)
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()
