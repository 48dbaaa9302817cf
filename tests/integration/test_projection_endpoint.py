"""Integration tests for the projection API."""

from http import HTTPStatus

import pytest
from flask.testing import FlaskClient


def test_projection_endpoint(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/projections",
        json={
            "purchase_price": 200000,
            "loan_amount": 180000,
            "acquisition_costs": 15000,
            "annual_rent": 12000,
            "annual_charges": 3600,
            "interest_per_year": [7000],
            "flat_tax_rate": 0.3,
            "start_year": 2024,
            "horizon_years": 10,
        },
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    first = payload["rows"][0]
    assert first["year"] == 2024
    assert first["cashflow"] == pytest.approx(980)
    assert first["cumulative_cashflow"] == pytest.approx(-34020)
    assert payload["break_even_year"] == 2030
    assert payload["down_payment"] == 20000


def test_projection_rejects_unknown_fields(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/projections",
        json={"purchase_price": 1000, "annual_rent": 100, "rent": 5},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["error"] == "validation_error"


def test_interest_schedule_endpoint(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/projections/interests",
        json={
            "start_year": 2024,
            "end_year": 2026,
            "loans": [
                {
                    "id": "L1",
                    "amount": 120000,
                    "annual_rate": 0.024,
                    "start_date": "2024-01-01",
                    "end_date": "2043-12-31",
                    "repayment_type": "in_fine",
                }
            ],
        },
    )

    assert response.status_code == HTTPStatus.OK
    years = response.get_json()["years"]
    assert [entry["total_interest"] for entry in years] == [2880, 2880, 2880]


def test_interest_schedule_requires_loans(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/projections/interests",
        json={"start_year": 2024, "end_year": 2026, "loans": []},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST


def test_projection_horizon_is_bounded(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/projections",
        json={"purchase_price": 1000, "annual_rent": 100, "horizon_years": 300000},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert "horizon_years" in payload["message"]


def test_projection_accepts_longest_horizon(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/projections",
        json={
            "purchase_price": 1000,
            "annual_rent": 100,
            "horizon_years": 100,
            "start_year": 2024,
        },
    )

    assert response.status_code == HTTPStatus.OK
    assert len(response.get_json()["rows"]) == 100


def test_interest_schedule_range_is_bounded(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/projections/interests",
        json={
            "start_year": 1900,
            "end_year": 2200,
            "loans": [
                {
                    "amount": 1000,
                    "annual_rate": 0.01,
                    "start_date": "2024-01-01",
                    "end_date": "2024-12-31",
                }
            ],
        },
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "cannot span" in response.get_json()["message"]


def test_loan_duration_is_bounded(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/projections",
        json={
            "purchase_price": 1000,
            "annual_rent": 100,
            "horizon_years": 5,
            "loans": [
                {
                    "amount": 1000,
                    "annual_rate": 0.01,
                    "start_date": "2024-01-01",
                    "end_date": "2999-12-31",
                }
            ],
        },
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "50 years" in response.get_json()["message"]
