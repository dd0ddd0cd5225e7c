"""Tests for the customer endpoints."""

import uuid

import pytest

from docqa.api.deps import get_customer_query_service
from docqa.boundary.db.models.customer_query_model import CustomerQueryStatus
from docqa.core.exceptions import CustomerQueryNotFoundError
from docqa.models.customer_query import CustomerAskResponse


@pytest.fixture
def customer_service(service_override):
    return service_override(get_customer_query_service)


def test_ask_should_return_needs_contact(client, customer_service) -> None:
    customer_service.ask.return_value = CustomerAskResponse(
        answer="I don't have enough information to answer that question.",
        needs_contact=True,
    )

    response = client.post("/api/v1/customer/ask", json={"question": "Do you ship abroad?"})

    assert response.status_code == 200
    assert response.json()["needs_contact"] is True
    customer_service.ask.assert_awaited_once_with("Do you ship abroad?")


def test_contact_should_capture_query(client, customer_service, fake_customer_query) -> None:
    customer_service.capture.return_value = fake_customer_query()

    response = client.post(
        "/api/v1/customer/contact",
        json={"question": "Do you ship abroad?", "customer_name": "Ada", "customer_email": "ada@example.com"},
    )

    assert response.status_code == 201
    assert response.json()["status"] == "pending"
    customer_service.capture.assert_awaited_once_with("Do you ship abroad?", "Ada", "ada@example.com")


def test_contact_should_reject_malformed_email(client, customer_service) -> None:
    response = client.post(
        "/api/v1/customer/contact",
        json={"question": "Do you ship abroad?", "customer_name": "Ada", "customer_email": "not-an-email"},
    )

    assert response.status_code == 422
    customer_service.capture.assert_not_awaited()


def test_list_should_filter_by_status(client, customer_service, fake_customer_query) -> None:
    customer_service.list_queries.return_value = [fake_customer_query(status="responded")]

    response = client.get("/api/v1/customer/queries", params={"status": "responded"})

    assert response.status_code == 200
    assert response.json()["items"][0]["status"] == "responded"
    customer_service.list_queries.assert_awaited_once_with(
        status=CustomerQueryStatus.RESPONDED, limit=None, offset=0
    )


def test_update_should_change_status(client, customer_service, fake_customer_query) -> None:
    query = fake_customer_query(status="archived")
    customer_service.update_status.return_value = query

    response = client.patch(f"/api/v1/customer/queries/{query.id}", json={"status": "archived"})

    assert response.status_code == 200
    customer_service.update_status.assert_awaited_once_with(query.id, CustomerQueryStatus.ARCHIVED)


def test_update_unknown_query_should_return_404(client, customer_service) -> None:
    query_id = uuid.uuid4()
    customer_service.update_status.side_effect = CustomerQueryNotFoundError(query_id)

    response = client.patch(f"/api/v1/customer/queries/{query_id}", json={"status": "responded"})

    assert response.status_code == 404
