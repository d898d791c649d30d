import pytest

from generator_service.generator import (
    ORDERS_API_ENDPOINTS,
    PROMPT_NOT_RECOGNIZED,
    generate_from_prompt,
)


@pytest.mark.parametrize("prompt", [
    "I want POST /orders and GET /orders/{id}",
    "post /orders, get /orders",
    "Build me an api.\nGET /orders/{id}\nPOST /orders\nthanks",
    "POST/orders GET/orders/123",
])
def test_recognized_prompts(prompt):
    result = generate_from_prompt(prompt)
    assert result.ok
    assert result.error is None
    assert result.runtime.endpoints == ["POST /orders", "GET /orders/:id"]
    assert result.runtime.defaultStatus == "pending"
    assert result.spec["info"] == {"title": "Orders API", "version": "1.0.0"}
    assert set(result.spec["paths"]) == {"/orders", "/orders/{id}"}


@pytest.mark.parametrize("prompt", [
    "hello",
    "",
    "POST /orders only",
    "GET /orders/{id} only",
    "PUT /orders and DELETE /orders",
])
def test_unrecognized_prompts(prompt):
    result = generate_from_prompt(prompt)
    assert not result.ok
    assert result.error == PROMPT_NOT_RECOGNIZED
    assert result.spec is None
    assert result.runtime is None


def test_order_schema():
    schema = generate_from_prompt("POST /orders GET /orders").spec["components"]["schemas"]["Order"]
    assert set(schema["properties"]) == {"id", "orderItems", "totalAmount", "status", "createdAt"}
    assert schema["properties"]["status"]["enum"] == ["pending", "shipped", "cancelled"]


def test_each_call_returns_an_independent_document():
    first = generate_from_prompt("POST /orders GET /orders")
    first.spec["info"]["title"] = "changed"
    first.runtime.endpoints.append("DELETE /orders/:id")

    second = generate_from_prompt("POST /orders GET /orders")
    assert second.spec["info"]["title"] == "Orders API"
    assert second.runtime.endpoints == ORDERS_API_ENDPOINTS
