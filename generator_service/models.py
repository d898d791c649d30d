"""
models.py — Data Models for API Generation and Order Processing

This module defines the data structures exchanged over HTTP and stored by the
service. It uses Pydantic models to ensure type safety and automatic
validation of incoming data.

Models:
    - GenerateRequest: Prompt submitted to `/generate`.
    - GenerateResponse: Registry id, access key and document returned by `/generate`.
    - RuntimeDescriptor: Endpoint signatures and default status of a generated API.
    - GeneratedApi: One issued registry record (persisted in the keys file).
    - SpecResponse: Public view of a generated API returned by `/specs/{id}`.
    - NewOrderRequest: Payload of `POST /orders`.
    - Order: A stored order.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

OrderStatus = Literal["pending", "shipped", "cancelled"]


class GenerateRequest(BaseModel):
    """
    Attributes:
        prompt (str | None): Free text describing the wanted API. Presence is
            checked by the route so that a missing prompt yields a plain 400.
    """
    prompt: Optional[str] = None


class RuntimeDescriptor(BaseModel):
    """
    Describes what the generated API serves at runtime.

    Attributes:
        endpoints (List[str]): Endpoint signatures, e.g. "GET /orders/:id".
        defaultStatus (str): Status assigned to newly created orders.
    """
    endpoints: List[str]
    defaultStatus: OrderStatus = "pending"


class GeneratedApi(BaseModel):
    """
    A generated API issued by `/generate`. Never mutated after creation.

    Attributes:
        id (str): Registry id.
        key (str): Access key required by the order endpoints.
        prompt (str): The prompt the API was generated from.
        runtime (RuntimeDescriptor): Endpoint list and default status.
        spec (dict | None): The specification document.
        createdAt (str | None): ISO-8601 creation timestamp (UTC).
    """
    id: str
    key: str
    prompt: str
    runtime: RuntimeDescriptor
    spec: Optional[Dict[str, Any]] = None
    createdAt: Optional[str] = None


class GenerateResponse(BaseModel):
    id: str
    apiKey: str
    spec: Dict[str, Any]
    endpoints: List[str]


class SpecResponse(BaseModel):
    id: str
    spec: Optional[Dict[str, Any]] = None
    prompt: str
    createdAt: Optional[str] = None


class NewOrderRequest(BaseModel):
    """
    Represents a new order submitted to a generated API.

    Attributes:
        orderItems (List[Any]): Line items, untyped. At least one is required.
        totalAmount (float): Total order value. Must be a finite number >= 0; strings
            and booleans are rejected.
    """
    orderItems: List[Any] = Field(..., min_length=1)
    totalAmount: float = Field(..., ge=0, strict=True, allow_inf_nan=False)  # ge=0 bedeutet "greater or equal 0"


class Order(BaseModel):
    """
    A stored order. Identifier and creation timestamp never change.

    Attributes:
        id (str): Unique order identifier.
        orderItems (List[Any]): Line items as submitted.
        totalAmount (float): Total order value.
        status (str): pending | shipped | cancelled; always created as pending.
        createdAt (str): ISO-8601 creation timestamp (UTC).
    """
    id: str
    orderItems: List[Any]
    totalAmount: float
    status: OrderStatus = "pending"
    createdAt: str
