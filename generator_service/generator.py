"""
generator.py — Prompt Matching for the Orders API

This module turns a prompt into an API specification. Only one shape is
recognized: a prompt that mentions both `POST /orders` and `GET /orders/{id}`
(case-insensitive, anywhere in the text). Such a prompt yields the static
"Orders API" document and its runtime descriptor; anything else yields an
error message naming the two expected patterns.

The function is pure: no state, no side effects, same input → same output.
"""

import copy
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .models import RuntimeDescriptor

PROMPT_NOT_RECOGNIZED = "Prompt not recognized. Expected POST /orders and GET /orders/{id}."

_POST_ORDERS = re.compile(r"POST\s*/orders", re.IGNORECASE)
_GET_ORDERS = re.compile(r"GET\s*/orders", re.IGNORECASE)

ORDERS_API_SPEC: Dict[str, Any] = {
    "info": {"title": "Orders API", "version": "1.0.0"},
    "paths": {
        "/orders": {"post": {"summary": "Create order"}},
        "/orders/{id}": {"get": {"summary": "Get order by id"}},
    },
    "components": {
        "schemas": {
            "Order": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "orderItems": {"type": "array"},
                    "totalAmount": {"type": "number"},
                    "status": {"type": "string", "enum": ["pending", "shipped", "cancelled"]},
                    "createdAt": {"type": "string", "format": "date-time"},
                },
            }
        }
    },
}

ORDERS_API_ENDPOINTS = ["POST /orders", "GET /orders/:id"]


@dataclass(frozen=True)
class GenerationResult:
    """
    Outcome of `generate_from_prompt()`.

    Exactly one of `error` or (`spec`, `runtime`) is set.
    """
    spec: Optional[Dict[str, Any]] = None
    runtime: Optional[RuntimeDescriptor] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def matches_orders_api(prompt: str) -> bool:
    return bool(_POST_ORDERS.search(prompt)) and bool(_GET_ORDERS.search(prompt))


def generate_from_prompt(prompt: str) -> GenerationResult:
    """
    Maps a prompt to the Orders API specification.

    Args:
        prompt (str): Free text; only the two endpoint patterns are inspected.

    Returns:
        GenerationResult: On success a fresh copy of the specification document
        plus the runtime descriptor; otherwise the fixed error message.
    """
    if not matches_orders_api(prompt):
        return GenerationResult(error=PROMPT_NOT_RECOGNIZED)

    return GenerationResult(
        spec=copy.deepcopy(ORDERS_API_SPEC),
        runtime=RuntimeDescriptor(endpoints=list(ORDERS_API_ENDPOINTS), defaultStatus="pending"),
    )
