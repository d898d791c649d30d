"""
errors.py — Domain Exceptions

Raised by the matcher, registry and order store; translated into HTTP
responses by the routes in `main.py`.

    OrderValidationError        → 400
    ApiKeyNotFoundError         → 403
    GeneratedApiNotFoundError   → 404
    OrderNotFoundError          → 404
    StorageError                → 500
"""


class GeneratorServiceError(Exception):
    """Base class for all errors raised by the generator service."""


class OrderValidationError(GeneratorServiceError):
    """The order payload is malformed; nothing was written."""


class OrderNotFoundError(GeneratorServiceError):
    def __init__(self, order_id: str):
        super().__init__(f"order {order_id} not found")
        self.order_id = order_id


class StorageError(GeneratorServiceError):
    """The persistence layer itself failed."""


class ApiKeyNotFoundError(GeneratorServiceError):
    """No generated API was issued with the presented key."""


class GeneratedApiNotFoundError(GeneratorServiceError):
    def __init__(self, api_id: str):
        super().__init__(f"generated api {api_id} not found")
        self.api_id = api_id
