"""
main.py — FastAPI Entry Point for the Generator Service

This module provides the REST API of the service. It turns a prompt into the
"Orders API" specification, issues an access key for it, and then serves that
generated API: creating orders and reading them back by id.

Responsibilities:
    • POST /generate — match the prompt, issue registry id + access key
    • GET /specs/{id} — return the specification of a generated API
    • POST /orders, GET /orders/{id} — the generated API, guarded by its access key
    • GET /_admin/generated-apis — list all generated APIs (only with ADMIN_KEY)
    • Serve the static UI from PUBLIC_DIR and provide health information
    • Persist the key registry on shutdown
"""

import os
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .errors import (
    ApiKeyNotFoundError,
    GeneratedApiNotFoundError,
    OrderNotFoundError,
    OrderValidationError,
    StorageError,
)
from .generator import generate_from_prompt
from .logging_config import get_logger, setup_logging
from .models import GeneratedApi, GenerateRequest, GenerateResponse, NewOrderRequest, Order, SpecResponse
from .order_store import OrderStore
from .registry import JsonFileSnapshotStore, KeyRegistry, MemorySnapshotStore

log = get_logger(__name__)


# --- Access control ---
def authorize_request(request: Request) -> GeneratedApi:
    """
    Resolves the access key of a request to its generated API.

    The key is read from the `x-api-key` header or the `apiKey` query
    parameter. The matched record is attached to `request.state.generated_api`.

    Raises:
        HTTPException(401): If no key was presented.
        HTTPException(403): If the key was never issued.
    """
    key = request.headers.get("x-api-key") or request.query_params.get("apiKey")
    if not key:
        raise HTTPException(status_code=401, detail="x-api-key required")

    try:
        generated_api = request.app.state.registry.authorize(key)
    except ApiKeyNotFoundError:
        log.warning(f"Ungültiger API-Key abgelehnt ({request.method} {request.url.path}).")
        raise HTTPException(status_code=403, detail="invalid api key")

    request.state.generated_api = generated_api
    return generated_api


def require_admin_key(request: Request):
    admin_key = request.headers.get("x-admin-key") or request.query_params.get("adminKey")
    if admin_key != request.app.state.settings.admin_key:
        raise HTTPException(status_code=403, detail="forbidden")


# --- Error responses: always {"error": "..."} ---
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse(status_code=400, content={"error": "invalid request body"})
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return JSONResponse(status_code=400, content={"error": message})


# --- Lifespan: registry load and final snapshot ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: creates the orders table and loads the persisted registry.
    Shutdown (uvicorn handles SIGINT/SIGTERM): writes a final registry
    snapshot on a best-effort basis and closes the database.
    """
    log.info("Generator-Service startet...")
    app.state.orders.init()
    loaded = app.state.registry.load()
    log.info(f"{loaded} generierte API(s) aus der Registry geladen.")

    yield

    log.info("Fahre herunter, speichere Keys...")
    if not app.state.registry.persist():
        log.warning("Finaler Registry-Snapshot fehlgeschlagen, wird ignoriert.")
    app.state.orders.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Builds the FastAPI application.

    Args:
        settings (Settings | None): Configuration; read from the environment
            when omitted.

    Returns:
        FastAPI: The app, with registry, order store and settings on `app.state`.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title="Orders API Generator", lifespan=lifespan)
    app.state.settings = settings
    app.state.orders = OrderStore(settings.database_url)
    snapshot_store = JsonFileSnapshotStore(settings.keys_file) if settings.keys_file else MemorySnapshotStore()
    app.state.registry = KeyRegistry(snapshot_store)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Basic CORS and preflight handling
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "x-api-key", "x-admin-key"],
    )

    # API Endpoint: prompt → generated API
    @app.post("/generate", response_model=GenerateResponse)
    def generate(payload: GenerateRequest, request: Request):
        """
        Generates an API from a prompt.

        Returns:
            GenerateResponse: Registry id, access key, specification document
            and endpoint list.

        Raises:
            HTTPException(400): If the prompt is missing or not recognized.
        """
        if not payload.prompt:
            raise HTTPException(status_code=400, detail="prompt required")

        result = generate_from_prompt(payload.prompt)
        if not result.ok:
            log.info(f"Prompt nicht erkannt: {payload.prompt!r}")
            raise HTTPException(status_code=400, detail=result.error)

        api = request.app.state.registry.issue(payload.prompt, result)
        return GenerateResponse(id=api.id, apiKey=api.key, spec=api.spec, endpoints=api.runtime.endpoints)

    @app.get("/specs/{api_id}", response_model=SpecResponse)
    def get_spec(api_id: str, request: Request):
        try:
            api = request.app.state.registry.get(api_id)
        except GeneratedApiNotFoundError:
            raise HTTPException(status_code=404, detail="spec not found")
        return SpecResponse(id=api.id, spec=api.spec, prompt=api.prompt, createdAt=api.createdAt)

    # API Endpoints: the generated Orders API
    @app.post("/orders", status_code=201, response_model=Order)
    def create_order(order: NewOrderRequest, request: Request):
        """
        Creates an order with status "pending".

        The body is validated (by FastAPI, before this function runs) ahead of
        the key check, so a malformed body is a 400 whatever key is presented.

        Raises:
            HTTPException(400): Invalid body.
            HTTPException(401/403): Missing or unknown access key.
            HTTPException(500): Database failure.
        """
        authorize_request(request)
        try:
            return request.app.state.orders.create(order.orderItems, order.totalAmount)
        except OrderValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except StorageError:
            raise HTTPException(status_code=500, detail="db error")

    @app.get("/orders/{order_id}", response_model=Order, dependencies=[Depends(authorize_request)])
    def get_order(order_id: str, request: Request):
        try:
            return request.app.state.orders.get(order_id)
        except OrderNotFoundError:
            raise HTTPException(status_code=404, detail="not found")
        except StorageError:
            raise HTTPException(status_code=500, detail="db error")

    # Optional: list generated APIs for management (protected by a simple admin key)
    if settings.admin_key:
        @app.get("/_admin/generated-apis", response_model=List[GeneratedApi], dependencies=[Depends(require_admin_key)])
        def list_generated_apis(request: Request):
            return request.app.state.registry.list()

    # Health Check Endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    # Serve static UI from PUBLIC_DIR (mounted last so it never shadows the API)
    if os.path.isdir(settings.public_dir):
        ui_page = os.path.join(settings.public_dir, "ui.html")

        @app.get("/", include_in_schema=False)
        def ui():
            return FileResponse(ui_page)

        app.mount("/", StaticFiles(directory=settings.public_dir), name="public")
    else:
        log.warning(f"Verzeichnis {settings.public_dir} nicht gefunden. Lege {settings.public_dir}/ui.html an, um die UI auszuliefern.")

    return app


def run():
    """Starts the service with uvicorn on HOST:PORT."""
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
