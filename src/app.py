"""Stockroom FastAPI application.

One web server for both bounded contexts. Commands are processed
synchronously; each request runs inside the Protean domain context that owns
its URL prefix.

PROTEAN_ENV picks the config overlay: by default projectors fire inside the
command's unit of work; under "production" they, and the sync bridge, are
driven by the Engine (see src/server.py).

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

import uuid

from catalogue.domain import catalogue
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from inventory.domain import inventory
from shared.errors import register_error_handlers
from shared.logging import add_context, clear_context

inventory.init()
catalogue.init()

# Routers load after both domains are initialized
from catalogue.api import product_router  # noqa: E402
from inventory.api import inventory_router, warehouse_router  # noqa: E402

# Longest prefix first
_DOMAIN_BY_PREFIX = sorted(
    {
        "/inventory": inventory,
        "/warehouses": inventory,
        "/products": catalogue,
    }.items(),
    key=lambda item: len(item[0]),
    reverse=True,
)


def domain_for_path(path: str):
    for prefix, domain in _DOMAIN_BY_PREFIX:
        if path == prefix or path.startswith(prefix + "/"):
            return domain
    return None


app = FastAPI(
    title="Stockroom API",
    description="Stock ledger, warehouses and product stock sync",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Bind a request id for logging and push the owning domain's context."""
    clear_context()
    add_context(request_id=request.headers.get("X-Request-ID") or str(uuid.uuid4()), path=request.url.path)

    domain = domain_for_path(request.url.path)
    if domain is None:
        return await call_next(request)

    with domain.domain_context():
        return await call_next(request)


app.include_router(inventory_router)
app.include_router(warehouse_router)
app.include_router(product_router)


@app.get("/health")
async def health():
    return {"status": "ok", "domains": [inventory.name, catalogue.name]}
