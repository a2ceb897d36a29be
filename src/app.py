"""Planet Scribbles FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV selects the config overlay ("production" switches to postgres).
from community.domain import community
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers
from shared.logging import bind_request_context, clear_request_context
from storefront.domain import storefront

storefront.init()
community.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/products": storefront,
    "/offers": storefront,
    "/orders": storefront,
    "/payment": storefront,
    "/events": community,
    "/meetups": community,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Planet Scribbles API",
    description="Printing storefront: catalog, offers, orders, payments and community events",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is None:
        # Health check, docs
        return await call_next(request)

    bind_request_context(domain=domain.name, method=request.method, path=request.url.path)
    try:
        with domain.domain_context():
            return await call_next(request)
    finally:
        clear_request_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from community.api import event_router, meetup_router  # noqa: E402
from storefront.api import (  # noqa: E402
    offer_router,
    order_router,
    payment_router,
    product_router,
    register_gateway_error_handler,
)

app.include_router(product_router)
app.include_router(offer_router)
app.include_router(order_router)
app.include_router(payment_router)
app.include_router(event_router)
app.include_router(meetup_router)

register_exception_handlers(app)
register_gateway_error_handler(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "storefront": {"name": storefront.name},
                "community": {"name": community.name},
            },
        }
    )
