"""Storefront domain API package."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.api.routes import offer_router, order_router, payment_router, product_router
from storefront.gateway.port import PaymentGatewayError

logger = structlog.get_logger(__name__)


def register_gateway_error_handler(app: FastAPI) -> None:
    """Map processor failures to 502 Bad Gateway."""

    @app.exception_handler(PaymentGatewayError)
    async def _gateway_error(request: Request, exc: PaymentGatewayError) -> JSONResponse:
        logger.error("payment_gateway_error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=502, content={"error": {"payment": [str(exc)]}})


__all__ = [
    "product_router",
    "offer_router",
    "order_router",
    "payment_router",
    "register_gateway_error_handler",
]
