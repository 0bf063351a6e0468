"""Exception-to-HTTP mappings for the Checkout API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers as register_protean_exception_handlers

from checkout.errors import ExternalServiceError


def register_exception_handlers(app: FastAPI) -> None:
    """Protean's standard mappings plus 502 for payment processor failures."""
    register_protean_exception_handlers(app)

    @app.exception_handler(ExternalServiceError)
    async def external_service_error_handler(request: Request, exc: ExternalServiceError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"error": str(exc)})
