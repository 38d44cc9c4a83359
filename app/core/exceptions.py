from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from app.payments.exceptions import PaymentNotFound, PaymentProviderError, ProviderNotFound

logger = logging.getLogger(__name__)


async def payment_not_found_handler(request: Request, exc: PaymentNotFound):
    return JSONResponse(
        status_code=404,
        content={"error": "Not Found", "message": str(exc)},
    )


async def provider_not_found_handler(request: Request, exc: ProviderNotFound):
    # Installed providers and stored app records have drifted apart
    logger.error(f"Misconfigured payment provider on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Misconfigured Provider",
            "message": str(exc),
            "provider": exc.key,
        },
    )


async def payment_provider_error_handler(request: Request, exc: PaymentProviderError):
    logger.error(f"Payment provider '{exc.provider}' failed on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=502,
        content={
            "error": "Payment Provider Error",
            "message": str(exc),
            "provider": exc.provider,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PaymentNotFound, payment_not_found_handler)
    app.add_exception_handler(ProviderNotFound, provider_not_found_handler)
    app.add_exception_handler(PaymentProviderError, payment_provider_error_handler)
