"""Map domain exceptions to HTTP responses"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from committee_gateway.domain.exceptions import DomainException, StorageError
from committee_gateway.infrastructure.observability.metrics import record_storage_failure


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    if isinstance(exc, StorageError):
        record_storage_failure("read" if request.method == "GET" else "write")
        logging.error(f"Storage error: {exc}", extra={"request_id": request_id})
        return JSONResponse(status_code=exc.status_code, content={"detail": "Storage unavailable"})

    logging.warning(
        f"{type(exc).__name__}: {exc}",
        extra={"request_id": request_id, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
