"""API error rendering

Use case errors are raised as ClientError and rendered as
{"error": {"code": ..., "message": ..., "reason": ...}}.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from libs.result import Error

ERROR_STATUS_CODES = {
    "SERIES_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "TERMINAL_STATE": status.HTTP_409_CONFLICT,
    "NOT_DUE": status.HTTP_409_CONFLICT,
    "CONCURRENCY_CONFLICT": status.HTTP_409_CONFLICT,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_TRANSITION": status.HTTP_400_BAD_REQUEST,
    "INVALID_PAGINATION": status.HTTP_400_BAD_REQUEST,
    "INVALID_PREVIEW_COUNT": status.HTTP_400_BAD_REQUEST,
    "INVOICE_CREATION_FAILED": status.HTTP_502_BAD_GATEWAY,
    "CATALOG_LOOKUP_FAILED": status.HTTP_502_BAD_GATEWAY,
}


class ClientError(Exception):
    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code

    @classmethod
    def from_error(cls, error: Error) -> "ClientError":
        """Pick the HTTP status for a use case error code"""
        if error.code in ERROR_STATUS_CODES:
            return cls(error, status_code=ERROR_STATUS_CODES[error.code])
        if error.code.endswith("_FAILED"):
            return cls(error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return cls(error)


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error.model_dump(exclude_none=True)},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClientError, client_error_handler)
