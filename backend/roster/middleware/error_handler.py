import logging
from fastapi import Request
from fastapi.exceptions import HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


def error_response(status_code: int, code: str, message, details=None) -> JSONResponse:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Render anything a route lets escape as ``{"success": false, "error": {...}}``."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except ValidationError as ve:
            return error_response(422, "VALIDATION_ERROR", "Invalid roster data", ve.errors())
        except HTTPException as he:
            return error_response(he.status_code, "HTTP_EXCEPTION", he.detail)
        except Exception:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            return error_response(500, "INTERNAL_ERROR", "An internal error occurred.")
