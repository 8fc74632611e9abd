import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import BaseModel, Field

from fcrepo_ref_server.ports.storage import ResourceConflict, ResourceGone, ResourceNotFound

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Translate storage-port errors raised inside the block into HTTP errors."""
    try:
        yield
    except HTTPException:
        raise
    except ResourceGone as e:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail=f"410 Gone: {e}")
    except ResourceNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Not found: {e}")
    except ResourceConflict as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        # InvalidPath / InvalidPatch
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("%s failed", action)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"{action} failed")


class RepositoryErrorBody(BaseModel):
    code: str = Field(..., description="Stable machine-readable code")
    message: str = Field(..., description="Human-readable explanation")
    status: int = Field(..., description="HTTP status code duplicated here for convenience")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Optional diagnostic details")

    @staticmethod
    def code_for_status(status: int) -> str:
        return {
            400: "bad_request",
            404: "not_found",
            405: "method_not_allowed",
            409: "conflict",
            410: "gone",
            413: "payload_too_large",
            415: "unsupported_media_type",
            422: "unprocessable_entity",
            500: "internal_error",
            503: "unavailable",
        }.get(status, "error")


def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Error"
    details = exc.detail if isinstance(exc.detail, dict) else None
    body = RepositoryErrorBody(
        code=RepositoryErrorBody.code_for_status(exc.status_code),
        message=message,
        status=exc.status_code,
        details=details,
    )
    logger.debug("%s %s -> %d %s", request.method, request.url.path, exc.status_code, message)
    return JSONResponse({"error": body.model_dump()}, status_code=exc.status_code, headers=exc.headers)


def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Normalize FastAPI/Pydantic 422 into 400 with consistent shape
    body = RepositoryErrorBody(
        code="bad_request",
        message="Invalid request",
        status=400,
        details={"errors": exc.errors()},
    )
    return JSONResponse({"error": body.model_dump()}, status_code=400)
