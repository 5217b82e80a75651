# Monday API Error Handling
# Errors raised by the GraphQL client and the HTTP handlers

from typing import Any, Optional
from starlette.responses import JSONResponse
from starlette import status


# ============================================================================
# ERROR CODES
# ============================================================================

ERROR_TRANSPORT = "transportError"
ERROR_GRAPHQL = "graphqlError"
ERROR_INVALID = "invalid"
ERROR_PARSE = "parseError"
ERROR_CONFIGURATION = "configurationError"
ERROR_INTERNAL = "internalError"


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================


class MondayAPIError(Exception):
    """Base exception for Monday API errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        code: str = ERROR_INVALID,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {
            "code": self.code,
            "status": self.status_code,
            "message": self.message,
        }
        if self.details is not None:
            error["details"] = self.details
        return {"error": error}

    def to_response(self) -> JSONResponse:
        return JSONResponse(content=self.to_dict(), status_code=self.status_code)


class MondayTransportError(MondayAPIError):
    """The Monday endpoint could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            code=ERROR_TRANSPORT,
            details={"upstream_status": upstream_status} if upstream_status else None,
        )
        self.upstream_status = upstream_status


class MondayGraphQLError(MondayAPIError):
    """The query reached Monday but the response carries errors."""

    def __init__(self, message: str, errors: Optional[list[Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            code=ERROR_GRAPHQL,
            details={"errors": errors} if errors else None,
        )
        self.errors = errors or []


class ValidationError(MondayAPIError):
    """Invalid request body (400)."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            code=ERROR_INVALID,
            details={"field": field} if field else None,
        )
        self.field = field


class ConfigurationError(MondayAPIError):
    """The service is missing settings it needs (500)."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code=ERROR_CONFIGURATION,
        )
