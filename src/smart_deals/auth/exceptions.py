"""Auth rejections and their HTTP rendering."""
from fastapi import Request
from fastapi.responses import JSONResponse


class AuthError(Exception):
    """Base for request rejections raised by verifiers and the ownership guard."""

    status_code: int = 401
    message: str = "Unauthorized Access"

    def __init__(self, reason: str | None = None) -> None:
        # reason is for logs only; clients always get the generic message.
        super().__init__(reason or self.message)
        self.reason = reason


class Unauthorized(AuthError):
    """Credential missing, malformed or failed verification."""

    status_code = 401
    message = "Unauthorized Access"


class Forbidden(AuthError):
    """Credential valid, but the caller does not own the requested scope."""

    status_code = 403
    message = "Forbidden Access"


async def auth_error_handler(_: Request, exc: AuthError) -> JSONResponse:
    """Render an AuthError as {"message": ...} without disclosing the cause."""
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})
