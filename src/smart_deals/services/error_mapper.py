"""Maps storage exceptions to HTTP responses."""
import asyncio
import logging
from dataclasses import dataclass

from fastapi import HTTPException
from pymongo.errors import (ConnectionFailure, ExecutionTimeout,
                            NetworkTimeout, PyMongoError)

logger = logging.getLogger(__name__)

# Exceptions from the store we map to HTTP; all others propagate (e.g. bugs).
STORE_EXCEPTIONS: tuple[type[Exception], ...] = (
    PyMongoError,
    OSError,
    asyncio.TimeoutError,
)


@dataclass(frozen=True)
class StoreErrorMapper:
    """Maps store exceptions to HTTP (status_code, detail).

    One mapper per service so log lines and details name the resource.
    """

    resource_name: str = "Resource"

    def to_http(self, exc: Exception) -> tuple[int, str]:
        """Map a store exception to (status_code, detail).

        Timeouts become 504, unreachable deployments 503, anything else 500.
        """
        if isinstance(exc, (NetworkTimeout, ExecutionTimeout, asyncio.TimeoutError, TimeoutError)):
            return (504, "Database request timed out")
        if isinstance(exc, (ConnectionFailure, OSError)):
            return (503, "Database unavailable")
        return (500, "Internal server error")

    def raise_http(self, exc: Exception, action: str) -> None:
        """Log, then raise the mapped HTTPException. Never returns."""
        status_code, detail = self.to_http(exc)
        logger.exception("%s store error while trying to %s", self.resource_name, action)
        raise HTTPException(status_code=status_code, detail=detail) from exc
