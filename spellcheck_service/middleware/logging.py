"""
Request logging middleware for tracking HTTP requests.
"""
import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from spellcheck_service.utils.logger import get_logger

logger = get_logger("middleware")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.

    Logs:
    - Request method, path, client IP
    - Response status code
    - Request processing time
    - Request ID for tracing
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable
    ) -> Response:
        """
        Process request and log details.

        Args:
            request: Incoming request
            call_next: Next middleware/route handler

        Returns:
            Response from handler
        """
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        client_ip = request.client.host if request.client else "unknown"

        # Spell-check lookups are high volume, keep them out of INFO
        log = logger.debug if request.url.path.startswith("/api/v1/spellcheck") else logger.info
        log(
            "Request started",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            ip=client_ip
        )

        start_time = time.time()

        try:
            response = await call_next(request)
            process_time = (time.time() - start_time) * 1000

            log(
                "Request completed",
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=f"{process_time:.2f}"
            )

            response.headers["X-Request-ID"] = request_id

            return response

        except Exception as e:
            process_time = (time.time() - start_time) * 1000

            logger.error(
                "Request failed",
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                duration_ms=f"{process_time:.2f}",
                error=str(e),
                exc_info=True
            )

            raise
