import logging
import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware

from inmoapp.core.logging import LOGGER_NAME, latency_bucket_ms, request_id_ctx_var, user_id_ctx_var

REQUEST_ID_HEADER = "x-request-id"
USER_ID_HEADER = "x-user-id"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Bind request_id and the acting account to the logging context.

    The request id is taken from the incoming header or generated, and echoed
    on the response. The account id is whatever the web tier forwarded in
    X-User-Id; it is only used for log correlation, never for authorization.
    """

    async def dispatch(self, request, call_next):
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        uid = (request.headers.get(USER_ID_HEADER) or "").strip() or None
        request.state.request_id = rid

        rid_token = request_id_ctx_var.set(rid)
        uid_token = user_id_ctx_var.set(uid)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            user_id_ctx_var.reset(uid_token)
            request_id_ctx_var.reset(rid_token)

        response.headers[REQUEST_ID_HEADER] = rid
        logging.getLogger(LOGGER_NAME).info(
            "request.complete",
            extra={
                "request_id": rid,
                "user_id": uid,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "latency_bucket": latency_bucket_ms((time.perf_counter() - start) * 1000),
            },
        )
        return response
