"""HTTP middleware stack for the SkillSwap API.

Starlette wraps each added middleware around the previous ones, so the
outermost layer is the one added last. From the outside in a request passes
CORS, then request-id binding, then the per-IP rate limiter, then routing.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skillswap.config import Settings
from skillswap.middleware.error_handler import setup_error_handlers
from skillswap.middleware.logging import setup_logging
from skillswap.middleware.rate_limit import RateLimitMiddleware
from skillswap.middleware.request_id import HEADER as REQUEST_ID_HEADER
from skillswap.middleware.request_id import RequestIdMiddleware

EXPOSED_HEADERS = [REQUEST_ID_HEADER, "X-RateLimit-Limit", "X-RateLimit-Remaining", "Retry-After"]


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure logging, error mapping and the middleware layers for ``app``."""
    setup_logging(settings)
    setup_error_handlers(app)

    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(RequestIdMiddleware)
    # Outermost, so 429s and error responses still carry CORS headers.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=EXPOSED_HEADERS,
    )
