from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Routers
from .routers.estimate import router as estimate_router

# Core modules
from .core.config import settings
from .core.logging import configure_logging, CorrelationIdMiddleware
from .core.metrics import PromMiddleware, metrics_endpoint
from .exceptions import EstimatorError, TransportError, TransportErrorKind
from .schemas import ErrorResponse

# HTTP status per error kind; transport errors are refined by cause below
ERROR_STATUS = {
    "validation": 400,
    "not_found": 404,
    "invalid_data": 502,
}
TRANSPORT_STATUS = {
    TransportErrorKind.REMOTE: 502,
    TransportErrorKind.NO_RESPONSE: 504,
    TransportErrorKind.LOCAL: 500,
}

def error_response(exc: EstimatorError) -> JSONResponse:
    body = ErrorResponse(error=exc.message, kind=exc.kind)
    if isinstance(exc, TransportError):
        status = TRANSPORT_STATUS[exc.cause]
        body.cause = exc.cause.value
        body.status_code = exc.status_code
    else:
        status = ERROR_STATUS.get(exc.kind, 500)
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))

def create_app() -> FastAPI:
    """
    App factory so tests and ASGI servers can instantiate cleanly.
    """
    configure_logging()  # Set up JSON logs + correlation-id filter

    app = FastAPI(
        title="Home Energy Estimator API",
        version="1.0.0",
        description="Geocodes an address and estimates house size, window count and monthly energy use.",
    )

    # CORS: allow the browser form to call the API.
    allow_origins = [o.strip() for o in settings.ALLOW_ORIGINS.split(",")] if settings.ALLOW_ORIGINS else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )

    # Observability middlewares
    app.add_middleware(CorrelationIdMiddleware)  # Adds/propagates X-Request-Id
    if settings.PROMETHEUS_ENABLED:
        app.add_middleware(PromMiddleware)       # Records req/latency metrics

    @app.exception_handler(EstimatorError)
    async def estimator_error_handler(request: Request, exc: EstimatorError):
        # One error banner per failed submission, never alongside a result
        return error_response(exc)

    # Meta routes
    @app.get("/v1/health", tags=["meta"])
    def health():
        return {"status": "ok"}

    @app.get("/v1/ping", tags=["meta"])
    def ping():
        return {"pong": True}

    if settings.PROMETHEUS_ENABLED:
        # Standard Prometheus scrape endpoint
        app.add_route("/v1/metrics", metrics_endpoint, methods=["GET"])

    # Business routes
    app.include_router(estimate_router, prefix="/v1", tags=["estimate"])

    return app

app = create_app()
