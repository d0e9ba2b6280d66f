"""
Breast Cancer Navigator API

Deterministic breast cancer treatment planning from tumor and biomarker
inputs.

This API provides:
- Staged treatment recommendations from a fixed decision table
- Optional side-effect reporting for the recommended therapies
- Field option listings for building input forms
- Verbatim, single-message errors for invalid input
"""

import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from breast_cancer_navigator.config.config import Settings, get_settings
from breast_cancer_navigator.config.logging_config import (
    configure_logging,
    get_logger,
    log_request_context,
)
from breast_cancer_navigator.errors import NavigatorError, UpstreamParseError, ValidationError
from breast_cancer_navigator.models.models import (
    ErrorResponse,
    FieldOption,
    FieldOptionsResponse,
    HealthResponse,
    HealthStatus,
    TreatmentPlanRequest,
    TreatmentPlanResponse,
)
from breast_cancer_navigator.services.input_validator import field_options
from breast_cancer_navigator.services.rule_engine import get_rule_engine
from breast_cancer_navigator.services.treatment_service import compute_treatment

# Configure logging before anything else
configure_logging()
logger = get_logger(__name__)

_ERROR_STATUS_CODES = {
    UpstreamParseError: 400,
    ValidationError: 422,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events with proper logging. Uses the
    settings the app was created with.
    """
    settings = app.dependency_overrides.get(get_settings, get_settings)()

    logger.info(
        "Application starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        rule_count=get_rule_engine().rule_count,
        config=settings.get_safe_config_dict(),
    )

    yield

    logger.info("Application shutting down")


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Optional settings override for testing.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=__doc__,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests with timing and context."""
        request_id = str(uuid4())
        request.state.request_id = request_id
        start_time = time.perf_counter()

        log_request_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        response = await call_next(request)

        processing_time = int((time.perf_counter() - start_time) * 1000)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Processing-Time-Ms"] = str(processing_time)

        logger.info(
            "Request completed",
            status_code=response.status_code,
            processing_time_ms=processing_time,
        )

        return response

    @app.exception_handler(NavigatorError)
    async def navigator_error_handler(request: Request, exc: NavigatorError):
        """Return planning errors with their message verbatim."""
        status_code = _ERROR_STATUS_CODES.get(type(exc), 400)
        logger.info("Treatment request rejected", error=exc.code, status_code=status_code)
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=exc.code,
                message=exc.message,
                details=exc.details,
                request_id=_request_id(request),
            ).model_dump(mode="json"),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Report a malformed request body (missing field, wrong JSON type)."""
        errors = [
            {"field": ".".join(str(part) for part in error["loc"][1:]), "reason": error["msg"]}
            for error in exc.errors()
        ]
        logger.info("Malformed request", errors=errors)
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error="INVALID_REQUEST",
                message="Request body is missing fields or has the wrong shape.",
                details={"errors": errors},
                request_id=_request_id(request),
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions with structured response."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=f"HTTP_{exc.status_code}",
                message=str(exc.detail),
                request_id=_request_id(request),
            ).model_dump(mode="json"),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception("Unhandled exception", error=str(exc))
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                message="An unexpected error occurred",
                request_id=_request_id(request),
            ).model_dump(mode="json"),
        )

    register_routes(app)

    return app


def register_routes(app: FastAPI) -> None:
    """Register all API routes."""

    @app.get("/", tags=["Root"])
    def root(settings: Settings = Depends(get_settings)):
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "operational",
            "docs": "/docs" if settings.debug else "disabled",
        }

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
        """
        Health check endpoint for monitoring.

        Returns system health status and component checks.
        """
        checks = {
            "api": True,
            "rule_table_loaded": get_rule_engine().rule_count > 0,
        }

        if all(checks.values()):
            status = HealthStatus.HEALTHY
        elif checks["api"]:
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.UNHEALTHY

        return HealthResponse(
            status=status,
            version=settings.app_version,
            environment=settings.environment,
            checks=checks,
        )

    @app.get("/api/v1/options", response_model=FieldOptionsResponse, tags=["Treatment"])
    def get_field_options() -> FieldOptionsResponse:
        """
        List the input fields in validation order with their valid options.

        Lets a client render pickers that only offer accepted values.
        """
        return FieldOptionsResponse(
            fields=[FieldOption(**option) for option in field_options()]
        )

    @app.post("/api/v1/treatment-plan", response_model=TreatmentPlanResponse, tags=["Treatment"])
    def create_treatment_plan(
        request: TreatmentPlanRequest,
        settings: Settings = Depends(get_settings),
    ) -> TreatmentPlanResponse:
        """
        Compute a staged treatment plan.

        **Errors:**
        - 400 `NON_NUMERIC_INPUT`: stage or grade is not a number
        - 422 `VALIDATION_ERROR`: first invalid field, with its valid options

        **Example body:**
        `{"tumor_type": "Invasive", "tumor_subtype": "Ductal", "tumor_stage": "1",
        "tumor_grade": "2", "er_status": "+", "pr_status": "+", "her2_status": "-",
        "lymph_node_status": "cN0", "genetic_risk": "Low"}`
        """
        start_time = time.perf_counter()

        include_side_effects = request.include_side_effects
        if include_side_effects is None:
            include_side_effects = settings.include_side_effects_default

        plan = compute_treatment(
            request.to_patient_inputs(),
            include_side_effects=include_side_effects,
        )

        processing_time = int((time.perf_counter() - start_time) * 1000)
        return TreatmentPlanResponse.from_plan(plan, processing_time_ms=processing_time)


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "breast_cancer_navigator.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
