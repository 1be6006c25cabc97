"""
RetentionPulse FastAPI application entry point.
"""
import logging
import uuid
from contextvars import ContextVar

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.routes.health import router as health_router
from app.routes.admin import router as admin_router
from app.routes.student import router as student_router
from app.routes.risk import router as risk_router
from app.routes.intervention import router as intervention_router
from app.routes.teacher import router as teacher_router

# Request ID context variable
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Custom logging filter to add request_id
class RequestIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("")
        return True

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s request_id=%(request_id)s"
)

# Add filter to root handlers so records from every logger carry request_id
root_logger = logging.getLogger()
root_logger.addFilter(RequestIDFilter())
for handler in root_logger.handlers:
    handler.addFilter(RequestIDFilter())

# Create FastAPI app
app = FastAPI(
    title="RetentionPulse",
    description="Student dropout risk tracking and intervention planning",
    version="0.1.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request ID middleware
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request_id_var.set(request_id)

    # Log request start
    logger = logging.getLogger("app.request")
    logger.info(
        f"Request started method={request.method} url={str(request.url)} client_ip={request.client.host if request.client else 'unknown'}"
    )

    response = await call_next(request)

    # Log request completion
    logger.info(
        f"Request completed status_code={response.status_code}"
    )

    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log unexpected errors and return a generic JSON error."""
    logging.getLogger("app.request").error(f"Unhandled error url={request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include routers
app.include_router(health_router, tags=["health"])
app.include_router(admin_router, tags=["admin"])
app.include_router(student_router, tags=["student"])
app.include_router(risk_router, tags=["risk"])
app.include_router(intervention_router, tags=["intervention"])
app.include_router(teacher_router, tags=["teacher"])
