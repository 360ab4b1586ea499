"""
FastAPI application for the North Carolina court case notification service.

Provides REST API endpoints for the frontend to:
- Subscribe an email address to updates for a court case
- Reactivate or pause an existing subscription
"""
import json
import logging
import traceback

from fastapi import FastAPI, Request, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings, is_development
from database import get_db, init_db
from db_models import ErrorLog, ErrorSeverity
from models import SubscribeRequest, SubscribeResponse
from subscription_service import (
    FreeTierLimitReached,
    SubscriptionOutcome,
    SubscriptionValidationError,
    upsert_subscription,
    validate_subscription,
)

logger = logging.getLogger(__name__)


# Initialize FastAPI app
app = FastAPI(
    title="NC Case Notify API",
    description="Backend API for North Carolina eCourts case notifications",
    version="1.0.0",
)

# Configure CORS for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
        "http://localhost:3001",
        get_settings().frontend_url,
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Create database tables on startup."""
    init_db()


# ============================================================================
# LOGGING HELPERS
# ============================================================================

def log_error(
    db: Session,
    error_type: str,
    message: str,
    request: Request = None,
    severity: ErrorSeverity = ErrorSeverity.ERROR,
    error_code: str = None,
    stack_trace: str = None,
    request_data: dict = None,
):
    """
    Log an error to the database.

    Args:
        db: Database session
        error_type: Category of error (e.g., "database", "subscription")
        message: Human-readable error message
        request: FastAPI request object (for endpoint/IP/user agent)
        severity: Error severity level
        error_code: HTTP status or custom error code
        stack_trace: Full stack trace if available
        request_data: Request data (sensitive keys are dropped)
    """
    try:
        ip_address = None
        user_agent = None
        endpoint = None

        if request:
            forwarded = request.headers.get("x-forwarded-for")
            if forwarded:
                ip_address = forwarded.split(",")[0].strip()
            else:
                ip_address = request.client.host if request.client else None
            user_agent = request.headers.get("user-agent", "")[:500]
            endpoint = f"{request.method} {request.url.path}"

        if request_data:
            sanitized = {k: v for k, v in request_data.items()
                        if k.lower() not in ('password', 'secret', 'token')}
        else:
            sanitized = None

        error_log = ErrorLog(
            severity=severity,
            error_type=error_type,
            error_code=error_code,
            message=message,
            stack_trace=stack_trace,
            request_data=json.dumps(sanitized, default=str) if sanitized else None,
            endpoint=endpoint,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        db.add(error_log)
        db.commit()
    except Exception as e:
        # The database may be the thing that failed; the application log still has it
        logger.warning(f"Failed to log error: {e}")
        db.rollback()


# ============================================================================
# ERROR RESPONSES
# ============================================================================

def message_response(status_code: int, message: str, **flags) -> JSONResponse:
    """Build a `{message, ...}` JSON response."""
    body = SubscribeResponse(message=message, **flags).to_body()
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        message = "Method not allowed"
    else:
        message = str(exc.detail)
    response = message_response(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Report malformed request bodies as 400 with a single message.

    The presence, case ID and email checks still come first, so a type error
    on another field never hides them.
    """
    if isinstance(exc.body, dict):
        try:
            validate_subscription(exc.body.get("caseId"), exc.body.get("email"))
        except SubscriptionValidationError as e:
            return message_response(400, str(e))

    message = "Invalid request body"
    for error in exc.errors():
        loc = error.get("loc", ())
        if "caseId" in loc:
            message = "Invalid case ID format"
            break
        if "email" in loc:
            message = "Invalid email format"
            break
        if "subscriptionDate" in loc:
            message = "Invalid subscription date"
            break
        if "isActive" in loc:
            message = "Invalid isActive value"
            break
    return message_response(400, message)


# API Endpoints

@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "healthy", "service": "NC Case Notify API"}


@app.post("/api/subscribe")
async def subscribe_to_case(
    subscription: SubscribeRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Subscribe an email address to notifications for a court case.

    - Existing case/email pair: updates is_active, returns 200 with updated=true
    - New pair within the free tier: creates it, returns 201 with created=true
    - Email already monitoring a case: returns 403 with limitReached=true
    """
    try:
        validate_subscription(subscription.case_id, subscription.email)
    except SubscriptionValidationError as e:
        return message_response(400, str(e))

    try:
        outcome = upsert_subscription(
            db,
            case_id=subscription.case_id,
            email=subscription.email,
            subscription_date=subscription.subscription_date,
            is_active=subscription.is_active,
        )
    except FreeTierLimitReached as e:
        return message_response(403, str(e), limit_reached=True)
    except Exception as e:
        logger.exception(f"Database error while subscribing {subscription.email} to {subscription.case_id}")
        log_error(
            db,
            error_type="database",
            message=str(e),
            request=request,
            error_code="500",
            stack_trace=traceback.format_exc(),
            request_data=subscription.model_dump(by_alias=True),
        )
        return message_response(
            500,
            "Internal server error",
            error=str(e) if is_development() else None,
        )

    if outcome is SubscriptionOutcome.UPDATED:
        return message_response(200, "Subscription updated successfully", updated=True)
    return message_response(201, "Subscription created successfully", created=True)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.api_host, port=settings.api_port)
