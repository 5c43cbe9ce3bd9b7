"""Main FastAPI application handler for Lambda deployment."""

import logging
import os
import time
from datetime import UTC, datetime

import boto3
from fastapi import APIRouter, Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from mangum import Mangum
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from models.problem import (
    AdminCredentialRequest,
    AdminLoginRequest,
    DeleteProblemResponse,
    ProblemCreate,
    StatusUpdateRequest,
)
from services.auth_service import AdminAuthService, AdminCredential, AuthorizationError
from services.problem_service import (
    ProblemNotFoundError,
    ProblemService,
    ProblemStoreError,
    ProblemValidationError,
    build_filters,
)

logger = logging.getLogger(__name__)
logger.setLevel(os.environ.get("LOG_LEVEL", "INFO"))

# Rate limits per client address; the general budget is shared by all routes
RATE_LIMIT_DEFAULT = os.environ.get("RATE_LIMIT_DEFAULT", "100/15minutes")
RATE_LIMIT_SUBMISSIONS = os.environ.get("RATE_LIMIT_SUBMISSIONS", "10/15minutes")

limiter = Limiter(
    key_func=get_remote_address,
    application_limits=[RATE_LIMIT_DEFAULT],
    storage_uri=os.environ.get("RATE_LIMIT_STORAGE_URI", "memory://"),
    enabled=os.environ.get("RATE_LIMIT_ENABLED", "true").lower() != "false",
)

# Initialize FastAPI app
app = FastAPI(
    title="Problem Desk API",
    description="API for submitting problems and reviewing them as an admin",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)
app.state.limiter = limiter

ALLOWED_ORIGINS = os.environ.get(
    "ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:5174"
).split(",")
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log API requests with timing."""
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000

    path = request.url.path
    if duration_ms > 1000:
        logger.warning(
            "[SLOW] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )
    elif response.status_code >= 500:
        logger.error(
            "[ERROR] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )
    elif response.status_code >= 400:
        logger.info(
            "[CLIENT_ERROR] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )

    return response


# Lazy-initialized AWS clients and services
_dynamodb = None
_problems_table = None
_auth_service = None
_problem_service = None

security = HTTPBearer(auto_error=False)


def reset_services():
    """Reset all lazy-initialized services. Useful for testing.

    Also resets boto3's default session so that subsequent calls to
    boto3.resource() create fresh sessions within the current mock context
    (e.g., moto's mock_aws).
    """
    global _dynamodb, _problems_table, _auth_service, _problem_service
    _dynamodb = None
    _problems_table = None
    _auth_service = None
    _problem_service = None
    boto3.DEFAULT_SESSION = None


def get_dynamodb():
    """Get or create DynamoDB resource."""
    global _dynamodb
    if _dynamodb is None:
        region = os.environ.get("AWS_DEFAULT_REGION", "us-west-2")
        _dynamodb = boto3.resource(
            "dynamodb",
            region_name=region,
            endpoint_url=os.environ.get("DYNAMODB_ENDPOINT_URL") or None,
        )
    return _dynamodb


def get_problems_table():
    """Get or create the problems table."""
    global _problems_table
    if _problems_table is None:
        _problems_table = get_dynamodb().Table(
            os.environ.get("PROBLEMS_TABLE", "problem-desk-problems-dev")
        )
    return _problems_table


def get_auth_service():
    """Get or create AdminAuthService."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AdminAuthService(
            admin_password=os.environ.get("ADMIN_PASSWORD"),
            session_secret=os.environ.get("ADMIN_SESSION_SECRET"),
        )
    return _auth_service


def get_problem_service():
    """Get or create ProblemService."""
    global _problem_service
    if _problem_service is None:
        _problem_service = ProblemService(
            table=get_problems_table(), auth_service=get_auth_service()
        )
    return _problem_service


# MARK: - Admin Credential


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),  # noqa: B008
) -> str | None:
    """Extract an admin session token from the Authorization header, if any."""
    if not credentials:
        return None
    return credentials.credentials


router = APIRouter(prefix="/api")


# MARK: - Health Check


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}


# MARK: - Problem Endpoints


@router.get("/problems")
async def list_problems(
    search: str | None = Query(None, description="Match email or problem text"),
    status_filter: str | None = Query(
        None, alias="status", description="Filter by status"
    ),
    sort_by: str | None = Query(None, alias="sortBy", description="Sort order"),
    limit: str | None = Query(None, description="Maximum number of results"),
):
    """List problems, optionally filtered, sorted and limited."""
    filters = build_filters(
        search=search, status=status_filter, sort_by=sort_by, limit=limit
    )
    try:
        problems = get_problem_service().list_problems(filters)
    except ProblemStoreError:
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch problems"
        )
    return [p.model_dump(mode="json") for p in problems]


@router.post("/problems", status_code=status.HTTP_201_CREATED)
@limiter.limit(
    RATE_LIMIT_SUBMISSIONS,
    error_message="Too many submissions, please try again later.",
)
async def create_problem(request: Request, submission: ProblemCreate):
    """Submit a new problem."""
    try:
        problem = get_problem_service().create_problem(
            email=submission.email,
            problem=submission.problem,
            timestamp=submission.timestamp,
        )
    except ProblemStoreError:
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create problem"
        )
    return problem.model_dump(mode="json")


@router.get("/problems/{problem_id}")
async def get_problem(problem_id: str):
    """Get a single problem by id."""
    try:
        problem = get_problem_service().get_problem(problem_id)
    except ProblemStoreError:
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch problem"
        )
    if not problem:
        raise ProblemNotFoundError(f"Problem {problem_id} not found")
    return problem.model_dump(mode="json")


@router.patch("/problems/{problem_id}")
async def update_problem_status(
    problem_id: str,
    payload: StatusUpdateRequest | None = None,
    token: str | None = Depends(get_bearer_token),
):
    """Change a problem's status (admin only)."""
    payload = payload or StatusUpdateRequest()
    credential = AdminCredential(password=payload.admin_password, token=token)
    try:
        problem = get_problem_service().update_status(
            problem_id, payload.status, credential
        )
    except ProblemStoreError:
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update problem"
        )
    return problem.model_dump(mode="json")


@router.delete("/problems/{problem_id}")
async def delete_problem(
    problem_id: str,
    payload: AdminCredentialRequest | None = None,
    token: str | None = Depends(get_bearer_token),
):
    """Delete a problem (admin only), returning its prior content."""
    payload = payload or AdminCredentialRequest()
    credential = AdminCredential(password=payload.admin_password, token=token)
    try:
        problem = get_problem_service().delete_problem(problem_id, credential)
    except ProblemStoreError:
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete problem"
        )
    return DeleteProblemResponse(problem=problem).model_dump(mode="json")


# MARK: - Admin Endpoints


@router.post("/admin/login")
async def admin_login(payload: AdminLoginRequest | None = None):
    """Verify the admin password and issue a session token."""
    auth_service = get_auth_service()
    if payload is None or not auth_service.verify_password(payload.password):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"success": False, "error": "Invalid password"},
        )

    session = auth_service.create_session_token()
    return {
        "success": True,
        "message": "Authentication successful",
        "token": session["token"],
        "expires_in": session["expires_in"],
    }


app.include_router(router)


# MARK: - Error Handlers


def _error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


@app.exception_handler(ProblemValidationError)
async def problem_validation_error_handler(request, exc: ProblemValidationError):
    """Handle rejected problem data."""
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), reason=exc.reason)


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request, exc: AuthorizationError):
    """Handle missing or wrong admin credentials."""
    return _error_response(status.HTTP_401_UNAUTHORIZED, "Unauthorized")


@app.exception_handler(ProblemNotFoundError)
async def not_found_error_handler(request, exc: ProblemNotFoundError):
    """Handle unknown problem ids."""
    return _error_response(status.HTTP_404_NOT_FOUND, "Problem not found")


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request, exc: RequestValidationError):
    """Handle malformed request bodies and parameters."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(ValueError)
async def value_error_handler(request, exc: ValueError):
    """Handle value errors."""
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(RateLimitExceeded)
def rate_limit_handler(request, exc: RateLimitExceeded):
    """Handle clients over their request budget."""
    logger.warning("429 Too Many Requests from %s: %s", request.client, exc.detail)
    message = exc.detail
    if not message.startswith("Too many"):
        message = "Too many requests from this IP, please try again later."
    return _error_response(status.HTTP_429_TOO_MANY_REQUESTS, message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    """Render HTTP errors in the API's error shape."""
    if exc.status_code in (
        status.HTTP_404_NOT_FOUND,
        status.HTTP_405_METHOD_NOT_ALLOWED,
    ):
        return _error_response(status.HTTP_404_NOT_FOUND, "Route not found")
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request, exc: Exception):
    """Handle anything else without leaking internals."""
    logger.exception("Server error on %s %s", request.method, request.url.path)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
    )


# MARK: - Lambda Handler

api_handler = Mangum(app, lifespan="off")


# For local development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "4000")))
