# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Member Directory Service
========================
Registers, looks up, updates and removes members by name.

    POST   /api/v1/members          register (name, email)
    GET    /api/v1/members?name=    find the first member with that name
    PUT    /api/v1/members?name=    merge-patch that member
    DELETE /api/v1/members?name=    remove it, once registered for a minute

Port: 8005
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from member_directory.controllers import member_controller, system_controller
from member_directory.controllers.member_controller import ERROR_STATUS_CODES
from member_directory.core.config import settings
from member_directory.core.dependencies import get_member_store
from member_directory.core.logging import get_logger
from member_directory.middleware import MetricsMiddleware, RequestIDMiddleware
from member_directory.models.domain import MemberWorkflowError
from member_directory.schemas import ErrorResponse

logger = get_logger(settings.SERVICE_NAME)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    store = get_member_store()
    if hasattr(store, "create_schema"):
        store.create_schema()
    logger.info("Member directory starting with store=%s", type(store).__name__)
    yield
    if hasattr(store, "dispose"):
        store.dispose()
    logger.info("Member directory shutting down")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Member Directory",
    description="Name-keyed member registry with a one-minute deletion time-gate.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    responses={
        422: {"model": ErrorResponse, "description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)

app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Exception handlers ────────────────────────────────────────────────────
@app.exception_handler(MemberWorkflowError)
async def member_error_handler(request: Request, exc: MemberWorkflowError):
    req_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=ERROR_STATUS_CODES[exc.kind],
        content={"error": exc.kind.value, "detail": exc.detail, "request_id": req_id},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception", extra={"request_id": req_id})
    return JSONResponse(
        status_code=500,
        content={"error": "internal_server_error", "detail": str(exc), "request_id": req_id},
    )


app.include_router(system_controller.router)
app.include_router(member_controller.router)


# ── Entrypoint ────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
