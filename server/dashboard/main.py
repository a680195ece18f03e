import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dashboard.config import settings
from dashboard.dependencies import resolve_session_id
from dashboard.routes import history
from dashboard.routes.wizard import build_wizard_router
from dashboard.services.backend_client import BackendError, close_http_client
from dashboard.services.flows import FLOWS

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Refresh", settings.session_header_name],
)


@app.middleware("http")
async def wizard_session_middleware(request: Request, call_next):
    """Attach the wizard session id to the request, minting a cookie for new browsers."""
    session_id, minted = resolve_session_id(request)
    request.state.wizard_session_id = session_id
    response = await call_next(request)
    if minted:
        response.set_cookie(
            settings.session_cookie_name,
            session_id,
            httponly=True,
            samesite="lax",
        )
    return response


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError):
    return JSONResponse(status_code=502, content={"error": exc.message})


@app.on_event("startup")
async def startup_event():
    logger.info("%s is starting...", settings.app_name)
    logger.info("Institution backend: %s/%s", settings.backend_base_url, settings.backend_domain)
    if not settings.openai_api_key:
        logger.info("OPENAI_API_KEY not set; AI question drafting is disabled")


@app.on_event("shutdown")
async def shutdown_event():
    await close_http_client()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.api_version,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


# Import and include routers
for flow in FLOWS.values():
    app.include_router(build_wizard_router(flow), prefix=flow.listing_url)

app.include_router(history.router)
