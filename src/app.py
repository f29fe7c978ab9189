"""Storefront checkout FastAPI application.

Backend-for-frontend for the cart page: keeps one cart per browser session
and forwards discount validation and order submission to the storefront API.
Every request runs inside the checkout domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
import structlog
from checkout.domain import checkout  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from tracking.config import TrackerConfig
from tracking.tracker import Tracker

checkout.init()

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------
def build_tracker() -> Tracker | None:
    """Start a tracker when TRACKDESK_API_URL and TRACKDESK_WEBSITE_ID are set."""
    config = TrackerConfig.from_env()
    if not config.api_url or not config.website_id:
        return None

    tracker = Tracker()
    tracker.init(config)
    return tracker if tracker.is_initialized else None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront Checkout API",
    description="Shopping cart, discount codes and checkout for the storefront",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the checkout domain context for each request."""
    with checkout.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from checkout.api import cart_router, sessions  # noqa: E402

app.include_router(cart_router)

sessions.tracker = build_tracker()


@app.on_event("shutdown")
def flush_analytics():
    if sessions.tracker is not None:
        sessions.tracker.unload()


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "checkout": {"name": checkout.name},
            },
            "tracking": sessions.tracker is not None,
        }
    )
