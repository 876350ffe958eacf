"""Storefront FastAPI application.

Serves the WhatsApp agent's tool calls. Commands are processed synchronously
inside the storefront domain context pushed for every request.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the domain.toml overlay (e.g. "production" → PostgreSQL).
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from storefront.domain import storefront
from storefront.utils.logging import clear_context

storefront.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="WhatsApp commerce — carts, checkout and inventory tools",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and start each request with a clean log context."""
    clear_context()
    with storefront.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.api import register_exception_handlers, router  # noqa: E402

app.include_router(router)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
