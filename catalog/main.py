"""FastAPI application."""

from fastapi import FastAPI

from catalog.api.routes.auth import router as auth_router
from catalog.api.routes.health import router as health_router
from catalog.api.routes.manuscripts import router as manuscripts_router
from catalog.api.routes.metrics import router as metrics_router

app = FastAPI(title="Manuscript Catalog API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(manuscripts_router, tags=["manuscripts"])
app.include_router(auth_router, tags=["auth"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Manuscript Catalog API", "version": "0.1.0"}
