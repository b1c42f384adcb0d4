"""FastAPI application entrypoint for the tracker service."""

from fastapi import FastAPI

from tracker.api.users import router as users_router
from tracker.core.errors import register_error_handlers

app = FastAPI(title="tracker")
register_error_handlers(app)
app.include_router(users_router)


@app.get("/")
def index() -> dict[str, str]:
    """Greeting for a bare request to the service root."""
    return {"message": "zdravo svete!"}


@app.get("/health")
def health() -> dict[str, str]:
    """Health check stub endpoint for service readiness."""
    return {"status": "ok"}
