"""Entrypoint for the FastAPI application."""
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from webhook_studio.api import auth, categories, health, relay, responses, webhooks
from webhook_studio.core.config import get_settings
from webhook_studio.core.logging_config import configure_logging

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Manage named webhooks grouped into categories, trigger them and inspect recorded responses",
)

# Permissive CORS also answers the relay's OPTIONS preflight
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(RequestValidationError, relay.relay_validation_exception_handler)

# Register API routers
app.include_router(health.router)  # Health checks at root level
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(categories.router, prefix=settings.api_prefix)
app.include_router(webhooks.router, prefix=settings.api_prefix)
app.include_router(responses.router, prefix=settings.api_prefix)
app.include_router(relay.router, prefix=settings.api_prefix)
