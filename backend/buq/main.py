"""FastAPI entrypoint for the BUQ backend."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routers import bottom_up_quantifications, health, remarks
from .config import load_settings
from .infra.logging import configure_logging


def create_app() -> FastAPI:
    """Instantiate the FastAPI app and register routers."""

    settings = load_settings()
    configure_logging(settings.logging)
    application = FastAPI(title="BUQ API", version="0.1.0")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    for router in (
        health.router,
        remarks.router,
        bottom_up_quantifications.router,
    ):
        application.include_router(router)
    return application


app = create_app()
