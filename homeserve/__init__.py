# homeserve/__init__.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .exceptions import register_exception_handlers

def create_app() -> FastAPI:
    from .routes import routers

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    app = FastAPI(
        title="HomeServe API",
        description="Booking lifecycle and provider earnings for the HomeServe marketplace",
        version="1.0.0"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include all routers
    for router in routers:
        app.include_router(router)

    register_exception_handlers(app)

    @app.get("/")
    def health_check():
        return {"status": "healthy", "version": app.version}

    return app
