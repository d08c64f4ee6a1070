"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from depthcodec.config import get_settings
from depthcodec.routers import codec as codec_router


def create_app() -> FastAPI:
    app = FastAPI(title="depthcodec")
    settings = get_settings()

    logging.basicConfig(level=settings.log_level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Depth-Format", "X-Depth-Width", "X-Depth-Height", "X-Depth-Encoding"],
    )
    app.include_router(codec_router.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("depthcodec.main:app", reload=True)
