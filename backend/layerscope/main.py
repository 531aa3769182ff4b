"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from layerscope.config import settings
from layerscope.errors import LayerScopeError

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.layerscope_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


async def _layerscope_error_handler(request: Request, exc: LayerScopeError) -> JSONResponse:
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Rejected inputs may be NaN or inf, which JSON cannot encode
    errors = [{key: value for key, value in error.items() if key != "input"} for error in exc.errors()]
    logger.warning("%s %s rejected: %d validation errors", request.method, request.url.path, len(errors))
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="LayerScope",
        description="Layout inference for layered designs: positioned layers in, widget tree and flex layout out",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LayerScopeError, _layerscope_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    from layerscope.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.layerscope_host, port=settings.layerscope_port)
