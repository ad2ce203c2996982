from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jetfund.config import settings
from jetfund.database import init_db
from jetfund.exceptions import JetFundError, NotAuthenticatedError
from jetfund.log import setup_logging
from jetfund.routes import api_router

load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(level=settings.log_level, json_output=settings.log_json)
    await init_db()
    yield


async def handle_jetfund_error(request: Request, exc: JetFundError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, NotAuthenticatedError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_response(), headers=headers)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Jet Fund Backend",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(JetFundError, handle_jetfund_error)
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()
