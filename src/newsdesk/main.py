from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from newsdesk.api.routes.news_router import router as news_router
from newsdesk.core.config import BASE_DIR, ENV_PATH, config
from newsdesk.core.logger import configure_root_logger, get_logger
from newsdesk.db.session import engine


configure_root_logger()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Запуск Newsdesk Server...")
    logger.info(
        f"Читаю .env, Base = {BASE_DIR}, path = {ENV_PATH}, table = {config.news_table}"
    )

    try:
        yield
    finally:
        logger.info("Остановка Newsdesk Server...")
        await engine.dispose()


app = FastAPI(lifespan=lifespan, title="Newsdesk Server")


# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(news_router)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}


@app.exception_handler(Exception)
async def global_exception_handler(request, exc: Exception) -> JSONResponse:
    logger.error(f"Необработанное исключение: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "message": str(exc),
        },
    )
