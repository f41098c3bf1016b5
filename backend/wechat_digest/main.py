from contextlib import asynccontextmanager
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from wechat_digest.ai.providers import DeepSeekClient
from wechat_digest.ai.services.article_summarizer import ArticleSummarizer
from wechat_digest.api.main import api_router
from wechat_digest.core.config import settings
from wechat_digest.core.log_config import LogConfig
from wechat_digest.db.session import close_db, init_db
from wechat_digest.scrapers.batch_fetcher import BatchFetcher
from wechat_digest.scrapers.wechat import WeChatArticleScraper
from wechat_digest.services.batch_summarize_service import BatchSummarizeService

LogConfig().setup()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing LLM configuration is fatal here, before any request is served
    page_client = httpx.AsyncClient(follow_redirects=True, max_redirects=5)
    llm_client = httpx.AsyncClient()
    try:
        ai_client = DeepSeekClient(client=llm_client)
        scraper = WeChatArticleScraper(client=page_client)
        app.state.batch_service = BatchSummarizeService(
            fetcher=BatchFetcher(scraper),
            summarizer=ArticleSummarizer(ai_client),
        )
        await init_db()
        logger.info(f"{settings.PROJECT_NAME} started ({settings.ENVIRONMENT})")
        yield
    finally:
        logger.info("Shutting down gracefully...")
        await page_client.aclose()
        await llm_client.aclose()
        await close_db()

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.detail})

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    error = "请提供有效的URL数组" if request.method == "POST" else "请求参数无效"
    return JSONResponse(status_code=400, content={"success": False, "error": error})

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(status_code=500, content={"success": False, "error": "服务器内部错误"})

app.include_router(api_router, prefix=settings.API_PREFIX)


def run():
    """Serve the API with uvicorn"""
    import uvicorn
    uvicorn.run(
        "wechat_digest.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "local",
    )


if __name__ == "__main__":
    run()
