from fastapi import APIRouter, HTTPException, Request

import structlog
from eco_engine.errors import classify_error
from ...schemas.extras import NewsItemModel, NewsResponse

router = APIRouter()
logger = structlog.get_logger()


@router.get("/", response_model=NewsResponse, summary="Latest environmental news")
async def news(request: Request) -> NewsResponse:
    client = request.app.state.news_client
    try:
        items = await request.app.state.environment_service.run_blocking(client.fetch)
    except Exception as e:
        error = classify_error(e)
        logger.exception("news_fetch_failed", category=error.category, error=str(e))
        raise HTTPException(status_code=503, detail=f"Failed to load news: {error.message}")
    return NewsResponse(
        items=[NewsItemModel(title=i.title, pub_date=i.pub_date, link=i.link) for i in items]
    )
