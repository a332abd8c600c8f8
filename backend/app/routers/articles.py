"""칼럼(루틴 아티클)과 페이지 아티클 API 라우터"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_store
from app.schemas.content import (
    PAGE_TYPES,
    PageArticle,
    PageArticleCreate,
    PageArticleUpdate,
    RoutineArticle,
    RoutineArticleCreate,
    RoutineArticleUpdate,
)
from app.services.content_store import ContentStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Articles"], responses={404: {"description": "Not found"}})

ARTICLE_NOT_FOUND = "아티클을 찾을 수 없습니다."


def _check_page_type(page_type: str) -> str:
    if page_type not in PAGE_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"잘못된 페이지 유형입니다: {page_type} (허용: {', '.join(PAGE_TYPES)})",
        )
    return page_type


# ------------------------------
# Routine articles
# ------------------------------
@router.get("/routine-articles", response_model=List[RoutineArticle])
async def list_routine_articles(category: Optional[str] = None, store: ContentStore = Depends(get_store)):
    return store.list_routine_articles(category)


@router.get("/routine-articles/{article_id}", response_model=RoutineArticle)
async def get_routine_article(article_id: str, store: ContentStore = Depends(get_store)):
    article = store.get_routine_article(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)
    return article


@router.post("/routine-articles", response_model=RoutineArticle, status_code=201)
async def create_routine_article(data: RoutineArticleCreate, store: ContentStore = Depends(get_store)):
    return store.create_routine_article(data)


@router.patch("/routine-articles/{article_id}", response_model=RoutineArticle)
async def update_routine_article(
    article_id: str,
    partial: RoutineArticleUpdate,
    store: ContentStore = Depends(get_store),
):
    article = store.update_routine_article(article_id, partial)
    if article is None:
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)
    return article


@router.delete("/routine-articles/{article_id}")
async def delete_routine_article(article_id: str, store: ContentStore = Depends(get_store)):
    if not store.delete_routine_article(article_id):
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)
    return {"success": True}


# ------------------------------
# Page articles (routine / real-estate / invest)
# ------------------------------
@router.get("/articles/{page_type}", response_model=List[PageArticle])
async def list_page_articles(
    page_type: str,
    category: Optional[str] = None,
    store: ContentStore = Depends(get_store),
):
    """페이지별 아티클 목록. 고정 글이 먼저, 그 안에서는 최신순입니다."""
    _check_page_type(page_type)
    return store.list_articles(page_type=page_type, category=category)


@router.get("/articles/{page_type}/{article_id}", response_model=PageArticle)
async def get_page_article(page_type: str, article_id: str, store: ContentStore = Depends(get_store)):
    _check_page_type(page_type)
    article = store.get_article(article_id)
    # 다른 페이지의 글은 없는 것으로 취급
    if article is None or article.page_type != page_type:
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)
    return article


@router.post("/articles", response_model=PageArticle, status_code=201)
async def create_page_article(data: PageArticleCreate, store: ContentStore = Depends(get_store)):
    return store.create_article(data)


@router.patch("/articles/{article_id}", response_model=PageArticle)
async def update_page_article(article_id: str, partial: PageArticleUpdate, store: ContentStore = Depends(get_store)):
    article = store.update_article(article_id, partial)
    if article is None:
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)
    return article


@router.delete("/articles/{article_id}")
async def delete_page_article(article_id: str, store: ContentStore = Depends(get_store)):
    if not store.delete_article(article_id):
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)
    return {"success": True}
