"""
콘텐츠 저장소 (Content Store)

대시보드 스냅샷, 루틴 칼럼, 페이지 아티클(루틴/부동산/투자), 뉴스레터 구독자에
대한 CRUD와 정렬/필터 조회를 제공합니다.

저장 방식은 주입받은 StorageBackend가 결정합니다. 이 모듈은 모델을 JSON
문서로 바꿔 저장하고, 읽을 때마다 다시 검증해 새 객체를 만듭니다. 따라서
조회 결과를 수정해도 저장소 내부에는 영향이 없습니다.

찾지 못한 경우는 예외 대신 None/False로 알려 주고, HTTP 상태 코드로의
변환은 라우터가 맡습니다.

PATCH 병합 결과가 모델 검증을 통과하지 못하면 pydantic ValidationError를 그대로
던지며, 이때 저장된 문서는 바뀌지 않습니다.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from typing import List, Optional

from app.schemas.content import (
    DashboardContent,
    PageArticle,
    PageArticleCreate,
    PageArticleUpdate,
    RoutineArticle,
    RoutineArticleCreate,
    RoutineArticleUpdate,
    Subscriber,
)
from app.services.storage import StorageBackend

logger = logging.getLogger(__name__)

DASHBOARDS = "dashboards"
ROUTINE_ARTICLES = "routine_articles"
PAGE_ARTICLES = "page_articles"
SUBSCRIBERS = "subscribers"


def _new_id() -> str:
    return str(uuid.uuid4())


def _dump(model) -> dict:
    return model.model_dump(mode="json")


def _dump_changes(partial) -> dict:
    """PATCH 본문에서 실제로 보낸 값만 저장 형식(JSON)으로 꺼냅니다."""
    return partial.model_dump(mode="json", exclude_unset=True)


class ContentStore:
    """콘텐츠 저장소. 앱 시작 시 한 번 만들어 app.state에 보관합니다."""

    def __init__(self, backend: StorageBackend):
        self.backend = backend

    # ------------------------------
    # Dashboard
    # ------------------------------
    def get_dashboard(self, day: date) -> Optional[DashboardContent]:
        payload = self.backend.get(DASHBOARDS, day.isoformat())
        if payload is None:
            return None
        return DashboardContent.model_validate(payload)

    def save_dashboard(self, day: date, content: DashboardContent) -> DashboardContent:
        """날짜 키로 upsert 합니다. 본문에 다른 날짜가 있어도 경로의 날짜로 덮어씁니다."""
        saved = content.model_copy(update={"date": day})
        self.backend.put(DASHBOARDS, day.isoformat(), _dump(saved))
        logger.info(f"대시보드 저장: {day.isoformat()}")
        return DashboardContent.model_validate(_dump(saved))

    def list_dashboard_dates(self) -> List[str]:
        """저장된 날짜 목록 (최신순)"""
        return sorted(self.backend.keys(DASHBOARDS), reverse=True)

    # ------------------------------
    # Routine articles (칼럼)
    # ------------------------------
    def list_routine_articles(self, category: Optional[str] = None) -> List[RoutineArticle]:
        articles = [RoutineArticle.model_validate(p) for p in self.backend.values(ROUTINE_ARTICLES)]
        if category:
            articles = [a for a in articles if a.category == category]
        return sorted(articles, key=lambda a: a.date, reverse=True)

    def get_routine_article(self, article_id: str) -> Optional[RoutineArticle]:
        payload = self.backend.get(ROUTINE_ARTICLES, article_id)
        return RoutineArticle.model_validate(payload) if payload is not None else None

    def create_routine_article(self, data: RoutineArticleCreate) -> RoutineArticle:
        article = RoutineArticle(id=_new_id(), **data.model_dump())
        self.backend.put(ROUTINE_ARTICLES, article.id, _dump(article))
        logger.info(f"루틴 아티클 생성: {article.id} ({article.title})")
        return article

    def update_routine_article(self, article_id: str, partial: RoutineArticleUpdate) -> Optional[RoutineArticle]:
        existing = self.backend.get(ROUTINE_ARTICLES, article_id)
        if existing is None:
            return None
        merged = {**existing, **_dump_changes(partial), "id": article_id}
        article = RoutineArticle.model_validate(merged)
        self.backend.put(ROUTINE_ARTICLES, article_id, _dump(article))
        logger.info(f"루틴 아티클 수정: {article_id}")
        return article

    def delete_routine_article(self, article_id: str) -> bool:
        deleted = self.backend.delete(ROUTINE_ARTICLES, article_id)
        if deleted:
            logger.info(f"루틴 아티클 삭제: {article_id}")
        return deleted

    # ------------------------------
    # Page articles (루틴/부동산/투자)
    # ------------------------------
    def list_articles(self, page_type: Optional[str] = None, category: Optional[str] = None) -> List[PageArticle]:
        """고정(pinned) 글을 먼저, 각 그룹 안에서는 최신 날짜순으로 정렬합니다."""
        articles = [PageArticle.model_validate(p) for p in self.backend.values(PAGE_ARTICLES)]
        if page_type:
            articles = [a for a in articles if a.page_type == page_type]
        if category:
            articles = [a for a in articles if a.category == category]
        articles.sort(key=lambda a: a.date, reverse=True)
        articles.sort(key=lambda a: not a.is_pinned)
        return articles

    def get_article(self, article_id: str) -> Optional[PageArticle]:
        payload = self.backend.get(PAGE_ARTICLES, article_id)
        return PageArticle.model_validate(payload) if payload is not None else None

    def create_article(self, data: PageArticleCreate) -> PageArticle:
        article = PageArticle(id=_new_id(), **data.model_dump())
        self.backend.put(PAGE_ARTICLES, article.id, _dump(article))
        logger.info(f"{article.page_type} 아티클 생성: {article.id} ({article.title})")
        return article

    def update_article(self, article_id: str, partial: PageArticleUpdate) -> Optional[PageArticle]:
        existing = self.backend.get(PAGE_ARTICLES, article_id)
        if existing is None:
            return None
        merged = {**existing, **_dump_changes(partial), "id": article_id}
        article = PageArticle.model_validate(merged)
        self.backend.put(PAGE_ARTICLES, article_id, _dump(article))
        logger.info(f"아티클 수정: {article_id}")
        return article

    def delete_article(self, article_id: str) -> bool:
        deleted = self.backend.delete(PAGE_ARTICLES, article_id)
        if deleted:
            logger.info(f"아티클 삭제: {article_id}")
        return deleted

    # ------------------------------
    # Subscribers
    # ------------------------------
    def add_subscriber(self, name: str, email: str) -> Subscriber:
        """같은 이메일이 이미 있으면 기존 구독자를 그대로 돌려줍니다."""
        for payload in self.backend.values(SUBSCRIBERS):
            if payload.get("email") == email:
                return Subscriber.model_validate(payload)

        subscriber = Subscriber(
            id=_new_id(),
            name=name or "",
            email=email,
            subscribed_at=datetime.now(timezone.utc),
        )
        self.backend.put(SUBSCRIBERS, subscriber.id, _dump(subscriber))
        logger.info(f"뉴스레터 구독 추가: {subscriber.id}")
        return subscriber

    def list_subscribers(self) -> List[Subscriber]:
        subscribers = [Subscriber.model_validate(p) for p in self.backend.values(SUBSCRIBERS)]
        return sorted(subscribers, key=lambda s: s.subscribed_at, reverse=True)

    def remove_subscriber(self, subscriber_id: str) -> bool:
        removed = self.backend.delete(SUBSCRIBERS, subscriber_id)
        if removed:
            logger.info(f"뉴스레터 구독 해지: {subscriber_id}")
        return removed

    # ------------------------------
    # Seeding
    # ------------------------------
    def is_empty(self) -> bool:
        return self.backend.count(ROUTINE_ARTICLES) == 0 and self.backend.count(PAGE_ARTICLES) == 0

