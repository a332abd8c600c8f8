"""대시보드 콘텐츠, 아티클, 구독자 스키마"""

from __future__ import annotations

import datetime as dt
from typing import List, Literal, Optional

from pydantic import ConfigDict, Field

from app.schemas.common import CamelModel
from app.schemas.market import ManualMarketData

PageType = Literal["routine", "real-estate", "invest"]
PAGE_TYPES = ("routine", "real-estate", "invest")


# ------------------------------
# Dashboard content
# ------------------------------
class SummaryItem(CamelModel):
    id: str
    text: str = ""


class IPOItem(CamelModel):
    id: str
    name: str = ""
    score: int = 0
    period: str = ""
    price: str = ""
    min_amount: str = ""
    broker: str = ""
    description: str = ""
    is_highlight: bool = False


class RealEstateItem(CamelModel):
    id: str
    name: str = ""
    location: str = ""
    units: int = 0
    period: str = ""
    priority: str = ""
    type: Literal["apartment", "urban"] = "apartment"


class NewsItem(CamelModel):
    id: str
    title: str = ""
    summary: str = ""
    url: Optional[str] = None


class TodoItem(CamelModel):
    id: str
    title: str = ""
    description: str = ""


class ThoughtItem(CamelModel):
    id: str
    title: str = ""
    content: str = ""


class DashboardContent(CamelModel):
    """하루치 '머니 루틴' 대시보드 콘텐츠. date는 저장 시 서버가 채웁니다."""
    date: Optional[dt.date] = None
    hero_title: str = "하루 5분으로 시작하는 재테크"
    hero_subtitle: str = "공모주 청약부터 부동산 뉴스, 놓치기 쉬운 정책 정보까지!"
    summaries: List[SummaryItem] = Field(default_factory=list)
    ipos: List[IPOItem] = Field(default_factory=list)
    real_estates: List[RealEstateItem] = Field(default_factory=list)
    news: List[NewsItem] = Field(default_factory=list)
    todos: List[TodoItem] = Field(default_factory=list)
    thoughts: List[ThoughtItem] = Field(default_factory=list)
    market_section_title: str = "주요 항목 시세 CHECK"
    market_refresh_note: str = "* 데이터는 5분마다 자동 갱신됩니다"
    manual_market_data: Optional[ManualMarketData] = None


# ------------------------------
# Articles
# ------------------------------
class _ArticleFields(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1)
    summary: str = ""
    content: str = ""
    category: str = Field(min_length=1)
    thumbnail: Optional[str] = None
    date: dt.date = Field(default_factory=dt.date.today)
    read_time: int = Field(default=0, ge=0)
    views: int = Field(default=0, ge=0)
    is_popular: bool = False


class RoutineArticleCreate(_ArticleFields):
    pass


class RoutineArticle(RoutineArticleCreate):
    id: str


class RoutineArticleUpdate(CamelModel):
    """PATCH 본문. 보낸 필드만 기존 아티클에 덮어씁니다."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1)
    summary: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = Field(default=None, min_length=1)
    thumbnail: Optional[str] = None
    date: Optional[dt.date] = None
    read_time: Optional[int] = Field(default=None, ge=0)
    views: Optional[int] = Field(default=None, ge=0)
    is_popular: Optional[bool] = None


class PageArticleCreate(_ArticleFields):
    page_type: PageType
    is_pinned: bool = False


class PageArticle(PageArticleCreate):
    id: str


class PageArticleUpdate(RoutineArticleUpdate):
    page_type: Optional[PageType] = None
    is_pinned: Optional[bool] = None


# ------------------------------
# Subscribers / admin
# ------------------------------
class SubscribeRequest(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = None
    email: str = Field(min_length=1)


class Subscriber(CamelModel):
    id: str
    name: str = ""
    email: str
    subscribed_at: dt.datetime


class VerifyRequest(CamelModel):
    password: str = ""
