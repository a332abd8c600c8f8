"""일일 대시보드 API 라우터"""

import datetime as dt
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_aggregator, get_store
from app.schemas.content import DashboardContent
from app.schemas.market import MarketData
from app.services.content_store import ContentStore
from app.services.market_data import MarketDataAggregator
from app.services.market_merge import merge_manual_market_data

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
    responses={404: {"description": "Not found"}},
)


# /dates 는 /{date} 보다 먼저 등록해야 합니다.
@router.get("/dates", response_model=List[str])
async def list_dashboard_dates(store: ContentStore = Depends(get_store)):
    """저장된 대시보드 날짜 목록 (최신순)"""
    return store.list_dashboard_dates()


@router.get("/{date}", response_model=DashboardContent)
async def get_dashboard(date: dt.date, store: ContentStore = Depends(get_store)):
    content = store.get_dashboard(date)
    if content is None:
        raise HTTPException(status_code=404, detail="해당 날짜의 대시보드가 없습니다.")
    return content


@router.post("/{date}", response_model=DashboardContent)
async def save_dashboard(date: dt.date, content: DashboardContent, store: ContentStore = Depends(get_store)):
    """해당 날짜의 대시보드를 저장합니다 (없으면 생성, 있으면 덮어쓰기)."""
    return store.save_dashboard(date, content)


@router.get("/{date}/market-data", response_model=MarketData)
async def get_dashboard_market_data(
    date: dt.date,
    store: ContentStore = Depends(get_store),
    aggregator: MarketDataAggregator = Depends(get_aggregator),
):
    """수집 시세에 그 날짜 대시보드의 수동 입력 시세를 덮어쓴 결과를 돌려줍니다."""
    content = store.get_dashboard(date)
    manual = content.manual_market_data if content is not None else None
    try:
        market_data = await aggregator.collect()
        return merge_manual_market_data(market_data, manual)
    except Exception:
        logger.exception(f"대시보드 시세 병합 중 예상치 못한 오류: {date.isoformat()}")
        raise HTTPException(status_code=500, detail="시세 데이터를 가져오지 못했습니다.")
