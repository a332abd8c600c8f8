"""시세 API 라우터"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_aggregator
from app.schemas.market import MarketData
from app.services.market_data import MarketDataAggregator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Market Data"])


@router.get("/market-data", response_model=MarketData)
async def get_market_data(aggregator: MarketDataAggregator = Depends(get_aggregator)):
    """
    8개 시세 슬롯을 조회합니다.

    소스별 실패는 수집기 안에서 고정 대체값으로 처리되므로, 여기서는
    결과를 조립하는 과정의 예상치 못한 오류만 500으로 바꿉니다.
    수동 입력 병합은 하지 않습니다 (/dashboard/{date}/market-data 참고).
    """
    try:
        return await aggregator.collect()
    except Exception:
        logger.exception("시세 데이터 조립 중 예상치 못한 오류")
        raise HTTPException(status_code=500, detail="시세 데이터를 가져오지 못했습니다.")
