"""관리자 수동 입력 시세와 수집 시세를 합치는 순수 함수"""

from __future__ import annotations

from typing import Optional

from app.schemas.market import (
    QUOTE_SLOTS,
    FearGreedData,
    ManualMarketData,
    MarketData,
    MarketDataItem,
)


def _is_active(manual) -> bool:
    return manual.enabled is True and bool(manual.value)


def merge_manual_market_data(
    market_data: MarketData,
    manual: Optional[ManualMarketData] = None,
) -> MarketData:
    """
    수동 입력이 켜져 있고 값이 비어 있지 않은 슬롯만 수동 값으로 바꿉니다.

    입력 객체는 건드리지 않고 새 MarketData를 돌려줍니다. manual이 None이면
    수집 결과를 그대로(복사본으로) 돌려줍니다.

    Args:
        market_data: 시세 수집기의 결과
        manual: 관리자 수동 입력 값 (선택)

    Returns:
        MarketData: 병합된 새 객체
    """
    merged = market_data.model_copy(deep=True)
    if manual is None:
        return merged

    updates = {}
    for slot in QUOTE_SLOTS:
        entry = getattr(manual, slot)
        if _is_active(entry):
            updates[slot] = MarketDataItem(value=entry.value, change=entry.change, loading=False)

    if _is_active(manual.fear_greed):
        updates["fear_greed"] = FearGreedData(
            value=manual.fear_greed.value,
            status=manual.fear_greed.status,
            loading=False,
        )

    return merged.model_copy(update=updates)
