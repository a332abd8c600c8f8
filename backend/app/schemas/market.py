"""시세 스냅샷 스키마 (대시보드 상단 '주요 항목 시세 CHECK' 영역)"""

from __future__ import annotations

from pydantic import Field

from app.schemas.common import CamelModel


class MarketDataItem(CamelModel):
    value: str
    change: float = 0.0
    loading: bool = False


class FearGreedData(CamelModel):
    value: str
    status: str
    loading: bool = False


class MarketData(CamelModel):
    """고정된 8개 슬롯. 어느 슬롯도 빠질 수 없습니다."""
    usdkrw: MarketDataItem
    gold: MarketDataItem
    spy: MarketDataItem
    bitcoin: MarketDataItem
    nasdaq: MarketDataItem
    kodex200: MarketDataItem
    fear_greed: FearGreedData
    scfi: MarketDataItem


# fear_greed를 제외한 일반 시세 슬롯 이름
QUOTE_SLOTS = ("usdkrw", "gold", "spy", "bitcoin", "nasdaq", "kodex200", "scfi")
MARKET_SLOTS = QUOTE_SLOTS + ("fear_greed",)


class ManualMarketItem(CamelModel):
    enabled: bool = False
    value: str = ""
    change: float = 0.0


class ManualFearGreedItem(CamelModel):
    enabled: bool = False
    value: str = ""
    status: str = ""


class ManualMarketData(CamelModel):
    """관리자가 직접 입력하는 시세. 슬롯마다 따로 켜고 끌 수 있습니다."""
    usdkrw: ManualMarketItem = Field(default_factory=ManualMarketItem)
    gold: ManualMarketItem = Field(default_factory=ManualMarketItem)
    spy: ManualMarketItem = Field(default_factory=ManualMarketItem)
    bitcoin: ManualMarketItem = Field(default_factory=ManualMarketItem)
    nasdaq: ManualMarketItem = Field(default_factory=ManualMarketItem)
    kodex200: ManualMarketItem = Field(default_factory=ManualMarketItem)
    fear_greed: ManualFearGreedItem = Field(default_factory=ManualFearGreedItem)
    scfi: ManualMarketItem = Field(default_factory=ManualMarketItem)
