"""외부 시세 제공자별 응답 스키마.

각 제공자의 JSON 형태를 명시적으로 검증합니다. 검증에 실패하면 네트워크
실패와 똑같이 취급되어 다음 시도(또는 고정 대체값)로 넘어갑니다.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel


class _ProviderModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, allow_inf_nan=False)


# exchangerate-api.com /v4/latest/USD
class ExchangeRates(_ProviderModel):
    krw: float = Field(alias="KRW", gt=0)


class ExchangeRateResponse(_ProviderModel):
    rates: ExchangeRates


# data-asg.goldprice.org /dbXRates/KRW
class GoldPriceItem(_ProviderModel):
    xau_price: float = Field(alias="xauPrice", gt=0)
    pc_xau: Optional[float] = Field(default=None, alias="pcXau")


class GoldPriceResponse(_ProviderModel):
    items: List[GoldPriceItem] = Field(min_length=1)


# query1/query2.finance.yahoo.com /v8/finance/chart/{symbol}
class YahooChartMeta(_ProviderModel):
    regular_market_price: float = Field(alias="regularMarketPrice", gt=0)
    previous_close: Optional[float] = Field(default=None, alias="previousClose")
    chart_previous_close: Optional[float] = Field(default=None, alias="chartPreviousClose")

    @property
    def reference_close(self) -> Optional[float]:
        """전일 종가. range=1d 응답에는 previousClose가 없고 chartPreviousClose만 오기도 합니다."""
        for candidate in (self.previous_close, self.chart_previous_close):
            if candidate:
                return candidate
        return None


class YahooChartResult(_ProviderModel):
    meta: YahooChartMeta


class YahooChart(_ProviderModel):
    result: List[YahooChartResult] = Field(min_length=1)


class YahooChartResponse(_ProviderModel):
    chart: YahooChart


# api.upbit.com /v1/ticker?markets=KRW-BTC
class UpbitTicker(_ProviderModel):
    trade_price: float = Field(gt=0)
    signed_change_rate: float


class UpbitTickerResponse(RootModel[List[UpbitTicker]]):
    root: List[UpbitTicker] = Field(min_length=1)


# api.coingecko.com /api/v3/simple/price
class CoinGeckoBitcoin(_ProviderModel):
    krw: float = Field(gt=0)
    krw_24h_change: float = 0.0


class CoinGeckoResponse(_ProviderModel):
    bitcoin: CoinGeckoBitcoin


# api.alternative.me /fng/
class FearGreedEntry(_ProviderModel):
    value: str = Field(pattern=r"^\d{1,3}$")
    value_classification: str


class FearGreedResponse(_ProviderModel):
    data: List[FearGreedEntry] = Field(min_length=1)
