"""
시세 데이터 수집기 (Market Data Aggregator)

대시보드 상단의 8개 시세 슬롯을 외부 무료 API에서 모아 하나의 MarketData로
만듭니다. 외부 API는 자주 느려지거나 응답 형식이 바뀌므로 다음 원칙을 따릅니다.

1. 소스마다 '시도 목록'을 순서대로 실행하고, 모두 실패하면 고정 대체값을 씁니다.
   (대부분 시도 1개, 비트코인/나스닥/KODEX200은 2개, SCFI는 0개)
2. 각 시도는 자기 타임아웃을 넘기면 포기합니다. 소켓이 멈춰 있어도
   asyncio.wait_for가 호출자 쪽 대기를 끊어 줍니다.
3. 8개 슬롯은 동시에 조회하며, 한 소스의 실패가 다른 소스나 전체 호출에
   영향을 주지 않습니다.

사용 예:
    aggregator = MarketDataAggregator()
    market_data = await aggregator.collect()
"""

from __future__ import annotations

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple, Type, TypeVar, Union

import requests
from pydantic import BaseModel, ValidationError

from app.exceptions import SourceError, SourceParsingError, SourceRequestError
from app.schemas.market import FearGreedData, MarketData, MarketDataItem
from app.schemas.providers import (
    CoinGeckoResponse,
    ExchangeRateResponse,
    FearGreedResponse,
    GoldPriceResponse,
    UpbitTickerResponse,
    YahooChartResponse,
)
from app.utils.formatting import format_decimal, format_krw

logger = logging.getLogger(__name__)

SlotValue = Union[MarketDataItem, FearGreedData]
ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_TIMEOUT_SECONDS = 5.0
SLOW_TIMEOUT_SECONDS = 8.0

# 1트로이온스 = 31.1035g
GRAMS_PER_TROY_OUNCE = 31.1035

# 환율 API는 전일 대비 값을 주지 않으므로 현재 환율의 99.8%를 전일 값으로 근사합니다.
FX_REFERENCE_RATIO = 0.998

USER_AGENT = "Mozilla/5.0 (compatible; MoneyRoutineBot/1.0)"

USDKRW_URL = "https://api.exchangerate-api.com/v4/latest/USD"
GOLD_URL = "https://data-asg.goldprice.org/dbXRates/KRW"
SPY_URL = "https://query1.finance.yahoo.com/v8/finance/chart/SPY"
UPBIT_BTC_URL = "https://api.upbit.com/v1/ticker?markets=KRW-BTC"
COINGECKO_BTC_URL = (
    "https://api.coingecko.com/api/v3/simple/price"
    "?ids=bitcoin&vs_currencies=krw&include_24hr_change=true"
)
NASDAQ_PRIMARY_URL = "https://query2.finance.yahoo.com/v8/finance/chart/%5EIXIC?interval=1d&range=1d"
NASDAQ_SECONDARY_URL = "https://query1.finance.yahoo.com/v8/finance/chart/%5EIXIC"
KODEX200_PRIMARY_URL = "https://query2.finance.yahoo.com/v8/finance/chart/069500.KS?interval=1d&range=1d"
KODEX200_SECONDARY_URL = "https://query1.finance.yahoo.com/v8/finance/chart/069500.KS"
FEAR_GREED_URL = "https://api.alternative.me/fng/"

# 모든 시도가 실패했을 때 쓰는 고정값
FALLBACKS = {
    "usdkrw": MarketDataItem(value="1,427.80", change=-0.19),
    "gold": MarketDataItem(value="220,000", change=0.0),
    "spy": MarketDataItem(value="590.25", change=-0.99),
    "bitcoin": MarketDataItem(value="136,000,000", change=0.0),
    "nasdaq": MarketDataItem(value="19,500", change=0.0),
    "kodex200": MarketDataItem(value="41,000", change=0.0),
    "fear_greed": FearGreedData(value="52", status="중립"),
    # SCFI 운임지수는 무료 실시간 소스가 없어 항상 고정값입니다.
    "scfi": MarketDataItem(value="1,245", change=-2.3),
}

FEAR_GREED_TRANSLATIONS = {
    "Extreme Fear": "극단적 공포",
    "Fear": "공포",
    "Neutral": "중립",
    "Greed": "탐욕",
    "Extreme Greed": "극단적 탐욕",
}


# ------------------------------
# Response parsing
# ------------------------------
def _validate(model: Type[ModelT], payload: Any) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise SourceParsingError(f"{model.__name__} 스키마 불일치: {e.error_count()}개 오류") from e


def percent_change(current: float, previous: float) -> float:
    return round((current - previous) / previous * 100, 2)


def translate_fear_greed(classification: str) -> str:
    """영문 분류를 한글로 바꿉니다. 모르는 분류는 그대로 돌려줍니다."""
    return FEAR_GREED_TRANSLATIONS.get(classification, classification)


def parse_usdkrw(payload: Any) -> MarketDataItem:
    rate = _validate(ExchangeRateResponse, payload).rates.krw
    reference = rate * FX_REFERENCE_RATIO
    return MarketDataItem(value=format_decimal(rate), change=percent_change(rate, reference))


def parse_gold(payload: Any) -> MarketDataItem:
    item = _validate(GoldPriceResponse, payload).items[0]
    krw_per_gram = item.xau_price / GRAMS_PER_TROY_OUNCE
    return MarketDataItem(value=format_krw(krw_per_gram), change=item.pc_xau or 0.0)


def yahoo_parser(formatter: Callable[[float], str]) -> Callable[[Any], MarketDataItem]:
    """야후 차트 응답 파서를 만듭니다. 달러 자산은 소수 둘째 자리, 원화 자산은 정수로 표시합니다."""
    def parse(payload: Any) -> MarketDataItem:
        meta = _validate(YahooChartResponse, payload).chart.result[0].meta
        previous = meta.reference_close
        if previous is None:
            raise SourceParsingError("야후 응답에 전일 종가가 없습니다")
        price = meta.regular_market_price
        return MarketDataItem(value=formatter(price), change=percent_change(price, previous))
    return parse


def parse_upbit_bitcoin(payload: Any) -> MarketDataItem:
    ticker = _validate(UpbitTickerResponse, payload).root[0]
    return MarketDataItem(
        value=format_krw(ticker.trade_price),
        change=round(ticker.signed_change_rate * 100, 2),
    )


def parse_coingecko_bitcoin(payload: Any) -> MarketDataItem:
    bitcoin = _validate(CoinGeckoResponse, payload).bitcoin
    return MarketDataItem(value=format_krw(bitcoin.krw), change=round(bitcoin.krw_24h_change, 2))


def parse_fear_greed(payload: Any) -> FearGreedData:
    entry = _validate(FearGreedResponse, payload).data[0]
    return FearGreedData(value=entry.value, status=translate_fear_greed(entry.value_classification))


# ------------------------------
# Source definitions
# ------------------------------
@dataclass(frozen=True)
class FetchAttempt:
    """소스 하나에 대한 한 번의 조회 시도"""
    name: str
    url: str
    parse: Callable[[Any], SlotValue]
    timeout: float = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class MarketSource:
    """슬롯 하나를 채우는 전략: 순서대로 시도하고 마지막에 고정 대체값"""
    slot: str
    attempts: Tuple[FetchAttempt, ...]
    fallback: SlotValue


def build_sources(
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    slow_timeout: float = SLOW_TIMEOUT_SECONDS,
) -> Tuple[MarketSource, ...]:
    """8개 슬롯의 조회 전략을 만듭니다. 금 시세 API는 응답이 느려 더 긴 타임아웃을 씁니다."""
    return (
        MarketSource("usdkrw", (
            FetchAttempt("exchangerate-api", USDKRW_URL, parse_usdkrw, timeout),
        ), FALLBACKS["usdkrw"]),
        MarketSource("gold", (
            FetchAttempt("goldprice.org", GOLD_URL, parse_gold, slow_timeout),
        ), FALLBACKS["gold"]),
        MarketSource("spy", (
            FetchAttempt("yahoo:SPY", SPY_URL, yahoo_parser(format_decimal), timeout),
        ), FALLBACKS["spy"]),
        MarketSource("bitcoin", (
            FetchAttempt("upbit", UPBIT_BTC_URL, parse_upbit_bitcoin, timeout),
            FetchAttempt("coingecko", COINGECKO_BTC_URL, parse_coingecko_bitcoin, timeout),
        ), FALLBACKS["bitcoin"]),
        MarketSource("nasdaq", (
            FetchAttempt("yahoo-query2:^IXIC", NASDAQ_PRIMARY_URL, yahoo_parser(format_decimal), timeout),
            FetchAttempt("yahoo-query1:^IXIC", NASDAQ_SECONDARY_URL, yahoo_parser(format_decimal), timeout),
        ), FALLBACKS["nasdaq"]),
        MarketSource("kodex200", (
            FetchAttempt("yahoo-query2:069500.KS", KODEX200_PRIMARY_URL, yahoo_parser(format_krw), timeout),
            FetchAttempt("yahoo-query1:069500.KS", KODEX200_SECONDARY_URL, yahoo_parser(format_krw), timeout),
        ), FALLBACKS["kodex200"]),
        MarketSource("fear_greed", (
            FetchAttempt("alternative.me", FEAR_GREED_URL, parse_fear_greed, timeout),
        ), FALLBACKS["fear_greed"]),
        MarketSource("scfi", (), FALLBACKS["scfi"]),
    )


# ------------------------------
# Aggregator
# ------------------------------
class MarketDataAggregator:
    """외부 시세 소스를 동시에 조회해 MarketData 하나로 합칩니다.

    requests는 블로킹 라이브러리이므로 전용 스레드 풀에서 실행하고,
    이벤트 루프 쪽에서는 시도마다 asyncio.wait_for로 대기 시간을 제한합니다.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        slow_timeout: float = SLOW_TIMEOUT_SECONDS,
        max_workers: int = 16,
        sources: Optional[Sequence[MarketSource]] = None,
    ):
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
        self.session = session
        self.sources = tuple(sources) if sources is not None else build_sources(timeout, slow_timeout)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="market-fetch")
        logger.info(f"MarketDataAggregator 초기화 완료 (소스 {len(self.sources)}개, 기본 타임아웃 {timeout}초)")

    def _get_json(self, url: str, timeout: float) -> Any:
        try:
            response = self.session.get(url, timeout=timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            status_code = getattr(getattr(e, "response", None), "status_code", None)
            raise SourceRequestError(f"요청 실패: {e}", url=url, status_code=status_code) from e
        try:
            return response.json()
        except ValueError as e:
            raise SourceParsingError(f"JSON 디코딩 실패: {url}") from e

    def _run_attempt(self, attempt: FetchAttempt) -> SlotValue:
        payload = self._get_json(attempt.url, attempt.timeout)
        try:
            return attempt.parse(payload)
        except SourceError:
            raise
        except (ArithmeticError, ValueError, TypeError, LookupError) as e:
            # 스키마는 통과했지만 값 변환/포맷 단계에서 깨진 응답
            raise SourceParsingError(f"응답 값 처리 실패: {type(e).__name__}: {e}") from e

    async def fetch_slot(self, source: MarketSource) -> SlotValue:
        """한 슬롯의 시도 목록을 순서대로 실행합니다. 어떤 실패도 밖으로 던지지 않습니다."""
        loop = asyncio.get_running_loop()
        for attempt in source.attempts:
            started = time.monotonic()
            try:
                # 타임아웃에는 스레드 풀 대기 시간도 포함됩니다. 풀이 가득 차 있으면
                # 요청을 보내기 전에 대체값으로 넘어갈 수 있습니다 (MARKET_MAX_WORKERS).
                result = await asyncio.wait_for(
                    loop.run_in_executor(self._executor, self._run_attempt, attempt),
                    timeout=attempt.timeout,
                )
                logger.debug(f"[{source.slot}] {attempt.name} 성공 ({time.monotonic() - started:.3f}초)")
                return result
            except asyncio.TimeoutError:
                logger.warning(f"[{source.slot}] {attempt.name} 타임아웃 ({attempt.timeout}초)")
            except SourceError as e:
                logger.warning(f"[{source.slot}] {attempt.name} 실패: {e}")
            except Exception:
                logger.exception(f"[{source.slot}] {attempt.name} 예상치 못한 오류")

        if source.attempts:
            logger.warning(f"[{source.slot}] 모든 시도 실패 - 고정 대체값 사용: {source.fallback.value}")
        return source.fallback.model_copy()

    async def collect(self) -> MarketData:
        """모든 슬롯을 동시에 조회해 완성된 MarketData를 돌려줍니다."""
        started = time.monotonic()
        results = await asyncio.gather(*(self.fetch_slot(source) for source in self.sources))
        slots = {}
        for source, result in zip(self.sources, results):
            slots[source.slot] = result.model_copy(update={"loading": False})
        market_data = MarketData(**slots)
        logger.info(f"시세 수집 완료 ({time.monotonic() - started:.3f}초)")
        return market_data

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
        self.session.close()
