"""시세 수집기 테스트

실제 네트워크 대신 URL별로 응답을 정해 둔 FakeSession을 주입합니다.
"""

import asyncio
import json
import os
import sys
import threading
import time
import unittest

import requests

# Ensure backend package is importable
current_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.abspath(os.path.join(current_dir, '..')))

from app.schemas.market import MARKET_SLOTS, MarketData, MarketDataItem
from app.services import market_data as md
from app.services.market_data import FALLBACKS, FetchAttempt, MarketDataAggregator, MarketSource

INVALID_JSON = object()


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self.payload is INVALID_JSON:
            raise ValueError("Expecting value")
        return self.payload


class FakeSession:
    """URL -> 응답(페이로드, FakeResponse, 예외, 호출 가능 객체) 매핑으로 동작하는 세션"""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def get(self, url, timeout=None):
        self.calls.append(url)
        if url not in self.routes:
            raise requests.exceptions.ConnectionError(f"no route for {url}")
        route = self.routes[url]
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route()
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(route)

    def close(self):
        self.closed = True


def yahoo_payload(price, previous_close=None, chart_previous_close=None):
    meta = {"regularMarketPrice": price}
    if previous_close is not None:
        meta["previousClose"] = previous_close
    if chart_previous_close is not None:
        meta["chartPreviousClose"] = chart_previous_close
    return {"chart": {"result": [{"meta": meta}], "error": None}}


def healthy_routes():
    return {
        md.USDKRW_URL: {"base": "USD", "rates": {"KRW": 1427.8, "USD": 1}},
        md.GOLD_URL: {"items": [{"curr": "KRW", "xauPrice": 3110350.0, "pcXau": 1.25}]},
        md.SPY_URL: yahoo_payload(600.0, previous_close=500.0),
        md.UPBIT_BTC_URL: [{"market": "KRW-BTC", "trade_price": 136512000.4, "signed_change_rate": 0.01234}],
        md.COINGECKO_BTC_URL: {"bitcoin": {"krw": 130000000, "krw_24h_change": -1.234}},
        md.NASDAQ_PRIMARY_URL: yahoo_payload(20000.0, chart_previous_close=19000.0),
        md.NASDAQ_SECONDARY_URL: yahoo_payload(19900.0, previous_close=19800.0),
        md.KODEX200_PRIMARY_URL: yahoo_payload(41235.0, previous_close=41000.0),
        md.KODEX200_SECONDARY_URL: yahoo_payload(40000.0, previous_close=40000.0),
        md.FEAR_GREED_URL: {"data": [{"value": "25", "value_classification": "Extreme Fear"}]},
    }


# 슬롯별로 실패시키려면 지워야 하는 URL 목록
SLOT_URLS = {
    "usdkrw": [md.USDKRW_URL],
    "gold": [md.GOLD_URL],
    "spy": [md.SPY_URL],
    "bitcoin": [md.UPBIT_BTC_URL, md.COINGECKO_BTC_URL],
    "nasdaq": [md.NASDAQ_PRIMARY_URL, md.NASDAQ_SECONDARY_URL],
    "kodex200": [md.KODEX200_PRIMARY_URL, md.KODEX200_SECONDARY_URL],
    "fear_greed": [md.FEAR_GREED_URL],
}


class AggregatorTestCase(unittest.TestCase):
    timeout = 1.0

    def setUp(self):
        self.aggregators = []

    def tearDown(self):
        for aggregator in self.aggregators:
            aggregator.close()

    def collect(self, routes):
        session = FakeSession(routes)
        aggregator = MarketDataAggregator(session=session, timeout=self.timeout, slow_timeout=self.timeout)
        self.aggregators.append(aggregator)
        return asyncio.run(aggregator.collect()), session

    def assert_complete(self, market_data):
        self.assertIsInstance(market_data, MarketData)
        for slot in MARKET_SLOTS:
            item = getattr(market_data, slot)
            self.assertTrue(item.value, f"{slot} 값이 비어 있음")
            self.assertFalse(item.loading, f"{slot} loading이 True")


class TestCollectHealthy(AggregatorTestCase):
    def test_all_sources_live(self):
        market_data, _ = self.collect(healthy_routes())
        self.assert_complete(market_data)

        self.assertEqual(market_data.usdkrw.value, "1,427.80")
        self.assertEqual(market_data.usdkrw.change, 0.2)
        self.assertEqual(market_data.gold.value, "100,000")
        self.assertEqual(market_data.gold.change, 1.25)
        self.assertEqual(market_data.spy.value, "600.00")
        self.assertEqual(market_data.spy.change, 20.0)
        self.assertEqual(market_data.bitcoin.value, "136,512,000")
        self.assertEqual(market_data.bitcoin.change, 1.23)
        self.assertEqual(market_data.nasdaq.value, "20,000.00")
        self.assertEqual(market_data.nasdaq.change, 5.26)
        self.assertEqual(market_data.kodex200.value, "41,235")
        self.assertEqual(market_data.kodex200.change, 0.57)
        self.assertEqual(market_data.fear_greed.value, "25")
        self.assertEqual(market_data.fear_greed.status, "극단적 공포")

    def test_scfi_is_always_constant(self):
        market_data, session = self.collect(healthy_routes())
        self.assertEqual(market_data.scfi, FALLBACKS["scfi"])
        self.assertFalse(any("scfi" in url.lower() for url in session.calls))

    def test_secondary_not_called_when_primary_succeeds(self):
        _, session = self.collect(healthy_routes())
        self.assertNotIn(md.COINGECKO_BTC_URL, session.calls)
        self.assertNotIn(md.NASDAQ_SECONDARY_URL, session.calls)
        self.assertNotIn(md.KODEX200_SECONDARY_URL, session.calls)

    def test_json_keys_are_camel_case(self):
        market_data, _ = self.collect(healthy_routes())
        payload = market_data.model_dump(by_alias=True)
        self.assertIn("fearGreed", payload)
        self.assertEqual(set(payload["fearGreed"].keys()), {"value", "status", "loading"})


class TestCollectFailures(AggregatorTestCase):
    def test_each_slot_fails_independently(self):
        for slot, urls in SLOT_URLS.items():
            with self.subTest(slot=slot):
                routes = healthy_routes()
                for url in urls:
                    routes[url] = requests.exceptions.ConnectionError("down")
                market_data, _ = self.collect(routes)

                self.assert_complete(market_data)
                expected = FALLBACKS[slot]
                actual = getattr(market_data, slot)
                self.assertEqual(actual.value, expected.value)
                # 다른 슬롯은 실시간 값 유지
                if slot != "spy":
                    self.assertEqual(market_data.spy.value, "600.00")
                else:
                    self.assertEqual(market_data.usdkrw.value, "1,427.80")

    def test_all_sources_fail(self):
        market_data, _ = self.collect({})
        self.assert_complete(market_data)
        for slot in MARKET_SLOTS:
            expected = FALLBACKS[slot].model_dump()
            self.assertEqual(getattr(market_data, slot).model_dump(), expected)

    def test_fallback_constants(self):
        market_data, _ = self.collect({})
        self.assertEqual((market_data.usdkrw.value, market_data.usdkrw.change), ("1,427.80", -0.19))
        self.assertEqual((market_data.spy.value, market_data.spy.change), ("590.25", -0.99))
        self.assertEqual((market_data.fear_greed.value, market_data.fear_greed.status), ("52", "중립"))
        self.assertEqual((market_data.scfi.value, market_data.scfi.change), ("1,245", -2.3))

    def test_http_error_status_uses_fallback(self):
        routes = healthy_routes()
        routes[md.GOLD_URL] = FakeResponse({"error": "rate limited"}, status_code=429)
        market_data, _ = self.collect(routes)
        self.assertEqual(market_data.gold.value, FALLBACKS["gold"].value)

    def test_invalid_json_uses_fallback(self):
        routes = healthy_routes()
        routes[md.FEAR_GREED_URL] = FakeResponse(INVALID_JSON)
        market_data, _ = self.collect(routes)
        self.assertEqual(market_data.fear_greed.status, "중립")

    def test_unexpected_shape_uses_fallback(self):
        routes = healthy_routes()
        routes[md.USDKRW_URL] = {"rates": {"EUR": 0.9}}
        routes[md.SPY_URL] = {"chart": {"result": []}}
        market_data, _ = self.collect(routes)
        self.assertEqual(market_data.usdkrw.value, FALLBACKS["usdkrw"].value)
        self.assertEqual(market_data.spy.value, FALLBACKS["spy"].value)

    def test_fallback_is_not_shared_instance(self):
        market_data, _ = self.collect({})
        market_data.usdkrw.value = "changed"
        self.assertEqual(FALLBACKS["usdkrw"].value, "1,427.80")


class TestFallbackChains(AggregatorTestCase):
    def test_bitcoin_falls_back_to_coingecko(self):
        routes = healthy_routes()
        routes[md.UPBIT_BTC_URL] = []
        market_data, session = self.collect(routes)
        self.assertEqual(market_data.bitcoin.value, "130,000,000")
        self.assertEqual(market_data.bitcoin.change, -1.23)
        self.assertIn(md.COINGECKO_BTC_URL, session.calls)

    def test_nasdaq_falls_back_to_secondary(self):
        routes = healthy_routes()
        routes[md.NASDAQ_PRIMARY_URL] = FakeResponse(None, status_code=500)
        market_data, _ = self.collect(routes)
        self.assertEqual(market_data.nasdaq.value, "19,900.00")
        self.assertEqual(market_data.nasdaq.change, 0.51)

    def test_kodex_missing_previous_close_tries_secondary(self):
        routes = healthy_routes()
        routes[md.KODEX200_PRIMARY_URL] = yahoo_payload(41235.0)
        market_data, _ = self.collect(routes)
        self.assertEqual(market_data.kodex200.value, "40,000")
        self.assertEqual(market_data.kodex200.change, 0.0)


class TestNonFiniteValues(AggregatorTestCase):
    """JSON의 1e400/NaN은 파이썬 float inf/nan으로 디코딩됩니다."""

    def test_infinite_gold_price_uses_fallback(self):
        routes = healthy_routes()
        routes[md.GOLD_URL] = json.loads('{"items": [{"xauPrice": 1e400, "pcXau": 1.0}]}')
        market_data, _ = self.collect(routes)

        self.assert_complete(market_data)
        self.assertEqual(market_data.gold, FALLBACKS["gold"])
        self.assertEqual(market_data.spy.value, "600.00")

    def test_infinite_upbit_price_moves_to_coingecko(self):
        routes = healthy_routes()
        routes[md.UPBIT_BTC_URL] = json.loads('[{"trade_price": 1e400, "signed_change_rate": 0.01}]')
        market_data, session = self.collect(routes)

        self.assertEqual(market_data.bitcoin.value, "130,000,000")
        self.assertIn(md.COINGECKO_BTC_URL, session.calls)

    def test_nan_previous_close_uses_fallback(self):
        routes = healthy_routes()
        routes[md.SPY_URL] = json.loads('{"chart": {"result": [{"meta": {"regularMarketPrice": 600.0, "previousClose": NaN}}]}}')
        market_data, _ = self.collect(routes)

        self.assertEqual(market_data.spy, FALLBACKS["spy"])
        self.assertIsInstance(market_data.model_dump(mode="json")["spy"]["change"], float)

    def test_nan_change_rate_moves_to_coingecko(self):
        routes = healthy_routes()
        routes[md.UPBIT_BTC_URL] = json.loads('[{"trade_price": 136000000, "signed_change_rate": NaN}]')
        market_data, _ = self.collect(routes)
        self.assertEqual(market_data.bitcoin.change, -1.23)


class TestUnexpectedParserErrors(AggregatorTestCase):
    def collect_with_parser(self, parse):
        source = MarketSource("usdkrw", (
            FetchAttempt("broken", md.USDKRW_URL, parse, self.timeout),
            FetchAttempt("backup", md.SPY_URL, lambda payload: MarketDataItem(value="backup"), self.timeout),
        ), FALLBACKS["usdkrw"])
        aggregator = MarketDataAggregator(session=FakeSession(healthy_routes()), sources=[source])
        self.aggregators.append(aggregator)
        return asyncio.run(aggregator.fetch_slot(source))

    def test_formatting_error_becomes_parsing_error(self):
        def parse(payload):
            return MarketDataItem(value=md.format_krw(float("inf")))

        self.assertEqual(self.collect_with_parser(parse).value, "backup")

    def test_run_attempt_wraps_value_errors(self):
        aggregator = MarketDataAggregator(session=FakeSession(healthy_routes()))
        self.aggregators.append(aggregator)
        attempt = FetchAttempt("broken", md.USDKRW_URL, lambda payload: 1 / 0)
        with self.assertRaises(md.SourceParsingError):
            aggregator._run_attempt(attempt)

    def test_any_other_error_still_moves_on(self):
        def parse(payload):
            raise RuntimeError("parser bug")

        with self.assertLogs("app.services.market_data", level="ERROR"):
            result = self.collect_with_parser(parse)
        self.assertEqual(result.value, "backup")


class TestTimeouts(AggregatorTestCase):
    timeout = 0.2

    def setUp(self):
        super().setUp()
        self.release = threading.Event()

    def tearDown(self):
        self.release.set()
        super().tearDown()

    def hang(self):
        self.release.wait(5)
        return FakeResponse({"rates": {"KRW": 1500.0}})

    def test_hung_source_returns_fallback_within_timeout(self):
        routes = healthy_routes()
        routes[md.USDKRW_URL] = self.hang

        started = time.monotonic()
        market_data, _ = self.collect(routes)
        elapsed = time.monotonic() - started

        self.assertLess(elapsed, 2.0)
        self.assertEqual(market_data.usdkrw.value, FALLBACKS["usdkrw"].value)
        self.assertEqual(market_data.spy.value, "600.00")

    def test_hung_primary_moves_to_secondary(self):
        routes = healthy_routes()
        routes[md.NASDAQ_PRIMARY_URL] = self.hang
        market_data, _ = self.collect(routes)
        self.assertEqual(market_data.nasdaq.value, "19,900.00")

    def test_everything_hangs(self):
        routes = {url: self.hang for url in healthy_routes()}
        started = time.monotonic()
        market_data, _ = self.collect(routes)
        # 소스는 동시에, 각 소스의 시도는 순서대로 진행되므로 최대 2번의 타임아웃
        self.assertLess(time.monotonic() - started, 2.0)
        self.assert_complete(market_data)

    def test_default_pool_requests_every_source_while_others_hang(self):
        routes = {url: self.hang for url in healthy_routes()}
        _, session = self.collect(routes)
        # 1차 시도 7개와 2차 시도 3개가 모두 실제로 요청되어야 함
        self.assertEqual(set(session.calls), set(healthy_routes()))


class TestParsers(unittest.TestCase):
    def test_translate_fear_greed(self):
        self.assertEqual(md.translate_fear_greed("Extreme Fear"), "극단적 공포")
        self.assertEqual(md.translate_fear_greed("Fear"), "공포")
        self.assertEqual(md.translate_fear_greed("Neutral"), "중립")
        self.assertEqual(md.translate_fear_greed("Greed"), "탐욕")
        self.assertEqual(md.translate_fear_greed("Extreme Greed"), "극단적 탐욕")

    def test_translate_unknown_label_passes_through(self):
        self.assertEqual(md.translate_fear_greed("Mild Optimism"), "Mild Optimism")

    def test_gold_without_change_defaults_to_zero(self):
        item = md.parse_gold({"items": [{"xauPrice": 6220700.0}]})
        self.assertEqual(item.value, "200,000")
        self.assertEqual(item.change, 0.0)

    def test_fear_greed_value_must_be_numeric(self):
        with self.assertRaises(md.SourceParsingError):
            md.parse_fear_greed({"data": [{"value": "n/a", "value_classification": "Fear"}]})

    def test_yahoo_prefers_previous_close(self):
        parse = md.yahoo_parser(md.format_decimal)
        item = parse(yahoo_payload(110.0, previous_close=100.0, chart_previous_close=50.0))
        self.assertEqual(item.change, 10.0)

    def test_percent_change_rounds_to_two_places(self):
        self.assertEqual(md.percent_change(1, 3), -66.67)


class TestClose(unittest.TestCase):
    def test_close_closes_session(self):
        session = FakeSession()
        aggregator = MarketDataAggregator(session=session)
        aggregator.close()
        self.assertTrue(session.closed)


if __name__ == '__main__':
    unittest.main()
