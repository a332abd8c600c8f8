"""라우터에서 쓰는 FastAPI 의존성

저장소, 시세 수집기, 인증기는 create_app()에서 한 번 만들어 app.state에
보관하고, 핸들러는 여기 함수들을 Depends로 받아 씁니다.
"""

from fastapi import Request

from app.services.auth import Authenticator
from app.services.content_store import ContentStore
from app.services.market_data import MarketDataAggregator


def get_store(request: Request) -> ContentStore:
    return request.app.state.store


def get_aggregator(request: Request) -> MarketDataAggregator:
    return request.app.state.aggregator


def get_authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator
