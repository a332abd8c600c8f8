"""Money Routine API 백엔드 메인 모듈"""

import time
import uuid
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings, load_settings
from app.database import build_engine
from app.routers import admin, articles, dashboard, market, subscribers
from app.services.auth import Authenticator, SharedSecretAuthenticator
from app.services.content_store import ContentStore
from app.services.market_data import MarketDataAggregator
from app.services.seed import seed_default_content
from app.services.storage import MemoryBackend, SqlAlchemyBackend
from app.utils.logger_config import setup_logging

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def _format_validation_error(errors) -> str:
    """첫 번째 검증 오류를 '<필드>: <메시지>' 형태로 만듭니다. 본문 위치(body)는 생략합니다."""
    if not errors:
        return "잘못된 요청입니다."
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    message = first.get("msg", "잘못된 값입니다.")
    return f"{'.'.join(loc)}: {message}" if loc else message


def build_store(settings: Settings) -> ContentStore:
    """설정에 맞는 저장소를 만들고, 비어 있으면 기본 콘텐츠를 채웁니다."""
    if settings.database_url:
        backend = SqlAlchemyBackend(build_engine(settings.database_url))
        logger.info("SQLAlchemy 저장소 사용")
    else:
        backend = MemoryBackend()
        logger.info("메모리 저장소 사용 (재시작 시 초기화)")

    store = ContentStore(backend)
    if settings.seed_content:
        seed_default_content(store)
    return store


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ContentStore] = None,
    aggregator: Optional[MarketDataAggregator] = None,
    authenticator: Optional[Authenticator] = None,
) -> FastAPI:
    """FastAPI 앱을 조립합니다. 테스트에서는 저장소/수집기/인증기를 직접 주입합니다."""
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Money Routine API 시작")
        yield
        app.state.aggregator.close()
        logger.info("Money Routine API 종료 - 시세 수집기 정리 완료")

    app = FastAPI(title="Money Routine API", version=API_VERSION, lifespan=lifespan)

    app.state.settings = settings
    app.state.store = store if store is not None else build_store(settings)
    app.state.aggregator = aggregator if aggregator is not None else MarketDataAggregator(
        timeout=settings.market_timeout_seconds,
        slow_timeout=settings.market_slow_timeout_seconds,
        max_workers=settings.market_max_workers,
    )
    app.state.authenticator = authenticator or SharedSecretAuthenticator(settings.admin_password)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )

    # 요청 로깅 미들웨어
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = str(uuid.uuid4())
        start_time = time.time()

        logger.info(f"Request {request_id} started: {request.method} {request.url.path}")

        try:
            response = await call_next(request)
            process_time = time.time() - start_time

            logger.info(f"Request {request_id} completed: {response.status_code} - {process_time:.3f} sec")

            response.headers["X-Process-Time"] = str(process_time)
            response.headers["X-Request-ID"] = request_id
            return response
        except Exception:
            process_time = time.time() - start_time
            # 예외 발생 시 전체 스택 트레이스를 로그에 기록
            logger.exception(f"Request {request_id} failed - {process_time:.3f} sec")
            return JSONResponse(
                status_code=500,
                content={"error": "서버 내부 오류가 발생했습니다."},
                headers={"X-Request-ID": request_id},
            )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        message = _format_validation_error(exc.errors())
        logger.info(f"요청 검증 실패: {request.method} {request.url.path} - {message}")
        return JSONResponse(status_code=400, content={"error": message})

    # PATCH 병합 결과처럼 요청 본문 검증 이후 저장소에서 다시 검증하다 실패한 경우
    @app.exception_handler(ValidationError)
    async def model_validation_exception_handler(request: Request, exc: ValidationError):
        message = _format_validation_error(exc.errors())
        logger.info(f"저장 전 검증 실패: {request.method} {request.url.path} - {message}")
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    # 라우터 등록
    app.include_router(market.router, prefix="/api")
    app.include_router(dashboard.router, prefix="/api")
    app.include_router(articles.router, prefix="/api")
    app.include_router(subscribers.router, prefix="/api")
    app.include_router(admin.router, prefix="/api")

    @app.get("/")
    def read_root():
        """API 루트 엔드포인트"""
        return {"message": "Welcome to Money Routine API"}

    @app.get("/health")
    def health_check():
        """API 상태 확인 엔드포인트"""
        return {"status": "healthy", "version": API_VERSION}

    return app


# === 로깅 시스템 초기화 (앱 생성 전에 한 번만 실행) ===
_settings = load_settings()
setup_logging(logs_dir=_settings.log_dir, log_level=_settings.log_level, log_to_file=_settings.log_to_file)

app = create_app(_settings)

# 앱이 직접 실행되는 경우
if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Money Routine API server")
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=False)
