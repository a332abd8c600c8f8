"""기본 콘텐츠 시드

저장소가 비어 있을 때(메모리 저장소는 재시작할 때마다) 사이트에 처음부터
보여 줄 칼럼과 페이지 아티클을 채웁니다.
"""

import logging

from app.schemas.content import PageArticleCreate, RoutineArticleCreate
from app.services.content_store import ContentStore

logger = logging.getLogger(__name__)

SEED_ROUTINE_ARTICLES = [
    {
        "title": "2026년 1월 투자 기록",
        "summary": "새해 첫 달, 공모주 3건 청약하고 분양권 1건 검토했습니다. 수익과 배운 점을 정리합니다.",
        "category": "monthly",
        "date": "2026-01-19",
        "read_time": 8,
        "views": 2340,
        "is_popular": True,
    },
    {
        "title": "2025년 결산 - 총 수익 공개",
        "summary": "2025년 한 해 동안의 투자 활동과 실제 수익을 공개합니다. 성공과 실패 모두 담았습니다.",
        "category": "monthly",
        "date": "2026-01-05",
        "read_time": 12,
        "views": 5670,
        "is_popular": True,
    },
    {
        "title": "워킹맘의 아침 10분 루틴",
        "summary": "출근 준비하면서 10분 만에 확인하는 투자 체크리스트. 매일 습관이 되면 큰 차이를 만듭니다.",
        "category": "routine",
        "date": "2026-01-15",
        "read_time": 5,
        "views": 4120,
    },
    {
        "title": "분양권 투자 실패하고 배운 것",
        "summary": "첫 분양권 투자에서 손해 본 이야기. 너무 급하게 결정해서 생긴 문제들을 솔직하게 털어놓습니다.",
        "category": "failure",
        "date": "2026-01-12",
        "read_time": 9,
        "views": 6780,
    },
    {
        "title": "5년 쉬고 달라진 시장",
        "summary": "육아로 5년 쉬는 동안 시장은 완전히 바뀌어 있었습니다. 복귀 후 느낀 변화들.",
        "category": "gap",
        "date": "2026-01-18",
        "read_time": 10,
        "views": 7890,
    },
]

SEED_PAGE_ARTICLES = [
    {
        "page_type": "real-estate",
        "title": "2026년 수도권 아파트 시장 전망",
        "summary": "올해 수도권 부동산 시장은 어떻게 될까요? 금리, 공급, 정책 변화를 종합적으로 분석하고 투자 전략을 제시합니다.",
        "category": "buy",
        "thumbnail": "https://images.unsplash.com/photo-1560518883-ce09059eeffa?w=400&h=300&fit=crop",
        "date": "2026-01-19",
        "read_time": 7,
        "views": 3240,
        "is_popular": True,
        "is_pinned": True,
    },
    {
        "page_type": "real-estate",
        "title": "청약 가점 계산하는 법",
        "summary": "청약 가점제의 구성요소와 계산 방법을 상세히 알려드립니다. 나의 가점을 미리 계산해보세요.",
        "category": "subscription",
        "thumbnail": "https://images.unsplash.com/photo-1554224155-8d04cb21cd6c?w=400&h=300&fit=crop",
        "date": "2026-01-18",
        "read_time": 5,
        "views": 4120,
        "is_popular": True,
        "is_pinned": True,
    },
    {
        "page_type": "real-estate",
        "title": "양도소득세 비과세 받는 조건",
        "summary": "1세대 1주택 비과세 요건과 다주택자 양도세 절세 전략을 상세히 설명합니다.",
        "category": "tax",
        "thumbnail": "https://images.unsplash.com/photo-1554224155-6726b3ff858f?w=400&h=300&fit=crop",
        "date": "2026-01-17",
        "read_time": 8,
        "views": 3890,
        "is_popular": True,
    },
    {
        "page_type": "real-estate",
        "title": "전월세 계약서 작성 꿀팁",
        "summary": "계약서에 꼭 넣어야 할 특약 조항과 불리한 조항 피하는 법. 계약서 샘플도 함께 제공합니다.",
        "category": "rent",
        "thumbnail": "https://images.unsplash.com/photo-1450101499163-c8848c66ca85?w=400&h=300&fit=crop",
        "date": "2026-01-13",
        "read_time": 7,
        "views": 2450,
    },
    {
        "page_type": "invest",
        "title": "주식 투자, 어디서부터 시작해야 할까?",
        "summary": "주식 투자를 처음 시작하는 분들을 위한 완벽 가이드. 증권사 계좌 개설부터 첫 주식 매수까지 단계별로 알려드립니다.",
        "category": "stock-basics",
        "thumbnail": "https://images.unsplash.com/photo-1611974789855-9c2a0a7236a3?w=400&h=300&fit=crop",
        "date": "2026-01-15",
        "read_time": 5,
        "is_popular": True,
    },
    {
        "page_type": "invest",
        "title": "ETF란 무엇인가? 초보자를 위한 ETF 완벽 정리",
        "summary": "ETF(상장지수펀드)의 개념부터 장단점, 투자 방법까지. 분산투자의 첫걸음을 ETF로 시작해보세요.",
        "category": "etf",
        "thumbnail": "https://images.unsplash.com/photo-1590283603385-17ffb3a7f29f?w=400&h=300&fit=crop",
        "date": "2026-01-14",
        "read_time": 7,
        "is_popular": True,
    },
    {
        "page_type": "invest",
        "title": "PER, PBR, ROE... 꼭 알아야 할 투자 용어 10선",
        "summary": "주식 투자할 때 자주 만나는 재무제표 용어들. 이것만 알면 기업 분석이 훨씬 쉬워집니다.",
        "category": "glossary",
        "thumbnail": "https://images.unsplash.com/photo-1554224155-6726b3ff858f?w=400&h=300&fit=crop",
        "date": "2026-01-10",
        "read_time": 8,
    },
    {
        "page_type": "routine",
        "title": "매일 5분 투자 체크리스트",
        "summary": "출근 전 5분이면 충분합니다. 환율, 공모주 일정, 관심 청약을 빠르게 확인하는 순서를 정리했습니다.",
        "category": "routine",
        "date": "2026-01-17",
        "read_time": 4,
        "views": 5230,
        "is_pinned": True,
    },
    {
        "page_type": "routine",
        "title": "월급날 자동 투자 세팅하기",
        "summary": "월급이 들어오는 날 자동이체로 적립식 투자를 세팅하는 방법. 한 번 해두면 신경 쓸 일이 없습니다.",
        "category": "routine",
        "date": "2026-01-11",
        "read_time": 5,
        "views": 4120,
    },
]


def seed_default_content(store: ContentStore) -> bool:
    """저장소에 아티클이 하나도 없을 때만 기본 아티클을 채웁니다.

    Returns:
        bool: 시드를 실제로 넣었으면 True
    """
    if not store.is_empty():
        logger.info("기존 아티클이 있어 시드를 건너뜁니다")
        return False

    for data in SEED_ROUTINE_ARTICLES:
        store.create_routine_article(RoutineArticleCreate(**data))
    for data in SEED_PAGE_ARTICLES:
        store.create_article(PageArticleCreate(**data))

    logger.info(f"기본 콘텐츠 시드 완료: 칼럼 {len(SEED_ROUTINE_ARTICLES)}개, 페이지 아티클 {len(SEED_PAGE_ARTICLES)}개")
    return True
