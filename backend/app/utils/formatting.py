"""시세 값 표시용 숫자 포맷 유틸리티"""

import math


def round_half_up(value: float) -> int:
    """0.5는 항상 올림하는 반올림 (파이썬 기본 round의 은행가 반올림과 다름)."""
    return int(math.floor(value + 0.5))


def format_krw(value: float) -> str:
    """
    원화 금액을 정수로 반올림하고 천 단위 콤마를 붙입니다.

    예시:
        >>> format_krw(136512000.4)
        '136,512,000'
    """
    return f"{round_half_up(value):,}"


def format_decimal(value: float, digits: int = 2) -> str:
    """
    달러 시세나 환율처럼 소수점이 의미 있는 값을 포맷합니다.

    예시:
        >>> format_decimal(1427.8)
        '1,427.80'
    """
    return f"{value:,.{digits}f}"

