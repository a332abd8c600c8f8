"""관리자 인증

관리자 화면은 하나의 공유 비밀번호(ADMIN_PASSWORD)로만 보호됩니다.
세션이나 토큰은 없으며, 비교 방식만 Authenticator 뒤로 숨겨 두었습니다.
"""

import hmac
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Authenticator(ABC):
    """관리자 비밀번호 검증 인터페이스"""

    @abstractmethod
    def verify(self, password: str) -> bool:
        ...


class SharedSecretAuthenticator(Authenticator):
    """설정된 공유 비밀번호와 상수 시간 비교를 합니다. 빈 비밀번호는 항상 거부합니다."""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("관리자 비밀번호가 비어 있습니다")
        self._secret = secret.encode("utf-8")

    def verify(self, password: str) -> bool:
        if not password:
            return False
        matched = hmac.compare_digest(password.encode("utf-8"), self._secret)
        if not matched:
            logger.warning("관리자 비밀번호 검증 실패")
        return matched
