class SourceError(Exception):
    """외부 시세 소스 예외의 기본 클래스"""
    pass


class SourceRequestError(SourceError):
    """HTTP 요청 실패 예외 (네트워크 오류, 타임아웃, 4xx/5xx 응답)"""
    def __init__(self, message, url=None, status_code=None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class SourceParsingError(SourceError):
    """응답 파싱 실패 예외 (JSON 디코딩 실패, 스키마 불일치)"""
    pass
