"""카드 렌더링 예외 모듈."""


class CardError(Exception):
    """카드 렌더링 파이프라인의 기본 예외."""


class ValidationError(CardError):
    """설정이 잘못되었거나 그릴 대상(캔버스)을 만들 수 없을 때."""


class DecodeError(CardError):
    """원본 이미지를 디코딩하지 못했을 때 — 전체 작업이 실패한다."""


class LogoError(CardError):
    """로고를 불러오지 못했을 때 — 로고만 생략하고 계속 진행한다."""
