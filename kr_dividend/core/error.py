from typing import Optional, Dict, Any, List
from decimal import Decimal


class DividendPlannerError(Exception):
    """
    배당 계산 처리의 기본 예외 클래스

    애플리케이션 고유 예외의 최상위 클래스로,
    오류의 상세 정보를 구조화된 형태로 보관합니다.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        예외 초기화

        Args:
            message: 오류 메시지
            details: 오류 상세 정보 (선택)
        """
        super().__init__(message)
        self.details = details or {}


class ValidationError(DividendPlannerError):
    """
    입력 검증 예외

    계산 전에 포트폴리오 또는 종목 입력이 규칙을
    위반했을 때 발생합니다. 계산은 일절 수행되지 않습니다.
    """

    def __init__(
        self,
        message: str,
        rule: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        예외 초기화

        Args:
            message: 오류 메시지
            rule: 위반한 검증 규칙 이름
            details: 오류 상세 정보 (선택)
        """
        super().__init__(message, details)
        self.rule = rule


class RatioSumError(ValidationError):
    """종목 비율 합계 위반"""

    def __init__(self, message: str, total_ratio: Decimal) -> None:
        super().__init__(message, rule="ratio_sum", details={"total_ratio": total_ratio})
        self.total_ratio = total_ratio


class MissingExchangeRateError(ValidationError):
    """
    환율 누락 예외

    종목이 사용하는 외화 중 환율표에 양수 환율이 없는
    통화 코드를 모두 보관합니다.
    """

    def __init__(self, currencies: List[str]) -> None:
        """
        예외 초기화

        Args:
            currencies: 환율이 없는 통화 코드 목록
        """
        super().__init__(
            f"{', '.join(currencies)} 통화의 환율을 먼저 조회해주세요.",
            rule="exchange_rate",
            details={"currencies": list(currencies)},
        )
        self.currencies = list(currencies)


class DegenerateInputError(DividendPlannerError):
    """
    퇴화 입력 예외

    가중 배당수익률이 0인 상태에서 필요 투자금을 구하는 등
    유한한 결과를 낼 수 없는 계산에서 발생합니다.
    """

    pass


class ConfigurationError(DividendPlannerError):
    """
    설정 관련 예외

    설정 파일의 읽기 또는 검증에 실패했을 때 발생합니다.
    """

    pass


class PortfolioLoadError(DividendPlannerError):
    """
    포트폴리오 파일 읽기 예외

    파일 접근 또는 내용 해석에 실패했을 때 발생합니다.
    """

    def __init__(self, message: str, source: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        예외 초기화

        Args:
            message: 오류 메시지
            source: 오류가 발생한 파일 경로
            details: 오류 상세 정보 (선택)
        """
        super().__init__(message, details)
        self.source = source

    def __str__(self) -> str:
        return f"{super().__str__()} [{self.source}]"
