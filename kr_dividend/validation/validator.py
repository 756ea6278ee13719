from decimal import Decimal
from typing import List, Optional
import logging

from ..config.tax_config import RatioMode, TaxConfig
from ..core.error import MissingExchangeRateError, RatioSumError, ValidationError
from ..core.models import CalculationMode, PortfolioInput


class ValidationResult:
    """검증 결과 (위반 규칙은 발견 순서대로 보관)"""
    def __init__(self):
        self.errors: List[ValidationError] = []

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, error: ValidationError) -> None:
        self.errors.append(error)

    @property
    def messages(self) -> List[str]:
        return [str(error) for error in self.errors]

    def raise_first(self) -> None:
        """첫 번째 위반을 예외로 발생"""
        if self.errors:
            raise self.errors[0]


class PortfolioValidator:
    """
    계산 전 포트폴리오 검증

    (a) 비율 합계, (b) 계산 방향별 필수 금액, (c) 외화 환율 순서로 검사하며
    첫 번째 위반을 차단 오류로 보고합니다.
    """

    def __init__(self, config: Optional[TaxConfig] = None) -> None:
        self.config = config or TaxConfig()
        self.logger = logging.getLogger(self.__class__.__name__)

    def validate(self, portfolio: PortfolioInput, mode: Optional[CalculationMode] = None) -> None:
        """
        검증 실행

        Args:
            portfolio: 계산 입력
            mode: 계산 방향 (생략 시 입력에서 판단)

        Raises:
            ValidationError: 첫 번째로 위반한 규칙
        """
        result = self.check(portfolio, mode)
        if not result.is_valid:
            self.logger.error(f"포트폴리오 검증 실패: {result.errors[0]}")
        result.raise_first()

    def check(self, portfolio: PortfolioInput, mode: Optional[CalculationMode] = None) -> ValidationResult:
        """모든 규칙을 검사해 결과를 반환"""
        result = ValidationResult()
        mode = mode or portfolio.mode

        self._validate_ratio_sum(portfolio, result)
        self._validate_amount(portfolio, mode, result)
        self._validate_exchange_rates(portfolio, result)

        return result

    def _validate_ratio_sum(self, portfolio: PortfolioInput, result: ValidationResult) -> None:
        total = portfolio.total_ratio
        if self.config.ratio_mode is RatioMode.EXACT:
            if abs(total - Decimal('100')) > self.config.ratio_epsilon:
                result.add_error(RatioSumError("총 비율이 100%가 되어야 합니다.", total))
        elif total > Decimal('100'):
            result.add_error(RatioSumError("총 비율이 100% 이하가 되어야 합니다.", total))

    @staticmethod
    def _validate_amount(portfolio: PortfolioInput, mode: CalculationMode, result: ValidationResult) -> None:
        if mode is CalculationMode.FORWARD:
            amount = portfolio.total_investment
            if amount is None or amount <= 0:
                result.add_error(ValidationError("총 투자금을 입력해주세요.", rule="total_investment"))
        else:
            amount = portfolio.target_annual_dividend
            if amount is None or amount <= 0:
                result.add_error(
                    ValidationError("목표 연 배당금을 입력해주세요.", rule="target_annual_dividend")
                )

    @staticmethod
    def _validate_exchange_rates(portfolio: PortfolioInput, result: ValidationResult) -> None:
        missing = portfolio.exchange_rates.missing_currencies(
            holding.currency for holding in portfolio.holdings
        )
        if missing:
            result.add_error(MissingExchangeRateError([currency.code for currency in missing]))
