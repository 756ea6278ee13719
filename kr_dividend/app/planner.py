"""
배당 계산 진입점

검증 -> 종목별 배당 계산 -> 집계 순으로 처리하며,
역방향 계산은 필요 투자금을 먼저 구한 뒤 같은 경로로 처리합니다.
검증을 통과하지 못하면 어떤 계산도 수행하지 않습니다.
"""

from decimal import Decimal
from typing import Optional, Union
import logging

from ..config.tax_config import TaxConfig
from ..core.models import CalculationMode, DividendResult, InvestmentResult, PortfolioInput
from ..processors.dividend.calculator import HoldingDividendCalculator
from ..processors.investment.sizer import InvestmentSizer
from ..processors.portfolio.aggregator import PortfolioAggregator
from ..tax.comprehensive import ComprehensiveTaxEngine, TaxBreakdown
from ..validation.validator import PortfolioValidator


class DividendPlanner:
    """배당 계산 서비스

    Attributes:
        config: 세율 및 검증 설정
        validator: 포트폴리오 검증기
        calculator: 종목별 배당 계산기
        aggregator: 포트폴리오 집계기
        sizer: 필요 투자금 계산기
        tax_engine: 종합과세 계산기
    """

    def __init__(self, config: Optional[TaxConfig] = None) -> None:
        self.config = config or TaxConfig()
        self.validator = PortfolioValidator(self.config)
        self.calculator = HoldingDividendCalculator(self.config)
        self.aggregator = PortfolioAggregator(self.config)
        self.sizer = InvestmentSizer()
        self.tax_engine = ComprehensiveTaxEngine(self.config)
        self.logger = logging.getLogger(self.__class__.__name__)

    def calculate_forward_dividends(self, portfolio: PortfolioInput) -> DividendResult:
        """
        총 투자금 -> 배당금 계산

        Raises:
            ValidationError: 입력 검증 실패
        """
        self.validator.validate(portfolio, CalculationMode.FORWARD)
        result = self._calculate(portfolio, portfolio.total_investment)
        self.logger.info(
            f"배당 계산 완료: 종목 {len(result.holdings)}개, 연 배당금 {result.total_annual_dividend}"
        )
        return result

    def calculate_required_investment(self, portfolio: PortfolioInput) -> InvestmentResult:
        """
        목표 연 배당금 -> 필요 투자금 계산

        Raises:
            ValidationError: 입력 검증 실패
            DegenerateInputError: 가중 배당수익률이 0인 경우
        """
        self.validator.validate(portfolio, CalculationMode.INVERSE)
        target = portfolio.target_annual_dividend
        required = self.sizer.required_investment(portfolio.holdings, target)
        result = self._calculate(portfolio, required)

        self.logger.info(f"필요 투자금 계산 완료: 목표 {target} -> 투자금 {required}")
        return InvestmentResult(
            holdings=result.holdings,
            total_annual_dividend=result.total_annual_dividend,
            total_foreign_annual_dividend=result.total_foreign_annual_dividend,
            weighted_average_foreign_tax_rate=result.weighted_average_foreign_tax_rate,
            merged_monthly_schedule=result.merged_monthly_schedule,
            required_investment=required,
            target_annual_dividend=target,
        )

    def calculate(self, portfolio: PortfolioInput) -> DividendResult:
        """입력에 지정된 계산 방향으로 계산"""
        if portfolio.mode is CalculationMode.INVERSE:
            return self.calculate_required_investment(portfolio)
        return self.calculate_forward_dividends(portfolio)

    def calculate_comprehensive_tax(
        self,
        annual_dividend_income: Union[Decimal, int, float, str],
        foreign_dividend_income: Union[Decimal, int, float, str] = 0,
        average_foreign_tax_rate: Optional[Union[Decimal, int, float, str]] = None,
    ) -> Optional[Decimal]:
        """종합과세 추가 납부세액 (분리과세 종결이면 None)"""
        return self.tax_engine.calculate(
            annual_dividend_income, foreign_dividend_income, average_foreign_tax_rate
        )

    def tax_breakdown(self, result: DividendResult) -> TaxBreakdown:
        """배당 계산 결과에 대한 종합과세 계산 과정

        역방향 계산은 목표 연 배당금을 총 배당소득으로 사용합니다.
        """
        total = (
            result.target_annual_dividend
            if isinstance(result, InvestmentResult)
            else result.total_annual_dividend
        )
        return self.tax_engine.breakdown(
            total,
            result.total_foreign_annual_dividend,
            result.weighted_average_foreign_tax_rate,
        )

    def _calculate(self, portfolio: PortfolioInput, total_investment: Decimal) -> DividendResult:
        holdings = [
            self.calculator.calculate(holding, amount, portfolio.exchange_rates)
            for holding, amount in self.sizer.allocate(portfolio.holdings, total_investment)
        ]
        return self.aggregator.aggregate(holdings)


def calculate_forward_dividends(portfolio: PortfolioInput, config: Optional[TaxConfig] = None) -> DividendResult:
    return DividendPlanner(config).calculate_forward_dividends(portfolio)


def calculate_required_investment(portfolio: PortfolioInput, config: Optional[TaxConfig] = None) -> InvestmentResult:
    return DividendPlanner(config).calculate_required_investment(portfolio)


def calculate_comprehensive_tax(
    annual_dividend_income: Union[Decimal, int, float, str],
    foreign_dividend_income: Union[Decimal, int, float, str] = 0,
    average_foreign_tax_rate: Optional[Union[Decimal, int, float, str]] = None,
    config: Optional[TaxConfig] = None,
) -> Optional[Decimal]:
    return ComprehensiveTaxEngine(config).calculate(
        annual_dividend_income, foreign_dividend_income, average_foreign_tax_rate
    )
