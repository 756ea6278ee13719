"""
종목별 배당 계산 모듈

배정된 투자금으로 한 종목의 연 배당금을 추정하고,
통화별 원천징수세율을 적용한 세후 금액을 지급월에 분배합니다.
배당금은 배당수익률에서 유도합니다 (주당 배당금 직접 입력 방식은 사용하지 않음).
"""

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Dict, Mapping, Optional
import logging

from ...config.tax_config import TaxConfig
from ...core.models import Holding, HoldingDividend
from ...exchange.converter import convert_to_home

CENT = Decimal('0.01')
# 몫 계산에서 생기는 Decimal 정밀도 잔차 흡수용
QUOTIENT_NOISE = Decimal('1e-9')


class HoldingDividendCalculator:
    """종목 단위 배당 계산기

    Attributes:
        tax_config: 원천징수세율을 제공하는 세율 설정
        logger: 로거 인스턴스
    """

    def __init__(self, tax_config: Optional[TaxConfig] = None) -> None:
        self.tax_config = tax_config or TaxConfig()
        self.logger = logging.getLogger(self.__class__.__name__)

    def annual_dividend(
        self,
        holding: Holding,
        investment_amount: Decimal,
        rates: Optional[Mapping]
    ) -> Decimal:
        """세전 연 배당금 계산

        보수적 추정을 위해 원 단위 미만은 버립니다.
        원화 환산 주가가 0이면 (환율 누락 등) 0을 반환합니다.

        Args:
            holding: 대상 종목
            investment_amount: 종목에 배정된 투자금 (원화)
            rates: 원화 환산 환율표

        Returns:
            연 배당금 (원화, 정수)
        """
        price_in_home = convert_to_home(holding.price, holding.currency, rates)
        if price_in_home <= 0:
            self.logger.warning(f"원화 환산 주가가 0입니다: {holding.label} ({holding.currency})")
            return Decimal('0')

        shares = investment_amount / price_in_home
        dividend_per_share = price_in_home * (holding.annual_yield_percent / Decimal('100'))
        dividend = (shares * dividend_per_share).quantize(QUOTIENT_NOISE, rounding=ROUND_HALF_UP)
        result = dividend.to_integral_value(rounding=ROUND_FLOOR)

        self.logger.debug(
            f"연 배당금: {holding.label} 투자금={investment_amount} "
            f"원화주가={price_in_home} 배당금={result}"
        )
        return result

    def withholding_rate(self, holding: Holding) -> Decimal:
        """종목 통화에 따른 배당 원천징수세율"""
        return self.tax_config.withholding_rate(holding.currency)

    def monthly_schedule(self, holding: Holding, annual_dividend: Decimal) -> Dict[int, Decimal]:
        """세후 월별 배당금 분배

        지급월마다 (연 배당금 / 지급 횟수) * (1 - 세율)을 각각 소수 둘째 자리로
        반올림합니다. 월별 반올림이 독립적이므로 합계는 연 배당금 세후액과
        조금 다를 수 있습니다.

        Args:
            holding: 대상 종목
            annual_dividend: 세전 연 배당금

        Returns:
            지급월을 키로 하는 세후 배당금 (지급월이 없으면 빈 딕셔너리)
        """
        months = holding.dividend_payment_months
        if not months:
            return {}

        after_tax_ratio = Decimal('1') - self.withholding_rate(holding)
        per_payment = (annual_dividend / len(months)) * after_tax_ratio
        amount = per_payment.quantize(CENT, rounding=ROUND_HALF_UP)
        return {month: amount for month in months}

    def share_quantity(
        self,
        holding: Holding,
        investment_amount: Decimal,
        rates: Optional[Mapping]
    ) -> int:
        """투자금으로 살 수 있는 정수 주식 수 (원화 환산 주가가 0이면 0)"""
        price_in_home = convert_to_home(holding.price, holding.currency, rates)
        if price_in_home <= 0:
            return 0
        return int((investment_amount / price_in_home).to_integral_value(rounding=ROUND_FLOOR))

    def calculate(
        self,
        holding: Holding,
        investment_amount: Decimal,
        rates: Optional[Mapping]
    ) -> HoldingDividend:
        """종목 하나의 배당 계산 결과 생성"""
        annual = self.annual_dividend(holding, investment_amount, rates)
        return HoldingDividend(
            holding=holding,
            investment_amount=investment_amount,
            shares=self.share_quantity(holding, investment_amount, rates),
            annual_dividend=annual,
            withholding_rate=self.withholding_rate(holding),
            monthly_schedule=self.monthly_schedule(holding, annual),
        )
