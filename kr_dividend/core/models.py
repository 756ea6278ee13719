from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..exchange.currency import Currency, HOME_CURRENCY
from ..exchange.rate_table import ExchangeRateTable
from .error import ValidationError

MONTHS = range(1, 13)


def to_decimal(value: Any, name: str) -> Decimal:
    """숫자 입력을 Decimal로 변환"""
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"{name} 값이 숫자가 아닙니다: {value}", rule=name) from e
    if not result.is_finite():
        raise ValidationError(f"{name} 값은 유한한 숫자여야 합니다: {value}", rule=name)
    return result


class CalculationMode(Enum):
    """계산 방향"""
    FORWARD = 'forward'    # 투자금 -> 배당금
    INVERSE = 'inverse'    # 목표 배당금 -> 투자금


@dataclass(frozen=True)
class Holding:
    """
    보유 종목

    계산 한 번 동안 변경되지 않는 불변 객체입니다.
    배당 지급월은 중복 없이 정렬된 튜플로 보관합니다.
    """
    name: str
    ticker: str
    price: Decimal
    currency: Currency
    annual_yield_percent: Decimal
    allocation_ratio_percent: Decimal
    dividend_payment_months: Tuple[int, ...] = ()
    purchase_date: Optional[date] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, 'price', to_decimal(self.price, 'price'))
        object.__setattr__(
            self, 'annual_yield_percent', to_decimal(self.annual_yield_percent, 'annual_yield_percent')
        )
        object.__setattr__(
            self, 'allocation_ratio_percent',
            to_decimal(self.allocation_ratio_percent, 'allocation_ratio_percent')
        )
        if not isinstance(self.currency, Currency):
            currency = Currency.from_str(str(self.currency))
            if currency is None:
                raise ValidationError(f"지원하지 않는 통화입니다: {self.currency}", rule="currency")
            object.__setattr__(self, 'currency', currency)

        self._validate()

    def _validate(self) -> None:
        label = self.ticker or self.name
        if self.price <= 0:
            raise ValidationError(f"[{label}] 주가는 0보다 커야 합니다: {self.price}", rule="price")
        if self.annual_yield_percent < 0:
            raise ValidationError(
                f"[{label}] 배당수익률은 0 이상이어야 합니다: {self.annual_yield_percent}",
                rule="yield",
            )
        if not Decimal('0') <= self.allocation_ratio_percent <= Decimal('100'):
            raise ValidationError(
                f"[{label}] 비율은 0~100 사이여야 합니다: {self.allocation_ratio_percent}",
                rule="ratio",
            )

        months = list(self.dividend_payment_months or ())
        if len(set(months)) != len(months):
            raise ValidationError(f"[{label}] 배당 지급월이 중복되었습니다: {months}", rule="months")
        for month in months:
            if isinstance(month, bool) or not isinstance(month, int) or month not in MONTHS:
                raise ValidationError(f"[{label}] 배당 지급월은 1~12 사이여야 합니다: {month}", rule="months")
        object.__setattr__(self, 'dividend_payment_months', tuple(sorted(months)))

    @property
    def is_foreign(self) -> bool:
        return self.currency is not HOME_CURRENCY

    @property
    def label(self) -> str:
        return f"[{self.ticker}] {self.name}" if self.name else self.ticker


@dataclass(frozen=True)
class PortfolioInput:
    """
    계산 입력

    순방향 계산은 총 투자금을, 역방향 계산은 목표 연 배당금을 사용하며
    둘을 동시에 지정할 수 없습니다.
    """
    holdings: Tuple[Holding, ...]
    exchange_rates: ExchangeRateTable = field(default_factory=ExchangeRateTable)
    total_investment: Optional[Decimal] = None
    target_annual_dividend: Optional[Decimal] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, 'holdings', tuple(self.holdings))
        if not isinstance(self.exchange_rates, ExchangeRateTable):
            object.__setattr__(self, 'exchange_rates', ExchangeRateTable(self.exchange_rates))
        if self.total_investment is not None:
            object.__setattr__(self, 'total_investment', to_decimal(self.total_investment, 'total_investment'))
        if self.target_annual_dividend is not None:
            object.__setattr__(
                self, 'target_annual_dividend',
                to_decimal(self.target_annual_dividend, 'target_annual_dividend')
            )
        if self.total_investment is not None and self.target_annual_dividend is not None:
            raise ValidationError(
                "총 투자금과 목표 연 배당금은 동시에 지정할 수 없습니다.",
                rule="mode",
            )

    @property
    def mode(self) -> CalculationMode:
        if self.target_annual_dividend is not None:
            return CalculationMode.INVERSE
        return CalculationMode.FORWARD

    @property
    def total_ratio(self) -> Decimal:
        return sum((h.allocation_ratio_percent for h in self.holdings), Decimal('0'))


@dataclass(frozen=True)
class HoldingDividend:
    """종목별 배당 계산 결과"""
    holding: Holding
    investment_amount: Decimal
    shares: int
    annual_dividend: Decimal
    withholding_rate: Decimal
    monthly_schedule: Dict[int, Decimal]


@dataclass(frozen=True)
class DividendResult:
    """포트폴리오 배당 계산 결과"""
    holdings: List[HoldingDividend]
    total_annual_dividend: Decimal
    total_foreign_annual_dividend: Decimal
    weighted_average_foreign_tax_rate: Decimal
    merged_monthly_schedule: List[Decimal]

    @property
    def per_holding_annual_dividend(self) -> Dict[Holding, Decimal]:
        return {item.holding: item.annual_dividend for item in self.holdings}

    @property
    def per_holding_monthly_schedule(self) -> Dict[Holding, Dict[int, Decimal]]:
        return {item.holding: item.monthly_schedule for item in self.holdings}

    @property
    def total_domestic_annual_dividend(self) -> Decimal:
        return self.total_annual_dividend - self.total_foreign_annual_dividend


@dataclass(frozen=True)
class InvestmentResult(DividendResult):
    """역방향 계산 결과 (목표 배당금 -> 필요 투자금)"""
    required_investment: Decimal = Decimal('0')
    target_annual_dividend: Decimal = Decimal('0')
