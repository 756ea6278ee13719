from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from ..core.error import ConfigurationError
from ..exchange.currency import Currency

INFINITY = Decimal('Infinity')


class RatioMode(Enum):
    """비율 합계 검증 방식"""
    AT_MOST = 'at_most'   # 합계 100% 이하
    EXACT = 'exact'       # 합계 100% (허용 오차 내)

    @classmethod
    def from_str(cls, value: str) -> 'RatioMode':
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ConfigurationError(f"알 수 없는 비율 검증 방식: {value}") from e


@dataclass(frozen=True)
class TaxBracket:
    """종합소득세 누진세율 구간"""
    limit: Decimal
    rate: Decimal
    cumulative_deduction: Decimal


def _d(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


DEFAULT_TAX_BRACKETS: Tuple[TaxBracket, ...] = (
    TaxBracket(Decimal('14000000'), Decimal('0.06'), Decimal('0')),
    TaxBracket(Decimal('50000000'), Decimal('0.15'), Decimal('1260000')),
    TaxBracket(Decimal('88000000'), Decimal('0.24'), Decimal('5760000')),
    TaxBracket(Decimal('150000000'), Decimal('0.35'), Decimal('15440000')),
    TaxBracket(Decimal('300000000'), Decimal('0.38'), Decimal('19940000')),
    TaxBracket(Decimal('500000000'), Decimal('0.40'), Decimal('25940000')),
    TaxBracket(Decimal('1000000000'), Decimal('0.42'), Decimal('35940000')),
    TaxBracket(INFINITY, Decimal('0.45'), Decimal('65940000')),
)

# 국가별 배당소득 원천징수세율
DEFAULT_FOREIGN_TAX_RATES: Dict[Currency, Decimal] = {
    Currency.USD: Decimal('0.15'),
    Currency.EUR: Decimal('0.26375'),  # 독일 기준
    Currency.JPY: Decimal('0.15315'),
    Currency.GBP: Decimal('0'),
    Currency.CNY: Decimal('0.10'),
    Currency.AUD: Decimal('0'),
    Currency.CAD: Decimal('0.25'),
    Currency.CHF: Decimal('0.35'),
    Currency.HKD: Decimal('0'),
}


@dataclass(frozen=True)
class TaxConfig:
    """
    세율 및 검증 설정

    과세연도별 세율표 교체와 테스트용 대체 구간표를 위해
    계산기에 명시적으로 전달되는 불변 설정 객체입니다.
    """
    separate_tax_threshold: Decimal = Decimal('20000000')
    domestic_withholding_rate: Decimal = Decimal('0.154')
    gross_up_factor: Decimal = Decimal('1.11')
    dividend_tax_credit_rate: Decimal = Decimal('0.15')
    local_surtax_rate: Decimal = Decimal('0.10')
    default_foreign_tax_rate: Decimal = Decimal('0.15')
    foreign_tax_rates: Mapping[Currency, Decimal] = field(
        default_factory=lambda: dict(DEFAULT_FOREIGN_TAX_RATES)
    )
    brackets: Tuple[TaxBracket, ...] = DEFAULT_TAX_BRACKETS
    ratio_mode: RatioMode = RatioMode.AT_MOST
    ratio_epsilon: Decimal = Decimal('0.1')

    def __post_init__(self) -> None:
        self._validate_brackets()

    def _validate_brackets(self) -> None:
        if not self.brackets:
            raise ConfigurationError("누진세율 구간이 비어 있습니다")

        previous: Optional[Decimal] = None
        for bracket in self.brackets:
            if previous is not None and bracket.limit <= previous:
                raise ConfigurationError(
                    f"누진세율 구간은 상한액 오름차순이어야 합니다: {bracket.limit}"
                )
            previous = bracket.limit

        if self.brackets[-1].limit != INFINITY:
            raise ConfigurationError("마지막 누진세율 구간의 상한은 무한대여야 합니다")

    def foreign_tax_rate(self, currency: Currency) -> Decimal:
        """외화 배당의 원천징수세율 (표에 없으면 기본 세율)"""
        return self.foreign_tax_rates.get(currency, self.default_foreign_tax_rate)

    def withholding_rate(self, currency: Currency) -> Decimal:
        """통화별 배당 원천징수세율"""
        if currency.is_home:
            return self.domestic_withholding_rate
        return self.foreign_tax_rate(currency)

    def bracket_for(self, tax_base: Decimal) -> TaxBracket:
        """과세표준이 속하는 첫 구간"""
        for bracket in self.brackets:
            if tax_base <= bracket.limit:
                return bracket
        return self.brackets[-1]

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'TaxConfig':
        """
        YAML 매핑에서 설정 생성

        지정되지 않은 항목은 기본값을 사용합니다.

        Args:
            data: 설정 매핑

        Returns:
            세율 설정

        Raises:
            ConfigurationError: 값이 올바르지 않은 경우
        """
        if not data:
            return cls()

        try:
            kwargs: Dict[str, Any] = {}
            for key in (
                'separate_tax_threshold',
                'domestic_withholding_rate',
                'gross_up_factor',
                'dividend_tax_credit_rate',
                'local_surtax_rate',
                'default_foreign_tax_rate',
                'ratio_epsilon',
            ):
                if key in data:
                    kwargs[key] = _d(data[key])

            if 'ratio_mode' in data:
                kwargs['ratio_mode'] = RatioMode.from_str(data['ratio_mode'])

            if 'foreign_tax_rates' in data:
                rates = dict(DEFAULT_FOREIGN_TAX_RATES)
                for code, rate in (data['foreign_tax_rates'] or {}).items():
                    currency = Currency.from_str(str(code))
                    if currency is None or currency.is_home:
                        raise ConfigurationError(f"외국 원천징수세율의 통화가 올바르지 않습니다: {code}")
                    rates[currency] = _d(rate)
                kwargs['foreign_tax_rates'] = rates

            if 'brackets' in data:
                kwargs['brackets'] = tuple(
                    TaxBracket(
                        limit=INFINITY if entry.get('limit') in (None, 'inf', 'infinity') else _d(entry['limit']),
                        rate=_d(entry['rate']),
                        cumulative_deduction=_d(entry.get('deduction', 0)),
                    )
                    for entry in data['brackets']
                )

            return cls(**kwargs)

        except (InvalidOperation, KeyError, TypeError, AttributeError) as e:
            raise ConfigurationError(f"세율 설정이 올바르지 않습니다: {e}") from e
