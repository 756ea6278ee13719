# exchange/rate_table.py

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Union

from .currency import Currency, HOME_CURRENCY
from ..core.error import ValidationError

RateValue = Union[Decimal, float, int, str]


class ExchangeRateTable(Mapping):
    """
    원화 환산 환율표

    각 항목은 "외화 1단위당 원화 금액"입니다. 원화 자체는 보관하지 않습니다.
    0 이하의 값은 보관은 되지만 누락된 환율로 취급됩니다.
    """

    def __init__(self, rates: Optional[Mapping] = None, strict: bool = False) -> None:
        """
        환율표 초기화

        Args:
            rates: 통화(또는 통화 코드)를 키로 하는 환율
            strict: True이면 0 이하의 환율을 즉시 거부

        Raises:
            ValidationError: 통화 코드 또는 환율 값이 잘못된 경우
        """
        self._rates: Dict[Currency, Decimal] = {}

        for key, value in (rates or {}).items():
            currency = key if isinstance(key, Currency) else Currency.from_str(str(key))
            if currency is None:
                raise ValidationError(f"지원하지 않는 통화입니다: {key}", rule="currency")
            if currency is HOME_CURRENCY:
                continue

            rate = self._to_decimal(currency, value)
            if strict and rate <= 0:
                raise ValidationError(
                    f"환율은 양수여야 합니다: {currency.code}={rate}",
                    rule="exchange_rate",
                )
            self._rates[currency] = rate

    @staticmethod
    def _to_decimal(currency: Currency, value: Optional[RateValue]) -> Decimal:
        if value is None:
            return Decimal('0')
        try:
            rate = value if isinstance(value, Decimal) else Decimal(str(value))
        except InvalidOperation as e:
            raise ValidationError(
                f"환율 값이 올바르지 않습니다: {currency.code}={value}",
                rule="exchange_rate",
            ) from e
        if not rate.is_finite():
            raise ValidationError(
                f"환율은 유한한 숫자여야 합니다: {currency.code}={value}",
                rule="exchange_rate",
            )
        return rate

    @classmethod
    def from_home_quotes(cls, quotes: Mapping, decimals: int = 2) -> 'ExchangeRateTable':
        """
        "원화 1원당 외화" 시세를 역수로 바꾸어 환율표를 만든다

        Args:
            quotes: 통화 코드를 키로 하는 원화 기준 시세
            decimals: 역수 반올림 자릿수

        Returns:
            원화 환산 환율표
        """
        exponent = Decimal(1).scaleb(-decimals)
        inverted = {}
        for code, quote in quotes.items():
            try:
                value = Decimal(str(quote))
            except InvalidOperation as e:
                raise ValidationError(f"환율 시세가 올바르지 않습니다: {code}={quote}", rule="exchange_rate") from e
            if not value.is_finite() or value <= 0:
                inverted[code] = Decimal('0')
                continue
            inverted[code] = (Decimal('1') / value).quantize(exponent, rounding=ROUND_HALF_UP)
        return cls(inverted)

    def rate_for(self, currency: Currency) -> Optional[Decimal]:
        """
        사용 가능한 환율 조회

        Returns:
            양수 환율. 없거나 0 이하이면 None
        """
        rate = self._rates.get(currency)
        if rate is None or rate <= 0:
            return None
        return rate

    def missing_currencies(self, currencies: Iterable[Currency]) -> List[Currency]:
        """
        사용 가능한 환율이 없는 외화 목록 (입력 순서 유지, 중복 제거)
        """
        missing: List[Currency] = []
        for currency in currencies:
            if currency is HOME_CURRENCY or currency in missing:
                continue
            if self.rate_for(currency) is None:
                missing.append(currency)
        return missing

    def __getitem__(self, currency: Currency) -> Decimal:
        return self._rates[currency]

    def __iter__(self) -> Iterator[Currency]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        items = ", ".join(f"{c.code}={r}" for c, r in self._rates.items())
        return f"ExchangeRateTable({items})"
