# exchange/currency.py

from enum import Enum, unique
from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN
from typing import Optional, Union


@dataclass(frozen=True)
class CurrencyInfo:
    """통화 메타데이터"""
    code: str
    symbol: str
    decimals: int
    display_name: str


@unique
class Currency(Enum):
    """배당 종목에서 사용하는 통화 (원화 + 해외 9개 통화)"""
    KRW = CurrencyInfo('KRW', '₩', 0, '원')
    USD = CurrencyInfo('USD', '$', 2, '미국 달러')
    EUR = CurrencyInfo('EUR', '€', 2, '유로')
    JPY = CurrencyInfo('JPY', '¥', 0, '일본 엔')
    GBP = CurrencyInfo('GBP', '£', 2, '영국 파운드')
    CNY = CurrencyInfo('CNY', 'CN¥', 2, '중국 위안')
    AUD = CurrencyInfo('AUD', 'A$', 2, '호주 달러')
    CAD = CurrencyInfo('CAD', 'C$', 2, '캐나다 달러')
    CHF = CurrencyInfo('CHF', 'CHF', 2, '스위스 프랑')
    HKD = CurrencyInfo('HKD', 'HK$', 2, '홍콩 달러')

    @property
    def code(self) -> str:
        return self.value.code

    @property
    def symbol(self) -> str:
        return self.value.symbol

    @property
    def decimals(self) -> int:
        """표시용 소수 자릿수"""
        return self.value.decimals

    @property
    def display_name(self) -> str:
        return self.value.display_name

    @property
    def is_home(self) -> bool:
        """원화 여부"""
        return self is HOME_CURRENCY

    def format_amount(self, amount: Union[Decimal, float, int], include_symbol: bool = True) -> str:
        """
        금액을 통화 표시 형식으로 변환 (표시 자릿수 미만은 버림)

        Args:
            amount: 금액
            include_symbol: 통화 기호 포함 여부

        Returns:
            천 단위 구분 기호가 들어간 문자열
        """
        places = Decimal(1).scaleb(-self.decimals)
        shown = Decimal(str(amount)).quantize(places, rounding=ROUND_DOWN)
        text = f"{shown:,.{self.decimals}f}"
        return self.symbol + text if include_symbol else text

    @classmethod
    def from_str(cls, value: Optional[str], default: Optional['Currency'] = None) -> Optional['Currency']:
        """
        통화 코드(대소문자 무관) 또는 기호로 통화 조회

        Returns:
            일치하는 통화. 없으면 default
        """
        text = (value or '').strip()
        if not text:
            return default

        by_code = cls.__members__.get(text.upper())
        if by_code is not None:
            return by_code
        return next((currency for currency in cls if currency.symbol == text), default)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency.{self.name}"


# 기준 통화
HOME_CURRENCY = Currency.KRW
