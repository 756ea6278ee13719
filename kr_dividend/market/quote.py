"""
시세 정보로 종목 입력값을 채우는 모듈

시세 제공자의 응답(주가, 거래소, 최근 1년 배당 내역)에서
배당수익률과 지급월을 유도합니다. 외부 호출은 하지 않습니다.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.models import Holding, to_decimal
from ..exchange.currency import Currency

# 원화로 거래되는 한국거래소 코드
KRX_EXCHANGE_CODES = frozenset({'KRW', 'KSC', 'KOE'})
YIELD_PLACES = Decimal('0.0001')


@dataclass(frozen=True)
class DividendEvent:
    """배당 지급 이력 한 건"""
    paid_on: date
    amount: Decimal


@dataclass(frozen=True)
class QuoteSnapshot:
    """시세 제공자 응답"""
    symbol: str
    price: Decimal
    exchange: str
    name: str = ''
    dividends: Tuple[DividendEvent, ...] = field(default_factory=tuple)


def currency_for_exchange(exchange_code: Optional[str]) -> Currency:
    """거래소 코드로 통화 결정 (한국거래소는 원화, 그 외는 달러)"""
    if exchange_code and exchange_code.upper() in KRX_EXCHANGE_CODES:
        return Currency.KRW
    return Currency.USD


def trailing_year(events: Iterable[DividendEvent], as_of: date) -> List[DividendEvent]:
    """기준일 이전 1년 이내의 배당 이력"""
    start = as_of - timedelta(days=365)
    return [event for event in events if start <= event.paid_on <= as_of]


def derive_dividend_profile(
    price: Decimal,
    events: Sequence[DividendEvent],
) -> Tuple[Decimal, Tuple[int, ...]]:
    """
    배당 이력에서 배당수익률과 지급월 유도

    Args:
        price: 현재 주가
        events: 최근 1년 배당 이력

    Returns:
        (배당수익률 %, 소수 넷째 자리 반올림), (정렬된 지급월)
    """
    price = to_decimal(price, 'price')
    months = tuple(sorted({event.paid_on.month for event in events}))
    annual = sum((to_decimal(event.amount, 'amount') for event in events), Decimal('0'))

    if price <= 0:
        return Decimal('0'), months

    yield_percent = (annual / price * Decimal('100')).quantize(YIELD_PLACES, rounding=ROUND_HALF_UP)
    return yield_percent, months


def build_holding(
    quote: QuoteSnapshot,
    allocation_ratio_percent: Decimal,
    as_of: Optional[date] = None,
    purchase_date: Optional[date] = None,
) -> Holding:
    """
    시세 응답으로 종목 생성

    Args:
        quote: 시세 응답
        allocation_ratio_percent: 배정 비율 (%)
        as_of: 배당 이력 기준일 (기본값 오늘)
        purchase_date: 매수일

    Returns:
        입력값이 채워진 종목
    """
    events = trailing_year(quote.dividends, as_of or date.today())
    yield_percent, months = derive_dividend_profile(quote.price, events)
    return Holding(
        name=quote.name,
        ticker=quote.symbol,
        price=quote.price,
        currency=currency_for_exchange(quote.exchange),
        annual_yield_percent=yield_percent,
        allocation_ratio_percent=allocation_ratio_percent,
        dividend_payment_months=months,
        purchase_date=purchase_date,
    )
