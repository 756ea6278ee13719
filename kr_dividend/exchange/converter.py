# exchange/converter.py

from decimal import Decimal
from typing import Mapping, Union

from .currency import Currency, HOME_CURRENCY


def convert_to_home(
    amount: Decimal,
    currency: Currency,
    rates: Union[Mapping, None],
) -> Decimal:
    """
    금액을 원화로 환산

    원화는 환율표와 무관하게 그대로 반환합니다. 환율이 없거나 0 이하이면
    0을 반환하며, 이는 상위 검증 단계를 위한 안전값이지 "배당 없음"의 의미가 아닙니다.
    반올림은 하지 않습니다.

    Args:
        amount: 환산할 금액
        currency: 금액의 통화
        rates: 외화 1단위당 원화 환율표

    Returns:
        원화 금액
    """
    if currency is HOME_CURRENCY:
        return amount

    if not rates:
        return Decimal('0')

    rate_for = getattr(rates, 'rate_for', None)
    if rate_for is not None:
        rate = rate_for(currency)
    else:
        rate = rates.get(currency, rates.get(currency.code))
        rate = Decimal(str(rate)) if rate is not None else None

    if rate is None or not rate.is_finite() or rate <= 0:
        return Decimal('0')

    return amount * rate
