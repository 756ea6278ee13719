from decimal import Decimal

import pytest

from kr_dividend.core.models import Holding
from kr_dividend.exchange.currency import Currency
from kr_dividend.exchange.rate_table import ExchangeRateTable


def make_holding(**overrides) -> Holding:
    values = dict(
        name='Test Holding',
        ticker='TEST',
        price=Decimal('150'),
        currency=Currency.USD,
        annual_yield_percent=Decimal('2.5'),
        allocation_ratio_percent=Decimal('100'),
        dividend_payment_months=(3, 6, 9, 12),
    )
    values.update(overrides)
    return Holding(**values)


@pytest.fixture
def usd_holding():
    return make_holding()


@pytest.fixture
def krw_holding():
    return make_holding(
        name='삼성전자우',
        ticker='005935',
        price=Decimal('56000'),
        currency=Currency.KRW,
        annual_yield_percent=Decimal('2.6'),
        dividend_payment_months=(3, 5, 8, 11),
    )


@pytest.fixture
def unit_rates():
    return ExchangeRateTable({'USD': 1})


@pytest.fixture
def market_rates():
    return ExchangeRateTable({'USD': Decimal('1400'), 'JPY': Decimal('9.5')})


@pytest.fixture
def holding_factory():
    return make_holding
