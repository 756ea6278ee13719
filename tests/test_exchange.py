"""환율표와 원화 환산 테스트"""

from decimal import Decimal

import pytest

from kr_dividend.core.error import ValidationError
from kr_dividend.exchange.converter import convert_to_home
from kr_dividend.exchange.currency import Currency, HOME_CURRENCY
from kr_dividend.exchange.rate_table import ExchangeRateTable


class TestCurrency:

    def test_from_str_code_and_symbol(self):
        assert Currency.from_str('usd') is Currency.USD
        assert Currency.from_str(' hkd ') is Currency.HKD
        assert Currency.from_str('€') is Currency.EUR
        assert Currency.from_str('XYZ') is None
        assert Currency.from_str('', default=Currency.KRW) is Currency.KRW

    def test_home_currency(self):
        assert HOME_CURRENCY is Currency.KRW
        assert Currency.KRW.is_home
        assert not Currency.USD.is_home
        assert len(Currency) == 10

    def test_format_amount(self):
        assert Currency.KRW.format_amount(Decimal('1234567.8')) == '₩1,234,567'
        assert Currency.USD.format_amount(Decimal('1234.5'), include_symbol=False) == '1,234.50'


class TestConvertToHome:

    @pytest.mark.parametrize('rates', [None, {}, ExchangeRateTable(), ExchangeRateTable({'USD': 0})])
    def test_home_currency_is_identity(self, rates):
        assert convert_to_home(Decimal('12345.67'), Currency.KRW, rates) == Decimal('12345.67')

    def test_converts_with_rate(self):
        rates = ExchangeRateTable({'USD': Decimal('1400')})
        assert convert_to_home(Decimal('150'), Currency.USD, rates) == Decimal('210000')

    def test_missing_rate_returns_zero(self):
        rates = ExchangeRateTable({'USD': Decimal('1400')})
        assert convert_to_home(Decimal('100'), Currency.JPY, rates) == Decimal('0')

    def test_non_positive_rate_returns_zero(self):
        rates = ExchangeRateTable({'USD': Decimal('-1')})
        assert convert_to_home(Decimal('100'), Currency.USD, rates) == Decimal('0')

    def test_plain_mapping_by_code(self):
        assert convert_to_home(Decimal('2'), Currency.USD, {'USD': 1300}) == Decimal('2600')

    def test_no_rounding(self):
        rates = ExchangeRateTable({'JPY': Decimal('9.213')})
        assert convert_to_home(Decimal('1.5'), Currency.JPY, rates) == Decimal('13.8195')


class TestExchangeRateTable:

    def test_home_currency_entry_ignored(self):
        table = ExchangeRateTable({'KRW': 1, 'USD': 1400})
        assert Currency.KRW not in table
        assert table[Currency.USD] == Decimal('1400')

    def test_unknown_currency_rejected(self):
        with pytest.raises(ValidationError):
            ExchangeRateTable({'XYZ': 1})

    @pytest.mark.parametrize('value', [float('nan'), float('inf'), '-Infinity', 'abc'])
    def test_non_finite_rate_rejected(self, value):
        with pytest.raises(ValidationError):
            ExchangeRateTable({'USD': value})

    def test_non_finite_quote_treated_as_missing(self):
        table = ExchangeRateTable.from_home_quotes({'USD': float('nan'), 'JPY': 'Infinity'})
        assert table.missing_currencies([Currency.USD, Currency.JPY]) == [Currency.USD, Currency.JPY]

    def test_strict_rejects_non_positive(self):
        with pytest.raises(ValidationError):
            ExchangeRateTable({'USD': 0}, strict=True)

    def test_missing_currencies_keeps_order_and_dedupes(self):
        table = ExchangeRateTable({'USD': 1400, 'EUR': 0})
        missing = table.missing_currencies(
            [Currency.JPY, Currency.KRW, Currency.USD, Currency.EUR, Currency.JPY]
        )
        assert missing == [Currency.JPY, Currency.EUR]

    def test_from_home_quotes_inverts_and_rounds(self):
        table = ExchangeRateTable.from_home_quotes({'USD': '0.000724', 'JPY': '0.1085', 'EUR': 0})
        assert table.rate_for(Currency.USD) == Decimal('1381.22')
        assert table.rate_for(Currency.JPY) == Decimal('9.22')
        assert table.rate_for(Currency.EUR) is None
