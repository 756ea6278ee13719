"""포트폴리오 검증 테스트"""

from decimal import Decimal

import pytest

from kr_dividend.config.tax_config import RatioMode, TaxConfig
from kr_dividend.core.error import MissingExchangeRateError, RatioSumError, ValidationError
from kr_dividend.core.models import CalculationMode, PortfolioInput
from kr_dividend.exchange.currency import Currency
from kr_dividend.validation.validator import PortfolioValidator


@pytest.fixture
def validator():
    return PortfolioValidator(TaxConfig())


@pytest.fixture
def strict_validator():
    return PortfolioValidator(TaxConfig(ratio_mode=RatioMode.EXACT))


class TestRatioSum:

    def test_over_100_rejected(self, validator, holding_factory, unit_rates):
        portfolio = PortfolioInput(
            holdings=(
                holding_factory(allocation_ratio_percent=Decimal('60')),
                holding_factory(allocation_ratio_percent=Decimal('40.5')),
            ),
            exchange_rates=unit_rates,
            total_investment=Decimal('1000000'),
        )
        with pytest.raises(RatioSumError) as exc_info:
            validator.validate(portfolio)
        assert exc_info.value.total_ratio == Decimal('100.5')
        assert exc_info.value.rule == 'ratio_sum'

    def test_under_100_allowed_in_at_most_mode(self, validator, holding_factory, unit_rates):
        portfolio = PortfolioInput(
            holdings=(holding_factory(allocation_ratio_percent=Decimal('70')),),
            exchange_rates=unit_rates,
            total_investment=Decimal('1000000'),
        )
        validator.validate(portfolio)

    def test_exact_mode_requires_100(self, strict_validator, holding_factory, unit_rates):
        portfolio = PortfolioInput(
            holdings=(holding_factory(allocation_ratio_percent=Decimal('70')),),
            exchange_rates=unit_rates,
            total_investment=Decimal('1000000'),
        )
        with pytest.raises(RatioSumError):
            strict_validator.validate(portfolio)

    def test_exact_mode_tolerates_drift(self, strict_validator, holding_factory, unit_rates):
        portfolio = PortfolioInput(
            holdings=tuple(
                holding_factory(allocation_ratio_percent=Decimal('33.33')) for _ in range(3)
            ),
            exchange_rates=unit_rates,
            total_investment=Decimal('1000000'),
        )
        strict_validator.validate(portfolio)


class TestRequiredAmount:

    def test_forward_requires_total_investment(self, validator, usd_holding, unit_rates):
        portfolio = PortfolioInput(holdings=(usd_holding,), exchange_rates=unit_rates)
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(portfolio, CalculationMode.FORWARD)
        assert exc_info.value.rule == 'total_investment'

    def test_forward_rejects_zero(self, validator, usd_holding, unit_rates):
        portfolio = PortfolioInput(holdings=(usd_holding,), exchange_rates=unit_rates, total_investment=0)
        with pytest.raises(ValidationError):
            validator.validate(portfolio)

    def test_inverse_requires_target(self, validator, usd_holding, unit_rates):
        portfolio = PortfolioInput(
            holdings=(usd_holding,), exchange_rates=unit_rates, total_investment=Decimal('100')
        )
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(portfolio, CalculationMode.INVERSE)
        assert exc_info.value.rule == 'target_annual_dividend'

    def test_both_amounts_rejected(self, usd_holding):
        with pytest.raises(ValidationError):
            PortfolioInput(holdings=(usd_holding,), total_investment=100, target_annual_dividend=100)


class TestExchangeRates:

    def test_missing_currencies_named(self, validator, holding_factory, unit_rates):
        portfolio = PortfolioInput(
            holdings=(
                holding_factory(currency=Currency.USD, allocation_ratio_percent=Decimal('25')),
                holding_factory(currency=Currency.EUR, allocation_ratio_percent=Decimal('25')),
                holding_factory(currency=Currency.JPY, allocation_ratio_percent=Decimal('25')),
                holding_factory(currency=Currency.EUR, allocation_ratio_percent=Decimal('25')),
            ),
            exchange_rates=unit_rates,
            total_investment=Decimal('1000000'),
        )
        with pytest.raises(MissingExchangeRateError) as exc_info:
            validator.validate(portfolio)
        assert exc_info.value.currencies == ['EUR', 'JPY']
        assert 'EUR, JPY' in str(exc_info.value)

    def test_domestic_only_needs_no_rates(self, validator, krw_holding):
        portfolio = PortfolioInput(holdings=(krw_holding,), total_investment=Decimal('1000000'))
        validator.validate(portfolio)


class TestOrdering:

    def test_first_violation_reported(self, validator, holding_factory):
        portfolio = PortfolioInput(
            holdings=(
                holding_factory(currency=Currency.EUR, allocation_ratio_percent=Decimal('80')),
                holding_factory(currency=Currency.EUR, allocation_ratio_percent=Decimal('80')),
            ),
        )
        result = validator.check(portfolio)
        assert len(result.errors) == 3
        with pytest.raises(RatioSumError):
            validator.validate(portfolio)

    def test_messages(self, validator, usd_holding):
        result = validator.check(PortfolioInput(holdings=(usd_holding,), total_investment=1))
        assert not result.is_valid
        assert result.messages == ['USD 통화의 환율을 먼저 조회해주세요.']
