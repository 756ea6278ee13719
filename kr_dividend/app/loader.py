import json
import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from ..config.settings import FILE_ENCODING
from ..core.error import PortfolioLoadError, ValidationError
from ..core.models import Holding, PortfolioInput, to_decimal
from ..exchange.currency import Currency
from ..exchange.rate_table import ExchangeRateTable
from ..market.quote import DividendEvent, currency_for_exchange, derive_dividend_profile, trailing_year
from ..processors.portfolio.allocation import redistribute_equally


class PortfolioLoader:
    """
    포트폴리오 정의 파일 로더

    YAML(.yaml/.yml) 또는 JSON(.json) 파일에서 계산 입력을 만듭니다.
    종목에 배당 이력이 있으면 배당수익률과 지급월을 이력에서 유도합니다.
    """

    def __init__(self, default_rates: Optional[Mapping] = None, as_of: Optional[date] = None) -> None:
        """
        Args:
            default_rates: 파일에 환율이 없을 때 사용할 환율
            as_of: 배당 이력 기준일 (기본값 오늘)
        """
        self.default_rates = dict(default_rates or {})
        self.as_of = as_of
        self.logger = logging.getLogger(self.__class__.__name__)

    def load(self, path: Union[str, Path]) -> PortfolioInput:
        """
        파일에서 계산 입력 생성

        Raises:
            PortfolioLoadError: 파일을 읽거나 해석할 수 없는 경우
            ValidationError: 종목 값이 규칙을 위반한 경우
        """
        path = Path(path)
        data = self._read(path)
        self.logger.debug(f"포트폴리오 파일 로드: {path}")
        try:
            return self.from_dict(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise PortfolioLoadError(f"포트폴리오 형식이 올바르지 않습니다: {e}", str(path)) from e

    def _read(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise PortfolioLoadError("포트폴리오 파일을 찾을 수 없습니다", str(path))

        try:
            with path.open('r', encoding=FILE_ENCODING) as f:
                if path.suffix.lower() == '.json':
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            self.logger.error(f"포트폴리오 파일 해석 오류: {e}")
            raise PortfolioLoadError(f"파일 해석에 실패했습니다: {e}", str(path)) from e

        if not isinstance(data, dict):
            raise PortfolioLoadError("포트폴리오 파일의 최상위는 매핑이어야 합니다", str(path))
        return data

    def from_dict(self, data: Mapping[str, Any]) -> PortfolioInput:
        """매핑에서 계산 입력 생성"""
        as_of = self._parse_date(data['as_of']) if data.get('as_of') else self.as_of
        holdings = [self._parse_holding(entry, as_of) for entry in data.get('holdings') or []]
        if data.get('equal_ratio'):
            holdings = redistribute_equally(holdings)

        return PortfolioInput(
            holdings=tuple(holdings),
            exchange_rates=self._parse_rates(data),
            total_investment=data.get('total_investment'),
            target_annual_dividend=data.get('target_annual_dividend'),
        )

    def _parse_rates(self, data: Mapping[str, Any]) -> ExchangeRateTable:
        if data.get('quoted_rates'):
            return ExchangeRateTable.from_home_quotes(data['quoted_rates'])
        rates = dict(self.default_rates)
        rates.update(data.get('exchange_rates') or {})
        return ExchangeRateTable(rates)

    def _parse_holding(self, entry: Mapping[str, Any], as_of: Optional[date] = None) -> Holding:
        price = to_decimal(entry['price'], 'price')
        currency = self._parse_currency(entry)
        annual_yield = entry.get('yield', 0)
        months: List[int] = list(entry.get('months') or [])

        history = entry.get('dividend_history')
        if history:
            events = [
                DividendEvent(paid_on=self._parse_date(item['date']), amount=Decimal(str(item['amount'])))
                for item in history
            ]
            annual_yield, derived_months = derive_dividend_profile(
                price, trailing_year(events, as_of or date.today())
            )
            months = list(derived_months)

        return Holding(
            name=str(entry.get('name', '')),
            ticker=str(entry.get('ticker', '')),
            price=price,
            currency=currency,
            annual_yield_percent=annual_yield,
            allocation_ratio_percent=entry.get('ratio', 0),
            dividend_payment_months=tuple(months),
            purchase_date=self._parse_date(entry['purchase_date']) if entry.get('purchase_date') else None,
        )

    @staticmethod
    def _parse_currency(entry: Mapping[str, Any]) -> Currency:
        if entry.get('currency'):
            currency = Currency.from_str(str(entry['currency']))
            if currency is None:
                raise ValidationError(f"지원하지 않는 통화입니다: {entry['currency']}", rule="currency")
            return currency
        if entry.get('exchange'):
            return currency_for_exchange(str(entry['exchange']))
        return Currency.KRW

    @staticmethod
    def _parse_date(value: Any) -> date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return datetime.strptime(str(value).strip(), '%Y-%m-%d').date()
        except ValueError as e:
            raise ValidationError(f"날짜 형식이 올바르지 않습니다: {value}", rule="date") from e
