from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Sequence
import logging

from ...config.tax_config import TaxConfig
from ...core.models import DividendResult, HoldingDividend

CENT = Decimal('0.01')


class PortfolioAggregator:
    """
    종목별 배당 결과를 포트폴리오 단위로 집계

    종목 순서는 호출자가 넘긴 순서를 그대로 따릅니다.
    """

    def __init__(self, tax_config: Optional[TaxConfig] = None) -> None:
        self.tax_config = tax_config or TaxConfig()
        self.logger = logging.getLogger(self.__class__.__name__)

    def aggregate(self, holdings: Sequence[HoldingDividend]) -> DividendResult:
        """
        연 배당금 합계, 해외 배당금 합계, 가중평균 해외 세율, 월별 합산 일정을 계산

        Args:
            holdings: 종목별 배당 계산 결과

        Returns:
            포트폴리오 배당 계산 결과
        """
        items = list(holdings)
        total = sum((item.annual_dividend for item in items), Decimal('0'))
        foreign_total = self.total_foreign_dividend(items)

        result = DividendResult(
            holdings=items,
            total_annual_dividend=total,
            total_foreign_annual_dividend=foreign_total,
            weighted_average_foreign_tax_rate=self.weighted_foreign_tax_rate(items),
            merged_monthly_schedule=self.merge_monthly_schedules(
                item.monthly_schedule for item in items
            ),
        )
        self.logger.debug(f"집계 완료: 연 배당금={total} 해외={foreign_total}")
        return result

    @staticmethod
    def total_foreign_dividend(items: Iterable[HoldingDividend]) -> Decimal:
        return sum(
            (item.annual_dividend for item in items if item.holding.is_foreign),
            Decimal('0')
        )

    def weighted_foreign_tax_rate(self, items: Sequence[HoldingDividend]) -> Decimal:
        """
        해외 배당금 가중평균 원천징수세율

        해외 배당이 없으면 기본 해외 세율을 반환합니다.
        """
        foreign = [item for item in items if item.holding.is_foreign]
        foreign_total = sum((item.annual_dividend for item in foreign), Decimal('0'))
        if foreign_total <= 0:
            return self.tax_config.default_foreign_tax_rate

        weighted = sum(
            (item.annual_dividend * self.tax_config.foreign_tax_rate(item.holding.currency)
             for item in foreign),
            Decimal('0')
        )
        return weighted / foreign_total

    @staticmethod
    def merge_monthly_schedules(schedules: Iterable[Dict[int, Decimal]]) -> List[Decimal]:
        """
        종목별 월 일정을 12칸 배열로 합산 (인덱스 0 = 1월)

        모든 합산이 끝난 뒤 각 칸을 소수 둘째 자리로 반올림합니다.
        """
        slots = [Decimal('0')] * 12
        for schedule in schedules:
            for month, amount in schedule.items():
                slots[month - 1] += amount
        return [slot.quantize(CENT, rounding=ROUND_HALF_UP) for slot in slots]
