from decimal import Decimal
from typing import List, Sequence, Tuple
import logging

from ...core.error import DegenerateInputError
from ...core.models import Holding

HUNDRED = Decimal('100')


class InvestmentSizer:
    """
    목표 연 배당금에서 필요 투자금을 역산

    가중 배당수익률이 0이면 유한한 답이 없으므로 DegenerateInputError를 발생시킵니다.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def weighted_yield(holdings: Sequence[Holding]) -> Decimal:
        """비율 가중 배당수익률 (소수)"""
        return sum(
            ((h.annual_yield_percent / HUNDRED) * (h.allocation_ratio_percent / HUNDRED)
             for h in holdings),
            Decimal('0')
        )

    def required_investment(self, holdings: Sequence[Holding], target_annual_dividend: Decimal) -> Decimal:
        """
        필요 투자금 계산

        Args:
            holdings: 보유 종목
            target_annual_dividend: 목표 연 배당금 (세전, 원화)

        Returns:
            필요 총 투자금

        Raises:
            DegenerateInputError: 가중 배당수익률이 0 이하인 경우
        """
        weighted = self.weighted_yield(holdings)
        if weighted <= 0:
            self.logger.error("가중 배당수익률이 0이어서 필요 투자금을 계산할 수 없습니다")
            raise DegenerateInputError(
                "배당수익률과 비율이 모두 양수인 종목이 최소 하나 필요합니다.",
                details={"weighted_yield": weighted},
            )

        required = target_annual_dividend / weighted
        self.logger.debug(f"필요 투자금: 목표={target_annual_dividend} 가중수익률={weighted} -> {required}")
        return required

    @staticmethod
    def allocate(holdings: Sequence[Holding], total_investment: Decimal) -> List[Tuple[Holding, Decimal]]:
        """총 투자금을 종목 비율대로 배분"""
        return [
            (holding, total_investment * holding.allocation_ratio_percent / HUNDRED)
            for holding in holdings
        ]
