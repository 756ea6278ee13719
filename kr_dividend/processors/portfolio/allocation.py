from dataclasses import replace
from decimal import Decimal
from typing import List, Sequence

from ...core.models import Holding


def redistribute_equally(holdings: Sequence[Holding]) -> List[Holding]:
    """모든 종목에 100 / n 비율을 균등 배정한 새 종목 목록"""
    if not holdings:
        return []
    equal_ratio = Decimal('100') / len(holdings)
    return [replace(holding, allocation_ratio_percent=equal_ratio) for holding in holdings]
