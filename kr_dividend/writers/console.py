from decimal import Decimal
from typing import List, Optional, TextIO
import sys

from .base import BaseWriter
from ..core.models import DividendResult, InvestmentResult
from ..tax.comprehensive import TaxBreakdown


class ConsoleWriter(BaseWriter):
    """콘솔 출력 클래스"""

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__()
        self.stream = stream or sys.stdout

    def write(self, result: DividendResult, tax: Optional[TaxBreakdown] = None) -> None:
        """종목별 배당, 월별 일정, 종합과세 결과 출력"""
        for line in self.render(result, tax):
            print(line, file=self.stream)

    def render(self, result: DividendResult, tax: Optional[TaxBreakdown] = None) -> List[str]:
        lines: List[str] = []
        if isinstance(result, InvestmentResult):
            lines.append("=== 필요 투자금 ===")
            lines.append(f"목표 연 배당금: {self._format_won(result.target_annual_dividend)}원")
            lines.append(f"필요 투자금: {self._format_won(result.required_investment)}원")
            lines.append("")

        lines.append("=== 종목별 배당 ===")
        for item in result.holdings:
            currency = item.holding.currency
            lines.append(
                f"{item.holding.label}: 주가 {currency.format_amount(item.holding.price)}"
                f"({currency.display_name}), 투자금 {self._format_won(item.investment_amount)}원, "
                f"{item.shares:,}주, 연 배당금 {self._format_won(item.annual_dividend)}원 "
                f"(원천징수 {item.withholding_rate * 100:.3f}%)"
            )

        lines.append("")
        lines.append(f"연 배당금 합계: {self._format_won(result.total_annual_dividend)}원")
        lines.append(f"해외 배당금: {self._format_won(result.total_foreign_annual_dividend)}원")

        lines.append("")
        lines.append("=== 월별 세후 배당금 ===")
        for index, amount in enumerate(result.merged_monthly_schedule):
            lines.append(f"{index + 1:>2}월: {self._format_won(amount, 2)}원")

        if tax is not None:
            lines.append("")
            lines.extend(self._render_tax(tax))
        return lines

    def _render_tax(self, tax: TaxBreakdown) -> List[str]:
        lines = ["=== 종합과세 ==="]
        if not tax.is_comprehensive:
            lines.append("분리과세로 종결됩니다 (추가 신고 불필요).")
            return lines

        lines.append(f"과세표준: {self._format_won(tax.comprehensive_tax_base)}원 (세율 {tax.bracket.rate * 100:.0f}%)")
        lines.append(f"배당세액공제: {self._format_won(tax.dividend_tax_credit)}원")
        lines.append(f"외국납부세액공제: {self._format_won(tax.foreign_tax_credit)}원")

        amount = tax.additional_tax
        if amount > 0:
            lines.append(f"추가 납부 예상: {self._format_won(amount)}원")
        elif amount == 0:
            lines.append("추가 납부 또는 환급 없음")
        else:
            lines.append(f"환급 예상: {self._format_won(-amount)}원")
        return lines
