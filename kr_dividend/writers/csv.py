from pathlib import Path
from typing import List, Optional
import csv
import logging

from .base import BaseWriter, WriterError
from ..core.models import DividendResult
from ..tax.comprehensive import TaxBreakdown


class MonthlyScheduleWriter(BaseWriter):
    """월별 세후 배당 일정 CSV 출력

    열: month, 종목 티커별 금액..., total
    """

    def __init__(self, filename: Path, encoding: str = 'utf-8'):
        super().__init__(filename, encoding)
        self.logger = logging.getLogger(self.__class__.__name__)

    def write(self, result: DividendResult, tax: Optional[TaxBreakdown] = None) -> None:
        tickers = self._column_names(result)
        fieldnames = ['month'] + tickers + ['total']

        try:
            self._ensure_output_directory()
            with self.output_path.open('w', newline='', encoding=self.encoding) as f:
                writer = csv.DictWriter(f, fieldnames=fieldnames)
                writer.writeheader()
                for month in range(1, 13):
                    row = {'month': month, 'total': f"{result.merged_monthly_schedule[month - 1]:.2f}"}
                    for ticker, item in zip(tickers, result.holdings):
                        amount = item.monthly_schedule.get(month)
                        row[ticker] = f"{amount:.2f}" if amount is not None else ''
                    writer.writerow(row)
        except OSError as e:
            self.logger.error(f"CSV 출력 오류: {e}")
            raise WriterError(f"CSV 출력에 실패했습니다: {e}") from e

        self.logger.info(f"월별 일정 출력: {self.output_path}")

    @staticmethod
    def _column_names(result: DividendResult) -> List[str]:
        """종목별 열 이름 (티커가 겹치거나 비어 있으면 순번을 붙임)"""
        reserved = {'month', 'total'}
        names: List[str] = []
        for index, item in enumerate(result.holdings, start=1):
            name = item.holding.ticker or item.holding.name or f"holding_{index}"
            if name in reserved or name in names:
                name = f"{name}_{index}"
            names.append(name)
        return names
