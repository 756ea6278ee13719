from abc import ABC, abstractmethod
from decimal import Decimal
from pathlib import Path
from typing import Optional

from ..core.error import DividendPlannerError
from ..core.models import DividendResult
from ..tax.comprehensive import TaxBreakdown


class WriterError(DividendPlannerError):
    """출력 처리 예외"""
    pass


class BaseWriter(ABC):
    """기본 출력 클래스"""

    def __init__(self, output_path: Optional[Path] = None, encoding: str = 'utf-8'):
        self.output_path = output_path
        self.encoding = encoding

    @abstractmethod
    def write(self, result: DividendResult, tax: Optional[TaxBreakdown] = None) -> None:
        """계산 결과 출력"""
        pass

    def _ensure_output_directory(self):
        """출력 디렉터리 확인 및 생성"""
        if self.output_path:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _format_won(amount: Decimal, decimal_places: int = 0) -> str:
        return f"{amount:,.{decimal_places}f}"
