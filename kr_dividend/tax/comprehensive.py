"""
배당소득 종합과세 계산 모듈

연간 배당소득이 분리과세 기준금액을 넘는지 판정하고, 넘는 경우
이미 원천징수된 세액 대비 추가 납부(또는 환급) 세액을 계산합니다.

국내 배당만 분리과세 구간을 채우고 해외 배당은 전액 종합과세 대상입니다.
Gross-up과 배당세액공제는 국내 초과분에만 적용됩니다.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR
from enum import Enum
from typing import Optional, Union
import logging

from ..config.tax_config import TaxBracket, TaxConfig
from ..core.models import to_decimal

Number = Union[Decimal, int, float, str]


def round_half_toward_positive(value: Decimal) -> Decimal:
    """원 단위 반올림 (.5는 양의 방향으로: -3090.5 -> -3090)"""
    return (value + Decimal('0.5')).to_integral_value(rounding=ROUND_FLOOR)


class TaxRegime(Enum):
    SEPARATE_FINAL = 'separate_final'      # 분리과세 종결
    COMPREHENSIVE = 'comprehensive'        # 종합과세 계산


@dataclass(frozen=True)
class TaxBreakdown:
    """종합과세 계산의 중간값 일체"""
    regime: TaxRegime
    annual_dividend_income: Decimal
    foreign_dividend_income: Decimal
    average_foreign_tax_rate: Decimal
    domestic_dividend_income: Decimal = Decimal('0')
    domestic_withheld_tax: Decimal = Decimal('0')
    foreign_withheld_tax: Decimal = Decimal('0')
    separate_tax: Decimal = Decimal('0')
    domestic_excess: Decimal = Decimal('0')
    foreign_excess: Decimal = Decimal('0')
    gross_up_domestic: Decimal = Decimal('0')
    comprehensive_tax_base: Decimal = Decimal('0')
    bracket: Optional[TaxBracket] = None
    income_tax: Decimal = Decimal('0')
    local_surtax: Decimal = Decimal('0')
    dividend_tax_credit: Decimal = Decimal('0')
    total_tax: Decimal = Decimal('0')
    foreign_tax_credit_limit: Decimal = Decimal('0')
    foreign_tax_credit: Decimal = Decimal('0')
    additional_tax: Optional[Decimal] = None

    @property
    def is_comprehensive(self) -> bool:
        return self.regime is TaxRegime.COMPREHENSIVE


class ComprehensiveTaxEngine:
    """종합소득세 추가 납부세액 계산기

    입력만으로 매번 다시 계산되는 순수 판정 함수이며 상태를 갖지 않습니다.

    Attributes:
        config: 세율 설정
        logger: 로거 인스턴스
    """

    def __init__(self, config: Optional[TaxConfig] = None) -> None:
        self.config = config or TaxConfig()
        self.logger = logging.getLogger(self.__class__.__name__)

    def calculate(
        self,
        annual_dividend_income: Number,
        foreign_dividend_income: Number = 0,
        average_foreign_tax_rate: Optional[Number] = None,
    ) -> Optional[Decimal]:
        """
        추가 납부세액 계산

        Args:
            annual_dividend_income: 연간 세전 배당소득 (국내 + 해외)
            foreign_dividend_income: 그 중 해외 배당소득
            average_foreign_tax_rate: 해외 배당 가중평균 원천징수세율

        Returns:
            양수는 추가 납부, 0 이하는 환급. 분리과세로 종결되면 None
        """
        return self.breakdown(
            annual_dividend_income, foreign_dividend_income, average_foreign_tax_rate
        ).additional_tax

    def breakdown(
        self,
        annual_dividend_income: Number,
        foreign_dividend_income: Number = 0,
        average_foreign_tax_rate: Optional[Number] = None,
    ) -> TaxBreakdown:
        """
        종합과세 계산 과정 전체를 반환

        Args:
            annual_dividend_income: 연간 세전 배당소득 (국내 + 해외)
            foreign_dividend_income: 그 중 해외 배당소득
            average_foreign_tax_rate: 해외 배당 가중평균 원천징수세율

        Returns:
            계산 중간값과 결과
        """
        cfg = self.config
        total = to_decimal(annual_dividend_income, 'annual_dividend_income')
        foreign = to_decimal(foreign_dividend_income, 'foreign_dividend_income')
        foreign_rate = (
            cfg.default_foreign_tax_rate
            if average_foreign_tax_rate is None
            else to_decimal(average_foreign_tax_rate, 'average_foreign_tax_rate')
        )

        if total <= cfg.separate_tax_threshold:
            self.logger.debug(f"분리과세 종결: 배당소득={total}")
            return TaxBreakdown(
                regime=TaxRegime.SEPARATE_FINAL,
                annual_dividend_income=total,
                foreign_dividend_income=foreign,
                average_foreign_tax_rate=foreign_rate,
            )

        domestic = total - foreign

        # 이미 원천징수된 세액
        domestic_withheld = domestic * cfg.domestic_withholding_rate
        foreign_withheld = foreign * foreign_rate

        # 분리과세분: 국내 배당 중 기준금액까지
        separate_tax = min(domestic, cfg.separate_tax_threshold) * cfg.domestic_withholding_rate

        # 종합과세분: 국내 초과분 + 해외 전액
        domestic_excess = max(Decimal('0'), domestic - cfg.separate_tax_threshold)
        foreign_excess = foreign

        gross_up = domestic_excess * cfg.gross_up_factor
        tax_base = gross_up + foreign_excess

        bracket = cfg.bracket_for(tax_base)
        income_tax = tax_base * bracket.rate - bracket.cumulative_deduction
        local_surtax = income_tax * cfg.local_surtax_rate
        dividend_credit = gross_up * cfg.dividend_tax_credit_rate

        total_tax = separate_tax + income_tax + local_surtax - dividend_credit

        # 외국납부세액공제 한도 = 해외소득 비중 * 산출세액
        credit_limit = (foreign / total) * total_tax
        foreign_credit = min(foreign_withheld, credit_limit)

        additional = round_half_toward_positive(total_tax - domestic_withheld - foreign_credit)

        self.logger.info(
            f"종합과세 계산: 배당소득={total} 해외={foreign} 과세표준={tax_base} "
            f"세율={bracket.rate} 추가납부={additional}"
        )

        return TaxBreakdown(
            regime=TaxRegime.COMPREHENSIVE,
            annual_dividend_income=total,
            foreign_dividend_income=foreign,
            average_foreign_tax_rate=foreign_rate,
            domestic_dividend_income=domestic,
            domestic_withheld_tax=domestic_withheld,
            foreign_withheld_tax=foreign_withheld,
            separate_tax=separate_tax,
            domestic_excess=domestic_excess,
            foreign_excess=foreign_excess,
            gross_up_domestic=gross_up,
            comprehensive_tax_base=tax_base,
            bracket=bracket,
            income_tax=income_tax,
            local_surtax=local_surtax,
            dividend_tax_credit=dividend_credit,
            total_tax=total_tax,
            foreign_tax_credit_limit=credit_limit,
            foreign_tax_credit=foreign_credit,
            additional_tax=additional,
        )
