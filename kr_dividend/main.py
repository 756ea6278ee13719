import sys
import logging
import logging.config
from pathlib import Path
import argparse
from datetime import datetime
from typing import List, NoReturn, Optional

from .app.config import ConfigManager
from .app.loader import PortfolioLoader
from .app.planner import DividendPlanner
from .core.error import DividendPlannerError
from .core.models import CalculationMode
from .writers.console import ConsoleWriter
from .writers.csv import MonthlyScheduleWriter


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    명령행 인자 해석

    Returns:
        argparse.Namespace: 해석된 인자
    """
    parser = argparse.ArgumentParser(
        description="배당금 및 배당소득 종합과세 계산기",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="설정 파일 경로 (YAML)",
    )
    parser.add_argument(
        "--portfolio",
        type=Path,
        required=True,
        help="포트폴리오 파일 경로 (YAML 또는 JSON)",
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in CalculationMode],
        default=None,
        help="계산 방향 (생략 시 파일 내용으로 판단)",
    )
    parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="월별 세후 배당 일정 CSV 출력 경로",
    )
    return parser.parse_args(argv)


def handle_keyboard_interrupt() -> NoReturn:
    logging.warning("사용자에 의해 처리가 중단되었습니다")
    sys.exit(130)


def run(args: argparse.Namespace) -> int:
    """
    계산 실행

    Returns:
        int: 종료 코드
    """
    config = ConfigManager(args.config)
    logging.config.dictConfig(config.create_logging_config())
    logger = logging.getLogger(__name__)

    loader = PortfolioLoader(default_rates=config.default_exchange_rates)
    portfolio = loader.load(args.portfolio)
    planner = DividendPlanner(config.tax_config)

    mode = CalculationMode(args.mode) if args.mode else portfolio.mode
    logger.info(f"계산 시작: {args.portfolio} ({mode.value})")

    if mode is CalculationMode.INVERSE:
        result = planner.calculate_required_investment(portfolio)
    else:
        result = planner.calculate_forward_dividends(portfolio)

    ConsoleWriter().write(result, planner.tax_breakdown(result))

    if args.csv:
        MonthlyScheduleWriter(args.csv).write(result)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    메인 진입점

    Returns:
        int: 종료 코드
    """
    start_time = datetime.now()
    args = parse_arguments(argv)

    try:
        exit_code = run(args)
        logging.getLogger(__name__).info(f"처리 완료 (소요 시간: {datetime.now() - start_time})")
        return exit_code

    except DividendPlannerError as e:
        logging.getLogger(__name__).error(f"계산 실패: {e}")
        print(f"오류: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return handle_keyboard_interrupt()


if __name__ == "__main__":
    sys.exit(main())
