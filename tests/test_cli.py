"""출력 및 명령행 진입점 테스트"""

import csv
import io
from decimal import Decimal
from pathlib import Path

import pytest

from kr_dividend.app.planner import DividendPlanner
from kr_dividend.core.models import PortfolioInput
from kr_dividend.main import main, parse_arguments
from kr_dividend.writers.console import ConsoleWriter
from kr_dividend.writers.csv import MonthlyScheduleWriter

SAMPLES_DIR = Path(__file__).parent.parent / 'samples'


@pytest.fixture
def planner():
    return DividendPlanner()


@pytest.fixture
def forward_result(planner, holding_factory, market_rates):
    portfolio = PortfolioInput(
        holdings=(
            holding_factory(ticker='SCHD', allocation_ratio_percent=Decimal('50')),
            holding_factory(
                ticker='005935', price=Decimal('56000'), currency='KRW',
                allocation_ratio_percent=Decimal('50'), dividend_payment_months=(4,),
            ),
        ),
        exchange_rates=market_rates,
        total_investment=Decimal('2100000'),
    )
    return planner.calculate_forward_dividends(portfolio)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text(f'logging:\n  log_dir: "{(tmp_path / "logs").as_posix()}"\n', encoding='utf-8')
    return path


class TestConsoleWriter:

    def test_render_separate_final(self, planner, forward_result):
        lines = ConsoleWriter().render(forward_result, planner.tax_breakdown(forward_result))
        assert "=== 종목별 배당 ===" in lines
        assert "=== 월별 세후 배당금 ===" in lines
        assert "분리과세로 종결됩니다 (추가 신고 불필요)." in lines
        assert "=== 필요 투자금 ===" not in lines
        assert len([line for line in lines if line.endswith('월: 0.00원')]) == 7
        assert lines[1].startswith("[SCHD] Test Holding: 주가 $150.00(미국 달러), 투자금 1,050,000원, 5주")
        assert lines[2].startswith("[005935] Test Holding: 주가 ₩56,000(원), ")

    def test_render_refund(self, planner):
        writer = ConsoleWriter()
        lines = writer._render_tax(planner.tax_engine.breakdown(40_000_000))
        assert lines[-1] == "환급 예상: 4,133,000원"

    def test_write_to_stream(self, forward_result):
        stream = io.StringIO()
        ConsoleWriter(stream).write(forward_result)
        assert "연 배당금 합계: 52,500원" in stream.getvalue()


class TestMonthlyScheduleWriter:

    def test_csv_columns(self, forward_result, tmp_path):
        path = tmp_path / 'out' / 'schedule.csv'
        MonthlyScheduleWriter(path).write(forward_result)

        with path.open(encoding='utf-8') as f:
            rows = list(csv.DictReader(f))
        assert list(rows[0]) == ['month', 'SCHD', '005935', 'total']
        assert len(rows) == 12
        # SCHD 26250 / 4 * 0.85, 005935 26250 * 0.846
        assert rows[2] == {'month': '3', 'SCHD': '5578.13', '005935': '', 'total': '5578.13'}
        assert rows[3] == {'month': '4', 'SCHD': '', '005935': '22207.50', 'total': '22207.50'}

    def test_duplicate_and_blank_tickers_keep_own_columns(self, planner, holding_factory, unit_rates, tmp_path):
        result = planner.calculate_forward_dividends(PortfolioInput(
            holdings=(
                holding_factory(ticker='SCHD', allocation_ratio_percent=Decimal('25'), dividend_payment_months=(1,)),
                holding_factory(ticker='SCHD', allocation_ratio_percent=Decimal('25'), dividend_payment_months=(2,)),
                holding_factory(ticker='', name='', allocation_ratio_percent=Decimal('25'), dividend_payment_months=(3,)),
                holding_factory(ticker='', name='', allocation_ratio_percent=Decimal('25'), dividend_payment_months=(4,)),
            ),
            exchange_rates=unit_rates,
            total_investment=Decimal('40000'),
        ))
        path = tmp_path / 'schedule.csv'
        MonthlyScheduleWriter(path).write(result)

        with path.open(encoding='utf-8') as f:
            rows = list(csv.DictReader(f))
        assert list(rows[0]) == ['month', 'SCHD', 'SCHD_2', 'holding_3', 'holding_4', 'total']
        # 각 종목 연 250 * 0.85 = 212.50
        assert rows[0]['SCHD'] == '212.50' and rows[0]['SCHD_2'] == ''
        assert rows[1]['SCHD_2'] == '212.50' and rows[1]['SCHD'] == ''
        assert rows[2]['holding_3'] == '212.50' and rows[2]['holding_4'] == ''
        assert rows[3]['holding_4'] == '212.50'


class TestMain:

    def test_parse_arguments(self):
        args = parse_arguments(['--portfolio', 'p.yaml', '--mode', 'inverse'])
        assert args.portfolio == Path('p.yaml')
        assert args.mode == 'inverse'
        assert args.config is None

    def test_forward_run(self, config_file, tmp_path, capsys):
        csv_path = tmp_path / 'schedule.csv'
        exit_code = main([
            '--config', str(config_file),
            '--portfolio', str(SAMPLES_DIR / 'portfolio.yaml'),
            '--csv', str(csv_path),
        ])
        assert exit_code == 0
        assert csv_path.exists()
        assert "=== 종합과세 ===" in capsys.readouterr().out

    def test_inverse_run(self, config_file, capsys):
        exit_code = main([
            '--config', str(config_file),
            '--portfolio', str(SAMPLES_DIR / 'target.yaml'),
        ])
        assert exit_code == 0
        assert "=== 필요 투자금 ===" in capsys.readouterr().out

    def test_validation_failure_exit_code(self, config_file, tmp_path, capsys):
        path = tmp_path / 'bad.yaml'
        path.write_text(
            'total_investment: 1000000\n'
            'holdings:\n'
            '  - {ticker: A, price: 10, currency: EUR, yield: 3, ratio: 100}\n',
            encoding='utf-8',
        )
        exit_code = main(['--config', str(config_file), '--portfolio', str(path)])
        assert exit_code == 1
        assert "EUR 통화의 환율을 먼저 조회해주세요." in capsys.readouterr().err

    @pytest.mark.parametrize('price', ['.nan', '.inf'])
    def test_non_finite_price_exit_code(self, config_file, tmp_path, capsys, price):
        path = tmp_path / 'nan.yaml'
        path.write_text(
            'total_investment: 1000000\n'
            'holdings:\n'
            f'  - {{ticker: A, price: {price}, currency: KRW, yield: 3, ratio: 100}}\n',
            encoding='utf-8',
        )
        exit_code = main(['--config', str(config_file), '--portfolio', str(path)])
        assert exit_code == 1
        assert "price 값은 유한한 숫자여야 합니다" in capsys.readouterr().err
