from pathlib import Path

# 베이스 경로
BASE_DIR = Path(__file__).parent.parent.parent
OUTPUT_DIR = BASE_DIR / 'output'
LOG_DIR = OUTPUT_DIR / 'logs'

# 파일 설정
FILE_ENCODING = 'utf-8'

# 환경 변수 접두사
ENV_PREFIX = 'DIVIDEND_'

# 로깅 기본값
DEFAULT_LOGGING = {
    'console_level': 'WARNING',
    'file_level': 'DEBUG',
    'log_dir': str(LOG_DIR),
    'log_file': 'dividend.log',
    'log_format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
}
