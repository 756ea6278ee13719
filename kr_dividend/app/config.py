import os
from pathlib import Path
from typing import Dict, Any, Optional, Union
import yaml
import logging
from dataclasses import dataclass, field
from functools import cached_property

from ..config.settings import DEFAULT_LOGGING, ENV_PREFIX, FILE_ENCODING
from ..config.tax_config import RatioMode, TaxConfig
from ..core.error import ConfigurationError


@dataclass
class ConfigOptions:
    """설정 옵션의 기본값"""
    debug: bool = False

    # 세율 설정 (YAML 원본 매핑)
    tax: Dict[str, Any] = field(default_factory=dict)

    # 기본 환율 (포트폴리오 파일에 환율이 없을 때 사용)
    exchange_rates: Dict[str, Any] = field(default_factory=dict)

    # 로깅 설정
    logging_config: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_LOGGING))


class ConfigManager:
    """설정 관리 클래스

    YAML 파일을 기본값에 병합한 뒤 환경 변수로 덮어씁니다.
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        env_prefix: str = ENV_PREFIX
    ):
        """
        설정 매니저 초기화

        Args:
            config_path: 설정 파일 경로
            env_prefix: 환경 변수 접두사

        Raises:
            ConfigurationError: 설정 파일 또는 값이 올바르지 않은 경우
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.env_prefix = env_prefix
        self._config_options = ConfigOptions()

        if config_path:
            self._load_config_file(config_path)

        self._override_from_env()

    def _load_config_file(self, config_path: Union[str, Path]) -> None:
        """
        설정 파일 읽기

        Args:
            config_path: 설정 파일 경로
        """
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"설정 파일을 찾을 수 없습니다: {path}")

        try:
            with path.open('r', encoding=FILE_ENCODING) as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            self.logger.error(f"설정 파일 해석 중 오류: {e}")
            raise ConfigurationError(f"설정 파일 해석에 실패했습니다: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(f"설정 파일의 최상위는 매핑이어야 합니다: {path}")

        self._merge_config(file_config)

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """
        파일 설정을 기본 설정에 병합

        Args:
            file_config: 파일에서 읽은 설정
        """
        if 'debug' in file_config:
            self._config_options.debug = bool(file_config['debug'])

        if 'tax' in file_config:
            self._config_options.tax = dict(file_config['tax'] or {})

        if 'exchange_rates' in file_config:
            self._config_options.exchange_rates = dict(file_config['exchange_rates'] or {})

        if 'logging' in file_config:
            logging_config = file_config['logging'] or {}
            self._config_options.logging_config.update({
                k: v for k, v in logging_config.items()
                if k in self._config_options.logging_config
            })

    def _override_from_env(self) -> None:
        """
        환경 변수로 설정 덮어쓰기
        """
        debug_env = os.getenv(f'{self.env_prefix}DEBUG')
        if debug_env is not None:
            self._config_options.debug = debug_env.lower() in ['true', '1', 'yes']

        ratio_mode_env = os.getenv(f'{self.env_prefix}RATIO_MODE')
        if ratio_mode_env:
            self._config_options.tax['ratio_mode'] = ratio_mode_env

        log_level_env = os.getenv(f'{self.env_prefix}LOG_LEVEL')
        if log_level_env:
            self._config_options.logging_config['console_level'] = log_level_env.upper()

    @property
    def debug(self) -> bool:
        """디버그 모드"""
        return self._config_options.debug

    @property
    def default_exchange_rates(self) -> Dict[str, Any]:
        return dict(self._config_options.exchange_rates)

    @cached_property
    def tax_config(self) -> TaxConfig:
        """세율 설정"""
        return TaxConfig.from_dict(self._config_options.tax)

    @property
    def ratio_mode(self) -> RatioMode:
        return self.tax_config.ratio_mode

    @cached_property
    def logging_config(self) -> Dict[str, str]:
        """로깅 설정"""
        return dict(self._config_options.logging_config)

    def create_logging_config(self) -> Dict[str, Any]:
        """
        logging.config.dictConfig용 설정 생성

        Returns:
            로깅 설정 딕셔너리
        """
        log_dir = Path(self.logging_config['log_dir'])
        log_dir.mkdir(parents=True, exist_ok=True)
        console_level = 'DEBUG' if self.debug else self.logging_config['console_level']

        return {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'detailed': {
                    'format': self.logging_config['log_format']
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'detailed',
                    'level': console_level
                },
                'file': {
                    'class': 'logging.FileHandler',
                    'filename': str(log_dir / self.logging_config['log_file']),
                    'formatter': 'detailed',
                    'level': self.logging_config['file_level'],
                    'encoding': FILE_ENCODING
                }
            },
            'root': {
                'handlers': ['console', 'file'],
                'level': 'DEBUG'
            }
        }
