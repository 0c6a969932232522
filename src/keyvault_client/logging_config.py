# -*- coding: utf-8 -*-
"""
=============================================================================
ログ設定モジュール (logging_config.py)
=============================================================================

keyvault_client を組み込むアプリケーション向けのログ設定を提供します。
ライブラリ内部の各モジュールは logging.getLogger(__name__) を使うだけで、
ハンドラーの設定はここで一度だけ行います。

【使い方】
    from keyvault_client.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("処理を開始します")

【環境変数】
- LOG_LEVEL: ログレベル（DEBUG/INFO/WARNING/ERROR/CRITICAL）
- LOG_DIR: ログファイルの出力ディレクトリ
- LOG_TO_FILE: ファイル出力の有効/無効（true/false、デフォルト: false）
- LOG_FORMAT: ログフォーマット（standard/json）

シークレット値はログに出力しません。
=============================================================================
"""

import logging
import logging.handlers
import sys
import json
import traceback
from datetime import datetime
from typing import Optional, Dict, Any
from pathlib import Path

from .config import get_env_bool, get_env_str


# =============================================================================
# 定数定義
# =============================================================================

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_DIR = "logs"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5

DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# LogRecord が標準で持つ属性（extra の抽出に使用）
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


# =============================================================================
# カスタムフォーマッター
# =============================================================================

class ColoredFormatter(logging.Formatter):
    """
    コンソール出力用のカラーフォーマッター

    ログレベルに応じて色を変えます。
    """

    COLORS = {
        'DEBUG': '\033[36m',      # シアン
        'INFO': '\033[32m',       # 緑
        'WARNING': '\033[33m',    # 黄色
        'ERROR': '\033[31m',      # 赤
        'CRITICAL': '\033[41m',   # 赤背景
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        color = self.COLORS.get(record.levelname, '')
        if color:
            return f"{color}{formatted}{self.RESET}"
        return formatted


class JsonFormatter(logging.Formatter):
    """
    JSON形式のログフォーマッター

    【出力例】
    {
        "timestamp": "2026-01-15 10:30:45",
        "level": "WARNING",
        "logger": "keyvault_client.secrets.operations",
        "message": "Key Vault操作に失敗: get [NOT_FOUND] ...",
        "function": "_log_failure",
        "line": 24,
        "extra": {"error_code": "NOT_FOUND", "status": 404, "trace_id": "..."}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        ログレコードをJSON形式にフォーマットする

        Args:
            record: ログレコード

        Returns:
            JSON形式のログ文字列
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).strftime(
                DATETIME_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info)
            }

        # extra パラメータで渡された情報
        extra_fields = {
            key: value for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith('_')
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        return json.dumps(log_data, ensure_ascii=False, default=str)


# =============================================================================
# ログ設定クラス
# =============================================================================

class LoggingConfig:
    """
    ログ設定を管理するクラス（シングルトン）

    ログ設定は一度だけ行えばよいため、インスタンスは1つだけ生成されます。
    """

    _instance: Optional['LoggingConfig'] = None
    _initialized: bool = False

    def __new__(cls) -> 'LoggingConfig':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if LoggingConfig._initialized:
            return

        self.log_level = get_env_str("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        self.log_dir = get_env_str("LOG_DIR", DEFAULT_LOG_DIR)
        self.log_format = get_env_str("LOG_FORMAT", "standard").lower()
        self.log_to_file = get_env_bool("LOG_TO_FILE", default=False)

        if self.log_to_file:
            Path(self.log_dir).mkdir(parents=True, exist_ok=True)

        self._configure_root_logger()

        LoggingConfig._initialized = True

    @classmethod
    def reset(cls) -> None:
        """シングルトンを破棄します（主にテスト用）。"""
        cls._instance = None
        cls._initialized = False

    def _configure_root_logger(self) -> None:
        root_logger = logging.getLogger()

        # 既存のハンドラーをクリア（重複防止）
        root_logger.handlers.clear()

        root_logger.setLevel(getattr(logging, self.log_level, logging.INFO))
        root_logger.addHandler(self._create_console_handler())

        if self.log_to_file:
            root_logger.addHandler(self._create_file_handler())

    def _create_console_handler(self) -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(logging.DEBUG)

        if self.log_format == "json":
            formatter = JsonFormatter()
        else:
            formatter = ColoredFormatter(
                DETAILED_FORMAT,
                datefmt=DATETIME_FORMAT
            )

        handler.setFormatter(formatter)
        return handler

    def _create_file_handler(self) -> logging.Handler:
        """
        ファイル出力用ハンドラーを作成（ローテーション対応）

        Returns:
            設定済みのRotatingFileHandler
        """
        log_file = Path(self.log_dir) / "keyvault_client.log"

        handler = logging.handlers.RotatingFileHandler(
            filename=str(log_file),
            maxBytes=DEFAULT_MAX_BYTES,
            backupCount=DEFAULT_BACKUP_COUNT,
            encoding='utf-8'
        )
        handler.setLevel(logging.DEBUG)

        if self.log_format == "json":
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(logging.Formatter(
                DETAILED_FORMAT,
                datefmt=DATETIME_FORMAT
            ))

        return handler


# =============================================================================
# 公開関数
# =============================================================================

def setup_logging() -> None:
    """
    ログ設定を初期化する

    アプリケーションの起動時に一度だけ呼び出してください。
    """
    LoggingConfig()


def get_logger(name: str) -> logging.Logger:
    """
    名前付きロガーを取得する

    Args:
        name: ロガー名（通常は __name__ を使用）

    Returns:
        設定済みのロガーインスタンス
    """
    setup_logging()
    return logging.getLogger(name)
