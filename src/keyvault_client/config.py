"""
環境変数の型安全な取得・バリデーションヘルパー

クライアント生成時に不正値を検出し、実行時エラーを防止します。
"""

import os
import re
import logging
from typing import Optional, List

logger = logging.getLogger(__name__)

KEY_VAULT_URL_FMT = "https://%s.vault.azure.net"

# 3-24文字、英字で始まり、英数字とハイフンのみ
_VAULT_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9-]{1,22}[A-Za-z0-9]$")


class ConfigError(ValueError):
    """設定値が不正な場合の例外"""
    pass


def get_env_bool(name: str, default: bool = False) -> bool:
    """
    環境変数を真偽値として安全に取得する。

    Args:
        name: 環境変数名
        default: デフォルト値

    Returns:
        真偽値

    Raises:
        ConfigError: 値が不正な場合
    """
    value_str = os.environ.get(name)
    if value_str is None:
        return default

    if value_str.lower() in ("true", "1", "yes", "on"):
        return True
    elif value_str.lower() in ("false", "0", "no", "off"):
        return False
    else:
        raise ConfigError(
            f"環境変数 {name}='{value_str}' は真偽値ではありません "
            f"(true/false/1/0 を指定してください)"
        )


def get_env_str(
    name: str,
    default: Optional[str] = None,
    allowed_values: Optional[List[str]] = None,
) -> Optional[str]:
    """
    環境変数を文字列として安全に取得する。

    Args:
        name: 環境変数名
        default: デフォルト値
        allowed_values: 許容される値のリスト（Noneで制限なし）

    Returns:
        文字列値

    Raises:
        ConfigError: 値が不正な場合
    """
    value = os.environ.get(name, default)

    if value is not None and allowed_values and value not in allowed_values:
        raise ConfigError(
            f"環境変数 {name}='{value}' は許容されない値です。"
            f"許容値: {allowed_values}"
        )

    return value


def validate_vault_name(name: Optional[str]) -> str:
    """
    Key Vault名を検証する。

    Args:
        name: Key Vault名

    Returns:
        検証済みのKey Vault名

    Raises:
        ConfigError: 名前が空、または命名規則に違反している場合

    Examples:
        >>> validate_vault_name("my-vault")
        'my-vault'
    """
    if not name:
        raise ConfigError(
            "Key Vault名が指定されていません。"
            "引数 vault_name または環境変数 AZURE_KEY_VAULT_NAME を設定してください。"
        )

    if not _VAULT_NAME_PATTERN.match(name) or "--" in name:
        raise ConfigError(
            f"Key Vault名 '{name}' は不正です "
            f"(3-24文字、英字で始まり、英数字とハイフンのみ、連続ハイフン不可)"
        )

    return name


def vault_url(name: str) -> str:
    """
    Key Vault名からVaultのURLを生成する。

    Examples:
        >>> vault_url("my-vault")
        'https://my-vault.vault.azure.net'
    """
    return KEY_VAULT_URL_FMT % name
