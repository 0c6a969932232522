"""
シークレットのドメインモデルとマッピング

Key Vault の応答（KeyVaultSecret / SecretProperties 相当）を
Secret 値に変換します。
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlparse


@dataclass(frozen=True)
class Secret:
    """
    Key Vault のシークレット

    Attributes:
        name: シークレット名（Vault内で一意）
        value: シークレット値（一覧取得時は常に空文字）
        expiration: 有効期限（Noneの場合は無期限・未設定）
    """
    name: str
    value: str = ""
    expiration: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        辞書形式に変換します。空の value と未設定の expiration は含めません。

        Examples:
            >>> Secret(name="db-password").to_dict()
            {'name': 'db-password'}
        """
        data: Dict[str, Any] = {"name": self.name}
        if self.value:
            data["value"] = self.value
        if self.expiration is not None:
            data["expiration"] = self.expiration.isoformat()
        return data


def secret_name_from_id(identifier: str) -> str:
    """
    シークレットIDの末尾セグメントを名前として取り出します。

    Args:
        identifier: シークレットID（例: https://my-vault.vault.azure.net/secrets/db-password）

    Returns:
        シークレット名

    Examples:
        >>> secret_name_from_id("https://my-vault.vault.azure.net/secrets/db-password")
        'db-password'
    """
    path = urlparse(identifier).path or identifier
    return path.rstrip("/").rsplit("/", 1)[-1]


def secret_from_bundle(name: str, bundle: Any) -> Secret:
    """
    get_secret の応答から Secret を作成します。

    名前は応答のIDではなく、要求した名前をそのまま使います。

    Args:
        name: 要求したシークレット名
        bundle: KeyVaultSecret 相当（value, properties.expires_on を持つ）

    Returns:
        Secret
    """
    return Secret(
        name=name,
        value=bundle.value,
        expiration=getattr(bundle.properties, "expires_on", None),
    )


def secret_from_properties(properties: Any) -> Secret:
    # 一覧の応答はメタデータのみ。値は持たない
    return Secret(
        name=secret_name_from_id(properties.id),
        expiration=getattr(properties, "expires_on", None),
    )
