"""
シークレットバックエンドの抽象インターフェース

操作ロジックを具体的なSDKから切り離すための境界です。
本番では AzureSecretsBackend（azure-keyvault-secrets の SecretClient）を使い、
テストでは任意の実装に差し替えられます。
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Iterable, Iterator, Optional


class SecretsBackend(ABC):
    """
    シークレットバックエンドの抽象基底クラス

    各メソッドは失敗時にバックエンド固有の例外を送出します。
    例外の正規化は呼び出し側（KeyVaultSecretsManager）が行います。
    """

    @abstractmethod
    def set_secret(
        self,
        name: str,
        value: str,
        expires_on: Optional[datetime] = None
    ) -> Any:
        """
        シークレットを設定します。

        Args:
            name: シークレット名
            value: シークレット値
            expires_on: 有効期限（Noneの場合は設定しない）
        """
        pass

    @abstractmethod
    def get_secret(self, name: str, version: Optional[str] = None) -> Any:
        """
        シークレットを取得します。

        Args:
            name: シークレット名
            version: バージョン（Noneの場合は最新）

        Returns:
            value と properties.expires_on を持つオブジェクト
        """
        pass

    @abstractmethod
    def delete_secret(self, name: str) -> None:
        """
        シークレットを削除します。

        Args:
            name: シークレット名
        """
        pass

    @abstractmethod
    def list_secret_properties(self) -> Iterator[Iterable[Any]]:
        """
        シークレットのメタデータをページ単位で列挙します。

        次のページの取得時に例外が送出される場合があります。

        Returns:
            ページのイテレーター。各ページは id と expires_on を持つ要素の列
        """
        pass


class AzureSecretsBackend(SecretsBackend):
    """
    Azure Key Vault バックエンド

    azure.keyvault.secrets.SecretClient への薄いアダプターです。
    """

    def __init__(self, client: Any):
        """
        AzureSecretsBackendを初期化します。

        Args:
            client: SecretClient インスタンス
        """
        self.client = client

    def set_secret(
        self,
        name: str,
        value: str,
        expires_on: Optional[datetime] = None
    ) -> Any:
        if expires_on is None:
            return self.client.set_secret(name, value)
        return self.client.set_secret(name, value, expires_on=expires_on)

    def get_secret(self, name: str, version: Optional[str] = None) -> Any:
        return self.client.get_secret(name, version)

    def delete_secret(self, name: str) -> None:
        # 削除は長時間操作。soft-delete 完了まで待つ
        poller = self.client.begin_delete_secret(name)
        poller.wait()

    def list_secret_properties(self) -> Iterator[Iterable[Any]]:
        return iter(self.client.list_properties_of_secrets().by_page())
