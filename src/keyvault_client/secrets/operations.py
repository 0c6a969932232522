"""
Key Vault シークレットのCRUD操作

バックエンドを呼び出し、結果を Secret に、例外を NormalizedError に変換します。
各操作は値とエラーのどちらか一方だけを返します。
"""

from typing import TYPE_CHECKING, List, Optional, Tuple
import logging

from ..errors import ERR_CODE_NOT_FOUND, NormalizedError
from .error_normalizer import normalize_error
from .models import Secret, secret_from_bundle, secret_from_properties

if TYPE_CHECKING:
    from .client import KeyVaultClient

logger = logging.getLogger(__name__)

SECRET_NOT_FOUND_ERR_MSG_FMT = "A secret with name (%s) was not found in the KeyVault (%s)"


def _log_failure(operation: str, error: NormalizedError) -> None:
    logger.warning(
        f"Key Vault操作に失敗: {operation} [{error.code}] {error.message}",
        extra={
            "error_code": error.code,
            "status": error.status,
            "trace_id": error.trace_id,
        }
    )


class KeyVaultSecretsManager:
    """
    Key Vault シークレットマネージャー

    KeyVaultClient が保持するバックエンドに対して List/Get/Set/Delete を提供します。
    呼び出し間で状態は保持しません。
    """

    def __init__(self, client: "KeyVaultClient"):
        """
        KeyVaultSecretsManagerを初期化します。

        Args:
            client: 対象VaultのKeyVaultClient
        """
        self.client = client

    def list(self) -> Tuple[List[Secret], Optional[NormalizedError]]:
        """
        Vault内の全シークレットを取得します（値は含まない）。

        ページは順番に1つずつ取得します。途中のページで失敗した場合、
        それまでに取得した分は破棄し、空リストとエラーを返します。

        Returns:
            (シークレットのリスト, None) または ([], NormalizedError)

        Examples:
            >>> secrets, err = client.secrets.list()
            >>> [s.name for s in secrets]
            ['db-password', 'api-key']
        """
        secrets: List[Secret] = []
        try:
            pages = iter(self.client.backend.list_secret_properties())
        except Exception as e:
            error = normalize_error(e)
            _log_failure("list", error)
            return [], error

        while True:
            try:
                page = next(pages)
            except StopIteration:
                break
            except Exception as e:
                error = normalize_error(e)
                _log_failure("list", error)
                return [], error

            secrets.extend(secret_from_properties(item) for item in page)

        logger.info(f"Key Vault {self.client.name} から{len(secrets)}個のシークレットを取得しました")
        return secrets, None

    def get(self, name: str) -> Tuple[Optional[Secret], Optional[NormalizedError]]:
        """
        シークレットの最新バージョンを取得します。

        Args:
            name: シークレット名

        Returns:
            (Secret, None) または (None, NormalizedError)。
            見つからない場合はVault名を含むメッセージに差し替えます。
        """
        logger.debug(f"Key Vaultからシークレットを取得: {name}")
        try:
            bundle = self.client.backend.get_secret(name)
        except Exception as e:
            error = normalize_error(e)
            if error.code == ERR_CODE_NOT_FOUND:
                error = error.with_message(
                    SECRET_NOT_FOUND_ERR_MSG_FMT % (name, self.client.name)
                )
            _log_failure("get", error)
            return None, error

        return secret_from_bundle(name, bundle), None

    def set(self, secret: Secret) -> Optional[NormalizedError]:
        """
        シークレットを設定します。

        名前の検証はバックエンドに任せます。

        Args:
            secret: 設定するシークレット（name, value, expiration）

        Returns:
            成功時None、失敗時NormalizedError
        """
        logger.debug(f"Key Vaultにシークレットを設定: {secret.name}")
        try:
            self.client.backend.set_secret(
                secret.name,
                secret.value,
                expires_on=secret.expiration
            )
        except Exception as e:
            error = normalize_error(e)
            _log_failure("set", error)
            return error

        logger.info(f"Key Vaultにシークレットを設定しました: {secret.name}")
        return None

    def delete(self, name: str) -> Optional[NormalizedError]:
        """
        シークレットを削除します。

        存在しない場合の NOT_FOUND はそのまま返します（メッセージの差し替えなし）。

        Args:
            name: シークレット名

        Returns:
            成功時None、失敗時NormalizedError
        """
        logger.debug(f"Key Vaultからシークレットを削除: {name}")
        try:
            self.client.backend.delete_secret(name)
        except Exception as e:
            error = normalize_error(e)
            _log_failure("delete", error)
            return error

        logger.info(f"Key Vaultからシークレットを削除しました: {name}")
        return None
