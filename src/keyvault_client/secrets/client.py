"""
Key Vault クライアントコンテキスト

対象Vaultの名前・URL・バックエンドを保持し、シークレット操作を公開します。
生成後は読み取り専用のため、複数の操作から共有できます。
"""

from typing import Any, Callable, Dict, Optional
import logging

from ..config import get_env_bool, get_env_str, validate_vault_name, vault_url
from .backend import AzureSecretsBackend, SecretsBackend
from .operations import KeyVaultSecretsManager

logger = logging.getLogger(__name__)


def default_credential_provider() -> Any:
    """DefaultAzureCredential を生成します。"""
    from azure.identity import DefaultAzureCredential
    return DefaultAzureCredential()


def default_secrets_client_provider(url: str, credential: Any, **options: Any) -> Any:
    """SecretClient を生成します。"""
    from azure.keyvault.secrets import SecretClient
    return SecretClient(vault_url=url, credential=credential, **options)


class KeyVaultClient:
    """
    Key Vault クライアント

    1つのVaultにつき1インスタンスを生成します。

    Attributes:
        name: Key Vault名
        url: Key VaultのURL（https://<name>.vault.azure.net）
        backend: シークレットバックエンド
        secrets: シークレット操作（List/Get/Set/Delete）
    """

    def __init__(
        self,
        vault_name: str,
        credential: Optional[Any] = None,
        backend: Optional[SecretsBackend] = None,
        credential_provider: Optional[Callable[[], Any]] = None,
        secrets_client_provider: Optional[Callable[..., Any]] = None,
        client_options: Optional[Dict[str, Any]] = None
    ):
        """
        KeyVaultClientを初期化します。

        Args:
            vault_name: Key Vault名
            credential: Azure認証情報。Noneの場合は credential_provider から取得
            backend: シークレットバックエンド。指定時は認証情報・SecretClientを生成しない
            credential_provider: 認証情報の生成関数（デフォルト: DefaultAzureCredential）
            secrets_client_provider: SecretClientの生成関数
            client_options: SecretClient に渡す追加オプション

        Raises:
            ConfigError: vault_name が不正な場合
        """
        self._name = validate_vault_name(vault_name)
        self._url = vault_url(self._name)

        if backend is None:
            if credential is None:
                credential = (credential_provider or default_credential_provider)()
            provider = secrets_client_provider or default_secrets_client_provider
            backend = AzureSecretsBackend(
                provider(self._url, credential, **(client_options or {}))
            )

        self._backend = backend
        self._secrets = KeyVaultSecretsManager(self)

    @property
    def name(self) -> str:
        return self._name

    @property
    def url(self) -> str:
        return self._url

    @property
    def backend(self) -> SecretsBackend:
        return self._backend

    @property
    def secrets(self) -> KeyVaultSecretsManager:
        return self._secrets

    def __repr__(self) -> str:
        return f"KeyVaultClient(name={self._name!r}, url={self._url!r})"


def new_key_vault_client(vault_name: Optional[str] = None, **kwargs: Any) -> KeyVaultClient:
    """
    KeyVaultClientを生成します。

    Args:
        vault_name: Key Vault名。Noneの場合は環境変数AZURE_KEY_VAULT_NAMEから取得
        **kwargs: KeyVaultClient に渡す追加パラメータ

    Returns:
        KeyVaultClient

    Raises:
        ConfigError: Vault名が未設定・不正、または環境変数の値が不正な場合

    Examples:
        >>> client = new_key_vault_client("my-vault")
        >>> secret, err = client.secrets.get("db-password")
    """
    if vault_name is None:
        vault_name = get_env_str("AZURE_KEY_VAULT_NAME")

    client_options = dict(kwargs.pop("client_options", None) or {})
    if "verify_challenge_resource" not in client_options:
        client_options["verify_challenge_resource"] = get_env_bool(
            "AZURE_KEY_VAULT_VERIFY_CHALLENGE_RESOURCE", default=True
        )

    client = KeyVaultClient(vault_name, client_options=client_options, **kwargs)
    logger.info(f"Azure Key Vault に接続しました: {client.url}")
    return client
