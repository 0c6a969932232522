"""
シークレット管理モジュール

Azure Key Vault のシークレット操作とエラー正規化を提供します。
"""

from .backend import AzureSecretsBackend, SecretsBackend
from .client import KeyVaultClient, new_key_vault_client
from .error_normalizer import normalize_error
from .models import Secret
from .operations import KeyVaultSecretsManager

__all__ = [
    "AzureSecretsBackend",
    "KeyVaultClient",
    "KeyVaultSecretsManager",
    "Secret",
    "SecretsBackend",
    "new_key_vault_client",
    "normalize_error",
]
