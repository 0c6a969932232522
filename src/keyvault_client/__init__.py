"""
================================================================================
keyvault_client - Azure Key Vault シークレットクライアント
================================================================================

【概要】
Azure Key Vault のシークレットに対する List/Get/Set/Delete を提供し、
バックエンドのエラーを4種類のエラーコードに正規化して返します。

【使用例】
```python
from keyvault_client import Secret, new_key_vault_client

client = new_key_vault_client("my-vault")

err = client.secrets.set(Secret(name="db-password", value="s3cr3t"))
secret, err = client.secrets.get("db-password")
if err is not None:
    print(err.code, err.message)
```

================================================================================
"""
from .config import ConfigError
from .errors import (
    ERR_CODE_INSUFFICIENT_ACCESS,
    ERR_CODE_INTERNAL_SERVER_ERROR,
    ERR_CODE_NOT_FOUND,
    ERR_CODE_UNAUTHORIZED,
    NormalizedError,
    NormalizedErrors,
)
from .secrets import (
    AzureSecretsBackend,
    KeyVaultClient,
    KeyVaultSecretsManager,
    Secret,
    SecretsBackend,
    new_key_vault_client,
    normalize_error,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ERR_CODE_INSUFFICIENT_ACCESS",
    "ERR_CODE_INTERNAL_SERVER_ERROR",
    "ERR_CODE_NOT_FOUND",
    "ERR_CODE_UNAUTHORIZED",
    "NormalizedError",
    "NormalizedErrors",
    "AzureSecretsBackend",
    "KeyVaultClient",
    "KeyVaultSecretsManager",
    "Secret",
    "SecretsBackend",
    "new_key_vault_client",
    "normalize_error",
]
