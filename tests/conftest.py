# -*- coding: utf-8 -*-
"""
================================================================================
conftest.py - pytest共通フィクスチャ
================================================================================

【概要】
全テストで共有するフィクスチャとモックを定義します。

【フィクスチャ一覧】
- fake_backend: インメモリのシークレットバックエンド
- kv_client: fake_backend を使う KeyVaultClient
- mock_secret_client: SecretClient モック
- mock_no_env: Key Vault 関連の環境変数を除去

【ヘルパー】
- FakeResponse / make_http_error: azure-core の HttpResponseError を組み立てる

================================================================================
"""

import pytest
import json
import os
import sys
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, Iterator, List, Optional
from unittest.mock import MagicMock, patch

# srcディレクトリをパスに追加
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_src_path = os.path.join(_project_root, "src")
if _src_path not in sys.path:
    sys.path.insert(0, _src_path)

# .envファイルを読み込み（統合テスト用）
from dotenv import load_dotenv
_env_path = os.path.join(_project_root, ".env")
if os.path.exists(_env_path):
    load_dotenv(_env_path)

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from keyvault_client.secrets.backend import SecretsBackend
from keyvault_client.secrets.client import KeyVaultClient


TEST_VAULT_NAME = "test-vault"


# =============================================================================
# azure-core エラー生成ヘルパー
# =============================================================================

class FakeResponse:
    """azure-core の HttpResponse 相当（status_code, headers, text() のみ）"""

    def __init__(
        self,
        status_code: int,
        body: str = "",
        headers: Optional[Dict[str, str]] = None,
        reason: str = "",
        text_error: Optional[Exception] = None
    ):
        self.status_code = status_code
        self.body = body
        self.headers = headers or {}
        self.reason = reason
        self.text_error = text_error

    def text(self, encoding: Optional[str] = None) -> str:
        if self.text_error is not None:
            raise self.text_error
        return self.body


def error_body(message: str, code: str = "Error") -> str:
    return json.dumps({
        "error": {
            "code": code,
            "message": message,
            "innererror": {"code": code}
        }
    })


def make_http_error(
    status_code: int,
    message: str = "",
    body: Optional[str] = None,
    request_id: Optional[str] = None,
    text_error: Optional[Exception] = None
) -> HttpResponseError:
    """
    Key Vault が返すのと同じ形の HttpResponseError を作成します。

    Args:
        status_code: HTTPステータス
        message: エンベロープ内の error.message
        body: ボディを直接指定する場合（message より優先）
        request_id: x-ms-request-id ヘッダー
        text_error: text() 呼び出し時に送出する例外
    """
    headers = {"x-ms-request-id": request_id} if request_id else {}
    response = FakeResponse(
        status_code,
        body=error_body(message) if body is None else body,
        headers=headers,
        reason="Test",
        text_error=text_error
    )
    error_cls = ResourceNotFoundError if status_code == 404 else HttpResponseError
    return error_cls(response=response)


# =============================================================================
# インメモリバックエンド
# =============================================================================

class InMemorySecretsBackend(SecretsBackend):
    """
    テスト用のインメモリバックエンド

    Attributes:
        page_size: list_secret_properties の1ページあたりの件数
        fail_on_page: このページ番号（0始まり）の取得時に list_error を送出
    """

    def __init__(self, vault_name: str = TEST_VAULT_NAME, page_size: int = 2):
        self.vault_url = f"https://{vault_name}.vault.azure.net"
        self.page_size = page_size
        self.secrets: Dict[str, SimpleNamespace] = {}
        self.fail_on_page: Optional[int] = None
        self.list_error: Optional[Exception] = None
        self.pages_fetched = 0
        self.calls: List[tuple] = []

    def set_secret(self, name, value, expires_on=None):
        self.calls.append(("set_secret", name))
        bundle = SimpleNamespace(
            name=name,
            value=value,
            id=f"{self.vault_url}/secrets/{name}/0123456789abcdef",
            properties=SimpleNamespace(expires_on=expires_on)
        )
        self.secrets[name] = bundle
        return bundle

    def get_secret(self, name, version=None):
        self.calls.append(("get_secret", name, version))
        if name not in self.secrets:
            raise make_http_error(404, f"A secret with (name/id) {name} was not found in this key vault.")
        return self.secrets[name]

    def delete_secret(self, name):
        self.calls.append(("delete_secret", name))
        if name not in self.secrets:
            raise make_http_error(404, f"A secret with (name/id) {name} was not found in this key vault.")
        del self.secrets[name]

    def list_secret_properties(self) -> Iterator[List[Any]]:
        items = [
            SimpleNamespace(
                id=f"{self.vault_url}/secrets/{name}",
                expires_on=bundle.properties.expires_on
            )
            for name, bundle in self.secrets.items()
        ]
        for index in range(0, max(len(items), 1), self.page_size):
            page_number = index // self.page_size
            if self.fail_on_page == page_number:
                raise self.list_error or make_http_error(500, "Internal error")
            self.pages_fetched += 1
            yield items[index:index + self.page_size]


# =============================================================================
# フィクスチャ
# =============================================================================

@pytest.fixture
def expiration():
    """テスト用の有効期限"""
    return datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fake_backend():
    """インメモリのシークレットバックエンド"""
    return InMemorySecretsBackend()


@pytest.fixture
def kv_client(fake_backend):
    """fake_backend を使う KeyVaultClient"""
    return KeyVaultClient(TEST_VAULT_NAME, backend=fake_backend)


@pytest.fixture
def mock_secret_client():
    """SecretClient モック"""
    client = MagicMock()
    client.begin_delete_secret.return_value = MagicMock()
    return client


@pytest.fixture
def mock_no_env():
    """Key Vault 関連の環境変数なしモック"""
    env_vars_to_remove = [
        "AZURE_KEY_VAULT_NAME",
        "AZURE_KEY_VAULT_VERIFY_CHALLENGE_RESOURCE",
    ]
    with patch.dict(os.environ, {}, clear=False):
        for var in env_vars_to_remove:
            os.environ.pop(var, None)
        yield


# =============================================================================
# 統合テストスキップ設定
# =============================================================================

def pytest_addoption(parser):
    """pytestコマンドラインオプション追加"""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="Run integration tests (requires Azure Key Vault access)"
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: mark test as integration test")


def pytest_collection_modifyitems(config, items):
    """統合テストマーカーを処理"""
    if config.getoption("--integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
