"""
エラーモデル統一モジュール

Key Vault バックエンドから返る多様なエラー（HTTPステータス、Azureエラー
エンベロープ、通信エラー）を、呼び出し側に見せる共通のエラー値に揃えます。

エラーコード:
- INTERNAL_SERVER_ERROR: 既定値（デコード失敗・未知のステータスを含む）
- NOT_FOUND: 404
- UNAUTHORIZED: 401
- INSUFFICIENT_ACCESS: 403
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List

ERR_CODE_INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
ERR_CODE_NOT_FOUND = "NOT_FOUND"
ERR_CODE_UNAUTHORIZED = "UNAUTHORIZED"
ERR_CODE_INSUFFICIENT_ACCESS = "INSUFFICIENT_ACCESS"

ERROR_CODES = frozenset({
    ERR_CODE_INTERNAL_SERVER_ERROR,
    ERR_CODE_NOT_FOUND,
    ERR_CODE_UNAUTHORIZED,
    ERR_CODE_INSUFFICIENT_ACCESS,
})


@dataclass(frozen=True)
class NormalizedError:
    """
    正規化済みエラー

    境界で一度だけ生成され、その後は変更されません。

    Attributes:
        code: エラーコード（ERROR_CODES のいずれか）
        status: 通信ステータス（参考値。不明な場合は0）
        message: エラーメッセージ（バックエンド提供のもの）
        trace_id: 相関ID（空文字の場合あり）
    """
    code: str
    status: int = 0
    message: str = ""
    trace_id: str = ""

    def __str__(self) -> str:
        return (
            f"Code: {self.code}, Status: {self.status}, "
            f"Message: {self.message}, TraceId: {self.trace_id}"
        )

    def with_message(self, message: str) -> "NormalizedError":
        """
        メッセージだけを差し替えたコピーを返します。

        Args:
            message: 新しいメッセージ

        Returns:
            NormalizedError（元のインスタンスは変更されない）

        Examples:
            >>> err = not_found_error("")
            >>> err.with_message("missing").message
            'missing'
        """
        return replace(self, message=message)

    def to_dict(self) -> Dict[str, Any]:
        """
        辞書形式に変換します。

        Returns:
            {"code", "status", "message", "traceId"} 形式の辞書
        """
        return {
            "code": self.code,
            "status": self.status,
            "message": self.message,
            "traceId": self.trace_id,
        }


@dataclass
class NormalizedErrors:
    """複数のNormalizedErrorをまとめて返すためのコンテナ"""
    errors: List[NormalizedError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"errors": [error.to_dict() for error in self.errors]}


def internal_server_error(message: str, status: int = 0, trace_id: str = "") -> NormalizedError:
    return NormalizedError(ERR_CODE_INTERNAL_SERVER_ERROR, status, message, trace_id)


def internal_server_errorf(fmt: str, *args: Any) -> NormalizedError:
    """
    %書式のメッセージでINTERNAL_SERVER_ERRORを作成します。

    Examples:
        >>> internal_server_errorf("decode failed: %s", "EOF").message
        'decode failed: EOF'
    """
    return internal_server_error(fmt % args)


def not_found_error(message: str, status: int = 404, trace_id: str = "") -> NormalizedError:
    return NormalizedError(ERR_CODE_NOT_FOUND, status, message, trace_id)


def unauthorized_error(message: str, status: int = 401, trace_id: str = "") -> NormalizedError:
    return NormalizedError(ERR_CODE_UNAUTHORIZED, status, message, trace_id)


def forbidden_error(message: str, status: int = 403, trace_id: str = "") -> NormalizedError:
    return NormalizedError(ERR_CODE_INSUFFICIENT_ACCESS, status, message, trace_id)
