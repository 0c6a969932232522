"""
Azureエラーレスポンスの正規化

azure-core が送出する例外を NormalizedError に変換します。
HttpResponseError にレスポンスが付いている場合はエラーエンベロープ
（{"error": {"code": ..., "message": ...}}）を解析し、
それ以外（通信エラー等）は例外の文字列表現をメッセージとして扱います。
"""

import json
import logging
from typing import Any, Dict, Optional, Tuple

from azure.core.exceptions import HttpResponseError

from ..errors import (
    NormalizedError,
    forbidden_error,
    internal_server_error,
    internal_server_errorf,
    not_found_error,
    unauthorized_error,
)

logger = logging.getLogger(__name__)

DECODE_ERROR_MSG_FMT = "Unable to decode the azure error response: %s"
REQUEST_ID_HEADER = "x-ms-request-id"


class EnvelopeDecodeError(ValueError):
    """エラーエンベロープを解析できない場合の例外"""
    pass


def decode_error_envelope(body: str) -> Dict[str, Any]:
    """
    Azureエラーエンベロープを解析します。

    Args:
        body: レスポンスボディ（JSON文字列）

    Returns:
        "error" オブジェクトの辞書。存在しない場合は空辞書

    Raises:
        EnvelopeDecodeError: JSONとして解析できない、またはオブジェクトでない場合
    """
    try:
        payload = json.loads(body)
    except (TypeError, ValueError) as e:
        raise EnvelopeDecodeError(str(e)) from e

    if not isinstance(payload, dict):
        raise EnvelopeDecodeError(
            f"expected a JSON object, got {type(payload).__name__}"
        )

    error = payload.get("error") or {}
    if not isinstance(error, dict):
        raise EnvelopeDecodeError(
            f"expected 'error' to be an object, got {type(error).__name__}"
        )
    return error


def _read_envelope(raw: HttpResponseError) -> Tuple[int, str, str]:
    response = raw.response
    trace_id = ""
    headers = getattr(response, "headers", None)
    if headers is not None:
        trace_id = headers.get(REQUEST_ID_HEADER) or ""

    try:
        body = response.text()
    except Exception as e:
        raise EnvelopeDecodeError(str(e)) from e

    error = decode_error_envelope(body)
    message = error.get("message") or ""
    return response.status_code, str(message), trace_id


def normalize_error(raw: Optional[BaseException]) -> Optional[NormalizedError]:
    """
    バックエンドの例外をNormalizedErrorに変換します。

    Args:
        raw: バックエンドが送出した例外（Noneの場合はエラーなし）

    Returns:
        NormalizedError。rawがNoneの場合はNone

    Examples:
        >>> normalize_error(None) is None
        True
        >>> normalize_error(ConnectionError("connection reset")).code
        'INTERNAL_SERVER_ERROR'
    """
    if raw is None:
        return None

    status = 0
    trace_id = ""
    if isinstance(raw, HttpResponseError) and raw.response is not None:
        try:
            status, message, trace_id = _read_envelope(raw)
        except EnvelopeDecodeError as e:
            logger.debug(f"Azureエラーレスポンスの解析に失敗: {e}")
            return internal_server_errorf(DECODE_ERROR_MSG_FMT, e)
    else:
        message = str(raw)

    logger.debug(
        f"Azureエラーを正規化: status={status} type={type(raw).__name__}",
        extra={"status": status, "trace_id": trace_id}
    )

    if status == 404:
        return not_found_error("", status=status, trace_id=trace_id)
    if status == 401:
        return unauthorized_error(message, status=status, trace_id=trace_id)
    if status == 403:
        return forbidden_error(message, status=status, trace_id=trace_id)
    return internal_server_error(message, status=status, trace_id=trace_id)
