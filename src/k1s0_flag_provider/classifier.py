"""評価エラーの分類と回復方針"""

from __future__ import annotations

from .exceptions import (
    FlagNotFoundError,
    ParseError,
    ProviderError,
    ProviderErrorCodes,
    TargetingKeyMissingError,
)
from .models import ErrorKind, Reason

_CODE_TO_KIND: dict[str, ErrorKind] = {
    ProviderErrorCodes.TARGETING_KEY_MISSING: ErrorKind.TARGETING_KEY_MISSING,
    ProviderErrorCodes.FLAG_NOT_FOUND: ErrorKind.FLAG_NOT_FOUND,
    ProviderErrorCodes.PARSE_ERROR: ErrorKind.PARSE_ERROR,
}


def classify_error(exc: BaseException) -> ErrorKind:
    """例外を ErrorKind に分類する。未知の例外は GENERAL。"""
    if isinstance(exc, TargetingKeyMissingError):
        return ErrorKind.TARGETING_KEY_MISSING
    if isinstance(exc, FlagNotFoundError):
        return ErrorKind.FLAG_NOT_FOUND
    if isinstance(exc, ParseError):
        return ErrorKind.PARSE_ERROR
    if isinstance(exc, ProviderError):
        return _CODE_TO_KIND.get(exc.code, ErrorKind.GENERAL)
    return ErrorKind.GENERAL


def should_propagate(kind: ErrorKind) -> bool:
    """評価境界を越えて例外として送出すべきかを返す。"""
    return kind is ErrorKind.TARGETING_KEY_MISSING


def reason_for(kind: ErrorKind) -> Reason:
    """回復した失敗に付与する Reason を返す。"""
    if kind is ErrorKind.FLAG_NOT_FOUND:
        return Reason.DEFAULT
    return Reason.ERROR
