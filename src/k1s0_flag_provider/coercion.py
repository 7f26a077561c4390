"""トリートメント文字列の型変換

フラグ型ごとに変換関数を 1 つだけ持つ。変換関数はデフォルト値の実行時の型ではなく、
宣言された結果型から選択する。
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

from .exceptions import ParseError
from .marshal import dict_to_structure
from .models import FlagType
from .value import INT64_MAX, INT64_MIN, StructureValue

_TRUE_WORDS = ("on",)
_FALSE_WORDS = ("off",)
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _reject_constant(token: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {token}")


def coerce_boolean(treatment: str) -> bool:
    """'true'/'false' (大文字小文字を区別しない) と 'on'/'off' を真偽値にする。"""
    lowered = treatment.lower()
    if lowered == "true" or treatment in _TRUE_WORDS:
        return True
    if lowered == "false" or treatment in _FALSE_WORDS:
        return False
    raise ParseError(f"treatment is not a boolean: {treatment!r}")


def coerce_string(treatment: str) -> str:
    return treatment


def coerce_integer(treatment: str) -> int:
    """符号付き 10 進整数を解析する。int64 の範囲外は ParseError。"""
    if not _INTEGER_RE.fullmatch(treatment):
        raise ParseError(f"treatment is not an integer: {treatment!r}")
    value = int(treatment)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ParseError(f"treatment is out of int64 range: {treatment!r}")
    return value


def coerce_double(treatment: str) -> float:
    """前後の空白を除いてから 10 進数を解析する。"""
    trimmed = treatment.strip()
    if not _DECIMAL_RE.fullmatch(trimmed):
        raise ParseError(f"treatment is not a decimal number: {treatment!r}")
    return float(trimmed)


def coerce_object(treatment: str) -> dict[str, Any]:
    """トリートメントを JSON オブジェクトとしてデコードする。"""
    try:
        data = json.loads(treatment, parse_constant=_reject_constant)
    except ValueError as e:
        raise ParseError(f"treatment is not valid JSON: {e}", cause=e) from e
    if not isinstance(data, dict):
        raise ParseError(f"treatment is not a JSON object: {treatment!r}")
    return data


def coerce_structure(treatment: str) -> StructureValue:
    """JSON オブジェクトとしてデコードし、Value ツリーに変換する。

    変換の失敗は MarshalError のまま送出され、呼び出し側で GENERAL に分類される。
    """
    return dict_to_structure(coerce_object(treatment))


COERCERS: dict[FlagType, Callable[[str], Any]] = {
    FlagType.BOOLEAN: coerce_boolean,
    FlagType.STRING: coerce_string,
    FlagType.INTEGER: coerce_integer,
    FlagType.DOUBLE: coerce_double,
    FlagType.STRUCTURE: coerce_structure,
    FlagType.OBJECT: coerce_object,
}
