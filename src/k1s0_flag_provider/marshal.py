"""オブジェクトツリーと Value ツリーの相互変換"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from .exceptions import MarshalError
from .value import (
    INT64_MAX,
    INT64_MIN,
    BoolValue,
    FloatValue,
    InstantValue,
    IntValue,
    ListValue,
    NullValue,
    StrValue,
    StructureValue,
    Value,
    is_value,
)

_INSTANT_RE = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})[Tt]"
    r"(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})"
)


def parse_instant(text: str) -> datetime | None:
    """厳密な ISO-8601 インスタント文字列を UTC の datetime に変換する。

    日付と時刻の両方、およびタイムゾーン指定 (Z または ±HH:MM) が必須。
    解釈できない場合は None を返す。
    """
    m = _INSTANT_RE.fullmatch(text)
    if m is None:
        return None
    fraction = (m.group("fraction") or "").ljust(6, "0")[:6]
    offset = m.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"
    try:
        parsed = datetime.fromisoformat(
            f"{m.group('date')}T{m.group('time')}.{fraction}{offset}"
        )
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        # 暦として不正、または UTC 換算で datetime の範囲外
        return None


def format_instant(value: datetime) -> str:
    """datetime を正規形 (UTC, 末尾 Z) の文字列にする。"""
    utc = value.astimezone(timezone.utc)
    timespec = "microseconds" if utc.microsecond else "seconds"
    return utc.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"


def object_to_value(obj: Any) -> Value:
    """ネイティブなオブジェクトツリーを Value ツリーに変換する。

    Raises:
        MarshalError: Value として表現できないオブジェクトが含まれる場合
    """
    if obj is None:
        return NullValue()
    if is_value(obj):
        return obj
    # bool は int のサブクラスなので先に判定する
    if isinstance(obj, bool):
        return BoolValue(obj)
    if isinstance(obj, int):
        if not INT64_MIN <= obj <= INT64_MAX:
            raise MarshalError(f"cannot represent object as Value: integer {obj} exceeds int64")
        return IntValue(obj)
    if isinstance(obj, float):
        return FloatValue(obj)
    if isinstance(obj, str):
        instant = parse_instant(obj)
        if instant is not None:
            return InstantValue(instant)
        return StrValue(obj)
    if isinstance(obj, datetime):
        if obj.tzinfo is None:
            obj = obj.replace(tzinfo=timezone.utc)
        try:
            return InstantValue(obj)
        except ValueError as e:
            raise MarshalError(f"cannot represent object as Value: {e}", cause=e) from e
    if isinstance(obj, (list, tuple)):
        return ListValue(tuple(object_to_value(item) for item in obj))
    if isinstance(obj, Mapping):
        fields: dict[str, Value] = {}
        for key, item in obj.items():
            if not isinstance(key, str):
                raise MarshalError(
                    f"cannot represent object as Value: non-string key {key!r}"
                )
            fields[key] = object_to_value(item)
        return StructureValue(fields)
    raise MarshalError(f"cannot represent object as Value: {type(obj).__name__}")


def value_to_object(value: Value) -> Any:
    """Value ツリーをネイティブなオブジェクトツリーに戻す。

    InstantValue は正規形の文字列になるため、再度 object_to_value に通すと
    同じ InstantValue が得られる。
    """
    if isinstance(value, NullValue):
        return None
    if isinstance(value, (BoolValue, IntValue, FloatValue, StrValue)):
        return value.value
    if isinstance(value, InstantValue):
        return format_instant(value.value)
    if isinstance(value, ListValue):
        return [value_to_object(item) for item in value.items]
    if isinstance(value, StructureValue):
        return {key: value_to_object(item) for key, item in value.fields.items()}
    raise MarshalError(f"not a Value: {type(value).__name__}")


def dict_to_structure(data: Mapping[str, Any]) -> StructureValue:
    """文字列キーの辞書を StructureValue に変換する。"""
    value = object_to_value(data)
    if not isinstance(value, StructureValue):
        raise MarshalError(f"expected a mapping, got {type(data).__name__}")
    return value


def structure_to_dict(value: StructureValue) -> dict[str, Any]:
    """StructureValue をネイティブな辞書に変換する。"""
    return {key: value_to_object(item) for key, item in value.fields.items()}
