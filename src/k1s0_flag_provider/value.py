"""タグ付き Value モデル

フラグ設定や評価コンテキスト属性を表現する不変の値ツリー。
ケースごとに 1 つの frozen dataclass を持ち、``Value`` はその Union。
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from types import MappingProxyType
from typing import ClassVar, Union

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ValueKind(StrEnum):
    """Value のタグ。"""

    NULL = "NULL"
    BOOL = "BOOL"
    INT = "INT"
    FLOAT = "FLOAT"
    STR = "STR"
    INSTANT = "INSTANT"
    LIST = "LIST"
    STRUCTURE = "STRUCTURE"


@dataclass(frozen=True)
class NullValue:
    """null。"""

    kind: ClassVar[ValueKind] = ValueKind.NULL


@dataclass(frozen=True)
class BoolValue:
    """真偽値。"""

    value: bool
    kind: ClassVar[ValueKind] = ValueKind.BOOL


@dataclass(frozen=True)
class IntValue:
    """64 ビット符号付き整数。"""

    value: int
    kind: ClassVar[ValueKind] = ValueKind.INT

    def __post_init__(self) -> None:
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"integer out of int64 range: {self.value}")


@dataclass(frozen=True)
class FloatValue:
    """倍精度浮動小数点数。"""

    value: float
    kind: ClassVar[ValueKind] = ValueKind.FLOAT


@dataclass(frozen=True)
class StrValue:
    """文字列。"""

    value: str
    kind: ClassVar[ValueKind] = ValueKind.STR


@dataclass(frozen=True)
class InstantValue:
    """タイムゾーン付きの時刻。常に UTC に正規化して保持する。"""

    value: datetime
    kind: ClassVar[ValueKind] = ValueKind.INSTANT

    def __post_init__(self) -> None:
        if self.value.tzinfo is None:
            raise ValueError("instant requires a timezone-aware datetime")
        try:
            utc = self.value.astimezone(timezone.utc)
        except OverflowError as e:
            raise ValueError(f"instant out of range in UTC: {self.value.isoformat()}") from e
        object.__setattr__(self, "value", utc)


@dataclass(frozen=True)
class ListValue:
    """順序付きの Value 列。"""

    items: tuple[Value, ...] = ()
    kind: ClassVar[ValueKind] = ValueKind.LIST

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Value:
        return self.items[index]


@dataclass(frozen=True)
class StructureValue:
    """文字列キーの Value マップ。キーの順序は等価性に影響しない。"""

    fields: Mapping[str, Value] = field(default_factory=dict)
    kind: ClassVar[ValueKind] = ValueKind.STRUCTURE

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, key: object) -> bool:
        return key in self.fields

    def __getitem__(self, key: str) -> Value:
        return self.fields[key]

    def get(self, key: str, default: Value | None = None) -> Value | None:
        return self.fields.get(key, default)

    def keys(self) -> list[str]:
        return list(self.fields.keys())

    # MappingProxyType はハッシュ不可
    __hash__ = None  # type: ignore[assignment]


Value = Union[
    NullValue,
    BoolValue,
    IntValue,
    FloatValue,
    StrValue,
    InstantValue,
    ListValue,
    StructureValue,
]

VALUE_TYPES: tuple[type, ...] = (
    NullValue,
    BoolValue,
    IntValue,
    FloatValue,
    StrValue,
    InstantValue,
    ListValue,
    StructureValue,
)


def is_value(obj: object) -> bool:
    """obj が Value モデルのいずれかのケースかどうかを返す。"""
    return isinstance(obj, VALUE_TYPES)
