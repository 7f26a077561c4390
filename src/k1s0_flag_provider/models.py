"""flag_provider データモデル"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, TypeVar

from .value import Value

T = TypeVar("T")

CONTROL_TREATMENT = "control"
CONFIG_METADATA_KEY = "config"


class FlagType(StrEnum):
    """評価結果の型。"""

    BOOLEAN = "BOOLEAN"
    STRING = "STRING"
    INTEGER = "INTEGER"
    DOUBLE = "DOUBLE"
    STRUCTURE = "STRUCTURE"
    OBJECT = "OBJECT"


class Reason(StrEnum):
    """評価理由。"""

    TARGETING_MATCH = "TARGETING_MATCH"
    DEFAULT = "DEFAULT"
    ERROR = "ERROR"


class ErrorKind(StrEnum):
    """評価エラーの分類。"""

    TARGETING_KEY_MISSING = "TARGETING_KEY_MISSING"
    FLAG_NOT_FOUND = "FLAG_NOT_FOUND"
    PARSE_ERROR = "PARSE_ERROR"
    GENERAL = "GENERAL"


@dataclass
class TargetingContext:
    """フラグ評価コンテキスト。"""

    targeting_key: str | None = None
    attributes: dict[str, Value] = field(default_factory=dict)

    def has_targeting_key(self) -> bool:
        return bool(self.targeting_key)


@dataclass(frozen=True)
class RawTreatment:
    """外部クライアントが返したトリートメントと設定 JSON。"""

    treatment: str | None = None
    config: str | None = None

    def is_not_found(self) -> bool:
        """トリートメントが無い・空・control のいずれかなら True。"""
        return not self.treatment or self.treatment == CONTROL_TREATMENT


@dataclass
class EvaluationResult(Generic[T]):
    """フラグ評価結果。"""

    flag_key: str
    value: T
    reason: Reason
    variant: str | None = None
    error_kind: ErrorKind | None = None
    error_message: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return self.error_kind is not None

    def to_dict(self) -> dict[str, Any]:
        """reason / error_kind を文字列化した辞書を返す。"""
        return {
            "flag_key": self.flag_key,
            "value": self.value,
            "variant": self.variant,
            "reason": str(self.reason),
            "error_kind": str(self.error_kind) if self.error_kind is not None else None,
            "error_message": self.error_message,
            "metadata": dict(self.metadata),
        }


@dataclass
class TrackingDetails:
    """track イベントの数値と付加属性。値が無い場合は 0.0 として転送する。"""

    value: float | None = None
    attributes: dict[str, Value] = field(default_factory=dict)


@dataclass(frozen=True)
class ProviderMetadata:
    """プロバイダーのメタデータ。"""

    name: str
