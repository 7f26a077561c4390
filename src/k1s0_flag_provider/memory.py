"""InMemoryTreatmentClient 実装"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .models import CONTROL_TREATMENT


@dataclass
class TrackedEvent:
    """記録された track 呼び出し。"""

    key: str
    traffic_type: str
    event_type: str
    value: float = 0.0
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass
class TreatmentLookup:
    """記録されたトリートメント取得呼び出し。"""

    key: str
    flag_key: str
    attributes: dict[str, Any] = field(default_factory=dict)


class InMemoryTreatmentClient:
    """テスト用インメモリトリートメントクライアント。

    未登録のフラグには control を返す。
    """

    def __init__(self) -> None:
        self._treatments: dict[str, tuple[str | None, str | None]] = {}
        self._overrides: dict[tuple[str, str], tuple[str | None, str | None]] = {}
        self.lookups: list[TreatmentLookup] = []
        self.events: list[TrackedEvent] = []
        self.shutdown_count = 0

    def set_treatment(
        self,
        flag_key: str,
        treatment: str | None,
        config: str | None = None,
        key: str | None = None,
    ) -> None:
        """トリートメントを設定する。key を指定するとそのキー専用になる。"""
        if key is None:
            self._treatments[flag_key] = (treatment, config)
        else:
            self._overrides[(key, flag_key)] = (treatment, config)

    def get_treatment(
        self, key: str, flag_key: str, attributes: dict[str, Any] | None = None
    ) -> str | None:
        treatment, _ = self.get_treatment_with_config(key, flag_key, attributes)
        return treatment

    def get_treatment_with_config(
        self, key: str, flag_key: str, attributes: dict[str, Any] | None = None
    ) -> tuple[str | None, str | None]:
        self.lookups.append(TreatmentLookup(key, flag_key, dict(attributes or {})))
        if (key, flag_key) in self._overrides:
            return self._overrides[(key, flag_key)]
        return self._treatments.get(flag_key, (CONTROL_TREATMENT, None))

    def track(
        self,
        key: str,
        traffic_type: str,
        event_type: str,
        value: float = 0.0,
        properties: dict[str, Any] | None = None,
    ) -> bool:
        self.events.append(
            TrackedEvent(key, traffic_type, event_type, value, dict(properties or {}))
        )
        return True

    def shutdown(self) -> None:
        self.shutdown_count += 1
