"""TreatmentClient プロトコル"""

from __future__ import annotations

from typing import Any, Protocol


class TreatmentClientProtocol(Protocol):
    """外部フラグ評価クライアントのプロトコル。

    インスタンスは統合レイヤーが生成・所有し、FlagProvider に注入される。
    """

    def get_treatment(
        self, key: str, flag_key: str, attributes: dict[str, Any] | None = None
    ) -> str | None: ...

    def get_treatment_with_config(
        self, key: str, flag_key: str, attributes: dict[str, Any] | None = None
    ) -> tuple[str | None, str | None]: ...

    def track(
        self,
        key: str,
        traffic_type: str,
        event_type: str,
        value: float = 0.0,
        properties: dict[str, Any] | None = None,
    ) -> bool: ...

    def shutdown(self) -> None: ...
