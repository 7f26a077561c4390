"""評価フック"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from .models import EvaluationResult, FlagType, TargetingContext


@dataclass(frozen=True)
class HookContext:
    """フックに渡される評価情報。"""

    flag_key: str
    flag_type: FlagType
    context: TargetingContext
    default_value: Any
    provider_name: str


class Hook:
    """評価フックの基底クラス。必要なメソッドだけをオーバーライドする。"""

    def before(self, hook_context: HookContext) -> None:
        """外部クライアント呼び出しの前に実行される。"""

    def after(self, hook_context: HookContext, result: EvaluationResult[Any]) -> None:
        """評価結果が確定した後に実行される。"""

    def error(self, hook_context: HookContext, result: EvaluationResult[Any]) -> None:
        """結果に error_kind が設定されている場合に実行される。"""

    def finally_after(self, hook_context: HookContext) -> None:
        """常に最後に実行される。"""


class LoggingHook(Hook):
    """評価ごとに 1 行の構造化ログを出力するフック。"""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or structlog.get_logger(__name__)

    def after(self, hook_context: HookContext, result: EvaluationResult[Any]) -> None:
        self._logger.info(
            "flag evaluated",
            provider=hook_context.provider_name,
            flag_key=hook_context.flag_key,
            flag_type=str(hook_context.flag_type),
            targeting_key=hook_context.context.targeting_key,
            reason=str(result.reason),
            variant=result.variant,
            error_kind=str(result.error_kind) if result.error_kind is not None else None,
        )
