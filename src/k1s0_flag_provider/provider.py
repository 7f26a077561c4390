"""FlagProvider — トリートメントを型付き評価結果へ解決する"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import structlog

from .classifier import classify_error, reason_for
from .client import TreatmentClientProtocol
from .coercion import COERCERS
from .exceptions import (
    GeneralError,
    InvalidContextError,
    ProviderError,
    TargetingKeyMissingError,
)
from .hooks import Hook, HookContext
from .marshal import value_to_object
from .models import (
    CONFIG_METADATA_KEY,
    ErrorKind,
    EvaluationResult,
    FlagType,
    ProviderMetadata,
    RawTreatment,
    Reason,
    TargetingContext,
    TrackingDetails,
)
from .value import StrValue, StructureValue

T = TypeVar("T")

TRAFFIC_TYPE_ATTRIBUTE = "trafficType"

logger = structlog.get_logger(__name__)


class FlagProvider:
    """外部クライアントのトリートメントを型付きの EvaluationResult に変換するプロバイダー。

    インスタンスは呼び出しをまたぐ可変状態を持たないため、
    複数スレッドから同時に評価してよい。
    """

    def __init__(
        self,
        client: TreatmentClientProtocol,
        hooks: list[Hook] | None = None,
        name: str = "k1s0",
    ) -> None:
        self._client = client
        self._hooks: list[Hook] = list(hooks or [])
        self._metadata = ProviderMetadata(name=name)
        self._shutdown = False

    @property
    def metadata(self) -> ProviderMetadata:
        return self._metadata

    @property
    def hooks(self) -> list[Hook]:
        return list(self._hooks)

    def get_boolean_evaluation(
        self, flag_key: str, default_value: bool, context: TargetingContext
    ) -> EvaluationResult[bool]:
        return self._evaluate(flag_key, default_value, context, FlagType.BOOLEAN)

    def get_string_evaluation(
        self, flag_key: str, default_value: str, context: TargetingContext
    ) -> EvaluationResult[str]:
        return self._evaluate(flag_key, default_value, context, FlagType.STRING)

    def get_integer_evaluation(
        self, flag_key: str, default_value: int, context: TargetingContext
    ) -> EvaluationResult[int]:
        return self._evaluate(flag_key, default_value, context, FlagType.INTEGER)

    def get_double_evaluation(
        self, flag_key: str, default_value: float, context: TargetingContext
    ) -> EvaluationResult[float]:
        return self._evaluate(flag_key, default_value, context, FlagType.DOUBLE)

    def get_structured_evaluation(
        self, flag_key: str, default_value: StructureValue, context: TargetingContext
    ) -> EvaluationResult[StructureValue]:
        return self._evaluate(flag_key, default_value, context, FlagType.STRUCTURE)

    def get_object_evaluation(
        self, flag_key: str, default_value: dict[str, Any], context: TargetingContext
    ) -> EvaluationResult[dict[str, Any]]:
        return self._evaluate(flag_key, default_value, context, FlagType.OBJECT)

    def transform_context(self, context: TargetingContext) -> dict[str, Any]:
        """評価コンテキストの属性を外部クライアント向けの辞書に変換する。"""
        return {key: value_to_object(value) for key, value in context.attributes.items()}

    def track(
        self,
        event_name: str,
        context: TargetingContext,
        details: TrackingDetails | None = None,
    ) -> bool:
        """イベントを外部クライアントの track に転送する。

        Raises:
            TargetingKeyMissingError: ターゲティングキーが無い場合
            InvalidContextError: イベント名が空、または trafficType 属性が無い場合
            GeneralError: 外部クライアントの呼び出しに失敗した場合
        """
        if not context.has_targeting_key():
            raise TargetingKeyMissingError("targeting key is required for track")
        if not event_name or not event_name.strip():
            raise InvalidContextError("event name must not be blank")
        traffic_type = context.attributes.get(TRAFFIC_TYPE_ATTRIBUTE)
        if not isinstance(traffic_type, StrValue) or not traffic_type.value.strip():
            raise InvalidContextError(
                f"context attribute {TRAFFIC_TYPE_ATTRIBUTE!r} is required for track"
            )

        details = details or TrackingDetails()
        try:
            properties = {
                key: value_to_object(value) for key, value in details.attributes.items()
            }
            return self._client.track(
                context.targeting_key,
                traffic_type.value,
                event_name,
                details.value if details.value is not None else 0.0,
                properties,
            )
        except ProviderError:
            raise
        except Exception as e:
            raise GeneralError(f"Failed to track event {event_name}: {e}", cause=e) from e

    def shutdown(self) -> None:
        """外部クライアントを解放する。2 回目以降は何もしない。"""
        if self._shutdown:
            return
        self._shutdown = True
        self._client.shutdown()
        logger.info("provider shut down", provider=self._metadata.name)

    def _evaluate(
        self,
        flag_key: str,
        default_value: T,
        context: TargetingContext,
        flag_type: FlagType,
    ) -> EvaluationResult[T]:
        if not context.has_targeting_key():
            logger.warning("targeting key missing", flag_key=flag_key, flag_type=str(flag_type))
            raise TargetingKeyMissingError(f"targeting key is required to evaluate {flag_key}")

        hook_context = HookContext(
            flag_key=flag_key,
            flag_type=flag_type,
            context=context,
            default_value=default_value,
            provider_name=self._metadata.name,
        )
        self._run_hooks("before", hook_context)
        try:
            result = self._resolve(flag_key, default_value, context, COERCERS[flag_type])
            self._run_hooks("after", hook_context, result)
            if result.error_kind is not None:
                self._run_hooks("error", hook_context, result)
            return result
        finally:
            self._run_hooks("finally_after", hook_context)

    def _resolve(
        self,
        flag_key: str,
        default_value: T,
        context: TargetingContext,
        coerce: Callable[[str], Any],
    ) -> EvaluationResult[T]:
        try:
            attributes = self.transform_context(context)
            treatment, config = self._client.get_treatment_with_config(
                context.targeting_key, flag_key, attributes
            )
        except Exception as e:
            logger.warning("treatment lookup failed", flag_key=flag_key, error=str(e))
            return self._failure(flag_key, default_value, ErrorKind.GENERAL, str(e), None)

        raw = RawTreatment(treatment=treatment, config=config)
        if raw.is_not_found():
            logger.info("treatment not found", flag_key=flag_key, treatment=raw.treatment)
            return self._failure(
                flag_key,
                default_value,
                ErrorKind.FLAG_NOT_FOUND,
                f"flag not found: {flag_key}",
                raw.config,
            )

        try:
            value = coerce(raw.treatment)
        except Exception as e:
            kind = classify_error(e)
            logger.warning(
                "treatment coercion failed",
                flag_key=flag_key,
                treatment=raw.treatment,
                error_kind=str(kind),
                error=str(e),
            )
            return self._failure(flag_key, default_value, kind, str(e), raw.config)

        logger.debug("treatment matched", flag_key=flag_key, treatment=raw.treatment)
        return EvaluationResult(
            flag_key=flag_key,
            value=value,
            reason=Reason.TARGETING_MATCH,
            variant=raw.treatment,
            metadata=_metadata_for(raw.config),
        )

    def _failure(
        self,
        flag_key: str,
        default_value: T,
        kind: ErrorKind,
        message: str,
        config: str | None,
    ) -> EvaluationResult[T]:
        return EvaluationResult(
            flag_key=flag_key,
            value=default_value,
            reason=reason_for(kind),
            error_kind=kind,
            error_message=message,
            metadata=_metadata_for(config),
        )

    def _run_hooks(self, stage: str, hook_context: HookContext, *args: Any) -> None:
        for hook in self._hooks:
            try:
                getattr(hook, stage)(hook_context, *args)
            except Exception as e:
                logger.warning(
                    "hook failed",
                    hook=type(hook).__name__,
                    stage=stage,
                    flag_key=hook_context.flag_key,
                    error=str(e),
                )


def _metadata_for(config: str | None) -> dict[str, str]:
    if config is None:
        return {}
    return {CONFIG_METADATA_KEY: config}
