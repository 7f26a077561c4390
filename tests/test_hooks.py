"""評価フックのユニットテスト"""

from typing import Any

import pytest
from k1s0_flag_provider import (
    ErrorKind,
    EvaluationResult,
    FlagProvider,
    FlagType,
    Hook,
    HookContext,
    InMemoryTreatmentClient,
    LoggingHook,
    Reason,
    TargetingContext,
    TargetingKeyMissingError,
)


class RecordingHook(Hook):
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.contexts: list[HookContext] = []
        self.results: list[EvaluationResult[Any]] = []

    def before(self, hook_context: HookContext) -> None:
        self.calls.append("before")
        self.contexts.append(hook_context)

    def after(self, hook_context: HookContext, result: EvaluationResult[Any]) -> None:
        self.calls.append("after")
        self.results.append(result)

    def error(self, hook_context: HookContext, result: EvaluationResult[Any]) -> None:
        self.calls.append("error")

    def finally_after(self, hook_context: HookContext) -> None:
        self.calls.append("finally")


class FailingHook(Hook):
    def before(self, hook_context: HookContext) -> None:
        raise RuntimeError("hook exploded")


def make_client() -> InMemoryTreatmentClient:
    client = InMemoryTreatmentClient()
    client.set_treatment("on_flag", "on")
    client.set_treatment("bad_flag", "not a bool")
    return client


def test_hooks_run_in_order_on_match() -> None:
    """一致時は before → after → finally の順に実行されること。"""
    hook = RecordingHook()
    provider = FlagProvider(make_client(), hooks=[hook])
    provider.get_boolean_evaluation("on_flag", False, TargetingContext(targeting_key="k"))
    assert hook.calls == ["before", "after", "finally"]
    assert hook.contexts[0].flag_type is FlagType.BOOLEAN
    assert hook.contexts[0].default_value is False
    assert hook.contexts[0].provider_name == "k1s0"
    assert hook.results[0].reason is Reason.TARGETING_MATCH


@pytest.mark.parametrize(
    ("flag_key", "kind"),
    [("bad_flag", ErrorKind.PARSE_ERROR), ("missing_flag", ErrorKind.FLAG_NOT_FOUND)],
)
def test_error_hook_runs_for_classified_failures(flag_key: str, kind: ErrorKind) -> None:
    """error_kind のある結果では error フックも実行されること。"""
    hook = RecordingHook()
    provider = FlagProvider(make_client(), hooks=[hook])
    provider.get_boolean_evaluation(flag_key, False, TargetingContext(targeting_key="k"))
    assert hook.calls == ["before", "after", "error", "finally"]
    assert hook.results[0].error_kind is kind


def test_hooks_not_run_without_targeting_key() -> None:
    """前提条件違反ではフックを実行しないこと。"""
    hook = RecordingHook()
    provider = FlagProvider(make_client(), hooks=[hook])
    with pytest.raises(TargetingKeyMissingError):
        provider.get_boolean_evaluation("on_flag", False, TargetingContext())
    assert hook.calls == []


def test_failing_hook_does_not_change_result() -> None:
    """フックの例外は評価結果に影響しないこと。"""
    recording = RecordingHook()
    provider = FlagProvider(make_client(), hooks=[FailingHook(), recording])
    result = provider.get_boolean_evaluation("on_flag", False, TargetingContext(targeting_key="k"))
    assert result.value is True
    assert recording.calls == ["before", "after", "finally"]


def test_logging_hook_logs_evaluation(mocker) -> None:
    """LoggingHook が評価ごとにログを出力すること。"""
    logger = mocker.MagicMock()
    provider = FlagProvider(make_client(), hooks=[LoggingHook(logger)])
    provider.get_boolean_evaluation("on_flag", False, TargetingContext(targeting_key="k"))
    logger.info.assert_called_once()
    _, kwargs = logger.info.call_args
    assert kwargs["flag_key"] == "on_flag"
    assert kwargs["reason"] == "TARGETING_MATCH"
    assert kwargs["variant"] == "on"
    assert kwargs["error_kind"] is None


def test_provider_hooks_property_is_copy() -> None:
    """hooks プロパティはコピーを返すこと。"""
    hook = RecordingHook()
    provider = FlagProvider(make_client(), hooks=[hook])
    provider.hooks.append(RecordingHook())
    assert provider.hooks == [hook]
