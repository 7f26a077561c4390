"""Value モデルのユニットテスト"""

from datetime import datetime, timedelta, timezone

import pytest
from k1s0_flag_provider import (
    BoolValue,
    InstantValue,
    IntValue,
    ListValue,
    NullValue,
    StrValue,
    StructureValue,
    ValueKind,
)


def test_each_case_has_kind() -> None:
    """各ケースがタグを持つこと。"""
    assert NullValue().kind == ValueKind.NULL
    assert BoolValue(True).kind == ValueKind.BOOL
    assert StrValue("a").kind == ValueKind.STR
    assert ListValue(()).kind == ValueKind.LIST
    assert StructureValue({}).kind == ValueKind.STRUCTURE


def test_int_value_rejects_out_of_range() -> None:
    """int64 範囲外の整数は ValueError。"""
    assert IntValue(2**63 - 1).value == 2**63 - 1
    with pytest.raises(ValueError):
        IntValue(2**63)


def test_instant_value_normalizes_to_utc() -> None:
    """InstantValue が UTC に正規化されること。"""
    jst = timezone(timedelta(hours=9))
    instant = InstantValue(datetime(2022, 10, 14, 7, 5, 54, tzinfo=jst))
    assert instant.value.tzinfo == timezone.utc
    assert instant.value.hour == 22
    assert instant == InstantValue(datetime(2022, 10, 13, 22, 5, 54, tzinfo=timezone.utc))


def test_instant_value_requires_timezone() -> None:
    """タイムゾーン無しの datetime は ValueError。"""
    with pytest.raises(ValueError):
        InstantValue(datetime(2022, 10, 13, 22, 5, 54))


def test_instant_value_rejects_overflow_in_utc() -> None:
    """UTC 換算で範囲外になる datetime は ValueError。"""
    plus_one = timezone(timedelta(hours=1))
    with pytest.raises(ValueError):
        InstantValue(datetime(1, 1, 1, 0, 0, 0, tzinfo=plus_one))


def test_structure_equality_ignores_key_order() -> None:
    """StructureValue の等価性はキー順序に依存しないこと。"""
    a = StructureValue({"a": IntValue(1), "b": StrValue("x")})
    b = StructureValue({"b": StrValue("x"), "a": IntValue(1)})
    assert a == b


def test_structure_is_read_only() -> None:
    """StructureValue のフィールドは変更できないこと。"""
    source = {"a": IntValue(1)}
    structure = StructureValue(source)
    source["b"] = IntValue(2)
    assert "b" not in structure
    with pytest.raises(TypeError):
        structure.fields["c"] = IntValue(3)  # type: ignore[index]


def test_structure_accessors() -> None:
    """StructureValue のアクセサ。"""
    structure = StructureValue({"a": IntValue(1)})
    assert structure["a"] == IntValue(1)
    assert structure.get("missing") is None
    assert structure.keys() == ["a"]
    assert len(structure) == 1


def test_list_preserves_order() -> None:
    """ListValue が順序を保持すること。"""
    items = ListValue([IntValue(1), BoolValue(True), StrValue("x")])
    assert isinstance(items.items, tuple)
    assert list(items) == [IntValue(1), BoolValue(True), StrValue("x")]
    assert items[2] == StrValue("x")
    assert len(items) == 3
    assert items != ListValue([BoolValue(True), IntValue(1), StrValue("x")])
