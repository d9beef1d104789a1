"""Tests for bound value resolution."""

from collections import OrderedDict

import pytest

from microdb.binding import BoundParameter, Bindings, ParamType, bind_values, param_type
from microdb.exceptions import InvalidArgumentError


class TestParamType:

    @pytest.mark.parametrize("value, expected", [
        (None, ParamType.NULL),
        (True, ParamType.BOOL),
        (False, ParamType.BOOL),
        (0, ParamType.INT),
        (-17, ParamType.INT),
        (1.5, ParamType.STR),
        ("text", ParamType.STR),
        ("", ParamType.STR),
    ])
    def test_scalar_types(self, value, expected):
        assert param_type(1, value) is expected

    @pytest.mark.parametrize("value", [[1], {"a": 1}, (1,), object(), b"raw"])
    def test_non_scalar_rejected(self, value):
        with pytest.raises(InvalidArgumentError):
            param_type(1, value)

    def test_native_conversion(self):
        assert BoundParameter.create(1, 2.5).native == "2.5"
        assert BoundParameter.create(1, True).native is True
        assert BoundParameter.create(1, 7).native == 7
        assert BoundParameter.create(1, None).native is None


class TestBindValues:

    def test_none_gives_empty_bindings(self):
        bindings = bind_values(None)
        assert len(bindings) == 0
        assert bindings.parameters() == []

    def test_positional_keys_are_renumbered(self):
        bindings = bind_values({5: "a", 2: "b"})
        assert [p.placeholder for p in bindings.params] == [1, 2]
        assert bindings.parameters() == ["a", "b"]

    def test_sequence_is_positional(self):
        bindings = bind_values(["x", 3, None])
        assert [p.placeholder for p in bindings.params] == [1, 2, 3]
        assert bindings.parameters() == ["x", 3, None]

    def test_named_keys_used_verbatim(self):
        bindings = bind_values({"name": "Ann", "age": 30})
        assert bindings.parameters() == {"name": "Ann", "age": 30}

    def test_leading_colon_is_stripped(self):
        bindings = bind_values({":name": "Ann"})
        assert bindings.params[0].placeholder == "name"

    def test_mixed_keys_share_one_counter(self):
        bindings = bind_values(OrderedDict([("name", "Ann"), (0, 10)]))
        assert [p.placeholder for p in bindings.params] == ["name", 2]
        assert bindings.parameters() == {"name": "Ann", "2": 10}

    def test_types_follow_values(self):
        bindings = bind_values([None, True, 1, 1.0, "s"])
        assert [p.type for p in bindings.params] == [
            ParamType.NULL, ParamType.BOOL, ParamType.INT, ParamType.STR, ParamType.STR,
        ]

    def test_invalid_value_reports_position(self):
        with pytest.raises(InvalidArgumentError) as info:
            bind_values({7: "ok", 9: ["bad"]})
        assert info.value.placeholder == 2
        assert info.value.value_type == "list"
        assert "#2" in str(info.value)

    def test_invalid_value_reports_name(self):
        with pytest.raises(InvalidArgumentError, match="`tags`"):
            bind_values({"tags": {"a"}})

    def test_string_is_not_a_value_sequence(self):
        with pytest.raises(InvalidArgumentError):
            bind_values("abc")

    def test_bindings_accumulate_in_order(self):
        bindings = Bindings()
        bindings.bind(1, "a")
        bindings.bind(2, "b")
        assert not bindings.has_named
        assert bindings.parameters() == ["a", "b"]
