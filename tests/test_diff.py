"""Tests for drift detection."""
import asyncio

import pytest

from ssm_secrets_sync.secrets.domains.diff import deep_equal, has_changed

from conftest import FakeParameterStore

PATH = "/my-api-dev/secrets/api"


class TestDeepEqual:
    """Test suite for deep_equal()."""

    def test_mapping_key_order_ignored(self):
        assert deep_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})

    def test_sequence_order_matters(self):
        assert not deep_equal([1, 2], [2, 1])

    @pytest.mark.parametrize("left,right", [
        (1, "1"),
        (True, 1),
        (None, ""),
        ({"a": 1}, [("a", 1)]),
        ({"a": 1}, {"a": 1, "b": 2}),
        ([1], [1, 1]),
    ])
    def test_type_or_shape_mismatch(self, left, right):
        assert not deep_equal(left, right)
        assert not deep_equal(right, left)

    def test_int_and_float_compare_by_value(self):
        assert deep_equal(30, 30.0)

    def test_nested_structures(self):
        left = {"api": {"key": "abc", "hosts": ["a", {"port": 1}]}}
        right = {"api": {"hosts": ["a", {"port": 1}], "key": "abc"}}
        assert deep_equal(left, right)


class TestHasChanged:
    """Test suite for has_changed()."""

    def test_missing_remote_is_changed(self):
        store = FakeParameterStore()
        assert asyncio.run(has_changed(store, PATH, "pw1")) is True

    @pytest.mark.parametrize("local_value", ["pw1", {"key": "abc"}, 30, None])
    def test_fetch_failure_is_changed_regardless_of_value(self, local_value):
        """Test unreadable remote values always count as changed."""
        store = FakeParameterStore({PATH: "pw1"}, fail_reads=True)
        assert asyncio.run(has_changed(store, PATH, local_value)) is True

    def test_undecodable_remote_is_changed(self):
        store = FakeParameterStore({PATH: "{unclosed: ["})
        assert asyncio.run(has_changed(store, PATH, "{unclosed: [")) is True

    def test_equal_structure_is_unchanged(self):
        store = FakeParameterStore({PATH: '{"ttl": 30, "key": "abc"}'})
        assert asyncio.run(has_changed(store, PATH, {"key": "abc", "ttl": 30})) is False

    def test_different_structure_is_changed(self):
        store = FakeParameterStore({PATH: '{"key": "abc", "ttl": 60}'})
        assert asyncio.run(has_changed(store, PATH, {"key": "abc", "ttl": 30})) is True

    def test_scalar_type_sensitive(self):
        """Test a stored number never matches a local string."""
        store = FakeParameterStore({PATH: "1"})
        assert asyncio.run(has_changed(store, PATH, "1")) is True
        assert asyncio.run(has_changed(store, PATH, 1)) is False

    def test_fetch_requested_at_given_path(self):
        store = FakeParameterStore({PATH: "pw1"})
        asyncio.run(has_changed(store, PATH, "pw1"))
        assert store.calls == [("get_parameter", PATH)]
