"""Tests for combined namespace:key addressing."""

import pytest

from localeflow_sync.keys import (
    NamespacedKey,
    combined_key,
    parse_namespaced_key,
)


class TestParseNamespacedKey:
    def test_bare_key_has_no_namespace(self):
        assert parse_namespaced_key("button.save") == NamespacedKey(
            namespace=None, key="button.save"
        )

    def test_namespaced_key(self):
        assert parse_namespaced_key("common:button.save") == NamespacedKey(
            namespace="common", key="button.save"
        )

    def test_only_first_colon_separates(self):
        parsed = parse_namespaced_key("common:time:format")
        assert parsed.namespace == "common"
        assert parsed.key == "time:format"

    def test_empty_namespace_is_none(self):
        assert parse_namespaced_key(":title").namespace is None
        assert parse_namespaced_key(":title").key == "title"


class TestCombinedKey:
    def test_without_namespace(self):
        assert combined_key(None, "title") == "title"

    def test_with_namespace(self):
        assert combined_key("common", "title") == "common:title"

    def test_namespace_with_colon_rejected(self):
        with pytest.raises(ValueError, match="must not contain"):
            combined_key("a:b", "title")

    def test_empty_namespace_rejected(self):
        with pytest.raises(ValueError):
            combined_key("", "title")


class TestRoundTrip:
    @pytest.mark.parametrize(
        "namespace,key",
        [
            ("common", "button.save"),
            (None, "button.save"),
            ("auth", "error:expired"),
            ("auth", ""),
        ],
    )
    def test_round_trip(self, namespace, key):
        parsed = parse_namespaced_key(combined_key(namespace, key))
        assert parsed == NamespacedKey(namespace=namespace, key=key)

    def test_empty_namespace_does_not_survive(self):
        # ":x" and "x" address the same root-file entry.
        parsed = parse_namespaced_key(":x")
        assert parsed == NamespacedKey(namespace=None, key="x")
        assert combined_key(parsed.namespace, parsed.key) == "x"

    def test_bare_colon_is_empty_root_key(self):
        assert parse_namespaced_key(":") == NamespacedKey(
            namespace=None, key=""
        )
