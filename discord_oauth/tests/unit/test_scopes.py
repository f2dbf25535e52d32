"""Unit tests for discord_oauth.utils.scopes module."""

import pytest

from discord_oauth.utils.scopes import missing_scopes, parse_scopes


@pytest.mark.unit
class TestParseScopes:
    """Tests for parse_scopes."""

    def test_splits_on_any_whitespace(self):
        assert parse_scopes("identify  email\tguilds\n") == ["identify", "email", "guilds"]

    def test_collapses_duplicates_preserving_order(self):
        assert parse_scopes("b a b c a") == ["b", "a", "c"]

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_input_yields_empty_list(self, value):
        assert parse_scopes(value) == []


@pytest.mark.unit
class TestMissingScopes:
    """Tests for missing_scopes."""

    def test_strict_subset_reports_difference(self):
        assert missing_scopes(["a", "b", "c"], ["a", "b"]) == ["c"]

    def test_preserves_required_order_regardless_of_granted_order(self):
        required = ["identify", "applications.commands", "gdm.join", "email"]
        assert missing_scopes(required, ["identify"]) == ["applications.commands", "gdm.join", "email"]
        assert missing_scopes(required, ["email", "identify"]) == ["applications.commands", "gdm.join"]

    def test_all_granted(self):
        assert missing_scopes(["a", "b"], ["b", "a", "extra"]) == []

    def test_empty_required_always_passes(self):
        assert missing_scopes([], []) == []
        assert missing_scopes([], ["a"]) == []

    def test_comparison_is_case_sensitive(self):
        assert missing_scopes(["Identify"], ["identify"]) == ["Identify"]
