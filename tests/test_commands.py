"""
Tests for the public command surface.

Covers the end-to-end scenarios for filtering, the degrade-silently contract
for unknown sessions, and explicit lock failures.
"""

import json

import pytest

from log_facets import LockUnavailableError, LogFacetCommands, MatchType, SessionRegistry, SortKey
from log_facets.registry import get_default_registry


class TestScenarios:
    """End-to-end filtering scenarios."""

    def test_single_or_facet(self, commands, level_lines):
        session_id = commands.start_session(level_lines)
        commands.add_facet(session_id, "lvl", "OR")
        commands.set_filtered_for_facet_value(session_id, "lvl", "a", True)

        result = commands.get_filtered_data(session_id, "", 0, 100, [])

        assert result.data == [{"lvl": "a"}, {"lvl": "a"}]
        assert result.filtered_total == 2
        assert result.total == 3

    def test_and_facet_disjoint_from_running_set_empties_result(self, commands, level_lines):
        session_id = commands.start_session(level_lines)
        commands.add_facet(session_id, "lvl", "OR")
        commands.add_facet(session_id, "src", "AND")
        commands.set_filtered_for_facet_value(session_id, "lvl", "a", True)

        # A value has to be discovered before it can be selected
        commands.add_data(session_id, [json.dumps({"lvl": "c", "src": "x"})])
        commands.set_filtered_for_facet_value(session_id, "src", "x", True)

        facets = commands.get_facets(session_id)
        assert facets[1].find_value("x").filtered is True

        result = commands.get_filtered_data(session_id, "", 0, 100, [])
        # No lvl=a record has src=x
        assert result.data == []
        assert result.filtered_total == 0
        assert result.total == 4

    def test_offset_beyond_filtered_set(self, commands, level_lines):
        session_id = commands.start_session(level_lines)

        result = commands.get_filtered_data(session_id, "", 5, 10, [])

        assert result.data == []
        assert result.filtered_total == 3
        assert result.total == 3

    def test_full_pipeline(self, commands, service_lines):
        session_id = commands.start_session(service_lines)
        commands.add_facet(session_id, "level", "OR")
        commands.add_facet(session_id, "src", "AND")
        commands.set_filtered_for_facet_value(session_id, "level", "error", True)
        commands.set_filtered_for_facet_value(session_id, "level", "warn", True)
        commands.set_filtered_for_facet_value(session_id, "src", "api", True)

        result = commands.get_filtered_data(
            session_id, "", 0, 10, [SortKey("msg", desc=True)]
        )

        assert [r["msg"] for r in result.data] == ["Timeout talking to upstream", "Slow request"]
        assert result.filtered_total == 2
        assert result.total == 5

    def test_search_reaches_nested_objects(self, commands, service_lines):
        session_id = commands.start_session(service_lines)

        result = commands.get_filtered_data(session_id, "/users", 0, 10, [])

        assert [r["msg"] for r in result.data] == ["Slow request"]

    def test_sorting_accepts_wire_dicts(self, commands, service_lines):
        session_id = commands.start_session(service_lines)

        result = commands.get_filtered_data(
            session_id, "", 0, 2, [{"id": "ms", "desc": True}]
        )

        assert [r.get("ms") for r in result.data] == [5000, 250]
        assert result.filtered_total == 5


class TestFacetBookkeeping:
    """Facet values through the command surface."""

    def test_append_never_removes_values(self, commands, level_lines):
        session_id = commands.start_session(level_lines)
        commands.add_facet(session_id, "lvl", "OR")
        commands.set_filtered_for_facet_value(session_id, "lvl", "b", True)

        before = {v.value for v in commands.get_facets(session_id)[0].values}
        commands.add_data(session_id, [json.dumps({"lvl": "z"}), "not json"])
        after = commands.get_facets(session_id)[0]

        assert before <= {v.value for v in after.values}
        assert after.find_value("z").total == 1
        assert after.find_value("a").total == 2
        assert after.find_value("b").filtered is True

    def test_appended_text_is_parsed(self, commands):
        session_id = commands.start_session([])
        commands.add_data(session_id, ['{"lvl": "a"}', "raw line"])

        result = commands.get_filtered_data(session_id, "", 0, 10, [])
        assert result.data == [{"lvl": "a"}, "raw line"]

    def test_match_type_update(self, commands, level_lines):
        session_id = commands.start_session(level_lines)
        commands.add_facet(session_id, "lvl", "OR")
        commands.set_facet_match_type(session_id, "lvl", "AND")

        assert commands.get_facets(session_id)[0].match_type is MatchType.AND

        commands.set_facet_match_type(session_id, "lvl", "bogus")
        assert commands.get_facets(session_id)[0].match_type is MatchType.OR

    def test_remove_facet(self, commands, level_lines):
        session_id = commands.start_session(level_lines)
        commands.add_facet(session_id, "lvl", "OR")
        commands.set_filtered_for_facet_value(session_id, "lvl", "a", True)

        commands.remove_facet(session_id, "lvl")

        assert commands.get_facets(session_id) == []
        assert commands.get_filtered_data(session_id, "", 0, 10, []).filtered_total == 3

    def test_total_ignores_filters_search_and_paging(self, commands, service_lines):
        session_id = commands.start_session(service_lines)
        commands.add_facet(session_id, "level", "OR")
        commands.set_filtered_for_facet_value(session_id, "level", "info", True)

        for query, offset, limit in [("", 0, 1), ("query", 0, 10), ("zzz", 3, 3)]:
            result = commands.get_filtered_data(session_id, query, offset, limit, [])
            assert result.total == 5


class TestUnknownSession:
    """Unknown session ids degrade to defaults instead of raising."""

    def test_mutations_are_noops(self, commands):
        commands.add_data("missing", ["{}"])
        commands.add_facet("missing", "lvl", "OR")
        commands.set_facet_match_type("missing", "lvl", "AND")
        commands.remove_facet("missing", "lvl")
        commands.set_filtered_for_facet_value("missing", "lvl", "a", True)

        assert len(commands.registry) == 0

    def test_reads_return_defaults(self, commands):
        assert commands.get_facets("missing") == []

        result = commands.get_filtered_data("missing", "x", 0, 10, [])
        assert result.data == []
        assert result.filtered_total == 0
        assert result.total == 0

    def test_drop_session(self, commands):
        session_id = commands.start_session([])

        assert commands.drop_session(session_id) is True
        assert commands.drop_session(session_id) is False
        assert commands.get_facets(session_id) == []

    def test_sessions_are_isolated(self, commands, level_lines):
        first = commands.start_session(level_lines)
        second = commands.start_session([])
        commands.add_facet(first, "lvl", "OR")

        assert commands.get_facets(second) == []
        assert commands.get_filtered_data(second, "", 0, 10, []).total == 0


class TestLockFailures:
    """Lock problems surface as explicit errors."""

    def test_poisoned_registry_raises(self, commands):
        session_id = commands.start_session([])
        with pytest.raises(RuntimeError):
            with commands.registry.locked(mutating=True):
                raise RuntimeError("half-done mutation")

        with pytest.raises(LockUnavailableError):
            commands.get_facets(session_id)
        with pytest.raises(LockUnavailableError):
            commands.add_data(session_id, ["{}"])

    def test_non_text_append_does_not_poison(self, commands, level_lines):
        """Appending values that are not text stores them as strings."""
        session_id = commands.start_session(level_lines)
        other = commands.start_session(["{}"])

        commands.add_data(session_id, [1, None])

        assert commands.get_filtered_data(session_id, "", 0, 10, []).data[3:] == ["1", "None"]
        assert commands.get_filtered_data(other, "", 0, 10, []).total == 1
        assert commands.drop_session(other) is True


class TestDefaultRegistry:
    """Commands built without a registry share the process default."""

    def test_shared_default(self):
        first = LogFacetCommands()
        second = LogFacetCommands()

        session_id = first.start_session(["{}"])

        assert second.get_filtered_data(session_id, "", 0, 10, []).total == 1

    def test_empty_injected_registry_is_used(self, config):
        """An injected registry is kept even while it holds no sessions."""
        registry = SessionRegistry(config)
        assert len(registry) == 0

        commands = LogFacetCommands(registry)
        session_id = commands.start_session(["{}"])

        assert commands.registry is registry
        assert session_id in registry
        assert session_id not in get_default_registry()
