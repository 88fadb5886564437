# tests/test_search_service.py
"""Tests for incremental name search."""
import pytest

from wwtt.services.search_service import MatchResult, SearchService, filter_names


class TestFilterNames:
    """Tests for the filter_names matcher."""

    def test_case_insensitive_substring(self):
        result = filter_names(["Alpha", "beta", "ALPHAbet"], "alpha")
        assert result.items == ["Alpha", "ALPHAbet"]

    def test_empty_query_returns_input_unchanged(self):
        candidates = ["b", "a", "c"]
        assert filter_names(candidates, "").items == candidates

    def test_whitespace_query_matches_everything(self):
        assert filter_names(["x", "y"], "  ").items == ["x", "y"]

    def test_query_is_trimmed(self):
        assert filter_names(["notes", "other"], "  not ").items == ["notes"]

    def test_candidates_are_trimmed(self):
        assert filter_names(["  padded  ", "plain"], "padded").items == ["  padded  "]

    def test_substring_not_prefix(self):
        assert filter_names(["docker compose", "compose"], "pose").items == [
            "docker compose", "compose"
        ]

    def test_not_fuzzy_or_tokenized(self):
        assert filter_names(["docker compose"], "dc").items == []
        assert filter_names(["docker compose"], "compose docker").items == []

    def test_no_match(self):
        result = filter_names(["a", "b"], "zzz")
        assert result.items == []
        assert result.selected_index is None

    def test_order_is_preserved(self):
        candidates = ["zz-x", "aa-x", "mm-x"]
        assert filter_names(candidates, "x").items == candidates

    def test_unicode_case_folding(self):
        assert filter_names(["Ärger", "other"], "ärg").items == ["Ärger"]

    @pytest.mark.parametrize(
        "previous, expected_index",
        [
            ("ALPHAbet", 1),
            ("Alpha", 0),
            ("beta", None),
            ("missing", None),
            (None, None),
        ],
    )
    def test_selected_index_is_position_in_results(self, previous, expected_index):
        result = filter_names(["Alpha", "beta", "ALPHAbet"], "alpha", previous)
        assert result.selected_index == expected_index

    def test_selected_label(self):
        result = filter_names(["one", "two", "three"], "t", "three")
        assert result.selected == "three"
        assert result.items[result.selected_index] == "three"

    def test_selection_is_exact_label(self):
        """Continuity uses the exact label, not the folded form."""
        result = filter_names(["Alpha"], "", "alpha")
        assert result.selected_index is None

    def test_duplicate_labels_select_first(self):
        result = filter_names(["dup", "x", "dup"], "", "dup")
        assert result.selected_index == 0

    def test_empty_candidates(self):
        assert filter_names([], "x") == MatchResult(items=[], selected_index=None)


class TestSearchService:
    """Tests for SearchService over a store."""

    def test_search_tags(self, populated_store):
        service = SearchService(populated_store)
        assert service.search_tags().items == ["all", "b", "a", "c"]
        assert service.search_tags("A").items == ["all", "a"]

    def test_search_tags_keeps_selection(self, populated_store):
        result = SearchService(populated_store).search_tags("", previous_selection="c")
        assert result.selected_index == 3

    def test_search_notes_in_tag(self, populated_store):
        service = SearchService(populated_store)
        assert service.search_notes("b").items == ["alpha", "gamma"]
        assert service.search_notes("b", "GAM").items == ["gamma"]

    def test_search_notes_in_all(self, populated_store):
        result = SearchService(populated_store).search_notes("all", "ta", "delta")
        assert result.items == ["Beta note", "delta"]
        assert result.selected_index == 1

    def test_search_notes_without_tag(self, populated_store):
        assert SearchService(populated_store).search_notes("", "").items == []
