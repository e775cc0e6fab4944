"""Unit tests for candidate selection."""

from catalog_api.domain.criteria import NameCriteria, resolve_name_criteria
from catalog_api.search.scoring import EXCLUDED, score_name_match
from catalog_api.search.selector import find_one_exact, find_one_loose, find_ranked


def _names(libraries):
    return [library.name for library in libraries]


class TestFindRanked:
    def test_without_criteria_keeps_storage_order(self, libraries):
        assert find_ranked(libraries, None) == libraries

    def test_without_criteria_returns_a_new_list(self, libraries):
        result = find_ranked(libraries, None)

        assert result is not libraries

    def test_literal_ranks_exact_match_first(self, library_factory):
        candidates = [library_factory("jquery-ui"), library_factory("jquery")]

        result = find_ranked(candidates, resolve_name_criteria("jquery"))

        assert _names(result) == ["jquery", "jquery-ui"]

    def test_literal_keeps_every_candidate(self, libraries):
        result = find_ranked(libraries, resolve_name_criteria("jquery"))

        assert sorted(_names(result)) == sorted(_names(libraries))
        assert _names(result)[0] == "jquery"

    def test_alternation_excludes_non_matches(self, library_factory):
        candidates = [library_factory(name) for name in ("a", "b", "c")]

        result = find_ranked(candidates, resolve_name_criteria("a,b"))

        assert _names(result) == ["a", "b"]

    def test_glob_orders_by_closeness_to_term(self, libraries):
        result = find_ranked(libraries, resolve_name_criteria("jquery*"))

        assert _names(result) == ["jquery", "jquery-ui", "jquery.cookie"]

    def test_ties_keep_input_order(self, library_factory):
        candidates = [library_factory(name) for name in ("ab", "aa", "ac")]

        result = find_ranked(candidates, resolve_name_criteria("a*"))

        assert _names(result) == ["ab", "aa", "ac"]

    def test_output_is_sorted_subset_of_matches(self, library_factory):
        names = ["vue", "vuex", "vue-router", "react", "vuetify", "preact"]
        candidates = [library_factory(name) for name in names]
        criteria = resolve_name_criteria("vue*")

        result = find_ranked(candidates, criteria)
        scores = [score_name_match(library, criteria) for library in result]

        assert scores == sorted(scores)
        assert EXCLUDED not in scores
        expected = [library for library in candidates if score_name_match(library, criteria) != EXCLUDED]
        assert sorted(_names(result)) == sorted(_names(expected))

    def test_no_matches_returns_empty(self, libraries):
        assert find_ranked(libraries, resolve_name_criteria("react*")) == []


class TestFindOneExact:
    def test_returns_first_equal_name(self, library_factory):
        first = library_factory("jquery", **{"$loki": 1})
        second = library_factory("jquery", **{"$loki": 2})

        result = find_one_exact([library_factory("jquery-ui"), first, second], NameCriteria.literal("jquery"))

        assert result is first

    def test_ignores_patterns(self, library_factory):
        candidates = [library_factory("jquery"), library_factory("jquery-ui")]

        assert find_one_exact(candidates, resolve_name_criteria("jquery*")) is None

    def test_matches_literal_pattern_text(self, library_factory):
        odd = library_factory("a,b")

        assert find_one_exact([library_factory("a"), odd], resolve_name_criteria("a,b")) is odd

    def test_no_match(self, libraries):
        assert find_one_exact(libraries, NameCriteria.literal("react")) is None


class TestFindOneLoose:
    def test_exact_match_wins(self, libraries):
        result = find_one_loose(libraries, NameCriteria.literal("jquery"))

        assert result.name == "jquery"

    def test_nearest_name_when_no_exact_match(self, libraries):
        result = find_one_loose(libraries, NameCriteria.literal("jqury"))

        assert result.name == "jquery"

    def test_tie_goes_to_first_encountered(self, library_factory):
        candidates = [library_factory("jquery-ux"), library_factory("jquery-ui")]

        result = find_one_loose(candidates, NameCriteria.literal("jquery-uz"))

        assert result is candidates[0]

    def test_all_excluded_returns_none(self, libraries):
        assert find_one_loose(libraries, resolve_name_criteria("react,vue")) is None

    def test_empty_candidates_returns_none(self):
        assert find_one_loose([], NameCriteria.literal("jquery")) is None

    def test_stops_scanning_at_exact_match(self, library_factory):
        seen: list[str] = []

        def recording_rank(candidate: str, literal: str) -> int:
            seen.append(candidate)
            return 0 if candidate == "jquery" else 5

        candidates = [library_factory(name) for name in ("jquery-ui", "jquery", "bootstrap", "d3")]

        result = find_one_loose(candidates, resolve_name_criteria("*"), rank=recording_rank)

        assert result.name == "jquery"
        assert seen == ["jquery-ui", "jquery"]

    def test_glob_picks_closest_match(self, libraries):
        result = find_one_loose(libraries, resolve_name_criteria("jquery.*"))

        assert result.name == "jquery.cookie"
