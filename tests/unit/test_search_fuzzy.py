"""Unit tests for the name closeness metric."""

from catalog_api.search.fuzzy import DEFAULT_RANK, levenshtein_distance


class TestLevenshteinDistance:
    def test_identical_strings(self):
        assert levenshtein_distance("jquery", "jquery") == 0

    def test_empty_strings(self):
        assert levenshtein_distance("", "") == 0
        assert levenshtein_distance("abc", "") == 3
        assert levenshtein_distance("", "abc") == 3

    def test_single_insertion(self):
        assert levenshtein_distance("d3", "d3js") == 2
        assert levenshtein_distance("cat", "cats") == 1

    def test_single_deletion(self):
        assert levenshtein_distance("cats", "cat") == 1

    def test_single_substitution(self):
        assert levenshtein_distance("cat", "bat") == 1

    def test_multiple_edits(self):
        assert levenshtein_distance("kitten", "sitting") == 3

    def test_case_sensitive(self):
        assert levenshtein_distance("jQuery", "jquery") == 1

    def test_symmetric(self):
        assert levenshtein_distance("jquery", "jquery-ui") == levenshtein_distance("jquery-ui", "jquery")

    def test_suffixed_names_rank_by_suffix_length(self):
        assert levenshtein_distance("jquery-ui", "jquery") == 3
        assert levenshtein_distance("jquery.cookie", "jquery") == 7

    def test_different_strings_never_rank_zero(self):
        for a, b in [("a", "b"), ("jquery", "jquerY"), ("x", "")]:
            assert levenshtein_distance(a, b) >= 1

    def test_glob_term_ranks_closest_name_first(self):
        assert levenshtein_distance("jquery", "jquery*") < levenshtein_distance("jquery-ui", "jquery*")

    def test_default_rank_is_levenshtein(self):
        assert DEFAULT_RANK is levenshtein_distance
