"""Unit tests for query parameter translation."""

from catalog_api.service_layer.params import RESERVED_PARAMS, build_action_params, has_param


class TestBuildActionParams:
    def test_reserved_keys_are_not_filters(self):
        query = {"name": "jquery", "version": "1.0.0", "fields": "name", "author": "jQuery Foundation"}

        assert build_action_params(query) == {"author": "jQuery Foundation"}

    def test_empty_values_are_dropped(self):
        assert build_action_params({"author": "", "mainfile": None, "github": "x"}) == {"github": "x"}

    def test_empty_query(self):
        assert build_action_params({}) == {}

    def test_reserved_set(self):
        assert RESERVED_PARAMS == {"name", "version", "fields"}


class TestHasParam:
    def test_name_counts(self):
        assert has_param({"name": "jquery"})

    def test_filter_counts(self):
        assert has_param({"author": "jQuery Foundation"})

    def test_version_and_fields_alone_do_not_count(self):
        assert not has_param({"version": "1.0.0", "fields": "name"})

    def test_empty_name_does_not_count(self):
        assert not has_param({"name": ""})

    def test_empty_query(self):
        assert not has_param({})
