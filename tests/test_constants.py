"""Tests for class constant introspection."""

import pytest

from fluent_introspect import Introspect, InvalidTargetError
from fluent_introspect.inspectors.constant import constants, declared_name

from sample_app.constants import Limits, StrictLimits
from sample_app.markers import Deprecated


class TestConstantDetection:
    """Which class attributes count as constants."""

    def test_upper_case_data_only(self):
        assert Introspect.constants(Limits).names() == [
            "MAX_USERS",
            "DEFAULT_PAGE_SIZE",
            "_RETRY_DELAY",
            "__SECRET",
        ]

    def test_declared_name_undoes_mangling(self):
        assert declared_name(Limits, "_Limits__SECRET") == "__SECRET"
        assert declared_name(Limits, "_RETRY_DELAY") == "_RETRY_DELAY"

    def test_inherited_constants_nearest_first(self):
        assert Introspect.constants(StrictLimits).names() == [
            "MAX_USERS",
            "BURST",
            "DEFAULT_PAGE_SIZE",
            "_RETRY_DELAY",
            "__SECRET",
        ]

    def test_override_wins(self):
        assert Introspect.constants(StrictLimits).all()["MAX_USERS"] == 10

    def test_owner(self):
        owners = {info.name: info.owner for info in constants(StrictLimits)}
        assert owners["BURST"] is StrictLimits
        assert owners["DEFAULT_PAGE_SIZE"] is Limits


class TestConstantIntrospector:
    """Filters and accessors."""

    def test_all(self):
        assert Introspect.constants(Limits).all() == {
            "MAX_USERS": 100,
            "DEFAULT_PAGE_SIZE": 25,
            "_RETRY_DELAY": 5,
            "__SECRET": "s3cret",
        }

    def test_visibility_filters(self):
        limits = Introspect.constants(Limits)
        assert limits.where_public().names() == ["MAX_USERS", "DEFAULT_PAGE_SIZE"]
        assert limits.where_protected().names() == ["_RETRY_DELAY"]
        assert limits.where_private().names() == ["__SECRET"]

    def test_where_final(self):
        assert Introspect.constants(Limits).where_final().names() == ["MAX_USERS"]
        assert Introspect.constants(StrictLimits).where_final().names() == ["MAX_USERS", "BURST"]

    def test_where_has_attribute(self):
        limits = Introspect.constants(Limits)
        assert limits.where_has_attribute(Deprecated).names() == ["MAX_USERS"]
        assert limits.where_has_attribute("sample_app.markers.Deprecated").names() == ["MAX_USERS"]

    def test_filters_chain(self):
        limits = Introspect.constants(Limits).where_public()
        assert limits.where_final().names() == ["MAX_USERS"]
        assert limits.names() == ["MAX_USERS", "DEFAULT_PAGE_SIZE"]

    def test_get(self):
        assert Introspect.constants(Limits).get("MAX_USERS") == {
            "name": "MAX_USERS",
            "value": 100,
            "visibility": "public",
            "final": True,
            "type": "int",
            "attributes": [Deprecated("use quotas")],
        }

    def test_get_untyped(self):
        info = Introspect.constants(Limits).get("_RETRY_DELAY")
        assert info["type"] is None
        assert info["final"] is False

    def test_bare_final_has_no_type(self):
        info = Introspect.constants(StrictLimits).get("MAX_USERS")
        assert info["final"] is True
        assert info["type"] is None
        assert info["attributes"] == []

    def test_get_ignores_filters(self):
        assert Introspect.constants(Limits).where_private().get("MAX_USERS") is not None

    @pytest.mark.parametrize("name", ["timeout", "registry", "HELPER", "MISSING"])
    def test_get_non_constant(self, name):
        assert Introspect.constants(Limits).get(name) is None

    def test_to_dict(self):
        data = Introspect.constants(Limits).where_protected().to_dict()
        assert list(data) == ["_RETRY_DELAY"]
        assert data["_RETRY_DELAY"]["value"] == 5

    def test_unknown_class(self):
        with pytest.raises(InvalidTargetError):
            Introspect.constants("sample_app.constants.Missing")
