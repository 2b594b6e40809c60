"""Tests for the single-target introspectors."""

import pytest

from fluent_introspect import Introspect, InvalidTargetError

from sample_app.contracts import Cacheable, Repository
from sample_app.controllers import HomeController, UserController
from sample_app.enums import Priority, Status, Suit
from sample_app.markers import Deprecated, Table
from sample_app.mixins import AuditMixin, SoftDeletesMixin, TimestampsMixin
from sample_app.repositories import BaseRepository, PostRepository, UserRepository
from sample_app.services import Clock, Mailer, PayloadValidator, greet


def make_multiplier(factor):
    return lambda value: value * factor


class TestClassIntrospector:
    """Checks and accessors for one class."""

    def test_hierarchy(self):
        inspector = Introspect.class_(UserRepository)
        assert inspector.parent() == "sample_app.repositories.BaseRepository"
        assert inspector.parent_classes() == ["sample_app.repositories.BaseRepository"]
        assert inspector.all_traits() == [
            "sample_app.mixins.AuditMixin",
            "sample_app.mixins.TimestampsMixin",
        ]
        assert inspector.interfaces() == ["sample_app.contracts.Repository"]
        assert inspector.direct_interfaces() == []

    def test_direct_interfaces(self):
        inspector = Introspect.class_(PostRepository)
        assert inspector.interfaces() == [
            "sample_app.contracts.Repository",
            "sample_app.contracts.Cacheable",
        ]
        assert inspector.direct_interfaces() == ["sample_app.contracts.Cacheable"]

    def test_checks_pass(self):
        inspector = (
            Introspect.class_("sample_app.repositories.UserRepository")
            .where_extends(BaseRepository)
            .where_implements(Repository)
            .where_uses_trait(TimestampsMixin)
            .where_concrete()
            .where_has_attribute(Table)
        )
        assert inspector.passes()
        assert inspector.get() is UserRepository

    def test_checks_fail(self):
        inspector = Introspect.class_(UserRepository).where_uses_trait(SoftDeletesMixin)
        assert not inspector.passes()
        assert inspector.get() is None

    def test_protocols_need_declaration(self):
        """A structural match is not an implementation."""
        assert not Introspect.class_(UserRepository).where_implements(Cacheable).passes()
        assert Introspect.class_(PostRepository).where_implements(Cacheable).passes()

    def test_negated_checks(self):
        inspector = (
            Introspect.class_(UserController)
            .where_doesnt_extend(BaseRepository)
            .where_doesnt_implement(Repository)
            .where_doesnt_use_trait(AuditMixin)
            .where_doesnt_have_method("find")
            .where_doesnt_have_attribute(Table)
        )
        assert inspector.passes()

    def test_abstract_and_instantiable(self):
        assert Introspect.class_(BaseRepository).where_abstract().passes()
        assert not Introspect.class_(BaseRepository).where_instantiable().passes()
        assert not Introspect.class_(Status).where_instantiable().passes()

    def test_copy_on_write(self):
        base = Introspect.class_(UserRepository)
        failing = base.where_abstract()
        assert base.passes()
        assert not failing.passes()

    def test_methods(self):
        inspector = Introspect.class_(UserRepository)
        methods = inspector.public_methods()
        assert methods[:7] == [
            "find",
            "save",
            "cache_key",
            "legacy_find",
            "make",
            "for_connection",
            "flush",
        ]
        assert {"audit", "touch", "describe"} <= set(methods)
        assert "_hydrate" not in methods
        assert inspector.static_methods() == ["make", "for_connection"]
        assert inspector.where_has_public_method("find").passes()
        assert not inspector.where_has_public_method("_hydrate").passes()
        assert inspector.where_has_method("_hydrate").passes()

    def test_properties(self):
        inspector = Introspect.class_(UserRepository)
        assert inspector.public_properties() == ["connection", "TABLE"]
        assert inspector.static_properties() == ["TABLE"]
        assert inspector.where_has_property("connection").passes()
        assert inspector.where_has_static_properties().passes()
        assert not Introspect.class_(HomeController).where_has_static_properties().passes()

    def test_constructor(self):
        inspector = Introspect.class_(UserRepository)
        assert inspector.where_has_constructor().passes()
        assert inspector.constructor_parameters() == [
            {
                "name": "connection",
                "type": "str",
                "has_default": True,
                "default": "default",
                "is_promoted": False,
                "is_variadic": False,
                "kind": "positional_or_keyword",
            }
        ]
        assert not Introspect.class_(HomeController).where_has_constructor().passes()

    def test_attributes(self):
        inspector = Introspect.class_(UserRepository)
        assert inspector.attributes() == [Table("users")]
        assert inspector.attributes(Deprecated) == []

    def test_attributes_are_not_inherited(self):
        class SpecialRepository(UserRepository):
            pass

        assert Introspect.class_(SpecialRepository).attributes() == []

    def test_to_dict(self):
        data = Introspect.class_(UserRepository).to_dict()
        assert data["name"] == "sample_app.repositories.UserRepository"
        assert data["namespace"] == "sample_app.repositories"
        assert data["short_name"] == "UserRepository"
        assert data["is_abstract"] is False
        assert data["is_final"] is False
        assert data["is_instantiable"] is True

    def test_unknown_class(self):
        with pytest.raises(InvalidTargetError) as exc_info:
            Introspect.class_("sample_app.repositories.Missing")
        assert exc_info.value.context["target"] == "sample_app.repositories.Missing"


class TestInstanceIntrospector:
    """Checks against an object and its class."""

    def test_class_checks(self):
        repository = UserRepository("mysql")
        inspector = (
            Introspect.instance(repository)
            .where_extends(BaseRepository)
            .where_implements(Repository)
            .where_uses_trait(AuditMixin)
        )
        assert inspector.passes()
        assert inspector.get() is repository

    def test_instance_state_counts_as_property(self):
        repository = UserRepository()
        repository.extra = 1
        inspector = Introspect.instance(repository)
        assert inspector.where_has_property("extra").passes()
        assert "extra" in inspector.public_properties()
        assert not Introspect.instance(UserRepository()).where_has_property("extra").passes()

    def test_names(self):
        inspector = Introspect.instance(Mailer())
        assert inspector.class_name() == "sample_app.services.Mailer"
        assert inspector.basename() == "Mailer"
        assert inspector.namespace() == "sample_app.services"

    def test_to_dict(self):
        data = Introspect.instance(UserRepository()).to_dict()
        assert data["class"] == "sample_app.repositories.UserRepository"
        assert data["parent"] == "sample_app.repositories.BaseRepository"
        assert data["interfaces"] == ["sample_app.contracts.Repository"]
        assert "find" in data["methods"]

    @pytest.mark.parametrize("target", [None, UserRepository])
    def test_rejects_non_instances(self, target):
        with pytest.raises(InvalidTargetError):
            Introspect.instance(target)


class TestEnumIntrospector:
    """Backed and unit enums."""

    def test_string_backed(self):
        inspector = Introspect.enum(Status)
        assert inspector.is_backed()
        assert inspector.backed_type() == "str"
        assert inspector.cases() == ["ACTIVE", "INACTIVE"]
        assert inspector.values() == ["active", "inactive"]
        assert inspector.where_backed().passes()

    def test_int_backed(self):
        inspector = Introspect.enum("sample_app.enums.Priority")
        assert inspector.backed_type() == "int"
        assert inspector.values() == [1, 2]
        assert inspector.methods() == []

    def test_unit_enum(self):
        inspector = Introspect.enum(Suit)
        assert not inspector.is_backed()
        assert inspector.backed_type() is None
        assert inspector.values() == []
        assert inspector.where_unit().passes()

    def test_aliases_are_not_cases(self):
        assert Introspect.enum(Suit).cases() == ["HEARTS", "SPADES"]

    def test_user_declared_methods_only(self):
        methods = Introspect.enum(Status).methods()
        assert "label" in methods
        assert "upper" not in methods

    def test_stdlib_bases_are_not_traits(self):
        assert Introspect.enum(Priority).traits() == []
        assert Introspect.enum(Status).interfaces() == []

    def test_to_dict(self):
        data = Introspect.enum(Suit).to_dict()
        assert data["name"] == "sample_app.enums.Suit"
        assert data["is_backed"] is False
        assert data["cases"] == ["HEARTS", "SPADES"]

    def test_not_an_enum(self):
        with pytest.raises(InvalidTargetError):
            Introspect.enum(UserController)


class TestMethodIntrospector:
    """Signatures, flags, attributes and docstrings of one method."""

    def test_parameters(self):
        method = Introspect.method(UserRepository, "find")
        assert method.parameters() == [
            {
                "name": "key",
                "type": "int",
                "default": None,
                "has_default": False,
                "is_variadic": False,
                "is_optional": False,
                "position": 0,
                "kind": "positional_or_keyword",
            },
            {
                "name": "with_trashed",
                "type": "bool",
                "default": False,
                "has_default": True,
                "is_variadic": False,
                "is_optional": True,
                "position": 1,
                "kind": "keyword_only",
            },
        ]
        assert method.return_type() == "?dict"

    def test_static_and_class_methods(self):
        make = Introspect.method(UserRepository, "make")
        assert make.is_static()
        assert [p["name"] for p in make.parameters()] == ["connection"]
        assert make.return_type() == "UserRepository"

        for_connection = Introspect.method(UserRepository, "for_connection")
        assert for_connection.is_static()
        assert [p["name"] for p in for_connection.parameters()] == ["connection"]

    def test_flags(self):
        assert Introspect.method(UserRepository, "flush").is_final()
        assert not Introspect.method(UserRepository, "find").is_final()
        assert Introspect.method(Repository, "find").is_abstract()
        assert Introspect.method(UserRepository, "_hydrate").visibility() == "protected"

    def test_inherited_method(self):
        method = Introspect.method(UserRepository, "touch")
        assert method.parameters() == []
        assert method.return_type() == "None"

    def test_attributes(self):
        method = Introspect.method(UserRepository, "legacy_find")
        assert method.attributes() == [
            {"name": "sample_app.markers.Deprecated", "arguments": {"reason": "use find"}}
        ]

    def test_google_docstring(self):
        doc = Introspect.method(UserRepository, "find").docstring()
        assert doc["description"] == "Find a record by key."
        assert doc["params"] == {
            "key": "Primary key to look up",
            "with_trashed": "Include soft-deleted rows",
        }
        assert doc["returns"] == "The record, or None"
        assert doc["raises"] == {"KeyError": "If the store is unavailable"}

    def test_rest_docstring(self):
        doc = Introspect.method(UserRepository, "legacy_find").docstring()
        assert doc["description"] == "Old lookup."
        assert doc["params"] == {"key": "the key"}
        assert doc["returns"] == "the record"
        assert doc["raises"] == {"LookupError": "when missing"}

    def test_missing_docstring(self):
        doc = Introspect.method(UserRepository, "save").docstring()
        assert doc == {"description": None, "params": {}, "returns": None, "raises": {}}

    def test_to_dict(self):
        data = Introspect.method(UserRepository, "find").to_dict()
        assert data["class"] == "sample_app.repositories.UserRepository"
        assert data["visibility"] == "public"
        assert data["is_static"] is False

    def test_missing_method(self):
        with pytest.raises(InvalidTargetError) as exc_info:
            Introspect.method(UserRepository, "missing")
        assert exc_info.value.context["method"] == "missing"

    def test_property_is_not_a_method(self):
        with pytest.raises(InvalidTargetError):
            Introspect.method(UserRepository, "TABLE")

    def test_missing_class(self):
        with pytest.raises(InvalidTargetError):
            Introspect.method("sample_app.Missing", "find")


class TestCallableIntrospector:
    """Functions, closures, bound methods and invokable objects."""

    def test_function(self):
        inspector = Introspect.callable_(greet)
        assert [p["name"] for p in inspector.parameters()] == ["name", "greeting"]
        assert inspector.parameters()[1]["default"] == "Hello"
        assert inspector.return_type() == "str"
        assert inspector.scope_class() is None
        assert not inspector.is_static()

    def test_dotted_path(self):
        inspector = Introspect.callable_("sample_app.services.greet")
        assert inspector.return_type() == "str"

    def test_closure_bound_variables(self):
        inspector = Introspect.callable_(make_multiplier(3))
        assert inspector.bound_variables() == {"factor": 3}
        assert [p["name"] for p in inspector.parameters()] == ["value"]

    def test_bound_method(self):
        inspector = Introspect.callable_(UserRepository().find)
        assert [p["name"] for p in inspector.parameters()] == ["key", "with_trashed"]
        assert inspector.scope_class() == "sample_app.repositories.UserRepository"

    def test_class_method(self):
        inspector = Introspect.callable_(Clock.create)
        assert inspector.is_static()
        assert [p["name"] for p in inspector.parameters()] == ["timezone"]

    def test_method_looked_up_on_class(self):
        inspector = Introspect.callable_("sample_app.services.Mailer.send")
        assert [p["name"] for p in inspector.parameters()] == ["to", "body"]
        assert inspector.scope_class() == "sample_app.services.Mailer"

    def test_class_method_pair(self):
        inspector = Introspect.callable_((UserRepository, "make"))
        assert inspector.is_static()
        assert [p["name"] for p in inspector.parameters()] == ["connection"]

    def test_invokable_object(self):
        inspector = Introspect.callable_(PayloadValidator())
        assert [p["name"] for p in inspector.parameters()] == ["payload"]
        assert inspector.return_type() == "bool"
        assert inspector.scope_class() == "sample_app.services.PayloadValidator"

    def test_source_location(self):
        inspector = Introspect.callable_(greet)
        assert inspector.source_file().endswith("services.py")
        start, end = inspector.source_lines()
        assert start <= end

    def test_to_dict(self):
        data = Introspect.callable_(greet).to_dict()
        assert set(data) == {
            "parameters",
            "return_type",
            "bound_variables",
            "scope_class",
            "is_static",
            "source_file",
            "source_lines",
        }

    @pytest.mark.parametrize(
        "target",
        [42, "sample_app.services.missing", (UserRepository, "missing"), UserController],
    )
    def test_rejects_non_callables(self, target):
        with pytest.raises(InvalidTargetError):
            Introspect.callable_(target)
