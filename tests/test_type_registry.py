from abc import ABC, abstractmethod

import pytest

from armature.domain import ConstructorParameter, ConstructorSignature
from armature.errors import TypeNotConstructible
from armature.type_registry import TypeRegistry, type_key


class Connection:
    def __init__(self, host: str, port: int = 5432):
        self.host = host
        self.port = port


class PooledConnection(Connection):
    def __init__(self, host: str, port: int = 5432, *extra, size: int = 4, **options):
        super().__init__(host, port)
        self.size = size
        self.options = options


class Repository(ABC):
    @abstractmethod
    def find(self, key): ...


@pytest.fixture
def types():
    return TypeRegistry()


def test_class_key_is_module_and_qualified_name(types):
    assert types.key_for(Connection) == f"{__name__}.Connection"
    assert type_key(Connection) == types.key_for(Connection)


def test_strings_are_their_own_key(types):
    assert types.key_for("app.Anything") == "app.Anything"


def test_describe_introspects_constructor(types):
    descriptor = types.describe(Connection)

    assert descriptor.factory is Connection
    assert descriptor.signature.names == ("host", "port")
    assert not descriptor.signature.parameters[0].has_default
    assert descriptor.signature.parameters[1].default == 5432


def test_variadic_parameters_are_not_named_parameters(types):
    signature = types.describe(PooledConnection).signature

    assert signature.names == ("host", "port", "size")
    assert signature.accepts_extra_keywords


def test_class_ancestry_is_root_first_without_object(types):
    assert types.ancestry(PooledConnection) == (
        type_key(Connection),
        type_key(PooledConnection),
    )


def test_unknown_name_has_ancestry_of_itself(types):
    assert types.ancestry("nowhere.Nothing") == ("nowhere.Nothing",)


def test_unknown_name_is_not_constructible(types):
    with pytest.raises(TypeNotConstructible, match="no type is registered"):
        types.describe("nowhere.Nothing")


def test_abstract_class_is_not_constructible(types):
    with pytest.raises(TypeNotConstructible, match="abstract methods \\['find'\\]"):
        types.describe(Repository)


def test_non_type_identifier_is_rejected(types):
    with pytest.raises(TypeNotConstructible):
        types.key_for(42)


def test_uninspectable_factory_is_not_constructible(types):
    with pytest.raises(TypeNotConstructible):
        types.register_factory("broken", 42)


def test_register_class_under_alias(types):
    @types.constructible("connection")
    class AliasedConnection(Connection):
        pass

    assert types.key_for("connection") == type_key(AliasedConnection)
    assert types.describe("connection").factory is AliasedConnection
    assert "connection" in types


def test_register_factory_with_declared_signature_and_ancestry(types):
    def make_cache(**settings):
        return dict(settings)

    descriptor = types.register_factory(
        "cache",
        make_cache,
        ancestry=["store"],
        signature=ConstructorSignature((ConstructorParameter("size", default=128),)),
    )

    assert descriptor.ancestry == ("store", "cache")
    assert types.describe("cache").signature.names == ("size",)
    assert types.ancestry("cache") == ("store", "cache")


def test_register_factory_introspects_when_no_signature_given(types):
    def make_cache(size, ttl=60):
        return size, ttl

    descriptor = types.register_factory("cache", make_cache)

    assert descriptor.signature.names == ("size", "ttl")
    assert descriptor.ancestry == ("cache",)


def _make_connection_class(host):
    class Conn:
        def __init__(self):
            self.host = host

    return Conn


def test_registered_class_does_not_shadow_namesake(types):
    first, second = _make_connection_class("a"), _make_connection_class("b")
    types.register_class(first)

    assert first in types
    assert second not in types
    assert types.describe(first).factory is first
    assert types.describe(second).factory is second
