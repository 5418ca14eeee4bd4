import pytest

from armature.builders import ContainerConfig, make_container
from armature.errors import ContainerLocked


class Database:
    def __init__(self, host):
        self.host = host
        self.tables = []

    def create_table(self, name):
        self.tables.append(name)


class ProductionDatabaseConfig(ContainerConfig):
    profiles = ("!test",)

    def define(self, container):
        container.params[Database]["host"] = "db.internal"
        container.set("database", container.lazy_new(Database))


class TestDatabaseConfig(ContainerConfig):
    __test__ = False
    profiles = ("test",)

    def define(self, container):
        container.params[Database]["host"] = "localhost"
        container.set("database", container.lazy_new(Database))


class SchemaConfig(ContainerConfig):
    def __init__(self, tables=("posts",)):
        self.tables = tables

    def modify(self, container):
        for table in self.tables:
            container.get("database").create_table(table)


CONFIGS = [ProductionDatabaseConfig, TestDatabaseConfig, SchemaConfig]


def test_configs_selected_by_profile():
    assert make_container(CONFIGS, {"test"}).get("database").host == "localhost"
    assert make_container(CONFIGS, {"prod"}).get("database").host == "db.internal"


def test_modify_runs_after_define():
    container = make_container(CONFIGS, {"test"})

    assert container.get("database").tables == ["posts"]


def test_config_instances_are_used_as_given():
    container = make_container(
        [TestDatabaseConfig(), SchemaConfig(tables=("users", "posts"))]
    )

    assert container.get("database").tables == ["users", "posts"]


def test_container_is_locked_before_modify():
    class Meddling(ContainerConfig):
        def modify(self, container):
            container.set("late", 1)

    with pytest.raises(ContainerLocked):
        make_container([Meddling])


def test_config_classes_are_built_by_the_container():
    class TablesConfig(SchemaConfig):
        pass

    container = make_container([TestDatabaseConfig, TablesConfig])

    assert container.get("database").tables == ["posts"]


def test_all_configs_applied_without_profiles():
    container = make_container([TestDatabaseConfig, SchemaConfig])

    assert container.get("database").host == "localhost"


@pytest.mark.parametrize(
    "stated, selected, expected",
    [
        ((), {"dev"}, True),
        (("dev",), {"dev"}, True),
        (("!test",), {"dev"}, True),
        (("!test",), {"test"}, False),
        (("prod", "uat"), {"dev"}, False),
        (("prod", "uat"), {"uat"}, True),
        (("uat", "!test"), {"uat", "test"}, False),
    ],
)
def test_config_is_active(stated, selected, expected):
    class Stated(ContainerConfig):
        profiles = stated

    assert Stated.is_active(selected) == expected


def test_default_profiles_are_immutable_and_not_shared():
    class First(ContainerConfig):
        pass

    class Second(ContainerConfig):
        profiles = ("prod",)

    assert First.profiles == ()
    assert isinstance(ContainerConfig.profiles, tuple)
    assert Second.profiles == ("prod",)
    assert ContainerConfig.profiles == ()
