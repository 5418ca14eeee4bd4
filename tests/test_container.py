import pytest

from armature.container import Container
from armature.deferred import NewInstance
from armature.errors import ContainerLocked
from armature.factory import Factory


class Database:
    def __init__(self, host, user, password):
        self.host = host
        self.user = user
        self.password = password


class AbstractModel:
    def __init__(self, db):
        self.db = db


class BlogModel(AbstractModel):
    pass


class Post:
    def __init__(self, title="", status="published"):
        self.title = title
        self.status = status
        self.db = None

    def set_db(self, db):
        self.db = db


class PostRepository:
    def __init__(self, factory):
        self.factory = factory


@pytest.fixture
def container() -> Container:
    container = Container()
    container.params[Database] = {"host": "localhost", "user": "u", "password": "p"}
    container.params[AbstractModel]["db"] = container.lazy_get("database")
    container.set("database", container.lazy_new(Database))
    container.set("blog_model", container.lazy_new(BlogModel))
    return container


def test_model_shares_the_database_service(container):
    blog_model = container.get("blog_model")

    assert isinstance(blog_model, BlogModel)
    assert blog_model.db is container.get("database")
    assert blog_model.db.host == "localhost"


def test_new_instances_share_the_database_service(container):
    first = container.new_instance(BlogModel)
    second = container.new_instance(BlogModel)

    assert first is not second
    assert first.db is second.db is container.get("database")


def test_lazy_new_with_fresh_dependency(container):
    model = container.new_instance(
        BlogModel, {"db": container.lazy_new(Database, {"host": "replica"})}
    )

    assert model.db is not container.get("database")
    assert model.db.host == "replica"
    assert model.db.user == "u"


def test_lazy_new_copies_overrides(container):
    overrides = {"host": "replica"}
    deferred = container.lazy_new(Database, overrides)
    overrides["host"] = "changed"

    assert deferred == NewInstance(Database, {"host": "replica"}, {})


def test_factory_builds_new_instance_per_call(container):
    container.setters[Post]["set_db"] = container.lazy_get("database")
    make_draft = container.new_factory(Post, {"status": "draft"})

    first = make_draft()
    second = make_draft(title="Hello")

    assert isinstance(make_draft, Factory)
    assert first is not second
    assert (first.status, second.status, second.title) == ("draft", "draft", "Hello")
    assert first.db is container.get("database")


def test_factory_is_injected_as_a_plain_value(container):
    make_post = container.new_factory(Post)
    container.params[PostRepository]["factory"] = make_post

    repository = container.new_instance(PostRepository)

    assert repository.factory is make_post
    assert isinstance(repository.factory(), Post)


def test_factory_setter_overrides(container):
    make_post = container.new_factory(Post, setters={"set_db": "in-memory"})

    assert make_post().db == "in-memory"


def test_lock_prevents_changes(container):
    container.lock()

    assert container.is_locked()
    with pytest.raises(ContainerLocked):
        container.set("cache", {})
    with pytest.raises(ContainerLocked):
        container.params[Database]["host"] = "example.com"

    assert container.get("blog_model").db is container.get("database")


def test_configuration_by_alias(container):
    container.types.register_class(Post, "post")
    container.params["post"]["title"] = "Aliased"

    assert container.new_instance(Post).title == "Aliased"
    assert container.new_instance("post").title == "Aliased"


def test_factory_overrides_are_read_only(container):
    make_draft = container.new_factory(Post, {"status": "draft"})

    with pytest.raises(TypeError):
        make_draft.params["status"] = "published"

    assert make_draft().status == "draft"
    assert hash(make_draft) == hash(container.new_factory(Post, {"status": "draft"}))


def test_locking_configuration_locks_the_container(container):
    container.config.lock()

    assert container.is_locked()
