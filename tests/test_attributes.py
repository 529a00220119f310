"""Tests for ModelClass declarations and Instance attribute access."""

import pytest

from modelforge import UNSET, SchemaError, model
from modelforge.model.store import AttributeStore, same_value


@pytest.fixture
def User():
    return (
        model("User")
        .attr("id", "number")
        .attr("name", "string")
        .attr("email", "string")
        .attr("tags", default_factory=list)
        .attr("role", "string", default="member")
    )


class TestModelClass:
    def test_attr_is_chainable(self, User):
        assert User.attributes() == ["id", "name", "email", "tags", "role"]
        assert User.has_attr("name")
        assert not User.has_attr("age")

    def test_duplicate_attribute(self, User):
        with pytest.raises(SchemaError, match="already declared"):
            User.attr("name")

    def test_unknown_type(self):
        with pytest.raises(SchemaError, match="Unknown attribute type"):
            model("Post").attr("title", "text")

    def test_default_and_factory_conflict(self):
        with pytest.raises(SchemaError):
            model("Post").attr("tags", default=[], default_factory=list)

    def test_schema_final_after_first_instance(self, User):
        assert not User.is_final
        User()
        assert User.is_final
        with pytest.raises(SchemaError, match="is final"):
            User.attr("age", "number")

    def test_primary_key_flag(self, User):
        assert User.schema["id"].primary_key
        assert not User.schema["name"].primary_key

    def test_custom_primary_key(self):
        Post = model("Post").attr("slug", "string", primary_key=True).attr("title")
        assert Post.primary_key == "slug"
        assert Post.schema["slug"].primary_key

    def test_second_primary_key(self):
        Post = model("Post").attr("slug", primary_key=True)
        with pytest.raises(SchemaError, match="already has primary key"):
            Post.attr("code", primary_key=True)

    def test_independent_classes(self):
        a = model("User").attr("name")
        b = model("User").attr("email")
        assert a.attributes() == ["name"]
        assert b.attributes() == ["email"]


class TestConstruction:
    def test_constructor_filters_schema(self, User):
        user = User({"name": "Tobi", "admin": True})
        assert user.get("name") == "Tobi"
        assert not user.has("admin")
        assert "admin" not in user.to_json()

    def test_keyword_arguments(self, User):
        user = User(name="Tobi", email="tobi@example.com")
        assert user.name == "Tobi"
        assert user.email == "tobi@example.com"

    def test_defaults_applied(self, User):
        user = User()
        assert user.role == "member"
        assert user.tags == []

    def test_default_factory_not_shared(self, User):
        a, b = User(), User()
        a.tags.append("x")
        assert b.tags == []

    def test_constructor_values_are_not_dirty(self, User):
        user = User(name="Tobi")
        assert user.changed() == {}

    def test_model_back_reference(self, User):
        assert User().model is User

    def test_call_and_repr(self, User):
        user = User(id=5)
        assert repr(user) == "<User id=5>"


class TestGetSet:
    def test_get_default(self, User):
        user = User()
        assert user.get("name") is None
        assert user.get("name", "anon") == "anon"

    def test_set_marks_dirty(self, User):
        user = User()
        user.set("name", "Tobi")
        assert user.changed("name")
        assert user.changed() == {"name": "Tobi"}

    def test_set_returns_instance(self, User):
        user = User()
        assert user.set("name", "Tobi").set("email", "t@example.com") is user

    def test_set_same_value_is_noop(self, User):
        user = User(name="Tobi")
        events = []
        user.on("change", lambda *args: events.append(args))
        user.set("name", "Tobi")
        assert events == []
        assert user.changed() == {}

    def test_set_int_to_equal_float_is_noop(self, User):
        user = User(id=1)
        events = []
        user.on("change", lambda *args: events.append(args))
        user.set("id", 1.0)
        assert events == []
        assert not user.changed("id")

    def test_set_bool_over_number_is_a_change(self, User):
        user = User(id=1)
        user.set("id", True)
        assert user.changed("id")

    def test_set_equal_but_distinct_list_is_a_change(self, User):
        user = User()
        tags = user.tags
        user.set("tags", list(tags))
        assert user.changed("tags")

    def test_set_undeclared_is_ignored(self, User):
        user = User()
        user.set("admin", True)
        assert not user.has("admin")
        assert user.changed() == {}

    def test_set_back_to_persisted_clears_dirty(self, User):
        user = User(name="Tobi")
        user.set("name", "Loki")
        assert user.changed("name")
        user.set("name", "Tobi")
        assert not user.changed("name")

    def test_none_is_a_value(self, User):
        user = User()
        user.set("email", None)
        assert user.has("email")
        assert user.to_json()["email"] is None

    def test_unset(self, User):
        user = User(name="Tobi")
        user.unset("name")
        assert not user.has("name")
        assert user.changed("name")
        assert user.changed()["name"] is UNSET

    def test_attribute_sugar(self, User):
        user = User()
        user.name = "Tobi"
        assert user.name == "Tobi"
        assert user.changed("name")

    def test_sugar_unknown_attribute(self, User):
        with pytest.raises(AttributeError):
            User().age

    def test_primary(self, User):
        user = User()
        assert user.primary is None
        user.primary = 10
        assert user.get("id") == 10


class TestChanged:
    def test_changed_returns_copy(self, User):
        user = User()
        user.set("name", "Tobi")
        first = user.changed()
        first["name"] = "mutated"
        first["email"] = "x"
        second = user.changed()
        assert second == {"name": "Tobi"}
        assert second is not first

    def test_changed_name(self, User):
        user = User()
        user.set("name", "Tobi")
        assert user.changed("name") is True
        assert user.changed("email") is False


class TestAssign:
    def test_assign_filters_schema(self, User):
        user = User()
        user.assign({"name": "Tobi", "admin": True, "save": "nope"})
        assert user.name == "Tobi"
        assert not user.has("admin")
        assert callable(user.save)

    def test_assign_keywords(self, User):
        user = User().assign(name="Tobi", email="t@example.com")
        assert user.changed() == {"name": "Tobi", "email": "t@example.com"}

    def test_setting_listener_can_edit_pending(self, User):
        user = User()

        @user.on("setting")
        def normalise(attrs):
            attrs["name"] = attrs["name"].upper()
            attrs["email"] = "forced@example.com"

        user.assign({"name": "tobi"})
        assert user.name == "TOBI"
        assert user.email == "forced@example.com"

    def test_setting_receives_callers_dict(self, User):
        user = User()
        source = {"name": "tobi"}
        seen = []

        @user.on("setting")
        def rename(attrs):
            seen.append(attrs)
            attrs["name"] = "loki"

        user.assign(source)
        assert seen[0] is source
        assert source == {"name": "loki"}
        assert user.name == "loki"

    def test_setting_with_keywords_receives_merged_copy(self, User):
        user = User()
        source = {"name": "tobi"}
        user.on("setting", lambda attrs: attrs.update(name="loki"))
        user.assign(source, email="t@example.com")
        assert source == {"name": "tobi"}
        assert user.name == "loki"
        assert user.email == "t@example.com"

    def test_setting_on_class_scope(self, User):
        seen = []
        User.on("setting", lambda instance, attrs: seen.append((instance, dict(attrs))))
        user = User()
        user.assign(name="Tobi")
        assert seen == [(user, {"name": "Tobi"})]


class TestIsNew:
    def test_new_without_primary_key(self, User):
        assert User(name="Tobi").is_new()

    def test_not_new_with_primary_key(self, User):
        assert not User(id=1).is_new()

    def test_none_primary_key_is_not_new(self, User):
        assert not User(id=None).is_new()

    def test_new_after_unset(self, User):
        user = User(id=1)
        user.unset("id")
        assert user.is_new()


class TestAttributeStore:
    def test_put_returns_previous(self):
        store = AttributeStore({"a": 1})
        assert store.put("a", 2) == 1
        assert store.put("b", 3) is UNSET

    def test_commit_clears_dirty(self):
        store = AttributeStore()
        store.put("a", 1)
        store.commit({"b": 2})
        assert store.dirty() == {}
        assert store.persisted("a") == 1
        assert store.persisted("b") == 2

    def test_same_value(self):
        assert same_value("a", "a")
        assert same_value(1, 1)
        assert same_value(1, 1.0)
        assert same_value(2.0, 2)
        assert not same_value(1, 1.5)
        assert not same_value(1, True)
        assert not same_value([], [])
        assert not same_value(0, False)

    def test_values_are_read_by_name(self):
        store = AttributeStore({"a": 1})
        assert "a" in store
        assert store.snapshot() == {"a": 1}
        assert not hasattr(store, "items")

    def test_commit_keeps_edits_after_written_snapshot(self):
        store = AttributeStore({"a": 1})
        store.put("a", 2)
        written = store.snapshot()
        store.put("a", 3)
        store.put("b", 4)
        store.commit({"c": 5}, written)
        assert store.persisted("a") == 2
        assert store.persisted("c") == 5
        assert store.dirty() == {"a": 3, "b": 4}

    def test_commit_revert_after_written_snapshot_stays_dirty(self):
        store = AttributeStore({"a": 1})
        store.put("a", 2)
        written = store.snapshot()
        store.put("a", 1)
        store.commit(None, written)
        assert store.persisted("a") == 2
        assert store.dirty() == {"a": 1}
