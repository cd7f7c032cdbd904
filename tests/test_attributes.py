# tests/test_attributes.py
import copy
import pickle

import pytest

from pico_factory import NO_VALUE, Association, Dynamic, Static


# --- Static ---

def test_static_resolves_to_stored_value(context):
    attr = Static("name", "Billy Idol")
    assert attr.resolve(context) == "Billy Idol"
    assert context.requests == []


def test_static_keeps_none_distinct_from_no_value(context):
    declared_none = Static("nickname", None)
    undeclared = Static("nickname")
    assert declared_none.resolve(context) is None
    assert undeclared.resolve(context) is NO_VALUE
    assert declared_none != undeclared


def test_static_is_immutable():
    attr = Static("name", "x")
    with pytest.raises(Exception):
        attr.value = "y"


# --- Dynamic ---

def test_dynamic_calls_generator_with_context(context):
    seen = []

    def gen(ctx):
        seen.append(ctx)
        return "computed"

    attr = Dynamic("token", gen)
    assert attr.resolve(context) == "computed"
    assert seen == [context]


def test_dynamic_generator_runs_on_every_resolution(context):
    calls = []
    attr = Dynamic("n", lambda ctx: calls.append(1) or len(calls))
    assert [attr.resolve(context) for _ in range(3)] == [1, 2, 3]


def test_dynamic_propagates_generator_errors(context):
    def boom(ctx):
        raise ValueError("generator failed")

    with pytest.raises(ValueError, match="generator failed"):
        Dynamic("x", boom).resolve(context)


def test_dynamic_equality_uses_generator_identity():
    def gen(ctx):
        return 1

    assert Dynamic("a", gen) == Dynamic("a", gen)
    assert Dynamic("a", gen) != Dynamic("a", lambda ctx: 1)
    assert hash(Dynamic("a", gen)) == hash(Dynamic("a", gen))


# --- Association ---

def test_association_delegates_to_context(context):
    attr = Association("author", "user", {"admin": True})
    result = attr.resolve(context)
    assert result == "<user via build>"
    assert context.requests == [("author", "user", {"admin": True})]


def test_association_options_are_read_only_copy():
    opts = {"admin": True}
    attr = Association("author", "user", opts)
    opts["admin"] = False
    assert attr.options["admin"] is True
    with pytest.raises(TypeError):
        attr.options["admin"] = False


def test_association_resolution_gets_fresh_options(context):
    class MutatingContext:
        strategy = "create"

        def associate(self, name, factory_name, options):
            options["touched"] = True
            return options

    attr = Association("author", "user", {})
    attr.resolve(MutatingContext())
    assert dict(attr.options) == {}


def test_association_equality_and_repr():
    a = Association("author", "user", {"x": 1})
    assert a == Association("author", "user", {"x": 1})
    assert a != Association("author", "author", {"x": 1})
    assert repr(a) == "Association(name='author', factory_name='user', options={'x': 1})"


def test_association_errors_propagate():
    class FailingContext:
        strategy = "build"

        def associate(self, name, factory_name, options):
            raise LookupError(factory_name)

    with pytest.raises(LookupError, match="missing"):
        Association("author", "missing").resolve(FailingContext())


# --- Variant predicates ---

@pytest.mark.parametrize(
    "attr, static, dynamic, association",
    [
        (Static("a", 1), True, False, False),
        (Dynamic("a", lambda ctx: 1), False, True, False),
        (Association("a", "a"), False, False, True),
    ],
)
def test_variant_predicates(attr, static, dynamic, association):
    assert attr.is_static is static
    assert attr.is_dynamic is dynamic
    assert attr.is_association is association


def test_no_value_sentinel():
    assert repr(NO_VALUE) == "NO_VALUE"
    assert not NO_VALUE
    assert NO_VALUE is not None
    assert pickle.loads(pickle.dumps(NO_VALUE)) is NO_VALUE
    assert type(NO_VALUE)() is NO_VALUE


def test_association_survives_pickle_and_deepcopy():
    attr = Association("author", "user", {"admin": True, "tags": ["a"]})
    for clone in (pickle.loads(pickle.dumps(attr)), copy.deepcopy(attr)):
        assert clone == attr
        assert clone.options["tags"] == ["a"]
        with pytest.raises(TypeError):
            clone.options["admin"] = False
