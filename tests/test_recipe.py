import pytest

from componentry.domain import Recipe
from componentry.errors import MalformedDeclarationError
from componentry.recipe import normalize


def builder():
    return {}


def test_plain_builder_has_no_dependencies():
    assert normalize(builder, "Factory") == Recipe((), builder)


def test_sequence_is_split_into_dependencies_and_builder():
    assert normalize(["one", "two", builder], "Factory") == Recipe(("one", "two"), builder)


def test_tuple_is_accepted():
    assert normalize(("one", builder), "Factory") == Recipe(("one",), builder)


def test_recipe_is_accepted_unchanged():
    recipe = Recipe(("one",), builder)
    assert normalize(recipe, "Factory") == recipe


def test_classes_are_builders():
    class Service:
        pass

    assert normalize(["one", Service], "Component").builder is Service


@pytest.mark.parametrize("spec", [["one", "two"], [], None, "one", 42])
def test_malformed_declarations_name_their_kind(spec):
    with pytest.raises(MalformedDeclarationError, match="^Component must"):
        normalize(spec, "Component")


def test_dependencies_must_be_paths():
    with pytest.raises(MalformedDeclarationError, match="Provider dependencies"):
        normalize(["one", 2, builder], "Provider")


def test_malformed_declaration_is_a_type_error():
    with pytest.raises(TypeError):
        normalize(["one"], "Factory")
