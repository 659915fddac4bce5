"""
Rule evaluator function tests

Each evaluator takes (target, functionOptions, context) and returns a list
of results; an empty list means the value passed.
"""

import pytest

from auditapi.functions import FUNCTIONS, MISSING, FunctionContext, get_function
from auditapi.functions.base import stringify_keys
from auditapi.functions.core import compile_pattern


def ctx(*path, document=None):
    return FunctionContext(document=document or {}, path=tuple(path))


def run(name, target, options=None, context=None):
    return get_function(name)(target, options, context or ctx("info", "field"))


class TestPresence:
    """truthy / falsy / defined / undefined"""

    @pytest.mark.parametrize("target", ["x", 1, True, {}, []])
    def test_truthy_passes(self, target):
        assert run("truthy", target) == []

    @pytest.mark.parametrize("target", [MISSING, None, "", 0, False])
    def test_truthy_fails(self, target):
        assert run("truthy", target) == [{"message": '"field" property must be truthy'}]

    def test_falsy(self):
        assert run("falsy", "") == []
        assert run("falsy", "set") == [{"message": '"field" property must be falsy'}]

    def test_defined_and_undefined(self):
        assert run("defined", None) == []
        assert len(run("defined", MISSING)) == 1
        assert run("undefined", MISSING) == []
        assert len(run("undefined", "x")) == 1

    def test_document_subject(self):
        assert run("truthy", None, context=ctx()) == [{"message": "Document must be truthy"}]


class TestPattern:
    """pattern"""

    def test_match_and_not_match(self):
        options = {"match": "^https://", "notMatch": "example"}

        assert run("pattern", "https://api.io", options) == []
        assert len(run("pattern", "http://example.com", options)) == 2

    def test_non_strings_are_ignored(self):
        assert run("pattern", 42, {"match": "^a"}) == []

    def test_regex_literal_flags(self):
        assert compile_pattern("/^get/i").match("GET")
        assert compile_pattern("^/pets").match("/pets")


class TestValueFunctions:
    """enumeration / length / casing / xor / alphabetical"""

    def test_enumeration(self):
        options = {"values": ["http", "https"]}

        assert run("enumeration", "https", options) == []
        assert run("enumeration", "ftp", options) == [
            {"message": '"ftp" must be equal to one of the allowed values: http, https'}
        ]

    def test_length(self):
        assert run("length", [1], {"min": 1}) == []
        assert run("length", [], {"min": 1}) == [{"message": '"field" property must not be shorter than 1'}]
        assert run("length", "abcdef", {"max": 3}) == [{"message": '"field" property must not be longer than 3'}]

    @pytest.mark.parametrize("case_type, good, bad", [
        ("camel", "listPets", "ListPets"),
        ("pascal", "ListPets", "listPets"),
        ("kebab", "list-pets", "list_pets"),
        ("snake", "list_pets", "list-pets"),
        ("macro", "LIST_PETS", "list_pets"),
        ("cobol", "LIST-PETS", "LIST_PETS"),
        ("flat", "listpets", "listPets"),
    ])
    def test_casing(self, case_type, good, bad):
        assert run("casing", good, {"type": case_type}) == []
        assert run("casing", bad, {"type": case_type}) == [{"message": f'"{bad}" must be {case_type} case'}]

    def test_casing_disallow_digits(self):
        assert run("casing", "pet2", {"type": "camel"}) == []
        assert len(run("casing", "pet2", {"type": "camel", "disallowDigits": True})) == 1

    def test_unknown_casing_type(self):
        with pytest.raises(ValueError, match="Unknown casing type"):
            run("casing", "pets", {"type": "train"})

    def test_xor(self):
        options = {"properties": ["example", "examples"]}

        assert run("xor", {"example": 1}, options) == []
        assert len(run("xor", {"example": 1, "examples": {}}, options)) == 1
        assert len(run("xor", {}, options)) == 1

    def test_alphabetical(self):
        assert run("alphabetical", ["a", "b", "c"]) == []

        results = run("alphabetical", [{"name": "pets"}, {"name": "owners"}], {"keyedBy": "name"},
                      context=ctx("tags"))

        assert len(results) == 1
        assert results[0]["path"] == ("tags", 0)
        assert '"pets" should be placed after "owners"' in results[0]["message"]


class TestDocumentFunctions:
    """schema / unreferencedReusableObject / oasOpSuccessResponse"""

    def test_schema_requires_option(self):
        with pytest.raises(ValueError):
            run("schema", {}, {})

    def test_schema_handles_integer_keys(self):
        options = {"schema": {"type": "object", "required": ["200"]}}

        assert run("schema", {200: {"description": "OK"}}, options) == []

    def test_unreferenced_components(self):
        document = {
            "paths": {"/pets": {"get": {"responses": {"200": {"$ref": "#/components/schemas/Pet"}}}}},
            "components": {"schemas": {"Pet": {}, "Owner": {}}},
        }
        schemas = document["components"]["schemas"]

        results = run("unreferencedReusableObject", schemas,
                      {"reusableObjectsLocation": "#/components/schemas"},
                      context=ctx("components", "schemas", document=document))

        assert results == [{
            "message": "Potentially unused component has been detected",
            "path": ("components", "schemas", "Owner"),
        }]

    def test_success_response(self):
        assert run("oasOpSuccessResponse", {200: {}, "404": {}}) == []
        assert run("oasOpSuccessResponse", {"3XX": {}}) == []
        assert len(run("oasOpSuccessResponse", {"400": {}, "default": {}})) == 1


class TestRegistry:
    """FUNCTIONS / get_function / stringify_keys"""

    def test_unknown_name(self):
        assert get_function("isAwesome") is None

    def test_every_function_is_callable(self):
        assert all(callable(function) for function in FUNCTIONS.values())

    def test_stringify_keys(self):
        assert stringify_keys({200: [{1: "a"}], "x": None}) == {"200": [{"1": "a"}], "x": None}
