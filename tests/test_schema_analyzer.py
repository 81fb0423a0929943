from conftest import make_document

from openapi_scorer.analyzers.schema import SchemaAndTypesAnalyzer


def analyze(document):
    return SchemaAndTypesAnalyzer().analyze(document)


def with_schema(name, schema):
    return make_document(components={"schemas": {name: schema}})


def json_response(schema):
    return {"description": "Successful response", "content": {"application/json": {"schema": schema}}}


class TestComponentSchemas:
    def test_petstore_is_clean(self, petstore):
        result = analyze(petstore)
        assert result.issues == ()
        assert result.score == 20

    def test_missing_type_on_component_root_is_high(self):
        result = analyze(with_schema("Thing", {"description": "A thing without a type"}))
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.severity == "high"
        assert issue.path == "components/schemas"
        assert issue.location == "components/schemas/Thing"
        assert result.score == 17

    def test_missing_type_on_nested_property_is_medium(self):
        schema = {"type": "object", "properties": {"a": {"description": "untyped"}}}
        result = analyze(with_schema("Thing", schema))
        assert [i.severity for i in result.issues] == ["medium"]
        assert result.issues[0].location == "components/schemas/Thing/properties/a"

    def test_composition_satisfies_type(self):
        schema = {"allOf": [{"$ref": "#/components/schemas/Base"}, {"type": "object", "properties": {"x": {"type": "string"}}}]}
        result = analyze(with_schema("Thing", schema))
        assert result.issues == ()

    def test_required_property_not_defined(self):
        schema = {"type": "object", "properties": {"a": {"type": "string"}}, "required": ["a", "b"]}
        result = analyze(with_schema("Thing", schema))
        assert len(result.issues) == 1
        assert result.issues[0].severity == "high"
        assert result.issues[0].location.endswith("/required")
        assert '"b"' in result.issues[0].description

    def test_unconstrained_additional_properties(self):
        schema = {"type": "object", "properties": {"a": {"type": "string"}}, "additionalProperties": True}
        result = analyze(with_schema("Thing", schema))
        assert [i.severity for i in result.issues] == ["medium"]
        assert "additional properties" in result.issues[0].description

    def test_object_without_properties(self):
        result = analyze(with_schema("Thing", {"type": "object"}))
        assert [i.severity for i in result.issues] == ["medium"]
        assert "no properties" in result.issues[0].description

    def test_free_form_map_is_accepted(self):
        schema = {"type": "object", "additionalProperties": {"type": "string"}}
        assert analyze(with_schema("Thing", schema)).issues == ()


class TestOperationSchemas:
    def test_array_without_items_in_response(self):
        document = make_document(paths={"/pets": {"get": {"responses": {"200": json_response({"type": "array"})}}}})
        result = analyze(document)
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.severity == "medium"
        assert issue.operation == "get"
        assert issue.location == "responses.200.content.application/json.schema"

    def test_media_type_without_schema(self):
        document = make_document(paths={
            "/pets": {"post": {
                "requestBody": {"content": {"application/json": {}}},
                "responses": {"201": {"description": "Created the pet"}},
            }},
        })
        result = analyze(document)
        assert [i.severity for i in result.issues] == ["high"]
        assert result.issues[0].location == "requestBody.content.application/json"

    def test_parameter_without_schema_or_content(self):
        document = make_document(paths={
            "/pets": {"get": {
                "parameters": [{"name": "limit", "in": "query"}],
                "responses": {"200": {"description": "A list of pets"}},
            }},
        })
        result = analyze(document)
        assert [i.severity for i in result.issues] == ["high"]
        assert "limit" in result.issues[0].description

    def test_references_are_not_followed(self):
        document = make_document(
            paths={"/pets": {"get": {"responses": {"200": json_response({"$ref": "#/components/schemas/Pet"})}}}},
        )
        assert analyze(document).issues == ()


class TestBoundedWalk:
    def test_cycle_is_reported_once(self):
        node = {"type": "object", "properties": {}}
        node["properties"]["self"] = node
        result = analyze(with_schema("Loop", node))
        assert len(result.issues) == 1
        assert result.issues[0].severity == "medium"
        assert "ancestors" in result.issues[0].description
        assert result.score == 18

    def test_excessive_depth_is_reported(self):
        schema = {"type": "string"}
        for _ in range(40):
            schema = {"type": "object", "properties": {"child": schema}}
        result = analyze(with_schema("Deep", schema))
        assert len(result.issues) == 1
        assert "maximum nesting depth" in result.issues[0].description

    def test_odd_shapes_are_skipped(self):
        document = make_document(paths={"/pets": "not a path item", "/dogs": {"get": "nope"}})
        document["components"] = {"schemas": {"Weird": "string"}}
        assert analyze(document).issues == ()
