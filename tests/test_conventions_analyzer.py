from conftest import make_document

from openapi_scorer.analyzers.conventions import BestPracticesAnalyzer


def analyze(document):
    return BestPracticesAnalyzer().analyze(document)


def well_described(**extra):
    """A document whose metadata passes every check."""
    document = make_document(
        servers=[{"url": "https://api.example.com", "description": "Production"}],
        tags=[{"name": "pets", "description": "Pet operations"}],
        **extra,
    )
    document["info"].update(license={"name": "MIT"}, termsOfService="https://example.com/terms")
    return document


def json_body(schema):
    return {"description": "Payload", "content": {"application/json": {"schema": schema}}}


class TestMetadata:
    def test_petstore_is_clean(self, petstore):
        result = analyze(petstore)
        assert result.issues == ()
        assert result.score == 10

    def test_minimal_document(self, minimal):
        result = analyze(minimal)
        assert sorted((i.location, i.severity) for i in result.issues) == [
            ("license", "low"),
            ("servers", "medium"),
            ("tags", "medium"),
            ("termsOfService", "low"),
        ]
        assert result.score == 4

    def test_version(self):
        document = well_described()
        document["info"]["version"] = "v1"
        assert [(i.location, i.severity) for i in analyze(document).issues] == [("version", "low")]

        del document["info"]["version"]
        assert [(i.location, i.severity) for i in analyze(document).issues] == [("version", "high")]

    def test_license_without_name(self):
        document = well_described()
        document["info"]["license"] = {"url": "https://opensource.org/licenses/MIT"}
        assert [i.location for i in analyze(document).issues] == ["license.name"]

    def test_servers(self):
        document = well_described()
        document["servers"] = [{"description": "No url"}, {"url": "https://staging.example.com"}]
        result = analyze(document)
        assert [(i.location, i.severity) for i in result.issues] == [("[0]", "medium"), ("[1]", "low")]

    def test_tags(self):
        paths = {"/pets": {"get": {"responses": {}}, "post": {"tags": ["pets"], "responses": {}}}, "/dogs": {"get": {"responses": {}}}}
        document = well_described(paths=paths)
        document["tags"].append({"name": "dogs"})
        result = analyze(document)
        assert sorted(i.description for i in result.issues) == [
            "2 operations are not tagged",
            'Tag "dogs" has no description',
        ]


class TestComponentReuse:
    def test_unused_components(self):
        components = {
            "schemas": {"Pet": {"type": "object"}, "Orphan": {"type": "string"}},
            "parameters": {"Limit": {"name": "limit", "in": "query", "schema": {"type": "integer"}}},
        }
        paths = {"/pets": {"get": {
            "tags": ["pets"],
            "parameters": [{"$ref": "#/components/parameters/Limit"}],
            "responses": {"200": json_body({"type": "array", "items": {"$ref": "#/components/schemas/Pet"}})},
        }}}
        result = analyze(well_described(paths=paths, components=components))
        assert [(i.description, i.severity) for i in result.issues] == [
            ("1 component definitions are unused", "low"),
        ]

    def test_references_inside_components_do_not_count(self):
        components = {"schemas": {
            "Pet": {"type": "object", "properties": {"owner": {"$ref": "#/components/schemas/Owner"}}},
            "Owner": {"type": "object", "properties": {"name": {"type": "string"}}},
        }}
        paths = {"/pets": {"get": {"tags": ["pets"], "responses": {"200": json_body({"$ref": "#/components/schemas/Pet"})}}}}
        result = analyze(well_described(paths=paths, components=components))
        assert [i.description for i in result.issues] == ["1 component definitions are unused"]

    def test_too_many_inline_definitions(self):
        responses = {str(code): {"description": "Inline response"} for code in range(200, 211)}
        paths = {"/pets": {"get": {"tags": ["pets"], "responses": responses}}}
        result = analyze(well_described(paths=paths, components={"schemas": {}}))
        assert [(i.description, i.severity) for i in result.issues] == [
            ("Found 11 inline schemas that could be reused", "medium"),
        ]

    def test_skipped_without_components(self):
        responses = {str(code): {"description": "Inline response"} for code in range(200, 220)}
        paths = {"/pets": {"get": {"tags": ["pets"], "responses": responses}}}
        assert analyze(well_described(paths=paths)).issues == ()

    def test_cyclic_inline_schema_stops_silently(self):
        node = {"type": "object", "properties": {"name": {"type": "string"}}}
        node["properties"]["children"] = {"type": "array", "items": node}
        paths = {"/nodes": {"get": {"tags": ["pets"], "responses": {"200": json_body(node)}}}}
        components = {"schemas": {"Tag": {"type": "string"}}}
        result = analyze(well_described(paths=paths, components=components))
        assert [i.description for i in result.issues] == ["1 component definitions are unused"]
        assert result.score == 9
