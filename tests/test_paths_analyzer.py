from conftest import make_document

from openapi_scorer.analyzers.paths import PathsAndOperationsAnalyzer


def analyze(document):
    return PathsAndOperationsAnalyzer().analyze(document)


def op(operation_id, **extra):
    return dict(operationId=operation_id, responses={}, **extra)


class TestNaming:
    def test_petstore_is_clean(self, petstore):
        result = analyze(petstore)
        assert result.issues == ()
        assert result.score == 15

    def test_no_paths(self, minimal):
        result = analyze(minimal)
        assert result.issues == ()
        assert result.score == 15

    def test_poor_document(self, poor):
        result = analyze(poor)
        descriptions = [i.description for i in result.issues]
        assert "Path has a trailing slash" in descriptions
        assert 'Path segment "Users" does not follow kebab-case naming convention' in descriptions
        assert 'Path parameter "user_id" does not follow camelCase naming convention' in descriptions
        assert 'Inconsistent casing for path segment "users" (found: Users, users)' in descriptions
        assert descriptions.count("Operation is missing an operationId") == 2
        assert result.score == 6

    def test_casing_reported_once_per_segment(self):
        paths = {
            "/Pets": {"get": op("listPets")},
            "/pets/{petId}": {"get": op("getPet")},
            "/PETS/{petId}/toys": {"get": op("listToys")},
        }
        result = analyze(make_document(paths=paths))
        casing = [i for i in result.issues if i.description.startswith("Inconsistent casing")]
        assert len(casing) == 1
        assert casing[0].location == "pets"


class TestParameterConsistency:
    def test_similar_paths_with_different_names(self):
        paths = {
            "/pets/{petId}": {"get": op("getPet")},
            "/pets/{id}": {"get": op("getPetById")},
        }
        result = analyze(make_document(paths=paths))
        descriptions = {i.description: i.severity for i in result.issues}
        assert descriptions["Similar paths use different parameter names (petId vs id)"] == "medium"
        assert descriptions["Potentially redundant paths with overlapping operations (get)"] == "high"

    def test_different_methods_are_not_redundant(self):
        paths = {
            "/pets/{petId}": {"get": op("getPet")},
            "/pets/{id}": {"delete": op("deletePet")},
        }
        result = analyze(make_document(paths=paths))
        assert not any("redundant" in i.description for i in result.issues)


class TestCrud:
    def test_write_methods_on_collection(self):
        paths = {"/pets": {"put": op("updatePets"), "patch": op("patchPets"), "delete": op("deletePets")}}
        result = analyze(make_document(paths=paths))
        assert sorted((i.operation, i.description) for i in result.issues) == [
            ("delete", "DELETE operation on a collection resource without filtering parameters"),
            ("put", "Using PUT on a collection resource"),
        ]

    def test_bulk_delete_with_filter(self):
        delete = op("deletePets", parameters=[{"name": "ids", "in": "query"}])
        assert analyze(make_document(paths={"/pets": {"delete": delete}})).issues == ()

    def test_post_on_item_path(self):
        result = analyze(make_document(paths={"/pets/{petId}": {"post": op("createPetToy")}}))
        assert [(i.operation, i.severity) for i in result.issues] == [("post", "medium")]


class TestOperationIds:
    def test_duplicate_reported_on_second_occurrence(self):
        paths = {"/pets": {"get": op("listPets")}, "/dogs": {"get": op("listPets")}}
        result = analyze(make_document(paths=paths))
        assert [(i.path, i.severity) for i in result.issues] == [("/dogs", "high")]

    def test_case_insensitive_duplicate(self):
        paths = {"/pets": {"get": op("listPets")}, "/dogs": {"get": op("listpets")}}
        result = analyze(make_document(paths=paths))
        assert [(i.path, i.severity) for i in result.issues] == [("/dogs", "medium")]

    def test_style_and_prefix(self):
        paths = {"/pets": {"get": op("Get_Pets"), "post": op("fetchPets")}}
        result = analyze(make_document(paths=paths))
        assert sorted((i.operation, i.severity, i.description.split(" does not ")[1]) for i in result.issues) == [
            ("get", "low", "follow camelCase naming convention"),
            ("post", "low", "indicate the HTTP method (POST)"),
        ]


class TestDocumentedScenarios:
    def test_widgets_parameter_names(self):
        paths = {
            "/widgets/{id}": {"get": op("getWidget")},
            "/widgets/{widgetId}": {"get": op("getWidgetById")},
        }
        result = analyze(make_document(paths=paths))
        consistency = [i for i in result.issues if "parameter names" in i.description]
        assert [(i.location, i.severity) for i in consistency] == [("/widgets/{id} vs /widgets/{widgetId}", "medium")]

    def test_collection_delete_filter(self):
        unfiltered = analyze(make_document(paths={"/items": {"delete": op("deleteItems")}}))
        assert [i.severity for i in unfiltered.issues] == ["medium"]

        filtered = op("deleteItems", parameters=[{"name": "filter", "in": "query"}])
        assert analyze(make_document(paths={"/items": {"delete": filtered}})).issues == ()
