import json

import yaml

from oasgen.openapi.models import (
    MediaTypeObject,
    OpenAPIObject,
    OperationObject,
    PathItemObject,
    ResponseObject,
    SchemaObject,
)
from oasgen.writer import render_document, write_document


def _document() -> OpenAPIObject:
    user = SchemaObject(id="models.User", type="object", properties={"id": SchemaObject(type="integer")})
    openapi = OpenAPIObject()
    openapi.components.schemas["models.User"] = user
    openapi.paths["/users"] = PathItemObject(
        get=OperationObject(
            summary="List users",
            operation_id="listUsers",
            responses={
                "200": ResponseObject(
                    description="ok",
                    content={"application/json": MediaTypeObject(schema=SchemaObject.reference("models.User"))},
                )
            },
        )
    )
    return openapi


class TestRenderDocument:
    def test_json_uses_openapi_names(self):
        doc = json.loads(render_document(_document()))

        operation = doc["paths"]["/users"]["get"]
        assert operation["operationId"] == "listUsers"
        assert operation["responses"]["200"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/models.User"
        }
        assert "post" not in doc["paths"]["/users"]
        assert doc["components"]["schemas"]["models.User"] == {
            "type": "object",
            "properties": {"id": {"type": "integer"}},
        }

    def test_yaml_matches_json(self):
        openapi = _document()
        assert yaml.safe_load(render_document(openapi, as_yaml=True)) == json.loads(render_document(openapi))

    def test_write_document(self, tmp_path):
        path = tmp_path / "nested" / "openapi.json"
        write_document(_document(), path)
        assert json.loads(path.read_text(encoding="utf-8"))["openapi"] == "3.0.0"
