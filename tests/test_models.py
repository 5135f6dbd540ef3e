import pytest

from oasgen.openapi.models import OperationObject, ParameterObject, PathItemObject, SchemaObject, ref_link


class TestSchemaObject:
    def test_reference(self):
        schema = SchemaObject.reference("models.User")
        assert schema.ref == "#/components/schemas/models.User"
        assert schema.model_dump(by_alias=True, exclude_none=True) == {"$ref": "#/components/schemas/models.User"}

    def test_ref_link_normalizes_backslashes(self):
        assert ref_link("pkg\\sub.Type") == "#/components/schemas/pkg/sub.Type"

    def test_registry_fields_are_not_serialized(self):
        schema = SchemaObject(id="models.Item", pkg_name="models", type="object")
        assert schema.model_dump(by_alias=True, exclude_none=True) == {"type": "object"}


class TestParameterObject:
    def test_location_alias(self):
        param = ParameterObject(name="id", location="path", required=True, schema=SchemaObject(type="integer"))
        dumped = param.model_dump(by_alias=True, exclude_none=True)
        assert dumped["in"] == "path"
        assert dumped["schema"] == {"type": "integer"}


class TestPathItemObject:
    def test_set_and_get_operation(self):
        item = PathItemObject()
        operation = OperationObject(summary="x")
        item.set_operation("delete", operation)
        assert item.get_operation("DELETE") is operation
        assert item.operations() == {"DELETE": operation}

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            PathItemObject().set_operation("CONNECT", OperationObject())


class TestOperationObject:
    def test_add_tag_keeps_order_and_uniqueness(self):
        operation = OperationObject()
        for tag in ("b", "a", "b"):
            operation.add_tag(tag)
        assert operation.tags == ["b", "a"]

    def test_defaults_are_not_shared(self):
        first, second = OperationObject(), OperationObject()
        first.add_tag("x")
        assert second.tags == []
