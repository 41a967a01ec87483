"""
Tests for data models.

Tests:
1. FieldType validation and conversion
2. LinkSpec and TypeDefinition validation
3. Node memoization
4. BuildResult helpers
"""

import pytest
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from pagegraph.models import (
    AssetRef,
    BuildResult,
    BuildWarning,
    FieldSpec,
    FieldType,
    LinkSpec,
    Node,
    PageDescriptor,
    TypeDefinition,
)
from pagegraph.models.type_def import Cardinality


class TestFieldType:
    """Test scalar type checks."""

    @pytest.mark.parametrize(
        "field_type,value,expected",
        [
            (FieldType.STRING, "x", True),
            (FieldType.STRING, 1, False),
            (FieldType.INT, 3, True),
            (FieldType.INT, True, False),
            (FieldType.INT, 1.5, False),
            (FieldType.INT, "3", False),
            (FieldType.FLOAT, 1, True),
            (FieldType.FLOAT, 1.5, True),
            (FieldType.FLOAT, False, False),
            (FieldType.BOOLEAN, False, True),
            (FieldType.BOOLEAN, 0, False),
            (FieldType.ID, "n-k-jemisin", True),
            (FieldType.ID, 9781101904244, True),
            (FieldType.ID, 1.0, False),
            (FieldType.LIST, ["a"], True),
            (FieldType.LIST, "abc", False),
            (FieldType.ANY, {"a": 1}, True),
        ],
    )
    def test_annotation_accepts(self, field_type, value, expected):
        adapter = TypeAdapter(field_type.annotation)

        if expected:
            adapter.validate_python(value)
        else:
            with pytest.raises(PydanticValidationError):
                adapter.validate_python(value)

    @pytest.mark.parametrize(
        "field_type,value,converted",
        [
            (FieldType.FLOAT, 1, 1.0),
            (FieldType.ID, 7, 7),
            (FieldType.ID, "7", "7"),
            (FieldType.LIST, ("a", "b"), ["a", "b"]),
        ],
    )
    def test_annotation_converts(self, field_type, value, converted):
        result = TypeAdapter(field_type.annotation).validate_python(value)

        assert result == converted
        assert type(result) is type(converted)


class TestTypeDefinition:
    """Test type declarations."""

    def test_link_name_defaults_to_source_field(self):
        link = LinkSpec(source_field="author", target_type="Author", target_field="slug")

        assert link.name == "author"
        assert link.cardinality == Cardinality.ONE

    def test_valid_definition(self):
        definition = TypeDefinition(
            name="Author",
            key_field="slug",
            fields=[FieldSpec(name="slug", type=FieldType.STRING), FieldSpec(name="name")],
        )

        assert definition.field_names == ["slug", "name"]
        assert definition.field("name").type == FieldType.ANY
        assert definition.field("missing") is None

    def test_record_model_uses_declared_names(self):
        definition = TypeDefinition(
            name="Item",
            key_field="sku",
            fields=[
                FieldSpec(name="sku", type=FieldType.ID),
                FieldSpec(name="model_json", type=FieldType.STRING, nullable=True),
            ],
        )

        model = definition.record_model()
        record = model.model_validate({"sku": "x"})

        assert model is definition.record_model()
        assert record.model_dump(by_alias=True) == {"sku": "x", "model_json": None}

    def test_undeclared_key_field(self):
        with pytest.raises(PydanticValidationError):
            TypeDefinition(name="Author", key_field="slug", fields=[FieldSpec(name="name")])

    def test_nullable_key_field(self):
        with pytest.raises(PydanticValidationError):
            TypeDefinition(
                name="Author",
                key_field="slug",
                fields=[FieldSpec(name="slug", nullable=True)],
            )

    def test_duplicate_field(self):
        with pytest.raises(PydanticValidationError):
            TypeDefinition(
                name="Author",
                key_field="slug",
                fields=[FieldSpec(name="slug"), FieldSpec(name="slug")],
            )

    def test_duplicate_link_name(self):
        link = LinkSpec(source_field="slug", target_type="Book", target_field="author")
        with pytest.raises(PydanticValidationError):
            TypeDefinition(
                name="Author",
                key_field="slug",
                fields=[FieldSpec(name="slug")],
                links=[link, link],
            )


class TestNode:
    """Test node behavior."""

    def make_node(self) -> Node:
        return Node(id="n1", type_name="Book", attributes={"name": "Dark Matter"}, content_digest="d")

    def test_node_is_frozen(self):
        node = self.make_node()

        with pytest.raises(PydanticValidationError):
            node.type_name = "Author"

    def test_memoize(self):
        node = self.make_node()

        assert node.is_resolved("cover") is False
        node.memoize("cover", None)

        assert node.is_resolved("cover") is True
        assert node.resolved_value("cover") is None
        assert node.resolved == {"cover": None}

    def test_memoize_twice_fails(self):
        node = self.make_node()
        node.memoize("buyLink", "https://example.test")

        with pytest.raises(ValueError):
            node.memoize("buyLink", "other")

    def test_attributes_are_read_only(self):
        source = {"name": "Dark Matter"}
        node = Node(id="n1", type_name="Book", attributes=source, content_digest="d")

        with pytest.raises(TypeError):
            node.attributes["name"] = "Recursion"
        source["name"] = "Recursion"

        assert node.get("name") == "Dark Matter"

    def test_memo_not_part_of_digest(self):
        node = self.make_node()
        node.memoize("buyLink", "x")

        assert node.content_digest == "d"
        assert "buyLink" not in node.attributes

    def test_get(self):
        node = self.make_node()

        assert node.get("name") == "Dark Matter"
        assert node.get("series", "none") == "none"


class TestAssetRef:
    def test_exists(self, tmp_path):
        payload = tmp_path / "cover.jpg"
        ref = AssetRef(locator="https://x.test/c.jpg", locator_hash="h", path=str(payload))

        assert ref.exists() is False
        payload.write_bytes(b"jpeg")
        assert ref.exists() is True


class TestBuildResult:
    def test_paths_and_warning_filter(self):
        result = BuildResult(
            pages=[
                PageDescriptor(path="/custom", template_id="custom"),
                PageDescriptor(path="/book/dark-matter", template_id="book", source_id="n1"),
            ],
            warnings=[
                BuildWarning(kind="FetchError", message="404"),
                BuildWarning(kind="LinkAmbiguity", message="two"),
            ],
        )

        assert result.paths == ["/custom", "/book/dark-matter"]
        assert [w.message for w in result.warnings_of("FetchError")] == ["404"]
