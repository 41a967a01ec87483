"""Type definitions: field schemas and link specifications."""

from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    create_model,
    model_validator,
)


def _not_null(value: Any) -> Any:
    if value is None:
        raise ValueError("value is required")
    return value


class FieldType(str, Enum):
    """Scalar kinds accepted in a field schema."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOLEAN = "boolean"
    ID = "id"  # string or integer identifier
    LIST = "list"
    ANY = "any"

    @property
    def annotation(self) -> Any:
        """
        Pydantic annotation validating a non-null value of this type.

        Values are converted to the declared type, so an integer given for a
        FLOAT field is stored as a float. Booleans never pass as numbers.
        """
        return _ANNOTATIONS[self]


_ANNOTATIONS: dict[FieldType, Any] = {
    FieldType.STRING: StrictStr,
    FieldType.INT: StrictInt,
    FieldType.FLOAT: Annotated[Union[StrictInt, StrictFloat], AfterValidator(float)],
    FieldType.BOOLEAN: StrictBool,
    FieldType.ID: Union[StrictStr, StrictInt],
    FieldType.LIST: list,
    FieldType.ANY: Any,
}


class Cardinality(str, Enum):
    """Link cardinality."""

    ONE = "one"
    MANY = "many"


class FieldSpec(BaseModel):
    """A declared field of a type."""

    name: str
    type: FieldType = FieldType.ANY
    nullable: bool = False

    def annotation(self) -> Any:
        """Annotation for this field in a record model."""
        if self.nullable:
            return Optional[self.type.annotation]
        return Annotated[self.type.annotation, AfterValidator(_not_null)]


class LinkSpec(BaseModel):
    """
    Foreign-key style relation from one type's field to another type's field.

    The relation matches when source.attributes[source_field] equals
    target.attributes[target_field].
    """

    name: str = ""
    source_field: str
    target_type: str
    target_field: str
    cardinality: Cardinality = Cardinality.ONE

    @model_validator(mode="after")
    def _default_name(self) -> "LinkSpec":
        if not self.name:
            self.name = self.source_field
        return self


class TypeDefinition(BaseModel):
    """Declared type: natural key, field schema and links."""

    name: str
    key_field: str
    fields: list[FieldSpec] = Field(default_factory=list)
    links: list[LinkSpec] = Field(default_factory=list)

    _record_model: type[BaseModel] | None = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _check_fields(self) -> "TypeDefinition":
        names = [spec.name for spec in self.fields]
        if len(names) != len(set(names)):
            raise ValueError(f"Type '{self.name}' declares a field more than once")
        key = self.field(self.key_field)
        if key is None:
            raise ValueError(f"Key field '{self.key_field}' is not declared on type '{self.name}'")
        if key.nullable:
            raise ValueError(f"Key field '{self.name}.{self.key_field}' cannot be nullable")
        link_names = [link.name for link in self.links]
        if len(link_names) != len(set(link_names)):
            raise ValueError(f"Type '{self.name}' declares a link name more than once")
        return self

    def field(self, name: str) -> FieldSpec | None:
        """Look up a field spec by name."""
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def link(self, name: str) -> LinkSpec | None:
        """Look up a link spec by name."""
        for spec in self.links:
            if spec.name == name:
                return spec
        return None

    @property
    def field_names(self) -> list[str]:
        return [spec.name for spec in self.fields]

    def record_model(self) -> type[BaseModel]:
        """
        Pydantic model validating raw records of this type.

        Declared field names are used as aliases, so record keys may be any
        string (including names BaseModel reserves). Undeclared keys are
        rejected and missing nullable fields default to None.
        """
        if self._record_model is None:
            definitions: dict[str, Any] = {}
            for index, spec in enumerate(self.fields):
                default = None if spec.nullable else ...
                definitions[f"field_{index}"] = (
                    spec.annotation(),
                    Field(default, alias=spec.name),
                )
            self._record_model = create_model(
                f"{self.name}Record",
                __config__=ConfigDict(extra="forbid"),
                **definitions,
            )
        return self._record_model
