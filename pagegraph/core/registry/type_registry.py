"""
Type registry - declares types, validates records and link targets.

Links whose target type is not registered yet are accepted and checked later,
either by validate_links() or on first use through link_target(). Either way
an unknown target fails fast instead of silently producing empty relations.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from pagegraph.models.node import Node
from pagegraph.models.type_def import LinkSpec, TypeDefinition
from pagegraph.utils.exceptions import DuplicateType, SchemaViolation, UnknownLinkTarget
from pagegraph.utils.id_generator import compute_content_digest, generate_node_id
from pagegraph.utils.logger import get_logger

logger = get_logger(__name__)


class TypeRegistry:
    """Registry of type definitions for one site."""

    def __init__(self):
        self._types: dict[str, TypeDefinition] = {}
        self._checked_links: set[tuple[str, str]] = set()

    # ═══════════════════════════════════════════════════════════
    # REGISTRATION
    # ═══════════════════════════════════════════════════════════

    def register_type(self, definition: TypeDefinition) -> None:
        """
        Register a type definition.

        Args:
            definition: Type to register

        Raises:
            DuplicateType: If the name is already registered
            UnknownLinkTarget: If a link's source field is undeclared, or its
                already-registered target type lacks the target field
        """
        if definition.name in self._types:
            raise DuplicateType(
                f"Type '{definition.name}' is already registered",
                context={"type": definition.name},
            )

        for link in definition.links:
            if definition.field(link.source_field) is None:
                raise UnknownLinkTarget(
                    f"Link '{definition.name}.{link.name}' reads undeclared field "
                    f"'{link.source_field}'",
                    context={"type": definition.name, "link": link.name},
                )

        self._types[definition.name] = definition

        for link in definition.links:
            if link.target_type in self._types:
                self._check_link(definition.name, link)

        logger.debug(
            f"Registered type {definition.name} "
            f"({len(definition.fields)} fields, {len(definition.links)} links)"
        )

    def get(self, type_name: str) -> TypeDefinition | None:
        """Look up a type definition."""
        return self._types.get(type_name)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._types

    @property
    def type_names(self) -> list[str]:
        return list(self._types)

    # ═══════════════════════════════════════════════════════════
    # LINK VALIDATION
    # ═══════════════════════════════════════════════════════════

    def link_target(self, type_name: str, link_name: str) -> tuple[LinkSpec, TypeDefinition]:
        """
        Return a link spec and its target type, validating on first use.

        Raises:
            UnknownLinkTarget: If the type, link, target type or target field is unknown
        """
        definition = self._types.get(type_name)
        link = definition.link(link_name) if definition else None
        if link is None:
            raise UnknownLinkTarget(
                f"No link '{link_name}' declared on type '{type_name}'",
                context={"type": type_name, "link": link_name},
            )
        target = self._check_link(type_name, link)
        return link, target

    def validate_links(self) -> None:
        """
        Check every declared link against the registered types.

        Raises:
            UnknownLinkTarget: On the first link with an unknown target
        """
        for definition in self._types.values():
            for link in definition.links:
                self._check_link(definition.name, link)

    def _check_link(self, type_name: str, link: LinkSpec) -> TypeDefinition:
        target = self._types.get(link.target_type)
        key = (type_name, link.name)
        if key in self._checked_links and target is not None:
            return target

        context = {
            "type": type_name,
            "link": link.name,
            "target_type": link.target_type,
            "target_field": link.target_field,
        }
        if target is None:
            raise UnknownLinkTarget(
                f"Link '{type_name}.{link.name}' targets unregistered type '{link.target_type}'",
                context=context,
            )
        if target.field(link.target_field) is None:
            raise UnknownLinkTarget(
                f"Link '{type_name}.{link.name}' targets unknown field "
                f"'{link.target_type}.{link.target_field}'",
                context=context,
            )

        self._checked_links.add(key)
        return target

    # ═══════════════════════════════════════════════════════════
    # RECORD VALIDATION
    # ═══════════════════════════════════════════════════════════

    def validate_record(self, type_name: str, record: dict[str, Any]) -> dict[str, Any]:
        """
        Validate a raw record against its type's field schema.

        Values are converted to their declared types and nullable fields
        missing from the record are filled with None, so every node of a type
        carries the same closed set of attributes.

        Returns:
            Attribute mapping containing exactly the declared fields

        Raises:
            SchemaViolation: On unknown type, undeclared attribute, missing
                required field, null in a non-nullable field or wrong type
        """
        definition = self._types.get(type_name)
        if definition is None:
            raise SchemaViolation(
                f"Cannot ingest record of unregistered type '{type_name}'",
                context={"type": type_name},
            )
        if not isinstance(record, dict):
            raise SchemaViolation(
                f"Record of type '{type_name}' must be a mapping, got {type(record).__name__}",
                context={"type": type_name},
            )

        try:
            validated = definition.record_model().model_validate(record)
        except PydanticValidationError as e:
            raise self._schema_violation(definition, e) from e

        return validated.model_dump(by_alias=True)

    def _schema_violation(
        self, definition: TypeDefinition, error: PydanticValidationError
    ) -> SchemaViolation:
        type_name = definition.name
        problems = error.errors()

        undeclared = sorted(str(p["loc"][0]) for p in problems if p["type"] == "extra_forbidden")
        if undeclared:
            return SchemaViolation(
                f"Record of type '{type_name}' has undeclared fields: {', '.join(undeclared)}",
                context={"type": type_name, "fields": undeclared},
            )

        problem = problems[0]
        field_name = str(problem["loc"][0])
        if problem["type"] == "missing" or problem.get("input") is None:
            return SchemaViolation(
                f"Record of type '{type_name}' is missing required field '{field_name}'",
                context={"type": type_name, "field": field_name},
            )

        expected = definition.field(field_name).type.value
        return SchemaViolation(
            f"Field '{type_name}.{field_name}' expects {expected}, "
            f"got {type(problem['input']).__name__}",
            context={"type": type_name, "field": field_name, "expected": expected},
        )

    def build_node(self, type_name: str, record: dict[str, Any]) -> Node:
        """
        Validate a record and turn it into a Node with stable id and digest.

        Raises:
            SchemaViolation: If the record does not satisfy the schema
        """
        attributes = self.validate_record(type_name, record)
        key_field = self._types[type_name].key_field
        return Node(
            id=generate_node_id(type_name, attributes[key_field]),
            type_name=type_name,
            attributes=attributes,
            content_digest=compute_content_digest(attributes),
        )
