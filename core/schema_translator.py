# =============================================================================
# core/schema_translator.py  —  JSON Schema → pydantic validation schema
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Takes the raw JSON Schema a remote tool publishes for its input and turns
#   it into pydantic v2 types that the agent runtime can (a) hand to the LLM
#   as a function declaration and (b) validate the LLM's arguments against.
#
# THE VOCABULARY:
#   object            → a pydantic model built with create_model()
#   string + enum     → Literal["a", "b", ...]
#   string            → str   (minLength / maxLength as Field constraints)
#   number / integer  → float / int  (minimum / maximum as ge / le)
#   boolean           → bool
#   array             → list[<items>]
#   ["T", "null"]     → Optional[<T>]
#   anything else     → Any  (the universal pass-through)
#
# UNTRUSTED INPUT:
#   Third-party schemas are frequently sloppy.  A node that is missing, is
#   not a mapping, or has a kind we don't know degrades to Any.  The only
#   error this module raises is SchemaTooLargeError.
#
# THE PROPERTY CEILING:
#   Structured-output APIs reject schemas with too many properties.  The
#   running total is shared across the whole tree of one tool and checked
#   every time an object node adds its properties.
# =============================================================================

import keyword
import logging
import re
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, create_model

from core.models import OptionalFieldPolicy, TranslationStats

logger = logging.getLogger(__name__)

MAX_TOTAL_PROPERTIES = 100

# The universal pass-through schema: accepts and preserves any value.
ANY_SCHEMA = Any

_SCALAR_KINDS = ("string", "number", "integer", "boolean")
_NAME_UNSAFE = re.compile(r"\W")


class SchemaTooLargeError(ValueError):
    """Raised when one schema tree declares more object properties than allowed."""

    def __init__(self, total: int, limit: int = MAX_TOTAL_PROPERTIES):
        super().__init__(
            f"Schema declares {total} object properties, more than the limit of {limit}"
        )
        self.total = total
        self.limit = limit


# =============================================================================
# Public entry points
# =============================================================================
def translate(
    node: Any,
    stats: TranslationStats | None = None,
    nesting_level: int = 0,
    *,
    policy: OptionalFieldPolicy = OptionalFieldPolicy.NULLABLE,
    name: str = "Schema",
) -> Any:
    """Translate one raw schema node into a pydantic type.

    Args:
        node: The raw JSON Schema node.  Anything that is not a mapping is
              treated as "accept anything".
        stats: Accumulator shared by the whole tree.  A fresh one is made
               when omitted.
        nesting_level: Depth of ``node`` below the root.
        policy: Representation of properties absent from ``required``.
        name: Model name used if ``node`` is an object.

    Returns:
        A type usable as a pydantic annotation (a model class for objects).

    Raises:
        SchemaTooLargeError: if the running property total passes
            MAX_TOTAL_PROPERTIES.
    """
    if stats is None:
        stats = TranslationStats()
    stats.observe_depth(nesting_level)

    if not isinstance(node, Mapping):
        return ANY_SCHEMA

    kind = node.get("type")
    if kind == "object":
        return _translate_object(node, stats, nesting_level, policy, name)
    if isinstance(kind, (list, tuple)):
        return _translate_union(node, kind, stats, nesting_level, policy, name)
    return _translate_scalar(node, kind, stats, nesting_level, policy, name)


def translate_tool_schema(
    tool_name: str,
    raw_schema: Any,
    policy: OptionalFieldPolicy = OptionalFieldPolicy.NULLABLE,
) -> tuple[type[BaseModel], TranslationStats]:
    """Translate a tool's whole input schema into a model class.

    Tool arguments are always an object, so a root that does not translate
    to a model (malformed, or a non-object kind) becomes an empty model that
    lets every key through.
    """
    stats = TranslationStats()
    model_name = _model_name(tool_name) + "Input"
    schema = translate(raw_schema, stats, policy=policy, name=model_name)
    if not (isinstance(schema, type) and issubclass(schema, BaseModel)):
        schema = create_model(model_name, __config__=ConfigDict(extra="allow"))

    logger.debug(
        "Translated %s: %d properties, depth %d, %d enum literals (%d chars)",
        tool_name,
        stats.total_properties,
        stats.max_nesting_level,
        len(stats.enum_values),
        stats.total_string_length,
    )
    return schema, stats


# =============================================================================
# Node kinds
# =============================================================================
def _translate_object(
    node: Mapping[str, Any],
    stats: TranslationStats,
    nesting_level: int,
    policy: OptionalFieldPolicy,
    name: str,
) -> type[BaseModel]:
    properties = node.get("properties")
    if not isinstance(properties, Mapping):
        properties = {}

    stats.total_properties += len(properties)
    if stats.total_properties > MAX_TOTAL_PROPERTIES:
        raise SchemaTooLargeError(stats.total_properties)

    required = node.get("required")
    if isinstance(required, (list, tuple, set)):
        required = {item for item in required if isinstance(item, str)}
    else:
        required = set()

    fields: dict[str, Any] = {}
    for prop_name, prop_node in properties.items():
        field_name = _field_name(prop_name, fields)
        field_type = translate(
            prop_node,
            stats,
            nesting_level + 1,
            policy=policy,
            name=f"{name}_{_model_name(prop_name)}",
        )
        fields[field_name] = _field_definition(
            prop_name, prop_node, field_type, prop_name in required, policy
        )

    extra = "forbid" if node.get("additionalProperties") is False else "allow"
    description = node.get("description")
    return create_model(
        name,
        __config__=ConfigDict(extra=extra, populate_by_name=True),
        __doc__=description if isinstance(description, str) else None,
        **fields,
    )


def _translate_union(
    node: Mapping[str, Any],
    kinds: list | tuple,
    stats: TranslationStats,
    nesting_level: int,
    policy: OptionalFieldPolicy,
    name: str,
) -> Any:
    # Only the nullable form ["T", "null"] is understood.
    if "null" not in kinds:
        return ANY_SCHEMA
    members = [kind for kind in kinds if kind != "null"]
    if not members or members[0] not in _SCALAR_KINDS:
        return Optional[ANY_SCHEMA]

    member_node = dict(node)
    member_node["type"] = members[0]
    return Optional[_translate_scalar(member_node, members[0], stats, nesting_level, policy, name)]


def _translate_scalar(
    node: Mapping[str, Any],
    kind: Any,
    stats: TranslationStats,
    nesting_level: int,
    policy: OptionalFieldPolicy,
    name: str,
) -> Any:
    if kind == "string":
        return _translate_string(node, stats)
    if kind in ("number", "integer"):
        return _translate_number(node, int if kind == "integer" else float)
    if kind == "boolean":
        return bool
    if kind == "array":
        items = translate(
            node.get("items"), stats, nesting_level + 1, policy=policy, name=f"{name}_Item"
        )
        constraints = _constraints(node, min_length="minItems", max_length="maxItems")
        if constraints:
            return Annotated[list[items], Field(**constraints)]
        return list[items]
    return ANY_SCHEMA


def _translate_string(node: Mapping[str, Any], stats: TranslationStats) -> Any:
    enum = node.get("enum")
    if isinstance(enum, (list, tuple)):
        literals = tuple(dict.fromkeys(value for value in enum if isinstance(value, str)))
        if literals:
            stats.record_enum(literals)
            return Literal[literals]

    constraints = _constraints(node, min_length="minLength", max_length="maxLength")
    if constraints:
        return Annotated[str, Field(**constraints)]
    return str


def _translate_number(node: Mapping[str, Any], base: type) -> Any:
    constraints = _constraints(
        node,
        ge="minimum",
        le="maximum",
        gt="exclusiveMinimum",
        lt="exclusiveMaximum",
    )
    if constraints:
        return Annotated[base, Field(**constraints)]
    return base


# =============================================================================
# Helpers
# =============================================================================
def _constraints(node: Mapping[str, Any], **keywords: str) -> dict[str, Any]:
    """Map numeric JSON Schema keywords onto pydantic Field() arguments.

    Values that are not plain numbers (including booleans) are ignored.
    """
    constraints = {}
    for argument, schema_key in keywords.items():
        value = node.get(schema_key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            constraints[argument] = value
    return constraints


def _field_definition(
    prop_name: str,
    prop_node: Any,
    field_type: Any,
    is_required: bool,
    policy: OptionalFieldPolicy,
) -> tuple[Any, Any]:
    description = None
    default = None
    if isinstance(prop_node, Mapping):
        if isinstance(prop_node.get("description"), str):
            description = prop_node["description"]
        default = prop_node.get("default")

    if is_required:
        return field_type, Field(..., alias=prop_name, description=description)
    if policy is OptionalFieldPolicy.NULLABLE:
        return Optional[field_type], Field(..., alias=prop_name, description=description)
    return Optional[field_type], Field(default=default, alias=prop_name, description=description)


def _field_name(prop_name: str, taken: Mapping[str, Any]) -> str:
    """Return a Python-safe attribute name for a wire property name.

    The wire name is always kept as the field alias; this only decides the
    attribute pydantic stores it under.
    """
    if _is_safe_attribute(prop_name) and prop_name not in taken:
        return prop_name

    base = "f_" + _NAME_UNSAFE.sub("_", prop_name).strip("_")
    candidate = base
    counter = 1
    while candidate in taken:
        counter += 1
        candidate = f"{base}_{counter}"
    return candidate


def _is_safe_attribute(name: str) -> bool:
    return (
        name.isidentifier()
        and not keyword.iskeyword(name)
        and not name.startswith("_")
        and not name.startswith("model_")
        and not hasattr(BaseModel, name)
    )


def _model_name(name: str) -> str:
    """CamelCase a tool or property name into a valid class name."""
    words = [word for word in re.split(r"[^0-9A-Za-z]+", name) if word]
    camel = "".join(word[0].upper() + word[1:] for word in words) or "Field"
    if camel[0].isdigit():
        camel = "N" + camel
    return camel
