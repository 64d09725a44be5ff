# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the bridge)
# =============================================================================
#
# These dataclasses describe everything that flows between the tool server,
# the schema translator and the agent runtime.  They carry almost no
# behavior: a couple of constructors that accept loosely-typed wire data
# and turn it into something the rest of core/ can match on.
#
# THE TWO HALVES:
#   - Discovery side:  ToolDescriptor  →  (translator)  →  TranslationStats
#   - Invocation side: raw envelope    →  CallEnvelope  →  normalized dict
#
# RESPONSE PARTS ARE A TAGGED VARIANT:
#   A remote tool answers with a list of typed parts.  Only "text" parts
#   carry data we fold into the result; everything else (images, embedded
#   resources, future kinds) becomes an OtherPart and is skipped.
# =============================================================================

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


# -----------------------------------------------------------------------------
# Translation policies
# -----------------------------------------------------------------------------
class OptionalFieldPolicy(str, Enum):
    """How a property missing from ``required`` is represented.

    NULLABLE:          the key must be present, its value may be null.
    OPTIONAL_DEFAULT:  the key may be omitted; the declared ``default`` is
                       used, otherwise the value is None.
    """

    NULLABLE = "nullable"
    OPTIONAL_DEFAULT = "optional"


class OversizedSchemaPolicy(str, Enum):
    """What registration does when one tool's schema exceeds the ceiling."""

    SKIP = "skip"      # leave that tool out, register the rest
    ABORT = "abort"    # propagate the error, register nothing


# -----------------------------------------------------------------------------
# ToolDescriptor — one entry from the tool server's listing
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolDescriptor:
    """A remote tool as advertised by the discovery service.

    ``name`` is the lookup key in the bridged registry, so it is expected
    to be unique within one listing.
    """

    name: str
    description: str = ""
    raw_schema: Any = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ToolDescriptor":
        """Build a descriptor from a ``tools/list`` entry (wire field names)."""
        return cls(
            name=data["name"],
            description=data.get("description") or "",
            raw_schema=data.get("inputSchema") or {},
        )


# -----------------------------------------------------------------------------
# TranslationStats — running totals for one translation pass
# -----------------------------------------------------------------------------
# One instance is created per tool schema and passed by reference down the
# recursion.  The nesting level is NOT stored here: each recursive call
# receives its own depth as a plain argument, so sibling branches never see
# each other's depth while still sharing one property total.
# -----------------------------------------------------------------------------
@dataclass
class TranslationStats:
    total_properties: int = 0
    enum_values: set[str] = field(default_factory=set)
    total_string_length: int = 0
    max_nesting_level: int = 0

    def record_enum(self, values: tuple[str, ...]) -> None:
        """Account for the literals of one closed enumeration."""
        for value in values:
            self.enum_values.add(value)
            self.total_string_length += len(value)

    def observe_depth(self, nesting_level: int) -> None:
        if nesting_level > self.max_nesting_level:
            self.max_nesting_level = nesting_level


# -----------------------------------------------------------------------------
# Response parts and the call envelope
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class TextPart:
    text: str
    type: str = "text"


@dataclass(frozen=True)
class OtherPart:
    """Any non-text part (image, resource, ...).  Kept only for inspection."""

    type: str
    payload: Mapping[str, Any] = field(default_factory=dict)


ContentPart = Union[TextPart, OtherPart]


@dataclass(frozen=True)
class CallEnvelope:
    """A remote tool's response.

    ``content`` is None when the response had no usable ``content`` list;
    in that case ``raw`` is what the caller gets back unchanged.
    """

    raw: Any
    content: tuple[ContentPart, ...] | None = None
