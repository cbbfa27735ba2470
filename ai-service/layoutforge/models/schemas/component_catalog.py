"""Centralized design-system component registry.

This module is the single source of truth for the component keys a layout
document may use. The schema validator, the enhancer, the Design IR converter
and the layout prompt all read from it.
"""

from __future__ import annotations

from copy import deepcopy
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, TypedDict


class ComponentDefinition(TypedDict):
    """Catalog entry for one allowed component key."""

    key: str
    category: str
    role: str
    text_bearing: bool
    ir_kind: str
    description: str


ALLOWED_COMPONENT_KEYS: Tuple[str, ...] = (
    "primary_button",
    "secondary_button",
    "primary_icon_button",
    "default_blankslate",
    "wrapped_description",
    "text_input",
    "card_container",
    "heading",
    "description",
)


COMPONENT_CATALOG: Mapping[str, ComponentDefinition] = MappingProxyType({
    "primary_button": {
        "key": "primary_button",
        "category": "action",
        "role": "primary_action",
        "text_bearing": True,
        "ir_kind": "button",
        "description": "Main call to action",
    },
    "secondary_button": {
        "key": "secondary_button",
        "category": "action",
        "role": "secondary_action",
        "text_bearing": True,
        "ir_kind": "button",
        "description": "Alternative or cancel action",
    },
    "primary_icon_button": {
        "key": "primary_icon_button",
        "category": "action",
        "role": "primary_action",
        "text_bearing": True,
        "ir_kind": "button",
        "description": "Compact primary action rendered with an icon",
    },
    "default_blankslate": {
        "key": "default_blankslate",
        "category": "container",
        "role": "placeholder",
        "text_bearing": True,
        "ir_kind": "container",
        "description": "Empty-state placeholder block",
    },
    "wrapped_description": {
        "key": "wrapped_description",
        "category": "text",
        "role": "content",
        "text_bearing": True,
        "ir_kind": "text",
        "description": "Long paragraph that wraps across lines",
    },
    "text_input": {
        "key": "text_input",
        "category": "input",
        "role": "input",
        "text_bearing": True,
        "ir_kind": "input",
        "description": "Single-line text field",
    },
    "card_container": {
        "key": "card_container",
        "category": "container",
        "role": "container",
        "text_bearing": True,
        "ir_kind": "container",
        "description": "Card surface grouping related content",
    },
    "heading": {
        "key": "heading",
        "category": "text",
        "role": "title",
        "text_bearing": True,
        "ir_kind": "heading",
        "description": "Screen or section title",
    },
    "description": {
        "key": "description",
        "category": "text",
        "role": "content",
        "text_bearing": True,
        "ir_kind": "text",
        "description": "Short supporting text",
    },
})

TEXT_COMPONENT_KEYS = frozenset({"heading", "description", "wrapped_description"})
BUTTON_COMPONENT_KEYS = frozenset({"primary_button", "secondary_button", "primary_icon_button"})

# Attributes a component object may carry besides its key.
KNOWN_COMPONENT_ATTRIBUTES = frozenset({
    "componentKey",
    "text",
    "component_role",
    "layout_priority",
})


def is_allowed_component(key: Any) -> bool:
    return isinstance(key, str) and key in COMPONENT_CATALOG


def get_component_definition(key: str) -> Optional[ComponentDefinition]:
    definition = COMPONENT_CATALOG.get(key)
    return deepcopy(definition) if definition else None


def get_component_role(key: str, default: str = "content") -> str:
    definition = COMPONENT_CATALOG.get(key)
    return definition["role"] if definition else default


def get_available_components() -> List[str]:
    return list(ALLOWED_COMPONENT_KEYS)


def export_component_catalog() -> Dict[str, Any]:
    return {
        "allowedComponentKeys": list(ALLOWED_COMPONENT_KEYS),
        "components": [deepcopy(COMPONENT_CATALOG[key]) for key in ALLOWED_COMPONENT_KEYS],
    }
