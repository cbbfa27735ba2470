"""
Archetype Resolver.

Maps (application_type, screen_type) to a canonical layout archetype, looks up
archetype configs and canvas sizes, and checks a document against the
archetype it declares.

All tables are built once at import time and exposed read-only.
"""
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from layoutforge.core.errors import ArchetypeError
from layoutforge.models.schemas.archetype import ArchetypeConfig, SectionRule
from layoutforge.models.schemas.layout import CanvasSize, LayoutDocument
from layoutforge.utils.logging import get_logger

logger = get_logger(__name__)


def _archetype(
    name: str,
    canvas_type: str,
    sections: List[str],
    typical_components: List[str],
    layout_direction: str,
    section_rules: Dict[str, Dict[str, Any]],
    responsive_behavior: str,
) -> ArchetypeConfig:
    return ArchetypeConfig(
        name=name,
        canvas_type=canvas_type,
        sections=tuple(sections),
        typical_components=tuple(typical_components),
        layout_direction=layout_direction,
        section_rules=MappingProxyType({
            section: SectionRule(direction=rule["direction"], allowed_components=tuple(rule["components"]))
            for section, rule in section_rules.items()
        }),
        responsive_behavior=responsive_behavior,
    )


_ARCHETYPES = [
    # Web archetypes
    _archetype(
        "dashboard_web", "desktop",
        ["header", "main_content", "sidebar"],
        ["heading", "card_container", "description", "primary_button", "secondary_button"],
        "multi_column",
        {
            "header": {"direction": "horizontal", "components": ["heading", "primary_button"]},
            "main_content": {"direction": "grid", "components": ["card_container", "description"]},
            "sidebar": {"direction": "vertical", "components": ["card_container", "secondary_button"]},
        },
        "collapse_sidebar_on_mobile",
    ),
    _archetype(
        "landing_web", "desktop",
        ["hero", "content_sections", "cta"],
        ["heading", "description", "wrapped_description", "primary_button", "secondary_button"],
        "vertical_sections",
        {
            "hero": {"direction": "vertical", "components": ["heading", "description", "primary_button"]},
            "content_sections": {"direction": "vertical", "components": ["heading", "wrapped_description"]},
            "cta": {"direction": "horizontal", "components": ["primary_button", "secondary_button"]},
        },
        "stack_sections_on_mobile",
    ),
    _archetype(
        "ecommerce_web", "desktop",
        ["header", "product_grid", "sidebar_filters"],
        ["heading", "card_container", "primary_button", "text_input"],
        "multi_column",
        {
            "header": {"direction": "horizontal", "components": ["heading", "text_input"]},
            "product_grid": {"direction": "grid", "components": ["card_container", "primary_button"]},
            "sidebar_filters": {"direction": "vertical", "components": ["heading", "text_input", "secondary_button"]},
        },
        "collapse_sidebar_on_mobile",
    ),
    _archetype(
        "healthcare_web", "desktop",
        ["header", "patient_info", "main_content", "actions"],
        ["heading", "description", "card_container", "primary_button", "text_input"],
        "multi_column",
        {
            "header": {"direction": "horizontal", "components": ["heading", "primary_button"]},
            "patient_info": {"direction": "vertical", "components": ["card_container", "description"]},
            "main_content": {"direction": "grid", "components": ["card_container", "text_input"]},
            "actions": {"direction": "horizontal", "components": ["primary_button", "secondary_button"]},
        },
        "stack_sections_on_mobile",
    ),
    _archetype(
        "auth_flow", "centered",
        ["centered_form"],
        ["heading", "description", "text_input", "primary_button", "secondary_button"],
        "vertical_form",
        {
            "centered_form": {
                "direction": "vertical",
                "components": ["heading", "description", "text_input", "primary_button", "secondary_button"],
            },
        },
        "maintain_center_on_all_sizes",
    ),
    _archetype(
        "content_page", "desktop",
        ["header", "main_content"],
        ["heading", "description", "wrapped_description", "secondary_button"],
        "single_column",
        {
            "header": {"direction": "horizontal", "components": ["heading", "secondary_button"]},
            "main_content": {"direction": "vertical", "components": ["heading", "wrapped_description"]},
        },
        "maintain_single_column",
    ),
    # Mobile archetypes
    _archetype(
        "mobile_stacked", "mobile",
        ["stacked_content"],
        ["heading", "description", "card_container", "primary_button"],
        "vertical_only",
        {
            "stacked_content": {
                "direction": "vertical",
                "components": ["heading", "description", "card_container", "primary_button"],
            },
        },
        "maintain_vertical_stack",
    ),
    _archetype(
        "mobile_dashboard", "mobile",
        ["header", "cards_stack", "bottom_actions"],
        ["heading", "card_container", "primary_button", "secondary_button"],
        "vertical_only",
        {
            "header": {"direction": "vertical", "components": ["heading"]},
            "cards_stack": {"direction": "vertical", "components": ["card_container"]},
            "bottom_actions": {"direction": "horizontal", "components": ["primary_button", "secondary_button"]},
        },
        "maintain_vertical_stack",
    ),
    _archetype(
        "mobile_form", "mobile",
        ["form_stack"],
        ["heading", "description", "text_input", "primary_button"],
        "vertical_only",
        {
            "form_stack": {
                "direction": "vertical",
                "components": ["heading", "description", "text_input", "primary_button"],
            },
        },
        "maintain_vertical_stack",
    ),
]

LAYOUT_ARCHETYPES: Mapping[str, ArchetypeConfig] = MappingProxyType(
    {archetype.name: archetype for archetype in _ARCHETYPES}
)

APPLICATION_ARCHETYPE_MAP: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "dashboard": MappingProxyType({"web": "dashboard_web", "mobile": "mobile_dashboard"}),
    "ecommerce": MappingProxyType({"web": "ecommerce_web", "mobile": "mobile_stacked"}),
    "healthcare": MappingProxyType({"web": "healthcare_web", "mobile": "mobile_dashboard"}),
    "education": MappingProxyType({"web": "content_page", "mobile": "mobile_stacked"}),
    "saas": MappingProxyType({"web": "dashboard_web", "mobile": "mobile_dashboard"}),
    "landing_page": MappingProxyType({"web": "landing_web", "mobile": "mobile_stacked"}),
    "auth": MappingProxyType({"web": "auth_flow", "mobile": "mobile_form"}),
    "profile": MappingProxyType({"web": "content_page", "mobile": "mobile_form"}),
    "settings": MappingProxyType({"web": "content_page", "mobile": "mobile_form"}),
    "default": MappingProxyType({"web": "content_page", "mobile": "mobile_stacked"}),
})

KNOWN_APPLICATION_TYPES = frozenset(key for key in APPLICATION_ARCHETYPE_MAP if key != "default")

CANVAS_SIZES: Mapping[str, CanvasSize] = MappingProxyType({
    "desktop": CanvasSize(width=1200, height=800),
    "mobile": CanvasSize(width=375, height=812),
    "centered": CanvasSize(width=400, height=600),
})

DEFAULT_CANVAS_TYPE = "desktop"


def expected_archetype(application_type: str, screen_type: str) -> str:
    """
    Archetype key the backend should have picked.

    Unknown application types use the ``default`` row; unknown screen types
    use the row's ``web`` entry.
    """
    row = APPLICATION_ARCHETYPE_MAP.get(application_type) or APPLICATION_ARCHETYPE_MAP["default"]
    return row.get(screen_type) or row["web"]


def config_for(archetype_key: str) -> Optional[ArchetypeConfig]:
    """Archetype config, or None when the key is not in the table"""
    return LAYOUT_ARCHETYPES.get(archetype_key)


def require_config(archetype_key: str, expected: Optional[str] = None) -> ArchetypeConfig:
    config = config_for(archetype_key)
    if config is None:
        raise ArchetypeError(archetype_key, expected=expected, available=list(LAYOUT_ARCHETYPES))
    return config


def canvas_size_for(canvas_type: str) -> CanvasSize:
    return CANVAS_SIZES.get(canvas_type) or CANVAS_SIZES[DEFAULT_CANVAS_TYPE]


def resolve_canvas_size(document: LayoutDocument, config: ArchetypeConfig) -> CanvasSize:
    """Keep the document's canvas when valid, otherwise use the archetype default"""
    if document.canvas_size is not None:
        return document.canvas_size
    return canvas_size_for(config.canvas_type)


def check_archetype_fit(document: LayoutDocument) -> List[str]:
    """
    Advisory comparison of a document against its declared archetype.

    Returns warning strings only; an unknown archetype is the caller's
    concern (see ``require_config``).
    """
    warnings: List[str] = []
    expected = expected_archetype(document.application_type, document.screen_type)

    if document.layout_archetype != expected:
        warnings.append(
            f"Layout archetype '{document.layout_archetype}' differs from expected "
            f"'{expected}' for {document.application_type}/{document.screen_type}"
        )

    config = config_for(document.layout_archetype)
    if config is None:
        return warnings

    for section in document.sections:
        rule = config.rule_for(section.section_name)
        if rule is None:
            warnings.append(
                f"Section '{section.section_name}' is not part of archetype '{config.name}'"
            )
            continue

        if section.layout_direction != rule.direction:
            warnings.append(
                f"Section '{section.section_name}' uses {section.layout_direction} "
                f"direction, archetype expects {rule.direction}"
            )

        unexpected = sorted({
            component.component_key
            for component in section.components
            if component.component_key not in rule.allowed_components
        })
        if unexpected:
            warnings.append(
                f"Section '{section.section_name}' contains components outside "
                f"archetype rule: {', '.join(unexpected)}"
            )

    if warnings:
        logger.debug(
            "archetype.fit.warnings",
            extra={"archetype": document.layout_archetype, "warnings": len(warnings)}
        )

    return warnings


def export_archetype_tables() -> Dict[str, Any]:
    return {
        "archetypes": {key: config.to_dict() for key, config in LAYOUT_ARCHETYPES.items()},
        "applicationArchetypeMap": {
            key: dict(row) for key, row in APPLICATION_ARCHETYPE_MAP.items()
        },
        "canvasSizes": {
            key: size.model_dump() for key, size in CANVAS_SIZES.items()
        },
    }
