"""
Layout Enhancer.

Derives document-level metadata (complexity, primary user flow, content
density) and per-component role / priority from a validated layout document.
Pure and total: the input is never modified and no input shape raises.
"""
from typing import List, Optional

from layoutforge.models.schemas.component_catalog import (
    BUTTON_COMPONENT_KEYS,
    TEXT_COMPONENT_KEYS,
    get_component_role,
)
from layoutforge.models.schemas.layout import (
    CanvasSize,
    EnhancedComponent,
    EnhancedLayoutDocument,
    EnhancedSection,
    LayoutComponent,
    LayoutDocument,
    LayoutMetadata,
)
from layoutforge.utils.logging import get_logger

logger = get_logger(__name__)

MIN_COMPLEXITY = 1
MAX_COMPLEXITY = 10

FORM_SECTION_NAMES = ("form", "centered_form", "form_stack")
BROWSE_SECTION_MARKERS = ("grid", "cards", "product")

# Components per 100 000 px2 of canvas
DENSITY_AREA_UNIT = 100_000
LOW_DENSITY_LIMIT = 1.0
MEDIUM_DENSITY_LIMIT = 2.5

ROLE_PRIORITY = {
    "primary_action": "high",
    "title": "high",
    "input": "medium",
    "content": "medium",
}


def complexity_score(document: LayoutDocument) -> int:
    """sections x average components per section, halved and clipped to 1..10"""
    section_count = len(document.sections)
    if section_count == 0:
        return MIN_COMPLEXITY

    average = document.component_count / section_count
    score = round(section_count * average / 2)
    return max(MIN_COMPLEXITY, min(MAX_COMPLEXITY, score))


def primary_user_flow(document: LayoutDocument) -> str:
    keys = [component.component_key for _, component in document.iter_components()]
    section_names = [section.section_name.lower() for section in document.sections]

    if keys.count("text_input") >= 2 or any(name in FORM_SECTION_NAMES for name in section_names):
        return "input"

    if any(section.layout_direction == "grid" for section in document.sections):
        return "browse"
    if any(marker in name for name in section_names for marker in BROWSE_SECTION_MARKERS):
        return "browse"

    if not keys:
        return "browse"

    text_count = sum(1 for key in keys if key in TEXT_COMPONENT_KEYS)
    if text_count * 2 > len(keys):
        return "read"

    if all(key in BUTTON_COMPONENT_KEYS for key in keys):
        return "action"

    return "browse"


def content_density(document: LayoutDocument, canvas_size: Optional[CanvasSize] = None) -> str:
    canvas = canvas_size or document.canvas_size
    if canvas is None or canvas.area <= 0:
        return "medium"

    per_unit = document.component_count / (canvas.area / DENSITY_AREA_UNIT)
    if per_unit < LOW_DENSITY_LIMIT:
        return "low"
    if per_unit < MEDIUM_DENSITY_LIMIT:
        return "medium"
    return "high"


def enhance_component(component: LayoutComponent) -> EnhancedComponent:
    role = get_component_role(component.component_key)
    return EnhancedComponent(
        component_key=component.component_key,
        text=component.text,
        component_role=role,
        layout_priority=ROLE_PRIORITY.get(role, "low"),
    )


def enhance(document: LayoutDocument) -> EnhancedLayoutDocument:
    """
    Build the enhanced document once from a validated layout document.

    Args:
        document: Layout produced by ``LayoutDocument.from_validated``

    Returns:
        A new EnhancedLayoutDocument; ``document`` is left untouched
    """
    sections: List[EnhancedSection] = [
        EnhancedSection(
            section_name=section.section_name,
            layout_direction=section.layout_direction,
            components=tuple(enhance_component(component) for component in section.components),
        )
        for section in document.sections
    ]

    metadata = LayoutMetadata(
        complexity_score=complexity_score(document),
        primary_user_flow=primary_user_flow(document),
        content_density=content_density(document),
        section_count=len(document.sections),
        total_components=document.component_count,
    )

    logger.debug(
        "layout.enhancement.completed",
        extra={
            "complexity": metadata.complexity_score,
            "flow": metadata.primary_user_flow,
            "density": metadata.content_density,
        }
    )

    return EnhancedLayoutDocument(
        screen_type=document.screen_type,
        application_type=document.application_type,
        layout_archetype=document.layout_archetype,
        canvas_size=document.canvas_size,
        sections=tuple(sections),
        layout_metadata=metadata,
    )
