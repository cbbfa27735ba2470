"""
Design IR Converter.

Normalises a layout document (raw flat, raw sectioned, validated or enhanced)
into a DesignIR. Conversion is local and deterministic: no backend call
happens here.
"""
from typing import Any, Dict, List, Mapping, Sequence, Union

from layoutforge.config import settings
from layoutforge.core.errors import InvalidInput, IRError, MissingComponentType, MissingField
from layoutforge.models.schemas.design_ir import (
    ButtonComponent,
    ContainerComponent,
    DesignIR,
    DesignTokens,
    HeadingComponent,
    InputComponent,
    TextComponent,
)
from layoutforge.models.schemas.layout import LayoutDocument
from layoutforge.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_IR_FIELDS = ("screenName", "layout", "components", "tokens")

LayoutInput = Union[LayoutDocument, Mapping[str, Any]]


def convert_component(component: Mapping[str, Any]):
    """
    Convert one layout component into its IR kind.

    Total: keys without an explicit conversion become a placeholder text
    component. Icon buttons map to primary buttons and blank slates to section
    containers, so neither falls through to the placeholder.
    """
    key = component.get("componentKey")
    text = component.get("text") or ""
    if not isinstance(text, str):
        text = str(text)

    if key == "heading":
        return HeadingComponent(text=text or "Heading")

    if key in ("description", "wrapped_description"):
        return TextComponent(text=text or "Description text")

    if key == "text_input":
        return InputComponent(label=text or "Input", input_type="text")

    if key in ("primary_button", "primary_icon_button"):
        return ButtonComponent(variant="primary", text=text or "Button")

    if key == "secondary_button":
        return ButtonComponent(variant="secondary", text=text or "Button")

    if key == "card_container":
        return ContainerComponent(variant="card")

    if key == "default_blankslate":
        return ContainerComponent(variant="section")

    return TextComponent(text=text or "Unknown component")


def extract_design_tokens(screen_type: Any) -> DesignTokens:
    """Mobile gets denser spacing, desktop looser spacing and a larger type scale"""
    if screen_type == "mobile":
        return DesignTokens(spacing="sm", font_size="base")
    if screen_type == "desktop":
        return DesignTokens(spacing="lg", font_size="lg")
    return DesignTokens()


def _flatten_components(document: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    components = document.get("components")
    if isinstance(components, list):
        return [c for c in components if isinstance(c, Mapping)]

    sections = document.get("sections")
    if isinstance(sections, list):
        flat: List[Mapping[str, Any]] = []
        for section in sections:
            if not isinstance(section, Mapping):
                continue
            section_components = section.get("components")
            if isinstance(section_components, list):
                flat.extend(c for c in section_components if isinstance(c, Mapping))
        return flat

    raise InvalidInput("Invalid layout JSON provided: no components or sections collection")


def to_ir(document: LayoutInput, screen_name: str = None) -> DesignIR:
    """
    Convert a layout document into Design IR.

    Args:
        document: LayoutDocument / EnhancedLayoutDocument, or a raw mapping with
            either a flat ``components`` list or ``sections``
        screen_name: Component base name, defaults to ``settings.default_screen_name``

    Raises:
        InvalidInput: when neither a components nor a sections collection exists
    """
    screen_name = screen_name or settings.default_screen_name

    if isinstance(document, LayoutDocument):
        raw: Mapping[str, Any] = document.to_wire()
    elif isinstance(document, Mapping):
        raw = document
    else:
        raise InvalidInput(f"Invalid layout JSON provided: {type(document).__name__}")

    components = [convert_component(component) for component in _flatten_components(raw)]
    screen_type = raw.get("screenType")

    ir = DesignIR(
        screen_name=screen_name,
        layout="horizontal" if screen_type == "desktop" else "vertical",
        components=tuple(components),
        tokens=extract_design_tokens(screen_type),
    )

    logger.info(
        "ir.conversion.completed",
        extra={
            "screen_name": screen_name,
            "components": len(components),
            "kinds": ir.kinds,
        }
    )

    return ir


def validate_ir(ir: Union[DesignIR, Mapping[str, Any]]) -> bool:
    """
    Structural sanity check of a Design IR, independent of the mapping table.

    Raises:
        MissingField: a required top-level field is absent or empty
        IRError: ``components`` is not a list
        MissingComponentType: a component carries no ``type`` tag
    """
    data: Dict[str, Any] = ir.to_dict() if isinstance(ir, DesignIR) else dict(ir)

    for field in REQUIRED_IR_FIELDS:
        value = data.get(field)
        if value is None or value == "":
            raise MissingField(field)

    components = data["components"]
    if not isinstance(components, Sequence) or isinstance(components, (str, bytes)):
        raise IRError("Components must be an array")

    for index, component in enumerate(components):
        if not isinstance(component, Mapping) or not component.get("type"):
            raise MissingComponentType(index)

    return True
