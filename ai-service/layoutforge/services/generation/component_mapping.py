"""
Component Mapping Table.

Deterministic lookup from Design IR kinds to Angular + PrimeNG fragments,
plus typed markup builders that turn one IR component into a fully resolved
template string. ``attribute_templates`` are descriptive only (they are
embedded in the generation prompt) and are never string-substituted.
"""
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

from layoutforge.core.errors import UnmappedComponentKind
from layoutforge.models.schemas.codegen import ComponentMappingEntry, InferredInputs
from layoutforge.models.schemas.design_ir import (
    ButtonComponent,
    ContainerComponent,
    HeadingComponent,
    InputComponent,
    TextComponent,
)
from layoutforge.utils.naming import camel_case, pascal_case

COMPONENT_MAPPING: Mapping[str, ComponentMappingEntry] = MappingProxyType({
    "heading": ComponentMappingEntry(
        kind="heading",
        target_tag="h1",
        attribute_templates=MappingProxyType({}),
        content_template="{{text}}",
    ),
    "text": ComponentMappingEntry(
        kind="text",
        target_tag="p",
        attribute_templates=MappingProxyType({"class": "text-content"}),
        content_template="{{text}}",
    ),
    "input": ComponentMappingEntry(
        kind="input",
        target_tag="p-inputText",
        attribute_templates=MappingProxyType({
            "type": "{{inputType}}",
            "placeholder": "{{label}}",
            "[(ngModel)]": "{{camelCase(label)}}Value",
        }),
        required_imports=frozenset({"InputTextModule", "FormsModule"}),
    ),
    "button": ComponentMappingEntry(
        kind="button",
        target_tag="p-button",
        attribute_templates=MappingProxyType({
            "label": "{{text}}",
            "severity": "{{mapButtonVariant(variant)}}",
            "(click)": "on{{pascalCase(text)}}Click()",
        }),
        required_imports=frozenset({"ButtonModule"}),
    ),
    "container": ComponentMappingEntry(
        kind="container",
        target_tag="div",
        attribute_templates=MappingProxyType({"class": "{{mapContainerVariant(variant)}}"}),
        content_template="<!-- Container content -->",
    ),
})

INPUT_TYPE_MAPPING: Mapping[str, str] = MappingProxyType({
    "email": "email",
    "password": "password",
    "text": "text",
    "number": "number",
    "tel": "tel",
    "url": "url",
})

BUTTON_VARIANT_MAPPING: Mapping[str, str] = MappingProxyType({
    "primary": "primary",
    "secondary": "secondary",
    "success": "success",
    "info": "info",
    "warning": "warning",
    "danger": "danger",
})

CONTAINER_VARIANT_MAPPING: Mapping[str, str] = MappingProxyType({
    "card": "card-container",
    "panel": "panel-container",
    "section": "section-container",
})


def map_input_type(input_type: str) -> str:
    return INPUT_TYPE_MAPPING.get(input_type, "text")


def map_button_variant(variant: str) -> str:
    return BUTTON_VARIANT_MAPPING.get(variant, "primary")


def map_container_variant(variant: str) -> str:
    return CONTAINER_VARIANT_MAPPING.get(variant, "container")


def _kind_of(component: Any) -> Any:
    if isinstance(component, Mapping):
        return component.get("type")
    return getattr(component, "type", None)


def _table(mapping_table: Optional[Mapping[str, ComponentMappingEntry]]) -> Mapping[str, ComponentMappingEntry]:
    return COMPONENT_MAPPING if mapping_table is None else mapping_table


def is_mappable(kind: Any, mapping_table: Optional[Mapping[str, ComponentMappingEntry]] = None) -> bool:
    # Kinds come from raw mappings too; anything but a string is unmapped
    return isinstance(kind, str) and kind in _table(mapping_table)


def mapping_for(kind: Any, mapping_table: Optional[Mapping[str, ComponentMappingEntry]] = None) -> ComponentMappingEntry:
    """
    Look up ``kind`` in ``mapping_table`` (the static table by default).

    Raises:
        UnmappedComponentKind: ``kind`` has no entry
    """
    if not is_mappable(kind, mapping_table):
        raise UnmappedComponentKind([{"index": None, "kind": kind}])
    return _table(mapping_table)[kind]


def validate_all_mappable(
    components: Iterable[Any],
    mapping_table: Optional[Mapping[str, ComponentMappingEntry]] = None,
) -> bool:
    """
    Check every component at once.

    Raises:
        UnmappedComponentKind: listing every offending index and kind
    """
    unmapped = [
        {"index": index, "kind": _kind_of(component)}
        for index, component in enumerate(components)
        if not is_mappable(_kind_of(component), mapping_table)
    ]
    if unmapped:
        raise UnmappedComponentKind(unmapped)
    return True


def required_imports(
    components: Iterable[Any],
    mapping_table: Optional[Mapping[str, ComponentMappingEntry]] = None,
) -> FrozenSet[str]:
    imports = set()
    for component in components:
        imports.update(mapping_for(_kind_of(component), mapping_table).required_imports)
    return frozenset(imports)


def mapping_table_as_dict() -> Dict[str, Any]:
    return {kind: entry.to_dict() for kind, entry in sorted(COMPONENT_MAPPING.items())}


# ---------------------------------------------------------------------------
# Typed markup builders
# ---------------------------------------------------------------------------

def model_property_name(label: str) -> str:
    """``Email Address`` -> ``emailAddressValue``"""
    return f"{camel_case(label) or 'field'}Value"


def click_handler_name(text: str) -> str:
    """``Sign In`` -> ``onSignInClick``"""
    return f"on{pascal_case(text) or 'Button'}Click"


def _escape_attribute(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


def _attributes(pairs: List[tuple]) -> str:
    return " ".join(f'{name}="{_escape_attribute(value)}"' for name, value in pairs)


def build_heading(component: HeadingComponent, entry: ComponentMappingEntry,
                  inferred: Optional[InferredInputs] = None) -> str:
    text = "{{ label }}" if inferred is not None and inferred.has_input("label") else component.text
    return f"<{entry.target_tag}>{text}</{entry.target_tag}>"


def build_text(component: TextComponent, entry: ComponentMappingEntry,
               inferred: Optional[InferredInputs] = None) -> str:
    attrs = _attributes([("class", entry.attribute_templates.get("class", "text-content"))])
    return f"<{entry.target_tag} {attrs}>{component.text}</{entry.target_tag}>"


def build_input(component: InputComponent, entry: ComponentMappingEntry,
                inferred: Optional[InferredInputs] = None) -> str:
    attrs = _attributes([
        ("type", map_input_type(component.input_type)),
        ("placeholder", component.label),
        ("[(ngModel)]", model_property_name(component.label)),
    ])
    return f"<{entry.target_tag} {attrs}></{entry.target_tag}>"


def build_button(component: ButtonComponent, entry: ComponentMappingEntry,
                 inferred: Optional[InferredInputs] = None) -> str:
    label = component.text
    pairs = []
    if inferred is not None and inferred.has_input("label"):
        label = "{{ label }}"
    pairs.append(("label", label))
    pairs.append(("severity", map_button_variant(component.variant)))
    pairs.append(("(click)", f"{click_handler_name(component.text)}()"))
    if inferred is not None:
        pairs.extend((f"[{item.name}]", item.name) for item in inferred.boolean_inputs())
    return f"<{entry.target_tag} {_attributes(pairs)}></{entry.target_tag}>"


def build_container(component: ContainerComponent, entry: ComponentMappingEntry,
                    inferred: Optional[InferredInputs] = None) -> str:
    attrs = _attributes([("class", map_container_variant(component.variant))])
    return f"<{entry.target_tag} {attrs}>{entry.content_template or ''}</{entry.target_tag}>"


MARKUP_BUILDERS = MappingProxyType({
    "heading": build_heading,
    "text": build_text,
    "input": build_input,
    "button": build_button,
    "container": build_container,
})


def render_markup(component: Any, entry: Optional[ComponentMappingEntry] = None,
                  inferred: Optional[InferredInputs] = None) -> str:
    """
    Fully resolved template markup for one IR component.

    Raises:
        UnmappedComponentKind: the component's kind has no entry
    """
    entry = entry or mapping_for(component.type)
    return MARKUP_BUILDERS[component.type](component, entry, inferred)
