"""
Input inference from host component nodes.

Reads the component properties of a design-tool node and derives the
``@Input()`` properties and template bindings a generated component must
expose.

Property mapping:
- TEXT    -> string input, default is the text value
- BOOLEAN -> boolean input, bound as a property on the button
- VARIANT -> string input, default is the selected variant, bound as a
  class on the root container
"""
from typing import Any, Dict, List, Mapping, Optional, Tuple
from loguru import logger

from layoutforge.models.schemas.codegen import InferredInput, InferredInputs, TemplateBinding
from layoutforge.utils.naming import camel_case, is_identifier, kebab_case

SUPPORTED_PROPERTY_TYPES = ("TEXT", "BOOLEAN", "VARIANT")
INTERPOLATED_TEXT_INPUTS = ("label", "text", "title")


def _property_name(raw_name: str) -> str:
    # Node property keys look like "Label#12:3"
    return camel_case(raw_name.split("#", 1)[0])


def _default_for(prop_type: str, value: Any):
    if prop_type == "BOOLEAN":
        return bool(value)
    return "" if value is None else str(value)


def _bindings_for(item: InferredInput, root_class: str) -> List[TemplateBinding]:
    if item.source_type == "BOOLEAN":
        return [TemplateBinding(type="property", target=f"p-button[{item.name}]", expression=item.name)]

    if item.source_type == "VARIANT":
        return [TemplateBinding(
            type="class",
            target=root_class,
            expression=f"'{kebab_case(item.name)}-' + {item.name}",
        )]

    if item.name in INTERPOLATED_TEXT_INPUTS:
        bindings = [TemplateBinding(type="interpolation", target="h1", expression=f"{{{{ {item.name} }}}}")]
        if item.name == "label":
            bindings.append(TemplateBinding(type="property", target="p-button[label]", expression=item.name))
        return bindings

    return []


def infer_inputs(node: Optional[Mapping[str, Any]], component_name: str) -> InferredInputs:
    """
    Derive inputs and bindings from a node descriptor.

    Args:
        node: ``{name, type, componentProperties}`` as sent by the host plugin
        component_name: Screen name of the generated component

    Returns:
        InferredInputs; problems are reported in ``warnings``, never raised
    """
    warnings: List[str] = []

    if not isinstance(node, Mapping):
        return InferredInputs(warnings=("No node descriptor provided",))

    properties = node.get("componentProperties")
    if not isinstance(properties, Mapping) or not properties:
        return InferredInputs(
            warnings=(f"No component properties found on node '{node.get('name', 'unknown')}'",)
        )

    inputs: List[InferredInput] = []
    seen = set()

    for raw_name, definition in properties.items():
        if not isinstance(definition, Mapping):
            warnings.append(f"Property '{raw_name}' has no definition")
            continue

        prop_type = definition.get("type")
        if prop_type not in SUPPORTED_PROPERTY_TYPES:
            warnings.append(f"Property '{raw_name}' of type {prop_type} is not supported")
            continue

        name = _property_name(str(raw_name))
        if not is_identifier(name):
            warnings.append(f"Property '{raw_name}' does not yield a valid identifier")
            continue
        if name in seen:
            warnings.append(f"Duplicate input '{name}' from property '{raw_name}' ignored")
            continue
        seen.add(name)

        inputs.append(InferredInput(
            name=name,
            type="boolean" if prop_type == "BOOLEAN" else "string",
            default_value=_default_for(prop_type, definition.get("value")),
            source_property=str(raw_name),
            source_type=prop_type,
        ))

    root_class = f"{component_name.lower()}-container"
    bindings = [binding for item in inputs for binding in _bindings_for(item, root_class)]

    logger.debug(
        f"Input inference for {component_name}: {len(inputs)} inputs, "
        f"{len(bindings)} bindings, {len(warnings)} warnings"
    )

    return InferredInputs(
        inputs=tuple(inputs),
        template_bindings=tuple(bindings),
        warnings=tuple(warnings),
    )


def validate_inferred_inputs(inferred: InferredInputs) -> Tuple[bool, List[str]]:
    """
    Check names are valid, unique identifiers and bindings reference declared inputs.

    Returns:
        Tuple of (is_valid, errors)
    """
    errors: List[str] = []
    names = inferred.names()

    for name in names:
        if not is_identifier(name):
            errors.append(f"Invalid input name: {name}")

    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        errors.append(f"Duplicate input names: {', '.join(duplicates)}")

    for binding in inferred.template_bindings:
        if not any(name in binding.expression for name in names):
            errors.append(f"Binding on {binding.target} does not reference a declared input")

    return not errors, errors


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    escaped = str(value if value is not None else "").replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def generate_input_declarations(inputs, indent: str = "  ") -> str:
    """One ``@Input()`` line per inferred input"""
    return "\n".join(
        f"{indent}@Input() {item.name}: {item.type} = {_literal(item.default_value)};"
        for item in inputs
    )


def create_inference_summary(inferred: InferredInputs) -> Dict[str, Any]:
    return {
        "inputCount": len(inferred.inputs),
        "hasLabel": inferred.has_input("label"),
        "hasVariants": any(item.source_type == "VARIANT" for item in inferred.inputs),
        "hasBooleans": bool(inferred.boolean_inputs()),
        "warnings": list(inferred.warnings),
    }
