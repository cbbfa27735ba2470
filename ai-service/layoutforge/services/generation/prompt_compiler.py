"""
Prompt Compiler.

Serialises Design IR, the component mapping table and optional inferred
inputs into the instruction text sent to the generative backend, and builds
the layout generation prompt.

Compilation is purely textual and deterministic: identical inputs always
produce byte-identical prompts (stable JSON, sorted sets, no timestamps).
"""
import json
from typing import List, Mapping, Optional, Tuple

from layoutforge.core.errors import PromptError
from layoutforge.models.prompts import PromptLibrary
from layoutforge.models.schemas.codegen import ComponentMappingEntry, InferredInputs
from layoutforge.models.schemas.component_catalog import ALLOWED_COMPONENT_KEYS
from layoutforge.models.schemas.design_ir import DesignIR, DesignTokens
from layoutforge.services.analysis.input_inference import (
    create_inference_summary,
    generate_input_declarations,
    validate_inferred_inputs,
)
from layoutforge.services.generation.archetype_resolver import (
    APPLICATION_ARCHETYPE_MAP,
    CANVAS_SIZES,
    KNOWN_APPLICATION_TYPES,
    LAYOUT_ARCHETYPES,
)
from layoutforge.services.generation.component_mapping import (
    COMPONENT_MAPPING,
    mapping_for,
    render_markup,
    required_imports,
    validate_all_mappable,
)
from layoutforge.utils.logging import get_logger, trace_sync
from layoutforge.utils.naming import kebab_case

logger = get_logger(__name__)

ARTIFACT_EXTENSIONS = ("ts", "html", "scss")


def validate_prompt_inputs(ir: DesignIR) -> bool:
    """
    Raises:
        PromptError: missing screen name or no components
    """
    if not ir.screen_name:
        raise PromptError("Design IR missing screenName")
    if len(ir.components) == 0:
        raise PromptError("Design IR must have at least one component")
    return True


def generate_tokens_mapping(tokens: DesignTokens) -> str:
    """``spacing: sm -> --spacing: var(--sm)`` per token, in declaration order"""
    return "\n".join(
        f"{key}: {value} → --{kebab_case(key)}: var(--{value})"
        for key, value in tokens.to_dict().items()
    )


def build_component_instructions(
    ir: DesignIR,
    inferred: Optional[InferredInputs] = None,
    mapping_table: Optional[Mapping[str, ComponentMappingEntry]] = None,
) -> str:
    """One markup line per component, rendered from ``mapping_table`` entries"""
    lines = []
    for index, component in enumerate(ir.components, start=1):
        markup = render_markup(component, mapping_for(component.type, mapping_table), inferred)
        lines.append(f"{index}. {component.type.capitalize()}: Use {markup}")
    return "\n".join(lines)


def _serialise_mapping(mapping_table: Mapping[str, ComponentMappingEntry]) -> str:
    table = {kind: entry.to_dict() for kind, entry in mapping_table.items()}
    return json.dumps(table, indent=2, sort_keys=True)


def _inference_section(inferred: Optional[InferredInputs]) -> Tuple[str, bool, bool]:
    """Returns (section text, has inputs, has bindings)"""
    if inferred is None or inferred.is_empty:
        return "", False, False

    is_valid, errors = validate_inferred_inputs(inferred)
    if not is_valid:
        logger.warning(
            "prompt.inference.skipped",
            extra={"errors": errors}
        )
        return "", False, False

    summary = create_inference_summary(inferred)
    bindings = "\n".join(
        f'- {binding.type}: {binding.target} = "{binding.expression}"'
        for binding in inferred.template_bindings
    )

    lines = [
        "",
        "INFERRED INPUTS (MANDATORY):",
        "Based on design signals from the host node, generate these EXACT @Input() properties:",
        "",
        generate_input_declarations(inferred.inputs),
        "",
        "TEMPLATE BINDING REQUIREMENTS:",
        bindings or "- none",
        "",
        "INFERENCE SUMMARY:",
        f"- Inputs detected: {summary['inputCount']}",
        f"- Has label: {str(summary['hasLabel']).lower()}",
        f"- Has variants: {str(summary['hasVariants']).lower()}",
        f"- Has booleans: {str(summary['hasBooleans']).lower()}",
    ]
    if summary["warnings"]:
        lines.append(f"- Warnings: {', '.join(summary['warnings'])}")

    return "\n".join(lines) + "\n", True, bool(inferred.template_bindings)


@trace_sync("prompt.compile")
def compile_prompt(
    ir: DesignIR,
    mapping_table: Optional[Mapping[str, ComponentMappingEntry]] = None,
    inferred_inputs: Optional[InferredInputs] = None,
) -> str:
    """
    Build the code generation prompt.

    Args:
        ir: Validated Design IR
        mapping_table: Kind -> mapping entry, defaults to COMPONENT_MAPPING
        inferred_inputs: Optional inputs from the input inference collaborator

    Returns:
        Prompt text. Never calls the backend.

    Raises:
        PromptError: the IR has no screen name or no components
        UnmappedComponentKind: a component kind has no entry in ``mapping_table``
    """
    validate_prompt_inputs(ir)
    mapping_table = mapping_table if mapping_table is not None else COMPONENT_MAPPING
    validate_all_mappable(ir.components, mapping_table)

    base = ir.screen_name.lower()
    inference_text, has_inputs, has_bindings = _inference_section(inferred_inputs)
    active_inference = inferred_inputs if has_inputs else None

    constraints: List[str] = [
        "- Use Angular + PrimeNG ONLY",
        "- NO redesign or layout changes",
        "- Use CSS variables for design tokens",
        "- Generate exactly 3 files: .component.ts, .component.html, .component.scss",
        "- Clean, production-ready code",
        "- Follow Angular best practices",
        "- Use proper TypeScript types",
        "- MANDATORY: Always use styleUrls (plural) with array syntax: styleUrls: ['./component.scss']",
        "- NEVER use styleUrl (singular) - always use styleUrls: ['./file.scss']",
    ]
    if has_inputs:
        constraints.append("- MANDATORY: Include ALL inferred @Input() properties from the INFERRED INPUTS section above")
    if has_bindings:
        constraints.append("- MANDATORY: Apply ALL template bindings from the INFERRED INPUTS section above")

    imports = sorted(required_imports(ir.components, mapping_table))

    sections = [
        PromptLibrary.CODE_GENERATE_SYSTEM,
        "",
        "DESIGN IR INPUT:",
        json.dumps(ir.to_dict(), indent=2),
        "",
        "COMPONENT MAPPING RULES:",
        _serialise_mapping(mapping_table),
        inference_text,
        "CONSTRAINTS:",
        "\n".join(constraints),
        "",
        "REQUIRED IMPORTS:",
        ", ".join(imports) if imports else "none",
        "",
        "DESIGN TOKENS TO CSS VARIABLES:",
        generate_tokens_mapping(ir.tokens),
        "",
        "COMPONENT INSTRUCTIONS:",
        build_component_instructions(ir, active_inference, mapping_table),
        "",
        "GENERATE FILES:",
        "",
        "\n".join(
            f"{position}. {base}.component.{ext}"
            for position, ext in enumerate(ARTIFACT_EXTENSIONS, start=1)
        ),
        "",
        "OUTPUT FORMAT:",
        "```typescript",
        f"// {base}.component.ts",
        "[TypeScript component code]",
        "```",
        "",
        "```html",
        f"<!-- {base}.component.html -->",
        "[HTML template code]",
        "```",
        "",
        "```scss",
        f"/* {base}.component.scss */",
        "[SCSS styles code]",
        "```",
        "",
        "Generate the code now:",
    ]

    prompt = "\n".join(sections)

    logger.info(
        "prompt.compile.built",
        extra={
            "screen_name": ir.screen_name,
            "characters": len(prompt),
            "inferred_inputs": has_inputs,
        }
    )

    return prompt


def build_layout_prompt(user_prompt: str) -> Tuple[str, str]:
    """
    Build the (system, user) prompt pair for layout generation.

    Archetype, mapping and component lists are rendered from the live tables
    so the prompt never drifts from what the validator accepts.
    """
    archetypes = "\n".join(
        f"- {name}: {' + '.join(config.sections)} ({config.canvas_type}, {config.layout_direction})"
        for name, config in LAYOUT_ARCHETYPES.items()
    )
    mapping_rules = "\n".join(
        f"- {app_type} → {row['web']} (web) | {row['mobile']} (mobile)"
        for app_type, row in APPLICATION_ARCHETYPE_MAP.items()
        if app_type in KNOWN_APPLICATION_TYPES
    )
    desktop, mobile = CANVAS_SIZES["desktop"], CANVAS_SIZES["mobile"]

    return PromptLibrary.LAYOUT_GENERATE.format(
        application_types=", ".join(
            key for key in APPLICATION_ARCHETYPE_MAP if key in KNOWN_APPLICATION_TYPES
        ),
        desktop_canvas=f"{desktop.width}x{desktop.height}",
        mobile_canvas=f"{mobile.width}x{mobile.height}",
        archetypes=archetypes,
        mapping_rules=mapping_rules,
        allowed_keys="\n".join(f"- {key}" for key in ALLOWED_COMPONENT_KEYS),
        user_prompt=user_prompt.strip(),
    )
