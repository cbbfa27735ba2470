"""
Generation services - layout and code generation stages.

Layout path: validation, enhancement, archetype resolution
Code path: Design IR, component mapping, prompt compilation, response parsing
"""

from layoutforge.services.generation.layout_validator import (
    layout_schema_validator,
    LayoutSchemaValidator,
    validate_layout,
)

from layoutforge.services.generation.layout_enhancer import enhance

from layoutforge.services.generation.archetype_resolver import (
    LAYOUT_ARCHETYPES,
    APPLICATION_ARCHETYPE_MAP,
    CANVAS_SIZES,
    expected_archetype,
    require_config,
    check_archetype_fit,
)

from layoutforge.services.generation.design_ir import (
    to_ir,
    validate_ir,
    convert_component,
    extract_design_tokens,
)

from layoutforge.services.generation.component_mapping import (
    COMPONENT_MAPPING,
    mapping_for,
    validate_all_mappable,
    required_imports,
    render_markup,
)

from layoutforge.services.generation.prompt_compiler import (
    compile_prompt,
    build_layout_prompt,
)

from layoutforge.services.generation.response_parser import (
    parse_response,
    to_export_manifest,
    generate_parsing_summary,
)

from layoutforge.services.generation.mock_code_generator import (
    mock_code_generator,
    MockCodeGenerator,
)

__all__ = [
    # Layout validation
    'layout_schema_validator',
    'LayoutSchemaValidator',
    'validate_layout',

    # Enhancement
    'enhance',

    # Archetypes
    'LAYOUT_ARCHETYPES',
    'APPLICATION_ARCHETYPE_MAP',
    'CANVAS_SIZES',
    'expected_archetype',
    'require_config',
    'check_archetype_fit',

    # Design IR
    'to_ir',
    'validate_ir',
    'convert_component',
    'extract_design_tokens',

    # Component mapping
    'COMPONENT_MAPPING',
    'mapping_for',
    'validate_all_mappable',
    'required_imports',
    'render_markup',

    # Prompt compilation
    'compile_prompt',
    'build_layout_prompt',

    # Response parsing
    'parse_response',
    'to_export_manifest',
    'generate_parsing_summary',

    # Test mode
    'mock_code_generator',
    'MockCodeGenerator',
]
