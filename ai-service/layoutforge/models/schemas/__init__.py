"""
Unified schema system for the layout and code generation service.

Layout documents, archetype configs, Design IR, code generation artifacts
and the request/result models used by the HTTP surface.
"""

from .layout import (
    SCREEN_TYPES,
    LAYOUT_DIRECTIONS,
    CanvasSize,
    LayoutComponent,
    LayoutSection,
    LayoutDocument,
    EnhancedComponent,
    EnhancedSection,
    LayoutMetadata,
    EnhancedLayoutDocument,
    FlatComponent,
    LayoutValidationResult,
)

from .archetype import (
    SectionRule,
    ArchetypeConfig,
)

from .component_catalog import (
    ALLOWED_COMPONENT_KEYS,
    COMPONENT_CATALOG,
    is_allowed_component,
    get_component_definition,
    get_component_role,
    get_available_components,
    export_component_catalog,
)

from .design_ir import (
    IR_KINDS,
    HeadingComponent,
    TextComponent,
    InputComponent,
    ButtonComponent,
    ContainerComponent,
    DesignTokens,
    DesignIR,
)

from .codegen import (
    ARTIFACT_KINDS,
    ComponentMappingEntry,
    InferredInput,
    TemplateBinding,
    InferredInputs,
    GeneratedArtifact,
    ParseIssue,
    GeneratedFileSet,
    ExportFile,
)

from .input_output import (
    LayoutRequest,
    CodeGenerationRequest,
    ScreenRequest,
    LayoutResult,
    PipelineResult,
    ScreenResult,
)

__all__ = [
    # Layout documents
    'SCREEN_TYPES',
    'LAYOUT_DIRECTIONS',
    'CanvasSize',
    'LayoutComponent',
    'LayoutSection',
    'LayoutDocument',
    'EnhancedComponent',
    'EnhancedSection',
    'LayoutMetadata',
    'EnhancedLayoutDocument',
    'FlatComponent',
    'LayoutValidationResult',

    # Archetypes
    'SectionRule',
    'ArchetypeConfig',

    # Component catalog
    'ALLOWED_COMPONENT_KEYS',
    'COMPONENT_CATALOG',
    'is_allowed_component',
    'get_component_definition',
    'get_component_role',
    'get_available_components',
    'export_component_catalog',

    # Design IR
    'IR_KINDS',
    'HeadingComponent',
    'TextComponent',
    'InputComponent',
    'ButtonComponent',
    'ContainerComponent',
    'DesignTokens',
    'DesignIR',

    # Code generation
    'ARTIFACT_KINDS',
    'ComponentMappingEntry',
    'InferredInput',
    'TemplateBinding',
    'InferredInputs',
    'GeneratedArtifact',
    'ParseIssue',
    'GeneratedFileSet',
    'ExportFile',

    # Input/Output
    'LayoutRequest',
    'CodeGenerationRequest',
    'ScreenRequest',
    'LayoutResult',
    'PipelineResult',
    'ScreenResult',
]
