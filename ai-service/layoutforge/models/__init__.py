"""
Models package - schemas and prompt templates.

Exports:
- schemas: layout, Design IR and code generation models
- prompts: prompt templates for the generative backend
"""

from .schemas import (
    LayoutDocument,
    EnhancedLayoutDocument,
    DesignIR,
    GeneratedFileSet,
    LayoutRequest,
    CodeGenerationRequest,
    ScreenRequest,
    LayoutResult,
    PipelineResult,
    ScreenResult,
)

from .prompts import (
    PromptTemplate,
    PromptLibrary,
)

__all__ = [
    'LayoutDocument',
    'EnhancedLayoutDocument',
    'DesignIR',
    'GeneratedFileSet',
    'LayoutRequest',
    'CodeGenerationRequest',
    'ScreenRequest',
    'LayoutResult',
    'PipelineResult',
    'ScreenResult',
    'PromptTemplate',
    'PromptLibrary',
]
