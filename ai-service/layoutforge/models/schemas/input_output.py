"""
Request and result models for the HTTP surface and the pipelines.
"""
from typing import List, Dict, Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .codegen import ExportFile, GeneratedFileSet, InferredInputs
from .design_ir import DesignIR
from .layout import EnhancedLayoutDocument, FlatComponent


class LayoutRequest(BaseModel):
    """Natural-language screen description"""
    user_prompt: str = Field(..., alias="userPrompt", min_length=1, max_length=4000)

    @field_validator('user_prompt')
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        """Ensure prompt is not just whitespace"""
        if not v.strip():
            raise ValueError("userPrompt cannot be empty or whitespace")
        return v.strip()

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"userPrompt": "Create a login screen for a mobile banking app"}
        },
    )


class CodeGenerationRequest(BaseModel):
    """
    Code generation input.

    ``figmaLayoutJSON`` and ``layoutDocument`` are accepted interchangeably,
    as are ``figmaNode`` and ``inferredInputSourceNode``.
    """
    figma_layout_json: Optional[Dict[str, Any]] = Field(None, alias="figmaLayoutJSON")
    layout_document: Optional[Dict[str, Any]] = Field(None, alias="layoutDocument")
    screen_name: Optional[str] = Field(None, alias="screenName", max_length=100)
    test_mode: bool = Field(False, alias="testMode")
    figma_node: Optional[Dict[str, Any]] = Field(None, alias="figmaNode")
    inferred_input_source_node: Optional[Dict[str, Any]] = Field(None, alias="inferredInputSourceNode")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "figmaLayoutJSON": {
                    "screenType": "mobile",
                    "components": [
                        {"componentKey": "heading", "text": "Login"},
                        {"componentKey": "text_input", "text": "Email"},
                        {"componentKey": "primary_button", "text": "Sign In"},
                    ],
                },
                "screenName": "Login",
                "testMode": True,
            }
        },
    )

    @model_validator(mode="after")
    def require_layout(self) -> "CodeGenerationRequest":
        if self.figma_layout_json is None and self.layout_document is None:
            raise ValueError("figmaLayoutJSON is required")
        return self

    @property
    def layout(self) -> Dict[str, Any]:
        return self.layout_document if self.layout_document is not None else self.figma_layout_json

    @property
    def source_node(self) -> Optional[Dict[str, Any]]:
        return self.inferred_input_source_node or self.figma_node


class ScreenRequest(BaseModel):
    """Prompt-to-code request covering both pipelines"""
    user_prompt: str = Field(..., alias="userPrompt", min_length=1, max_length=4000)
    screen_name: Optional[str] = Field(None, alias="screenName", max_length=100)
    test_mode: bool = Field(False, alias="testMode")
    figma_node: Optional[Dict[str, Any]] = Field(None, alias="figmaNode")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('user_prompt')
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("userPrompt cannot be empty or whitespace")
        return v.strip()


class LayoutResult(BaseModel):
    """Outcome of the layout pipeline"""
    success: bool
    layout: Optional[EnhancedLayoutDocument] = None
    archetype_config: Optional[Dict[str, Any]] = None
    components: List[FlatComponent] = Field(default_factory=list)
    validation_valid: bool = False
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    error_detail: Optional[Dict[str, Any]] = None
    stage_times: Dict[str, int] = Field(default_factory=dict)

    def to_response(self) -> Dict[str, Any]:
        """Wire payload: the enhanced layout, flattened components and validation result"""
        if not self.success or self.layout is None:
            detail = dict(self.error_detail or {})
            detail.pop("type", None)
            message = detail.pop("message", None) or (self.errors[0] if self.errors else "Layout generation failed")
            return {"error": message, "errors": self.errors, **detail}

        data = self.layout.to_wire()
        return {
            "screenType": data["screenType"],
            "application_type": data["application_type"],
            "layout_archetype": data["layout_archetype"],
            "canvas_size": data.get("canvas_size"),
            "archetype_config": self.archetype_config,
            "layout_metadata": data["layout_metadata"],
            "sections": data["sections"],
            "components": [
                component.model_dump(mode="json", by_alias=True, exclude_none=True)
                for component in self.components
            ],
            "validation_result": {
                "valid": self.validation_valid,
                "warnings": self.warnings,
                "enhanced": True,
            },
        }


class PipelineResult(BaseModel):
    """Outcome of the code generation pipeline. Created per request, never shared."""
    success: bool
    design_ir: Optional[DesignIR] = None
    generated_files: Optional[GeneratedFileSet] = None
    export_manifest: List[ExportFile] = Field(default_factory=list)
    summary: Optional[Dict[str, Any]] = None
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    input_inference: Optional[InferredInputs] = None
    stage_times: Dict[str, int] = Field(default_factory=dict)

    def to_response(self) -> Dict[str, Any]:
        design_ir = self.design_ir.to_dict() if self.design_ir else None

        if not self.success:
            return {
                "success": False,
                "errors": self.errors,
                "designIR": design_ir,
                "summary": self.summary,
            }

        files = self.generated_files
        return {
            "success": True,
            "designIR": design_ir,
            "files": {
                kind: (files.artifact(kind).to_dict() if files.artifact(kind) else None)
                for kind in ("typescript", "html", "scss")
            } if files else None,
            "exportFiles": [item.to_dict() for item in self.export_manifest],
            "summary": self.summary,
            "inputInference": self.input_inference.to_dict() if self.input_inference else None,
        }


class ScreenResult(BaseModel):
    """Layout pipeline followed by code generation on the enhanced layout"""
    success: bool
    layout: LayoutResult
    code: Optional[PipelineResult] = None
    errors: List[str] = Field(default_factory=list)

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "layout": self.layout.to_response(),
            "code": self.code.to_response() if self.code else None,
            "errors": self.errors,
        }
