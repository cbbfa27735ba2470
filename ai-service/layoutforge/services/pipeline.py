"""
Pipeline orchestrator.

Two pipelines plus their composition:

LayoutPipeline (prompt -> enhanced layout):
1. Prompt Build
2. Backend Call
3. JSON Extraction
4. Schema Validation
5. Enhancement
6. Archetype Resolution
7. Flatten

CodeGenerationPipeline (layout -> Angular + PrimeNG files):
1. IR Conversion
2. IR Validation
3. Mapping Validation
4. Input Inference (only with a source node)
5. Prompt Compilation
6. Code Generation (mock in test mode)
7. Response Parsing
8. Export

ScreenPipeline runs both back to back.

Stages raise; the pipeline catches at its boundary, records
``"<stage>: <message>"`` and halts. Parse issues never halt.
"""
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from layoutforge.config import settings
from layoutforge.core.errors import GenerationError, LayoutForgeError, SchemaError
from layoutforge.llm import BaseLLMProvider, LLMMessage, get_default_provider
from layoutforge.models.schemas.input_output import LayoutResult, PipelineResult, ScreenResult
from layoutforge.models.schemas.layout import EnhancedLayoutDocument, FlatComponent, LayoutDocument
from layoutforge.services.analysis.input_inference import create_inference_summary, infer_inputs
from layoutforge.services.generation.archetype_resolver import (
    canvas_size_for,
    check_archetype_fit,
    expected_archetype,
    require_config,
)
from layoutforge.services.generation.component_mapping import validate_all_mappable
from layoutforge.services.generation.design_ir import to_ir, validate_ir
from layoutforge.services.generation.layout_enhancer import content_density, enhance
from layoutforge.services.generation.layout_validator import layout_schema_validator
from layoutforge.services.generation.mock_code_generator import mock_code_generator
from layoutforge.services.generation.prompt_compiler import build_layout_prompt, compile_prompt
from layoutforge.services.generation.response_parser import (
    generate_parsing_summary,
    parse_response,
    to_export_manifest,
)
from layoutforge.utils.logging import get_logger, log_context, trace_async

logger = get_logger(__name__)


@dataclass
class PipelineContext:
    """Per-request state. Created by ``execute`` and never shared between requests."""
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    data: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    stage_times: Dict[str, int] = field(default_factory=dict)
    failed_stage: Optional[str] = None
    error_detail: Optional[Dict[str, Any]] = None

    @property
    def halted(self) -> bool:
        return self.failed_stage is not None


class PipelineStage:
    """Base class for pipeline stages"""

    def __init__(self, name: str):
        self.name = name

    async def execute(self, context: PipelineContext) -> Optional[Dict[str, Any]]:
        """Execute stage - must be implemented by subclasses"""
        raise NotImplementedError(f"Stage {self.name} does not implement execute()")

    async def on_error(self, error: Exception, context: PipelineContext):
        """Handle errors - can be overridden"""
        # Expected failures carry a clean message; anything else gets a traceback
        logger.error(
            f"pipeline.stage.{self.name}.error",
            extra={
                "stage": self.name,
                "request_id": context.request_id,
                "error": str(error),
                "error_type": type(error).__name__,
            },
            exc_info=None if isinstance(error, LayoutForgeError) else error
        )


# ============================================================================
# LAYOUT STAGES
# ============================================================================

class PromptBuildStage(PipelineStage):
    """Stage 1: Build the (system, user) layout prompt"""

    def __init__(self):
        super().__init__("prompt_build")

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        system_prompt, user_prompt = build_layout_prompt(context.data["user_prompt"])
        context.data["messages"] = [
            LLMMessage(role="system", content=system_prompt),
            LLMMessage(role="user", content=user_prompt),
        ]
        return {"characters": len(system_prompt) + len(user_prompt)}


class BackendCallStage(PipelineStage):
    """Stage 2: One awaited backend round-trip"""

    def __init__(self, provider: Optional[BaseLLMProvider] = None):
        super().__init__("backend_call")
        self._provider = provider

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        provider = self._provider or get_default_provider()
        response = await provider.generate(
            context.data["messages"],
            min_response_length=0,
        )
        context.data["llm_response"] = response
        return {"characters": len(response.content), "tokens": response.tokens_used}


class JsonExtractionStage(PipelineStage):
    """Stage 3: Pull the layout object out of the backend reply"""

    def __init__(self):
        super().__init__("json_extraction")

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        response = context.data["llm_response"]

        if not response.is_valid_json:
            if response.json_candidate is None:
                raise GenerationError(
                    "No valid JSON found in AI response",
                    details={"rawResponse": response.content},
                )
            raise GenerationError(
                "Invalid JSON from AI response",
                details={"rawJSON": response.json_candidate, "parseError": response.json_error},
            )

        if not isinstance(response.extracted_json, dict):
            raise GenerationError(
                "Invalid JSON from AI response",
                details={
                    "rawJSON": response.json_candidate,
                    "parseError": f"Expected a JSON object, got {type(response.extracted_json).__name__}",
                },
            )

        context.data["raw_layout"] = response.extracted_json
        return {"keys": sorted(response.extracted_json)}


class SchemaValidationStage(PipelineStage):
    """Stage 4: Schema validation. An invalid document never reaches enhancement."""

    def __init__(self):
        super().__init__("schema_validation")

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        result = layout_schema_validator.validate(context.data["raw_layout"])
        context.warnings.extend(result.warnings)

        if not result.valid:
            raise SchemaError(
                "Layout JSON failed schema validation",
                result.errors,
                result.warnings,
                received=context.data["raw_layout"],
            )

        context.data["validation_valid"] = True
        context.data["layout"] = LayoutDocument.from_validated(context.data["raw_layout"])
        return {"warnings": len(result.warnings)}


class EnhancementStage(PipelineStage):
    """Stage 5: Derive layout metadata and component roles"""

    def __init__(self):
        super().__init__("enhancement")

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        enhanced = enhance(context.data["layout"])
        context.data["enhanced"] = enhanced
        return {"complexity": enhanced.layout_metadata.complexity_score}


class ArchetypeResolutionStage(PipelineStage):
    """Stage 6: Resolve the archetype config and default the canvas"""

    def __init__(self):
        super().__init__("archetype_resolution")

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        enhanced: EnhancedLayoutDocument = context.data["enhanced"]
        expected = expected_archetype(enhanced.application_type, enhanced.screen_type)
        config = require_config(enhanced.layout_archetype, expected)

        if enhanced.canvas_size is None:
            canvas = canvas_size_for(config.canvas_type)
            metadata = enhanced.layout_metadata.model_copy(
                update={"content_density": content_density(enhanced, canvas)}
            )
            enhanced = enhanced.model_copy(update={"canvas_size": canvas, "layout_metadata": metadata})
            context.warnings.append(
                f"canvas_size missing, using {config.canvas_type} default "
                f"{canvas.width}x{canvas.height}"
            )

        context.warnings.extend(check_archetype_fit(enhanced))
        context.data["enhanced"] = enhanced
        context.data["archetype_config"] = config.to_dict()
        return {"archetype": config.name, "expected": expected}


class FlattenStage(PipelineStage):
    """Stage 7: Flatten sections into one component list for renderers"""

    def __init__(self):
        super().__init__("flatten")

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        enhanced: EnhancedLayoutDocument = context.data["enhanced"]
        context.data["components"] = [
            FlatComponent(
                componentKey=component.component_key,
                text=component.text,
                section=section.section_name,
                layout_direction=section.layout_direction,
                component_role=component.component_role,
                layout_priority=component.layout_priority,
            )
            for section, component in enhanced.iter_components()
        ]
        return {"components": len(context.data["components"])}


# ============================================================================
# CODE GENERATION STAGES
# ============================================================================

class IRConversionStage(PipelineStage):
    """Stage 1: Layout document -> Design IR"""

    def __init__(self):
        super().__init__("ir_conversion")

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        ir = to_ir(context.data["layout_document"], context.data["screen_name"])
        context.data["design_ir"] = ir
        return {"components": len(ir.components)}


class IRValidationStage(PipelineStage):
    def __init__(self):
        super().__init__("ir_validation")

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        validate_ir(context.data["design_ir"])
        return {"valid": True}


class MappingValidationStage(PipelineStage):
    """Stage 3: Every IR kind must have a static mapping entry"""

    def __init__(self):
        super().__init__("mapping_validation")

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        validate_all_mappable(context.data["design_ir"].components)
        return {"mappable": True}


class InputInferenceStage(PipelineStage):
    """Stage 4: Infer @Input() properties from a design-tool node, when one is given"""

    def __init__(self):
        super().__init__("input_inference")

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        node = context.data.get("source_node")
        if not node:
            return {"skipped": True, "reason": "no_source_node"}

        inferred = infer_inputs(node, context.data["design_ir"].screen_name)
        context.data["inferred_inputs"] = inferred
        context.warnings.extend(inferred.warnings)
        return create_inference_summary(inferred)


class PromptCompilationStage(PipelineStage):
    """Stage 5: Compile the code prompt. Runs in test mode too."""

    def __init__(self):
        super().__init__("prompt_compilation")

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        prompt = compile_prompt(
            context.data["design_ir"],
            inferred_inputs=context.data.get("inferred_inputs"),
        )
        context.data["prompt"] = prompt
        return {"characters": len(prompt)}


class CodeGenerationStage(PipelineStage):
    """Stage 6: Backend call, or the deterministic mock in test mode"""

    def __init__(self, provider: Optional[BaseLLMProvider] = None):
        super().__init__("code_generation")
        self._provider = provider

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        if context.data["test_mode"]:
            context.data["model_text"] = mock_code_generator.generate(
                context.data["design_ir"],
                context.data.get("inferred_inputs"),
            )
            return {"mode": "mock", "characters": len(context.data["model_text"])}

        provider = self._provider or get_default_provider()
        response = await provider.generate(
            [LLMMessage(role="user", content=context.data["prompt"])],
            min_response_length=settings.llm_min_response_length,
        )
        context.data["model_text"] = response.content
        return {"mode": "backend", "characters": len(response.content)}


class ResponseParsingStage(PipelineStage):
    """Stage 7: Extract and check the three artifacts. Issues never halt."""

    def __init__(self):
        super().__init__("response_parsing")

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        file_set = parse_response(
            context.data["model_text"],
            context.data["design_ir"].screen_name,
            settings.min_markup_length,
        )
        context.data["generated_files"] = file_set
        context.data["summary"] = generate_parsing_summary(file_set)
        context.errors.extend(file_set.errors)
        context.warnings.extend(file_set.warnings)
        return {"artifacts": len(file_set.present_artifacts()), "errors": len(file_set.errors)}


class ExportStage(PipelineStage):
    def __init__(self):
        super().__init__("export")

    async def execute(self, context: PipelineContext) -> Dict[str, Any]:
        manifest = to_export_manifest(context.data["generated_files"])
        context.data["export_manifest"] = manifest
        return {"files": len(manifest)}


# ============================================================================
# PIPELINES
# ============================================================================

class _StagedPipeline:
    """Runs stages in order, halting on the first exception"""

    name = "pipeline"

    def __init__(self, stages: List[PipelineStage]):
        self.stages = stages

    async def _run(self, context: PipelineContext) -> PipelineContext:
        pipeline_start = time.time()

        logger.info(
            f"pipeline.{self.name}.started",
            extra={"request_id": context.request_id, "stages": len(self.stages)}
        )

        for stage in self.stages:
            stage_start = time.time()
            try:
                result = await stage.execute(context)
            except Exception as error:
                await stage.on_error(error, context)
                context.errors.append(f"{stage.name}: {error}")
                context.failed_stage = stage.name
                context.error_detail = (
                    error.to_dict() if isinstance(error, LayoutForgeError)
                    else {"type": type(error).__name__, "message": str(error)}
                )
                break
            finally:
                context.stage_times[stage.name] = int((time.time() - stage_start) * 1000)

            logger.debug(
                f"pipeline.stage.{stage.name}.completed",
                extra={
                    "request_id": context.request_id,
                    "duration_ms": context.stage_times[stage.name],
                    "result": result or {},
                }
            )

        total_ms = int((time.time() - pipeline_start) * 1000)

        if context.errors:
            logger.warning(
                f"pipeline.{self.name}.failed",
                extra={
                    "request_id": context.request_id,
                    "failed_stage": context.failed_stage,
                    "errors": len(context.errors),
                    "total_duration_ms": total_ms,
                }
            )
        else:
            logger.performance(
                f"pipeline.{self.name}.completed",
                duration_ms=total_ms,
                extra={"request_id": context.request_id, "stage_times": context.stage_times}
            )

        return context


class LayoutPipeline(_StagedPipeline):
    """Natural-language prompt -> validated, enhanced layout document"""

    name = "layout"

    def __init__(self, provider: Optional[BaseLLMProvider] = None):
        super().__init__([
            PromptBuildStage(),
            BackendCallStage(provider),
            JsonExtractionStage(),
            SchemaValidationStage(),
            EnhancementStage(),
            ArchetypeResolutionStage(),
            FlattenStage(),
        ])

    async def execute(self, user_prompt: str, request_id: str = None) -> LayoutResult:
        context = PipelineContext(data={"user_prompt": user_prompt})
        if request_id:
            context.request_id = request_id

        with log_context(request_id=context.request_id):
            await self._run(context)

        return LayoutResult(
            success=not context.errors,
            layout=context.data.get("enhanced") if not context.errors else None,
            archetype_config=context.data.get("archetype_config"),
            components=context.data.get("components", []),
            validation_valid=context.data.get("validation_valid", False),
            warnings=context.warnings,
            errors=context.errors,
            error_detail=context.error_detail,
            stage_times=context.stage_times,
        )


class CodeGenerationPipeline(_StagedPipeline):
    """Layout document -> Design IR -> prompt -> Angular + PrimeNG artifacts"""

    name = "code_generation"

    def __init__(self, provider: Optional[BaseLLMProvider] = None):
        super().__init__([
            IRConversionStage(),
            IRValidationStage(),
            MappingValidationStage(),
            InputInferenceStage(),
            PromptCompilationStage(),
            CodeGenerationStage(provider),
            ResponseParsingStage(),
            ExportStage(),
        ])

    async def execute(
        self,
        layout_document: Any,
        screen_name: Optional[str] = None,
        test_mode: bool = False,
        inferred_input_source_node: Optional[Mapping[str, Any]] = None,
        request_id: str = None,
    ) -> PipelineResult:
        """
        Run the code generation path.

        Args:
            layout_document: LayoutDocument or raw layout mapping
            screen_name: Component base name, defaults to settings
            test_mode: Use the deterministic mock instead of the backend
            inferred_input_source_node: Optional design-tool node for input inference

        Returns:
            PipelineResult; ``success`` is true iff no errors were recorded
        """
        screen_name = screen_name or settings.default_screen_name
        context = PipelineContext(data={
            "layout_document": layout_document,
            "screen_name": screen_name,
            "test_mode": test_mode,
            "source_node": inferred_input_source_node,
        })
        if request_id:
            context.request_id = request_id

        with log_context(request_id=context.request_id, screen_name=screen_name):
            await self._run(context)

        return PipelineResult(
            success=not context.errors,
            design_ir=context.data.get("design_ir"),
            generated_files=context.data.get("generated_files"),
            export_manifest=context.data.get("export_manifest", []),
            summary=context.data.get("summary"),
            errors=context.errors,
            warnings=context.warnings,
            input_inference=context.data.get("inferred_inputs"),
            stage_times=context.stage_times,
        )


class ScreenPipeline:
    """Prompt -> layout -> code, with errors from both halves concatenated"""

    def __init__(self, provider: Optional[BaseLLMProvider] = None):
        self.layout_pipeline = LayoutPipeline(provider)
        self.code_pipeline = CodeGenerationPipeline(provider)

    @trace_async("pipeline.screen")
    async def execute(
        self,
        user_prompt: str,
        screen_name: Optional[str] = None,
        test_mode: bool = False,
        inferred_input_source_node: Optional[Mapping[str, Any]] = None,
    ) -> ScreenResult:
        request_id = str(uuid.uuid4())
        layout_result = await self.layout_pipeline.execute(user_prompt, request_id=request_id)

        if not layout_result.success:
            return ScreenResult(success=False, layout=layout_result, errors=list(layout_result.errors))

        code_result = await self.code_pipeline.execute(
            layout_result.layout,
            screen_name=screen_name,
            test_mode=test_mode,
            inferred_input_source_node=inferred_input_source_node,
            request_id=request_id,
        )

        errors = list(layout_result.errors) + list(code_result.errors)
        return ScreenResult(
            success=not errors,
            layout=layout_result,
            code=code_result,
            errors=errors,
        )
