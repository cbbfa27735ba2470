"""
Generation endpoints.

POST /api/v1/generate-layout - prompt -> enhanced layout document
POST /api/v1/generate-code   - layout document -> Angular + PrimeNG files
POST /api/v1/generate-screen - prompt -> layout -> files
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from layoutforge.models.schemas.input_output import (
    CodeGenerationRequest,
    LayoutRequest,
    ScreenRequest,
)
from layoutforge.services.pipeline import CodeGenerationPipeline, LayoutPipeline, ScreenPipeline
from layoutforge.utils.logging import get_logger, log_context

router = APIRouter()
logger = get_logger(__name__)


# Pipelines are stateless between requests; dependency functions let tests
# inject pipelines wired to a stub provider.
def get_layout_pipeline() -> LayoutPipeline:
    return LayoutPipeline()


def get_code_pipeline() -> CodeGenerationPipeline:
    return CodeGenerationPipeline()


def get_screen_pipeline() -> ScreenPipeline:
    return ScreenPipeline()


@router.post(
    "/generate-layout",
    tags=["Generation"],
    summary="Generate a layout document",
    description="Ask the generative backend for a layout, then validate, enhance and resolve its archetype."
)
async def generate_layout(
    request: LayoutRequest,
    pipeline: LayoutPipeline = Depends(get_layout_pipeline)
) -> JSONResponse:
    with log_context(endpoint="/api/v1/generate-layout"):
        logger.info(
            "api.layout.received",
            extra={"prompt_length": len(request.user_prompt)}
        )

        result = await pipeline.execute(request.user_prompt)

        if not result.success:
            logger.warning(
                "api.layout.failed",
                extra={"errors": result.errors}
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=result.to_response()
            )

        logger.info(
            "api.layout.completed",
            extra={
                "archetype": result.layout.layout_archetype,
                "components": len(result.components),
                "warnings": len(result.warnings),
            }
        )
        return JSONResponse(status_code=status.HTTP_200_OK, content=result.to_response())


@router.post(
    "/generate-code",
    tags=["Generation"],
    summary="Generate Angular + PrimeNG code",
    description="Convert a layout document to Design IR, compile the prompt and return the parsed component files."
)
async def generate_code(
    request: CodeGenerationRequest,
    pipeline: CodeGenerationPipeline = Depends(get_code_pipeline)
) -> JSONResponse:
    with log_context(endpoint="/api/v1/generate-code", screen_name=request.screen_name):
        logger.info(
            "api.code.received",
            extra={
                "test_mode": request.test_mode,
                "has_source_node": request.source_node is not None,
            }
        )

        result = await pipeline.execute(
            request.layout,
            screen_name=request.screen_name,
            test_mode=request.test_mode,
            inferred_input_source_node=request.source_node,
        )

        status_code = status.HTTP_200_OK if result.success else status.HTTP_400_BAD_REQUEST
        if not result.success:
            logger.warning(
                "api.code.failed",
                extra={"errors": result.errors}
            )

        return JSONResponse(status_code=status_code, content=result.to_response())


@router.post(
    "/generate-screen",
    tags=["Generation"],
    summary="Generate layout and code from a prompt",
    description="Runs the layout pipeline, then code generation on the enhanced layout."
)
async def generate_screen(
    request: ScreenRequest,
    pipeline: ScreenPipeline = Depends(get_screen_pipeline)
) -> JSONResponse:
    with log_context(endpoint="/api/v1/generate-screen", screen_name=request.screen_name):
        result = await pipeline.execute(
            request.user_prompt,
            screen_name=request.screen_name,
            test_mode=request.test_mode,
            inferred_input_source_node=request.figma_node,
        )

        if result.success:
            status_code = status.HTTP_200_OK
        elif not result.layout.success:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        else:
            status_code = status.HTTP_400_BAD_REQUEST

        logger.info(
            "api.screen.completed",
            extra={"success": result.success, "errors": len(result.errors)}
        )
        return JSONResponse(status_code=status_code, content=result.to_response())
