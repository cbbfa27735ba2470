"""
Layout Schema Validator - structural validation of backend layout JSON.

Validates raw layout documents for:
- Required top-level fields
- Screen type and section layout directions
- Section / component shape (sections are leaf groupings)
- Component keys against the fixed allow-list
- Canvas size (advisory)
"""
from typing import Any, Dict, List

from layoutforge.models.schemas.component_catalog import (
    ALLOWED_COMPONENT_KEYS,
    KNOWN_COMPONENT_ATTRIBUTES,
    is_allowed_component,
)
from layoutforge.models.schemas.layout import (
    LAYOUT_DIRECTIONS,
    SCREEN_TYPES,
    CanvasSize,
    LayoutValidationResult,
)
from layoutforge.services.generation.archetype_resolver import KNOWN_APPLICATION_TYPES
from layoutforge.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("screenType", "application_type", "layout_archetype", "sections")
NESTED_KEYS = ("components", "sections")


class _Findings:
    """Errors and warnings collected during one validation run"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)


class LayoutSchemaValidator:
    """
    Total validator for layout documents.

    Validation passes:
    1. Top-level fields
    2. Canvas size
    3. Sections
    4. Components within each section

    ``validate`` never raises. Each call collects into its own findings object
    so one instance can serve concurrent requests.
    """

    def validate(self, raw: Any) -> LayoutValidationResult:
        findings = _Findings()

        if not isinstance(raw, dict):
            findings.error(f"Layout document must be a JSON object, got {type(raw).__name__}")
            return self._finish(findings)

        self._validate_top_level(raw, findings)
        self._validate_canvas(raw, findings)

        sections = raw.get("sections")
        if "sections" in raw:
            if isinstance(sections, list):
                self._validate_sections(raw, sections, findings)
            else:
                findings.error("Field 'sections' must be an array")

        return self._finish(findings)

    def _finish(self, findings: _Findings) -> LayoutValidationResult:
        result = LayoutValidationResult(
            valid=not findings.errors,
            errors=findings.errors,
            warnings=findings.warnings,
        )

        if result.valid:
            logger.info(
                "✅ layout.validation.passed",
                extra={"warnings": len(result.warnings)}
            )
        else:
            logger.warning(
                "❌ layout.validation.failed",
                extra={"errors": len(result.errors), "warnings": len(result.warnings)}
            )

        return result

    def _validate_top_level(self, raw: Dict[str, Any], findings: _Findings) -> None:
        for field in REQUIRED_FIELDS:
            if field not in raw or raw[field] is None:
                findings.error(f"Missing required field: {field}")

        screen_type = raw.get("screenType")
        if screen_type is not None and screen_type not in SCREEN_TYPES:
            findings.error(
                f"Invalid screenType '{screen_type}', expected one of: {', '.join(SCREEN_TYPES)}"
            )

        application_type = raw.get("application_type")
        if application_type is not None:
            if not isinstance(application_type, str):
                findings.error("Field 'application_type' must be a string")
            elif application_type not in KNOWN_APPLICATION_TYPES:
                findings.warning(
                    f"Unknown application_type '{application_type}', default archetype mapping applies"
                )

        archetype = raw.get("layout_archetype")
        if archetype is not None and not isinstance(archetype, str):
            findings.error("Field 'layout_archetype' must be a string")

    def _validate_canvas(self, raw: Dict[str, Any], findings: _Findings) -> None:
        canvas = raw.get("canvas_size")
        if canvas is None:
            findings.warning("Missing canvas_size, archetype default will be used")
        elif CanvasSize.parse_optional(canvas) is None:
            findings.warning("Invalid canvas_size, archetype default will be used")

    def _validate_sections(
        self,
        raw: Dict[str, Any],
        sections: List[Any],
        findings: _Findings
    ) -> None:
        is_mobile = raw.get("screenType") == "mobile"

        for index, section in enumerate(sections):
            if not isinstance(section, dict):
                findings.error(f"Section {index} must be an object")
                continue

            name = section.get("section_name")
            if not isinstance(name, str) or not name:
                findings.error(f"Section {index} missing section_name")
                name = f"#{index}"

            if "sections" in section:
                findings.error(f"Section {index} ({name}) must not contain nested sections")

            direction = section.get("layout_direction", "vertical")
            if direction not in LAYOUT_DIRECTIONS:
                findings.error(
                    f"Section {index} ({name}) has invalid layout_direction '{direction}'"
                )
            elif is_mobile and direction != "vertical":
                findings.warning(
                    f"Section {index} ({name}) uses {direction} layout on a mobile screen"
                )

            components = section.get("components")
            if not isinstance(components, list):
                findings.error(f"Section {index} ({name}) has invalid components array")
                continue

            if not components:
                findings.warning(f"Section {index} ({name}) has no components")

            for position, component in enumerate(components):
                self._validate_component(index, name, position, component, findings)

    def _validate_component(
        self,
        section_index: int,
        section_name: str,
        position: int,
        component: Any,
        findings: _Findings
    ) -> None:
        where = f"Section {section_index} ({section_name}) component {position}"

        if not isinstance(component, dict):
            findings.error(f"{where} must be an object")
            return

        key = component.get("componentKey")
        if key is None:
            findings.error(f"{where} missing componentKey")
        elif not is_allowed_component(key):
            findings.error(
                f"{where} has invalid componentKey '{key}'. "
                f"Allowed: {', '.join(ALLOWED_COMPONENT_KEYS)}"
            )

        text = component.get("text")
        if text is not None and not isinstance(text, str):
            findings.error(f"{where} has non-string text")

        for nested in NESTED_KEYS:
            if nested in component:
                findings.error(f"{where} ({key}) cannot contain nested {nested}")

        extra = sorted(set(component) - KNOWN_COMPONENT_ATTRIBUTES - set(NESTED_KEYS))
        if extra:
            findings.warning(f"{where} has unknown attributes: {', '.join(extra)}")


# Global validator instance
layout_schema_validator = LayoutSchemaValidator()


def validate_layout(raw: Any) -> LayoutValidationResult:
    return layout_schema_validator.validate(raw)
