"""
Exception taxonomy for the layout and code generation pipeline.

Stages raise these locally; the pipeline orchestrator is the only place that
turns them into the aggregated error list returned to callers.
"""
from typing import Any, Dict, List, Optional, Sequence


class LayoutForgeError(Exception):
    """Base exception for all pipeline errors"""

    def __init__(self, message: str = "", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details: Dict[str, Any] = dict(details or {})

    def to_dict(self) -> Dict[str, Any]:
        data = {"type": type(self).__name__, "message": str(self)}
        data.update(self.details)
        return data


class SchemaError(LayoutForgeError):
    """Structurally invalid layout document. Blocks all downstream stages."""

    def __init__(
        self,
        message: str,
        errors: Optional[Sequence[str]] = None,
        warnings: Optional[Sequence[str]] = None,
        received: Any = None,
    ):
        self.errors: List[str] = list(errors or [])
        self.warnings: List[str] = list(warnings or [])
        self.received = received
        super().__init__(message, details={
            "validationErrors": self.errors,
            "validationWarnings": self.warnings,
            "received": received,
        })


class ArchetypeError(LayoutForgeError):
    """Unknown layout archetype key"""

    def __init__(
        self,
        archetype: Any,
        expected: Optional[str] = None,
        available: Optional[Sequence[str]] = None,
    ):
        super().__init__(f"Invalid layout archetype: {archetype!r}")
        self.archetype = archetype
        self.expected = expected
        self.available: List[str] = list(available or [])

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "received": self.archetype,
            "expected": self.expected,
            "availableArchetypes": self.available,
        })
        return data


class IRError(LayoutForgeError):
    """Design IR could not be built or is structurally broken"""


class InvalidInput(IRError):
    """Layout document has no components or sections collection"""


class MissingField(IRError):
    """Design IR lacks a required top-level field"""

    def __init__(self, field: str):
        super().__init__(f"Missing required field: {field}")
        self.field = field


class MissingComponentType(IRError):
    """A Design IR component has no kind tag"""

    def __init__(self, index: int):
        super().__init__(f"Component at index {index} missing type field")
        self.index = index


class MappingError(LayoutForgeError):
    """IR component kinds and the mapping table disagree"""


class UnmappedComponentKind(MappingError):
    """One or more IR kinds have no static mapping entry"""

    def __init__(self, unmapped: Sequence[Dict[str, Any]]):
        self.unmapped: List[Dict[str, Any]] = list(unmapped)
        listing = ", ".join(
            f"#{item['index']}:{item['kind']}" if item.get("index") is not None else str(item["kind"])
            for item in self.unmapped
        )
        super().__init__(f"Unmapped component kinds: {listing}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["unmapped"] = self.unmapped
        return data


class PromptError(LayoutForgeError):
    """Design IR cannot be compiled into a generation prompt"""


class GenerationError(LayoutForgeError):
    """Generative backend unavailable or returned an unusable response"""


class ExtractionError(LayoutForgeError):
    """A requested artifact could not be located in backend output"""

    category = "extraction"


class StructuralValidationError(LayoutForgeError):
    """An extracted artifact failed a content sanity check"""

    category = "structure"
