"""
Layout document models.

JSON keys follow the generative backend's wire format (``screenType``,
``application_type``, ``layout_archetype``, ``canvas_size``, ``section_name``,
``layout_direction``, ``componentKey``). Documents are immutable once built.
"""
from typing import Any, Dict, Iterator, List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

ScreenType = Literal["web", "mobile"]
LayoutDirection = Literal["vertical", "horizontal", "grid"]
UserFlow = Literal["input", "browse", "read", "action"]
ContentDensity = Literal["low", "medium", "high"]
LayoutPriority = Literal["high", "medium", "low"]

SCREEN_TYPES: Tuple[str, ...] = ("web", "mobile")
LAYOUT_DIRECTIONS: Tuple[str, ...] = ("vertical", "horizontal", "grid")


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class CanvasSize(_FrozenModel):
    """Frame size the layout is drawn on"""
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    @property
    def area(self) -> int:
        return self.width * self.height

    @classmethod
    def parse_optional(cls, value: Any) -> Optional["CanvasSize"]:
        """Return a CanvasSize for a well-formed mapping, otherwise None"""
        if not isinstance(value, dict):
            return None
        width, height = value.get("width"), value.get("height")
        for dim in (width, height):
            if isinstance(dim, bool) or not isinstance(dim, (int, float)) or dim <= 0:
                return None
        return cls(width=int(width), height=int(height))


class LayoutComponent(_FrozenModel):
    """One design-system component instance"""
    component_key: str = Field(..., alias="componentKey")
    text: Optional[str] = None


class LayoutSection(_FrozenModel):
    """Leaf grouping of components. Sections never nest."""
    section_name: str
    layout_direction: LayoutDirection = "vertical"
    components: Tuple[LayoutComponent, ...] = ()


class LayoutDocument(_FrozenModel):
    """Validated layout document"""
    screen_type: ScreenType = Field(..., alias="screenType")
    application_type: str
    layout_archetype: str
    canvas_size: Optional[CanvasSize] = None
    sections: Tuple[LayoutSection, ...] = ()

    @classmethod
    def from_validated(cls, raw: Dict[str, Any]) -> "LayoutDocument":
        """
        Build the typed document from a raw mapping that passed schema validation.

        A malformed ``canvas_size`` is dropped (validation only warns about it)
        so the caller can substitute the archetype default.
        """
        data = dict(raw)
        data["canvas_size"] = CanvasSize.parse_optional(raw.get("canvas_size"))
        return cls.model_validate(data)

    def iter_components(self) -> Iterator[Tuple[LayoutSection, LayoutComponent]]:
        for section in self.sections:
            for component in section.components:
                yield section, component

    @property
    def component_count(self) -> int:
        return sum(len(section.components) for section in self.sections)

    def with_canvas_size(self, canvas_size: CanvasSize) -> "LayoutDocument":
        return self.model_copy(update={"canvas_size": canvas_size})

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EnhancedComponent(LayoutComponent):
    """Component with derived layout metadata"""
    component_role: str = "content"
    layout_priority: LayoutPriority = "medium"


class EnhancedSection(LayoutSection):
    components: Tuple[EnhancedComponent, ...] = ()


class LayoutMetadata(_FrozenModel):
    """Document-level metadata derived by the enhancer"""
    complexity_score: int = Field(..., ge=1, le=10)
    primary_user_flow: UserFlow = "browse"
    content_density: ContentDensity = "medium"
    section_count: int = Field(0, ge=0)
    total_components: int = Field(0, ge=0)


class EnhancedLayoutDocument(LayoutDocument):
    """Layout document enriched once by the enhancer"""
    sections: Tuple[EnhancedSection, ...] = ()
    layout_metadata: LayoutMetadata


class FlatComponent(_FrozenModel):
    """Component flattened out of its section, as consumed by canvas renderers"""
    component_key: str = Field(..., alias="componentKey")
    text: Optional[str] = None
    section: str
    layout_direction: LayoutDirection
    component_role: Optional[str] = None
    layout_priority: Optional[LayoutPriority] = None


class LayoutValidationResult(BaseModel):
    """Outcome of schema validation"""
    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
