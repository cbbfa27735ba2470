"""
Archetype models.

An archetype is a canonical structural pattern (named sections, per-section
direction and component kinds) for one application / screen type pairing.
"""
from typing import Any, Dict, Literal, Mapping, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

CanvasType = Literal["desktop", "mobile", "centered"]


class SectionRule(BaseModel):
    """Expected direction and component kinds of one archetype section"""
    direction: str
    allowed_components: Tuple[str, ...] = Field(default=(), alias="components")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ArchetypeConfig(BaseModel):
    """Canonical, read-only archetype record"""
    model_config = ConfigDict(frozen=True)

    name: str
    canvas_type: CanvasType
    sections: Tuple[str, ...]
    typical_components: Tuple[str, ...]
    layout_direction: str
    section_rules: Mapping[str, SectionRule]
    responsive_behavior: str

    def rule_for(self, section_name: str) -> Optional[SectionRule]:
        return self.section_rules.get(section_name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "canvas_type": self.canvas_type,
            "sections": list(self.sections),
            "typical_components": list(self.typical_components),
            "layout_direction": self.layout_direction,
            "section_rules": {
                section: {
                    "direction": rule.direction,
                    "components": list(rule.allowed_components),
                }
                for section, rule in self.section_rules.items()
            },
            "responsive_behavior": self.responsive_behavior,
        }
