"""
Code generation models: mapping entries, inferred inputs, generated files.

Serialised with camelCase keys (``fileName``, ``sizeBytes``, ``defaultValue``,
``templateBindings``) for the HTTP layer.
"""
from typing import Any, Dict, FrozenSet, List, Literal, Mapping, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ArtifactKind = Literal["typescript", "html", "scss"]
ARTIFACT_KINDS: Tuple[str, ...] = ("typescript", "html", "scss")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ComponentMappingEntry(CamelModel):
    """Static Angular + PrimeNG mapping for one IR kind"""
    kind: str
    target_tag: str
    attribute_templates: Mapping[str, str] = Field(default_factory=dict)
    content_template: Optional[str] = None
    required_imports: FrozenSet[str] = frozenset()

    def to_dict(self) -> Dict[str, Any]:
        # Sets are emitted sorted so prompt text stays byte-stable
        return {
            "tag": self.target_tag,
            "attributes": dict(self.attribute_templates),
            "content": self.content_template,
            "imports": sorted(self.required_imports),
        }


# ---------------------------------------------------------------------------
# Input inference
# ---------------------------------------------------------------------------

InputType = Literal["string", "boolean"]


class InferredInput(CamelModel):
    """One externally configurable ``@Input()`` property"""
    name: str
    type: InputType = "string"
    default_value: Union[str, bool, None] = None
    source_property: Optional[str] = None
    source_type: Optional[Literal["TEXT", "BOOLEAN", "VARIANT"]] = None


class TemplateBinding(CamelModel):
    """
    Template wiring for an inferred input.

    ``type`` is one of ``interpolation``, ``property`` or ``class``.
    """
    type: Literal["interpolation", "property", "class"]
    target: str
    expression: str


class InferredInputs(CamelModel):
    inputs: Tuple[InferredInput, ...] = ()
    template_bindings: Tuple[TemplateBinding, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.inputs

    def names(self) -> List[str]:
        return [item.name for item in self.inputs]

    def boolean_inputs(self) -> List[InferredInput]:
        return [item for item in self.inputs if item.type == "boolean"]

    def has_input(self, name: str) -> bool:
        return any(item.name == name for item in self.inputs)


# ---------------------------------------------------------------------------
# Parsed backend output
# ---------------------------------------------------------------------------

class GeneratedArtifact(CamelModel):
    """One generated source file"""
    file_name: str
    content: str
    language: ArtifactKind
    size_bytes: int = Field(0, ge=0)


class ParseIssue(CamelModel):
    """
    A problem found while parsing backend output.

    ``extraction`` issues are always errors; ``structure`` issues are errors
    or advisory warnings depending on the check.
    """
    severity: Literal["error", "warning"]
    category: Literal["extraction", "structure"]
    message: str
    artifact: Optional[ArtifactKind] = None


class GeneratedFileSet(CamelModel):
    typescript: Optional[GeneratedArtifact] = None
    html: Optional[GeneratedArtifact] = None
    scss: Optional[GeneratedArtifact] = None
    errors: Tuple[str, ...] = ()
    issues: Tuple[ParseIssue, ...] = ()

    def artifact(self, kind: str) -> Optional[GeneratedArtifact]:
        return getattr(self, kind) if kind in ARTIFACT_KINDS else None

    def present_artifacts(self) -> List[GeneratedArtifact]:
        return [a for a in (self.typescript, self.html, self.scss) if a is not None]

    @property
    def warnings(self) -> List[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]


class ExportFile(CamelModel):
    """File ready to be written under the export directory"""
    path: str
    content: str
    kind: ArtifactKind
