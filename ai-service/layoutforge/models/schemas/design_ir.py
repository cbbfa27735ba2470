"""
Design IR models.

Framework-agnostic intermediate representation between layout documents and
generated source. Components are a tagged union on ``type``; every model is
frozen and serialises with camelCase keys (``screenName``, ``inputType``).
"""
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

IRKind = Literal["heading", "text", "input", "button", "container"]
IR_KINDS: Tuple[str, ...] = ("heading", "text", "input", "button", "container")


class IRModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class HeadingComponent(IRModel):
    type: Literal["heading"] = "heading"
    text: str


class TextComponent(IRModel):
    type: Literal["text"] = "text"
    text: str


class InputComponent(IRModel):
    type: Literal["input"] = "input"
    label: str
    input_type: str = "text"


class ButtonComponent(IRModel):
    type: Literal["button"] = "button"
    variant: str = "primary"
    text: str


class ContainerComponent(IRModel):
    type: Literal["container"] = "container"
    variant: str = "card"


IRComponent = Annotated[
    Union[HeadingComponent, TextComponent, InputComponent, ButtonComponent, ContainerComponent],
    Field(discriminator="type"),
]


class DesignTokens(IRModel):
    """Small fixed token record derived from the screen type"""
    primary_color: str = "primary-500"
    spacing: str = "md"
    border_radius: str = "md"
    font_size: Optional[str] = None


class DesignIR(IRModel):
    screen_name: str
    layout: Literal["vertical", "horizontal"] = "vertical"
    components: Tuple[IRComponent, ...] = ()
    tokens: DesignTokens = Field(default_factory=DesignTokens)

    @property
    def kinds(self) -> List[str]:
        return [component.type for component in self.components]
