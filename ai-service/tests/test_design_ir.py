"""
Tests for layout -> Design IR conversion and IR validation.
"""
import pytest

from layoutforge.core.errors import InvalidInput, IRError, MissingComponentType, MissingField
from layoutforge.models.schemas.design_ir import (
    ButtonComponent,
    ContainerComponent,
    DesignIR,
    HeadingComponent,
    InputComponent,
    TextComponent,
)
from layoutforge.models.schemas.layout import LayoutDocument
from layoutforge.services.generation.design_ir import (
    convert_component,
    extract_design_tokens,
    to_ir,
    validate_ir,
)
from layoutforge.services.generation.layout_enhancer import enhance


class TestConvertComponent:
    @pytest.mark.parametrize("component,expected", [
        ({"componentKey": "heading", "text": "Login"}, HeadingComponent(text="Login")),
        ({"componentKey": "description", "text": "Hi"}, TextComponent(text="Hi")),
        ({"componentKey": "wrapped_description", "text": "Long"}, TextComponent(text="Long")),
        ({"componentKey": "text_input", "text": "Email"}, InputComponent(label="Email", input_type="text")),
        ({"componentKey": "primary_button", "text": "Go"}, ButtonComponent(variant="primary", text="Go")),
        ({"componentKey": "primary_icon_button", "text": "Add"}, ButtonComponent(variant="primary", text="Add")),
        ({"componentKey": "secondary_button", "text": "Back"}, ButtonComponent(variant="secondary", text="Back")),
        ({"componentKey": "card_container"}, ContainerComponent(variant="card")),
        ({"componentKey": "default_blankslate", "text": "Empty"}, ContainerComponent(variant="section")),
    ])
    def test_known_keys(self, component, expected):
        assert convert_component(component) == expected

    def test_missing_text_gets_placeholder(self):
        assert convert_component({"componentKey": "heading"}).text == "Heading"
        assert convert_component({"componentKey": "text_input"}).label == "Input"
        assert convert_component({"componentKey": "primary_button"}).text == "Button"

    def test_unknown_key_becomes_text(self):
        component = convert_component({"componentKey": "hologram"})

        assert component == TextComponent(text="Unknown component")


class TestDesignTokens:
    def test_mobile_tokens(self):
        tokens = extract_design_tokens("mobile")

        assert (tokens.spacing, tokens.font_size) == ("sm", "base")

    def test_desktop_tokens(self):
        tokens = extract_design_tokens("desktop")

        assert (tokens.spacing, tokens.font_size) == ("lg", "lg")

    def test_other_screens_use_defaults(self):
        tokens = extract_design_tokens("web")

        assert tokens.to_dict() == {"primaryColor": "primary-500", "spacing": "md", "borderRadius": "md"}


class TestToIR:
    def test_flat_login_layout(self, flat_login_layout):
        ir = to_ir(flat_login_layout, "Login")

        assert ir.screen_name == "Login"
        assert ir.layout == "vertical"
        assert ir.kinds == ["heading", "input", "button"]
        assert ir.tokens.spacing == "sm"

    def test_sectioned_layout_is_flattened_in_order(self, dashboard_layout):
        ir = to_ir(dashboard_layout, "Dashboard")

        assert ir.kinds == ["heading", "button", "container", "container", "text", "container", "button"]

    def test_validated_and_enhanced_documents(self, login_layout):
        document = LayoutDocument.from_validated(login_layout)

        from_document = to_ir(document, "Login")
        from_enhanced = to_ir(enhance(document), "Login")

        assert from_document == from_enhanced
        assert from_document.kinds == ["heading", "input", "input", "button"]

    def test_desktop_layout_is_horizontal(self, flat_login_layout):
        flat_login_layout["screenType"] = "desktop"

        assert to_ir(flat_login_layout).layout == "horizontal"

    def test_default_screen_name(self, flat_login_layout):
        assert to_ir(flat_login_layout).screen_name == "GeneratedScreen"

    def test_no_components_or_sections(self):
        with pytest.raises(InvalidInput):
            to_ir({"screenType": "mobile"})

    def test_not_a_mapping(self):
        with pytest.raises(InvalidInput):
            to_ir("heading, button")

    def test_camel_case_serialisation(self, flat_login_layout):
        data = to_ir(flat_login_layout, "Login").to_dict()

        assert data["screenName"] == "Login"
        assert data["components"][1] == {"type": "input", "label": "Email", "inputType": "text"}
        assert data["tokens"]["fontSize"] == "base"


class TestValidateIR:
    def test_converted_ir_is_valid(self, flat_login_layout):
        assert validate_ir(to_ir(flat_login_layout, "Login")) is True

    def test_empty_component_list_is_structurally_valid(self):
        assert validate_ir(DesignIR(screen_name="Empty")) is True

    def test_missing_screen_name(self):
        with pytest.raises(MissingField) as exc_info:
            validate_ir({"layout": "vertical", "components": [], "tokens": {}})

        assert str(exc_info.value) == "Missing required field: screenName"

    def test_empty_string_counts_as_missing(self):
        with pytest.raises(MissingField):
            validate_ir({"screenName": "", "layout": "vertical", "components": [], "tokens": {}})

    def test_components_must_be_a_list(self):
        with pytest.raises(IRError, match="Components must be an array"):
            validate_ir({"screenName": "X", "layout": "vertical", "components": "heading", "tokens": {}})

    def test_component_without_type(self):
        with pytest.raises(MissingComponentType) as exc_info:
            validate_ir({
                "screenName": "X",
                "layout": "vertical",
                "components": [{"type": "heading", "text": "A"}, {"text": "B"}],
                "tokens": {},
            })

        assert str(exc_info.value) == "Component at index 1 missing type field"
