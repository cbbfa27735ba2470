"""
Tests for the layout schema validator.
"""
from layoutforge.models.schemas.component_catalog import ALLOWED_COMPONENT_KEYS
from layoutforge.services.generation.layout_validator import (
    LayoutSchemaValidator,
    layout_schema_validator,
    validate_layout,
)


class TestValidDocuments:
    def test_login_layout_is_valid_without_warnings(self, login_layout):
        result = validate_layout(login_layout)

        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_dashboard_layout_is_valid(self, dashboard_layout):
        result = layout_schema_validator.validate(dashboard_layout)

        assert result.valid is True
        assert result.errors == []

    def test_every_allowed_key_is_accepted(self, login_layout):
        login_layout["sections"][0]["components"] = [
            {"componentKey": key, "text": key} for key in ALLOWED_COMPONENT_KEYS
        ]

        result = validate_layout(login_layout)

        assert result.valid is True

    def test_input_is_not_modified(self, login_layout):
        snapshot = repr(login_layout)

        validate_layout(login_layout)

        assert repr(login_layout) == snapshot


class TestTopLevelErrors:
    def test_non_object_document(self):
        result = validate_layout(["not", "a", "layout"])

        assert result.valid is False
        assert result.errors[0].startswith("Layout document must be a JSON object")

    def test_missing_required_fields_are_all_reported(self):
        result = validate_layout({})

        assert result.valid is False
        assert result.errors == [
            "Missing required field: screenType",
            "Missing required field: application_type",
            "Missing required field: layout_archetype",
            "Missing required field: sections",
        ]

    def test_invalid_screen_type(self, login_layout):
        login_layout["screenType"] = "watch"

        result = validate_layout(login_layout)

        assert result.valid is False
        assert any("Invalid screenType 'watch'" in error for error in result.errors)

    def test_sections_must_be_an_array(self, login_layout):
        login_layout["sections"] = {"section_name": "form_stack"}

        result = validate_layout(login_layout)

        assert "Field 'sections' must be an array" in result.errors

    def test_non_string_archetype(self, login_layout):
        login_layout["layout_archetype"] = 7

        result = validate_layout(login_layout)

        assert "Field 'layout_archetype' must be a string" in result.errors


class TestSectionAndComponentErrors:
    def test_unknown_component_key_lists_allowed_keys(self, login_layout):
        login_layout["sections"][0]["components"].append({"componentKey": "fancy_slider"})

        result = validate_layout(login_layout)

        assert result.valid is False
        assert len(result.errors) == 1
        assert "invalid componentKey 'fancy_slider'" in result.errors[0]
        assert "primary_button" in result.errors[0]

    def test_missing_component_key(self, login_layout):
        login_layout["sections"][0]["components"].append({"text": "Orphan"})

        result = validate_layout(login_layout)

        assert any("missing componentKey" in error for error in result.errors)

    def test_components_must_not_nest(self, login_layout):
        login_layout["sections"][0]["components"][0]["components"] = [{"componentKey": "heading"}]

        result = validate_layout(login_layout)

        assert result.valid is False
        assert any("cannot contain nested components" in error for error in result.errors)

    def test_sections_must_not_nest(self, login_layout):
        login_layout["sections"][0]["sections"] = []

        result = validate_layout(login_layout)

        assert any("must not contain nested sections" in error for error in result.errors)

    def test_invalid_layout_direction(self, login_layout):
        login_layout["sections"][0]["layout_direction"] = "diagonal"

        result = validate_layout(login_layout)

        assert any("invalid layout_direction 'diagonal'" in error for error in result.errors)

    def test_components_must_be_an_array(self, login_layout):
        login_layout["sections"][0]["components"] = "heading"

        result = validate_layout(login_layout)

        assert "Section 0 (form_stack) has invalid components array" in result.errors

    def test_non_string_text(self, login_layout):
        login_layout["sections"][0]["components"][0]["text"] = 42

        result = validate_layout(login_layout)

        assert any("non-string text" in error for error in result.errors)


class TestWarnings:
    def test_missing_canvas_is_a_warning(self, login_layout):
        del login_layout["canvas_size"]

        result = validate_layout(login_layout)

        assert result.valid is True
        assert "Missing canvas_size, archetype default will be used" in result.warnings

    def test_malformed_canvas_is_a_warning(self, login_layout):
        login_layout["canvas_size"] = {"width": -1, "height": 812}

        result = validate_layout(login_layout)

        assert result.valid is True
        assert "Invalid canvas_size, archetype default will be used" in result.warnings

    def test_unknown_application_type(self, login_layout):
        login_layout["application_type"] = "space_travel"

        result = validate_layout(login_layout)

        assert result.valid is True
        assert any("Unknown application_type 'space_travel'" in w for w in result.warnings)

    def test_horizontal_section_on_mobile(self, login_layout):
        login_layout["sections"][0]["layout_direction"] = "horizontal"

        result = validate_layout(login_layout)

        assert result.valid is True
        assert any("horizontal layout on a mobile screen" in w for w in result.warnings)

    def test_empty_section(self, login_layout):
        login_layout["sections"][0]["components"] = []

        result = validate_layout(login_layout)

        assert result.valid is True
        assert "Section 0 (form_stack) has no components" in result.warnings

    def test_unknown_component_attributes(self, login_layout):
        login_layout["sections"][0]["components"][0]["color"] = "red"

        result = validate_layout(login_layout)

        assert result.valid is True
        assert any("unknown attributes: color" in w for w in result.warnings)


class TestValidatorIsolation:
    def test_findings_do_not_leak_between_calls(self, login_layout):
        validator = LayoutSchemaValidator()

        first = validator.validate({"screenType": "watch"})
        second = validator.validate(login_layout)

        assert first.valid is False
        assert second.valid is True
        assert second.errors == []
