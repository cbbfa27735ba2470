"""
Tests for archetype tables and resolution.
"""
import pytest

from layoutforge.core.errors import ArchetypeError
from layoutforge.models.schemas.layout import LayoutDocument
from layoutforge.services.generation.archetype_resolver import (
    APPLICATION_ARCHETYPE_MAP,
    CANVAS_SIZES,
    LAYOUT_ARCHETYPES,
    canvas_size_for,
    check_archetype_fit,
    expected_archetype,
    export_archetype_tables,
    require_config,
    resolve_canvas_size,
)


class TestTables:
    def test_nine_archetypes(self):
        assert set(LAYOUT_ARCHETYPES) == {
            "dashboard_web", "landing_web", "ecommerce_web", "healthcare_web",
            "auth_flow", "content_page", "mobile_stacked", "mobile_dashboard", "mobile_form",
        }

    def test_every_mapped_archetype_exists(self):
        for row in APPLICATION_ARCHETYPE_MAP.values():
            for archetype in row.values():
                assert archetype in LAYOUT_ARCHETYPES

    def test_every_canvas_type_has_a_size(self):
        for config in LAYOUT_ARCHETYPES.values():
            assert config.canvas_type in CANVAS_SIZES

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            LAYOUT_ARCHETYPES["custom"] = LAYOUT_ARCHETYPES["auth_flow"]
        with pytest.raises(TypeError):
            APPLICATION_ARCHETYPE_MAP["auth"]["web"] = "landing_web"

    def test_export_is_json_friendly(self):
        tables = export_archetype_tables()

        assert tables["canvasSizes"]["mobile"] == {"width": 375, "height": 812}
        assert tables["applicationArchetypeMap"]["auth"] == {"web": "auth_flow", "mobile": "mobile_form"}
        assert tables["archetypes"]["mobile_form"]["section_rules"]["form_stack"]["direction"] == "vertical"


class TestExpectedArchetype:
    @pytest.mark.parametrize("application_type,screen_type,expected", [
        ("auth", "mobile", "mobile_form"),
        ("auth", "web", "auth_flow"),
        ("dashboard", "web", "dashboard_web"),
        ("ecommerce", "mobile", "mobile_stacked"),
        ("unknown_kind", "web", "content_page"),
        ("unknown_kind", "mobile", "mobile_stacked"),
        ("dashboard", "tablet", "dashboard_web"),
    ])
    def test_mapping(self, application_type, screen_type, expected):
        assert expected_archetype(application_type, screen_type) == expected


class TestConfigLookup:
    def test_require_known_config(self):
        assert require_config("auth_flow").canvas_type == "centered"

    def test_unknown_archetype_raises(self):
        with pytest.raises(ArchetypeError) as exc_info:
            require_config("space_station", expected="mobile_form")

        error = exc_info.value
        assert str(error) == "Invalid layout archetype: 'space_station'"
        detail = error.to_dict()
        assert detail["received"] == "space_station"
        assert detail["expected"] == "mobile_form"
        assert len(detail["availableArchetypes"]) == 9

    def test_canvas_defaults(self):
        assert canvas_size_for("centered").width == 400
        assert canvas_size_for("holographic") == CANVAS_SIZES["desktop"]

    def test_document_canvas_wins(self, login_layout):
        login_layout["canvas_size"] = {"width": 390, "height": 844}
        document = LayoutDocument.from_validated(login_layout)

        size = resolve_canvas_size(document, require_config("mobile_form"))

        assert (size.width, size.height) == (390, 844)

    def test_missing_canvas_uses_archetype_default(self, login_layout):
        del login_layout["canvas_size"]
        document = LayoutDocument.from_validated(login_layout)

        size = resolve_canvas_size(document, require_config("mobile_form"))

        assert (size.width, size.height) == (375, 812)


class TestArchetypeFit:
    def test_matching_document_has_no_warnings(self, login_layout, dashboard_layout):
        assert check_archetype_fit(LayoutDocument.from_validated(login_layout)) == []
        assert check_archetype_fit(LayoutDocument.from_validated(dashboard_layout)) == []

    def test_unexpected_archetype_and_sections(self, login_layout):
        login_layout["layout_archetype"] = "mobile_stacked"

        warnings = check_archetype_fit(LayoutDocument.from_validated(login_layout))

        assert warnings[0].startswith("Layout archetype 'mobile_stacked' differs from expected 'mobile_form'")
        assert "Section 'form_stack' is not part of archetype 'mobile_stacked'" in warnings

    def test_components_outside_rule(self, login_layout):
        login_layout["sections"][0]["components"].append({"componentKey": "card_container"})

        warnings = check_archetype_fit(LayoutDocument.from_validated(login_layout))

        assert warnings == [
            "Section 'form_stack' contains components outside archetype rule: card_container"
        ]

    def test_unknown_archetype_only_reports_mismatch(self, login_layout):
        login_layout["layout_archetype"] = "space_station"

        warnings = check_archetype_fit(LayoutDocument.from_validated(login_layout))

        assert len(warnings) == 1
