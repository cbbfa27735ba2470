"""
Tests for prompt compilation.
"""
import json

import pytest

from layoutforge.core.errors import PromptError, UnmappedComponentKind
from layoutforge.models import prompts as prompt_package
from layoutforge.models.schemas.codegen import ComponentMappingEntry, GeneratedFileSet
from layoutforge.models.schemas.component_catalog import ALLOWED_COMPONENT_KEYS
from layoutforge.models.schemas.design_ir import DesignIR, DesignTokens, HeadingComponent
from layoutforge.services.analysis.input_inference import infer_inputs
from layoutforge.services.generation.component_mapping import COMPONENT_MAPPING
from layoutforge.services.generation.design_ir import to_ir
from layoutforge.services.generation.prompt_compiler import (
    build_component_instructions,
    build_layout_prompt,
    compile_prompt,
    generate_tokens_mapping,
    validate_prompt_inputs,
)


@pytest.fixture
def login_ir(flat_login_layout):
    return to_ir(flat_login_layout, "Login")


class TestCompilePrompt:
    def test_is_deterministic(self, login_ir, button_node):
        inferred = infer_inputs(button_node, "Login")

        assert compile_prompt(login_ir) == compile_prompt(login_ir)
        assert compile_prompt(login_ir, inferred_inputs=inferred) == compile_prompt(login_ir, inferred_inputs=inferred)

    def test_sections_in_order(self, login_ir):
        prompt = compile_prompt(login_ir)

        headers = [
            "DESIGN IR INPUT:",
            "COMPONENT MAPPING RULES:",
            "CONSTRAINTS:",
            "REQUIRED IMPORTS:",
            "DESIGN TOKENS TO CSS VARIABLES:",
            "COMPONENT INSTRUCTIONS:",
            "GENERATE FILES:",
            "OUTPUT FORMAT:",
        ]
        positions = [prompt.index(header) for header in headers]
        assert positions == sorted(positions)
        assert prompt.rstrip().endswith("Generate the code now:")

    def test_embeds_ir_and_imports(self, login_ir):
        prompt = compile_prompt(login_ir)

        assert json.dumps(login_ir.to_dict(), indent=2) in prompt
        assert "ButtonModule, FormsModule, InputTextModule" in prompt
        assert "styleUrls: ['./component.scss']" in prompt

    def test_component_instructions_use_resolved_markup(self, login_ir):
        prompt = compile_prompt(login_ir)

        assert "1. Heading: Use <h1>Login</h1>" in prompt
        assert '[(ngModel)]="emailValue"' in prompt
        assert '(click)="onSignInClick()"' in prompt

    def test_file_names_and_fences(self, login_ir):
        prompt = compile_prompt(login_ir)

        for name in ("login.component.ts", "login.component.html", "login.component.scss"):
            assert name in prompt
        for fence in ("```typescript", "```html", "```scss"):
            assert fence in prompt

    def test_without_inference_there_is_no_inputs_section(self, login_ir):
        assert "INFERRED INPUTS" not in compile_prompt(login_ir)

    def test_inferred_inputs_section(self, login_ir, button_node):
        prompt = compile_prompt(login_ir, inferred_inputs=infer_inputs(button_node, "Login"))

        assert "INFERRED INPUTS (MANDATORY):" in prompt
        assert "@Input() label: string = 'Submit';" in prompt
        assert "TEMPLATE BINDING REQUIREMENTS:" in prompt
        assert "- Has booleans: true" in prompt
        assert "Include ALL inferred @Input() properties" in prompt
        assert "1. Heading: Use <h1>{{ label }}</h1>" in prompt

    def test_empty_inference_is_ignored(self, login_ir):
        inferred = infer_inputs(None, "Login")

        assert compile_prompt(login_ir, inferred_inputs=inferred) == compile_prompt(login_ir)

    def test_custom_mapping_table(self, login_ir):
        table = dict(COMPONENT_MAPPING)
        table["button"] = ComponentMappingEntry(
            kind="button",
            target_tag="my-button",
            required_imports=frozenset({"MyButtonModule"}),
        )

        prompt = compile_prompt(login_ir, mapping_table=table)

        rules = prompt.split("COMPONENT MAPPING RULES:")[1].split("CONSTRAINTS:")[0]
        assert '"my-button"' in rules
        imports = prompt.split("REQUIRED IMPORTS:")[1].split("DESIGN TOKENS")[0].strip()
        assert imports.split(", ") == ["FormsModule", "InputTextModule", "MyButtonModule"]
        instructions = prompt.split("COMPONENT INSTRUCTIONS:")[1].split("GENERATE FILES:")[0]
        assert "3. Button: Use <my-button" in instructions
        assert "<p-button" not in instructions

    def test_table_missing_a_kind_is_rejected(self, login_ir):
        table = {kind: entry for kind, entry in COMPONENT_MAPPING.items() if kind != "input"}

        with pytest.raises(UnmappedComponentKind) as excinfo:
            compile_prompt(login_ir, mapping_table=table)

        assert excinfo.value.unmapped == [{"index": 1, "kind": "input"}]


class TestPromptInputs:
    def test_no_components(self):
        with pytest.raises(PromptError, match="at least one component"):
            compile_prompt(DesignIR(screen_name="Empty"))

    def test_no_screen_name(self):
        with pytest.raises(PromptError, match="missing screenName"):
            validate_prompt_inputs(DesignIR(screen_name="", components=(HeadingComponent(text="A"),)))


class TestHelpers:
    def test_tokens_mapping(self):
        mapping = generate_tokens_mapping(DesignTokens(spacing="sm", font_size="base"))

        assert mapping.splitlines() == [
            "primaryColor: primary-500 → --primary-color: var(--primary-500)",
            "spacing: sm → --spacing: var(--sm)",
            "borderRadius: md → --border-radius: var(--md)",
            "fontSize: base → --font-size: var(--base)",
        ]

    def test_component_instructions(self, login_ir):
        lines = build_component_instructions(login_ir).splitlines()

        assert len(lines) == 3
        assert lines[2].startswith("3. Button: Use <p-button")


class TestLayoutPrompt:
    def test_system_and_user_parts(self):
        system, user = build_layout_prompt("  A login screen for a banking app  ")

        assert system
        assert "A login screen for a banking app" in user
        assert "  A login screen" not in user

    def test_lists_live_tables(self):
        _, user = build_layout_prompt("dashboard")

        for key in ALLOWED_COMPONENT_KEYS:
            assert f"- {key}" in user
        assert "mobile_form" in user
        assert "375x812" in user
        assert "1200x800" in user

    def test_prompt_package_exports(self):
        assert prompt_package.__all__ == ["PromptTemplate", "PromptLibrary"]
        assert isinstance(prompt_package.PromptLibrary.LAYOUT_GENERATE, prompt_package.PromptTemplate)
        assert not hasattr(prompt_package, "prompts")
        assert not hasattr(GeneratedFileSet(), "has_errors")
