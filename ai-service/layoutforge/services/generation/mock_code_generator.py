"""
Deterministic stand-in for the generative backend.

Used in test mode: produces a fixed-shape three-block reply from the Design IR
using the same typed markup builders the prompt describes, so the parser and
validator run against realistic output without a network call.
"""
from typing import List, Optional

from layoutforge.llm.base import LLMProvider
from layoutforge.models.schemas.codegen import InferredInputs
from layoutforge.models.schemas.design_ir import DesignIR
from layoutforge.services.analysis.input_inference import generate_input_declarations
from layoutforge.services.generation.component_mapping import (
    click_handler_name,
    model_property_name,
    render_markup,
)
from layoutforge.utils.logging import get_logger
from layoutforge.utils.naming import kebab_case

logger = get_logger(__name__)

MOCK_STYLES = """.text-content {
  color: var(--text-color);
  margin-bottom: var(--spacing-sm);
}

p-inputText {
  width: 100%;
  margin-bottom: var(--spacing-md);
}

p-button {
  align-self: flex-start;
}"""


class MockCodeGenerator:
    """Builds a canned backend reply for a Design IR"""

    provider = LLMProvider.MOCK

    def generate(self, ir: DesignIR, inferred_inputs: Optional[InferredInputs] = None) -> str:
        inferred = inferred_inputs if inferred_inputs is not None and not inferred_inputs.is_empty else None
        base = ir.screen_name.lower()

        response = "\n".join([
            "Here's the Angular component code:",
            "",
            "```typescript",
            self._typescript(ir, base, inferred),
            "```",
            "",
            "```html",
            self._html(ir, base, inferred),
            "```",
            "",
            "```scss",
            self._scss(ir, base),
            "```",
        ])

        logger.debug(
            "mock.generation.completed",
            extra={
                "screen_name": ir.screen_name,
                "characters": len(response),
                "inferred_inputs": len(inferred.inputs) if inferred else 0,
            }
        )
        return response

    def _typescript(self, ir: DesignIR, base: str, inferred: Optional[InferredInputs]) -> str:
        core_imports = "Component, Input" if inferred else "Component"

        members: List[str] = []
        if inferred:
            members.append(generate_input_declarations(inferred.inputs))

        properties = []
        for component in ir.components:
            if component.type == "input":
                line = f"  {model_property_name(component.label)} = '';"
                if line not in properties:
                    properties.append(line)
        if properties:
            members.append("\n".join(properties))

        methods = []
        seen = set()
        for component in ir.components:
            if component.type != "button":
                continue
            handler = click_handler_name(component.text)
            if handler in seen:
                continue
            seen.add(handler)
            text = component.text.replace("'", "\\'")
            methods.append(f"  {handler}() {{\n    console.log('{text} clicked');\n  }}")
        if methods:
            members.append("\n\n".join(methods))

        body = "\n\n".join(members)
        return "\n".join([
            f"import {{ {core_imports} }} from '@angular/core';",
            "",
            "@Component({",
            f"  selector: 'app-{base}',",
            f"  templateUrl: './{base}.component.html',",
            f"  styleUrls: ['./{base}.component.scss']",
            "})",
            f"export class {ir.screen_name}Component {{",
            body,
            "}",
        ])

    def _html(self, ir: DesignIR, base: str, inferred: Optional[InferredInputs]) -> str:
        root_attrs = f'class="{base}-container"'
        if inferred:
            for item in inferred.inputs:
                if item.source_type == "VARIANT":
                    root_attrs += f" [ngClass]=\"'{kebab_case(item.name)}-' + {item.name}\""

        children = [f"  {render_markup(component, inferred=inferred)}" for component in ir.components]
        return "\n".join([f"<div {root_attrs}>", *children, "</div>"])

    def _scss(self, ir: DesignIR, base: str) -> str:
        return "\n".join([
            f".{base}-container {{",
            "  display: flex;",
            "  flex-direction: column;",
            f"  gap: var(--spacing-{ir.tokens.spacing});",
            "  padding: var(--spacing-lg);",
            "}",
            "",
            MOCK_STYLES,
        ])


mock_code_generator = MockCodeGenerator()
