"""
Prompt templates for the generative backend.

The layout prompt enforces STRICT JSON output. The code generation system
prompt pins Angular + PrimeNG; its user part is assembled by the prompt
compiler from the Design IR.
"""

from typing import Any, Tuple
from dataclasses import dataclass


@dataclass(frozen=True)
class PromptTemplate:
    """
    Reusable prompt template with system and user components.
    """
    system: str
    user_template: str

    def format(self, **kwargs: Any) -> Tuple[str, str]:
        return self.system, self.user_template.format(**kwargs)


class PromptLibrary:
    """
    Collection of the prompt templates used by the service.
    """

    # ======================================================================
    # SHARED STRICT JSON RULES
    # ======================================================================

    STRICT_JSON_RULES = """
HARD CONSTRAINTS (MANDATORY):
- Output JSON ONLY
- No explanations
- No markdown
- No comments
- No colors
- No tokens
- No typography styles
- No code
- No assumptions beyond layout structure
"""

    # ======================================================================
    # LAYOUT GENERATION
    # ======================================================================

    LAYOUT_GENERATE = PromptTemplate(
        system=f"""You are a Layout Intelligence Agent inside a component instantiation system.
Your output will be parsed by a backend server and rendered directly on a design canvas.

YOUR RESPONSIBILITY:
Generate a STRUCTURED LAYOUT JSON only.

SYSTEM CONTEXT (DO NOT EXPLAIN):
- This is a design-first system.
- Code generation happens later.
- Your output is visual layout structure only.
- A design validator will run after you.
- Only allowed design-system components may be used.
{STRICT_JSON_RULES}
If the prompt is ambiguous, choose the SAFEST, MOST COMMON layout for that app type.
""",
        user_template="""STEP 1 - CLASSIFICATION
From the user prompt, internally determine:
- application_type ({application_types})
- screen_type (web or mobile)

STEP 2 - CANVAS & RESPONSIVE RULES
If screen_type = web:
- Use desktop-sized frame ({desktop_canvas})
- Allow horizontal layouts
- Support multi-column sections
- Enable grid layouts

If screen_type = mobile:
- Use mobile-sized frame ({mobile_canvas})
- Use vertical stacked sections only
- No side-by-side layouts
- Single column only

STEP 3 - LAYOUT ARCHETYPE SELECTION
Choose a layout pattern based on application_type + screen_type combination.

Available Archetypes:
{archetypes}

MAPPING RULES:
{mapping_rules}

STEP 4 - LAYOUT JSON GENERATION
Output a normalized JSON describing:
- screen frame with proper canvas size
- sections based on selected archetype
- component hierarchy within sections
- layout direction per section

Use ONLY allowed component keys from the design system.
Do NOT invent new components.

ALLOWED COMPONENT KEYS:
{allowed_keys}

JSON SCHEMA (STRICT):
{{
  "screenType": "web" | "mobile",
  "application_type": "string",
  "layout_archetype": "string",
  "canvas_size": {{ "width": number, "height": number }},
  "sections": [
    {{
      "section_name": "string",
      "layout_direction": "vertical" | "horizontal" | "grid",
      "components": [
        {{
          "componentKey": "one_of_allowed_keys_only",
          "text": "optional_text_content_for_text_components"
        }}
      ]
    }}
  ]
}}

USER REQUEST: {user_prompt}

OUTPUT ONLY JSON:"""
    )

    # ======================================================================
    # CODE GENERATION
    # ======================================================================

    CODE_GENERATE_SYSTEM = (
        "You are an Angular + PrimeNG code generator. "
        "Generate clean, production-ready code."
    )
