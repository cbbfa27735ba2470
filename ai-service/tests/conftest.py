"""
Shared fixtures: layout documents, design-tool nodes and a stub backend.

The live generative backend is never called from tests; pipelines get a
StubProvider injected instead.
"""
import copy
import json
from typing import Any, Dict, List, Optional

import pytest

from layoutforge.llm.base import BaseLLMProvider, LLMMessage, LLMProvider, LLMResponse


class StubProvider(BaseLLMProvider):
    """Backend double returning canned text and recording every call"""

    def __init__(self, content: str = "", error: Optional[Exception] = None):
        super().__init__({})
        self.provider_name = LLMProvider.MOCK
        self.content = content
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def generate(
        self,
        messages: List[LLMMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        self.calls.append({"messages": list(messages), **kwargs})
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.content, provider=LLMProvider.MOCK)

    async def health_check(self) -> bool:
        return True

    def get_provider_type(self) -> LLMProvider:
        return LLMProvider.MOCK


LOGIN_LAYOUT: Dict[str, Any] = {
    "screenType": "mobile",
    "application_type": "auth",
    "layout_archetype": "mobile_form",
    "canvas_size": {"width": 375, "height": 812},
    "sections": [
        {
            "section_name": "form_stack",
            "layout_direction": "vertical",
            "components": [
                {"componentKey": "heading", "text": "Login"},
                {"componentKey": "text_input", "text": "Email"},
                {"componentKey": "text_input", "text": "Password"},
                {"componentKey": "primary_button", "text": "Sign In"},
            ],
        }
    ],
}

FLAT_LOGIN_LAYOUT: Dict[str, Any] = {
    "screenType": "mobile",
    "components": [
        {"componentKey": "heading", "text": "Login"},
        {"componentKey": "text_input", "text": "Email"},
        {"componentKey": "primary_button", "text": "Sign In"},
    ],
}

DASHBOARD_LAYOUT: Dict[str, Any] = {
    "screenType": "web",
    "application_type": "dashboard",
    "layout_archetype": "dashboard_web",
    "canvas_size": {"width": 1200, "height": 800},
    "sections": [
        {
            "section_name": "header",
            "layout_direction": "horizontal",
            "components": [
                {"componentKey": "heading", "text": "Overview"},
                {"componentKey": "primary_button", "text": "New Report"},
            ],
        },
        {
            "section_name": "main_content",
            "layout_direction": "grid",
            "components": [
                {"componentKey": "card_container"},
                {"componentKey": "card_container"},
                {"componentKey": "description", "text": "Weekly totals"},
            ],
        },
        {
            "section_name": "sidebar",
            "layout_direction": "vertical",
            "components": [
                {"componentKey": "card_container"},
                {"componentKey": "secondary_button", "text": "Settings"},
            ],
        },
    ],
}

BUTTON_NODE: Dict[str, Any] = {
    "name": "Primary Button",
    "type": "INSTANCE",
    "componentProperties": {
        "Label#1:0": {"type": "TEXT", "value": "Submit"},
        "Disabled#1:1": {"type": "BOOLEAN", "value": False},
        "Size": {"type": "VARIANT", "value": "large"},
        "Icon#2:0": {"type": "INSTANCE_SWAP", "value": "12:34"},
    },
}


@pytest.fixture
def login_layout() -> Dict[str, Any]:
    return copy.deepcopy(LOGIN_LAYOUT)


@pytest.fixture
def flat_login_layout() -> Dict[str, Any]:
    return copy.deepcopy(FLAT_LOGIN_LAYOUT)


@pytest.fixture
def dashboard_layout() -> Dict[str, Any]:
    return copy.deepcopy(DASHBOARD_LAYOUT)


@pytest.fixture
def button_node() -> Dict[str, Any]:
    return copy.deepcopy(BUTTON_NODE)


@pytest.fixture
def stub_provider():
    """Factory: ``stub_provider(content=..., error=...)``"""
    return StubProvider


@pytest.fixture
def layout_reply(login_layout) -> str:
    """Backend reply wrapping the login layout in a json fence"""
    return "Here is the layout:\n```json\n" + json.dumps(login_layout, indent=2) + "\n```"


VALID_TS = """import { Component } from '@angular/core';

@Component({
  selector: 'app-login',
  templateUrl: './login.component.html',
  styleUrls: ['./login.component.scss']
})
export class LoginComponent {
  emailValue = '';
}"""

VALID_HTML = """<div class="login-container">
  <h1>Login</h1>
  <p-inputText type="text" placeholder="Email" [(ngModel)]="emailValue"></p-inputText>
  <p-button label="Sign In" severity="primary" (click)="onSignInClick()"></p-button>
</div>"""

VALID_SCSS = """.login-container {
  display: flex;
  flex-direction: column;
}"""


@pytest.fixture
def three_block_reply() -> str:
    return "\n".join([
        "Here's the code:",
        "```typescript", VALID_TS, "```",
        "",
        "```html", VALID_HTML, "```",
        "",
        "```scss", VALID_SCSS, "```",
    ])


@pytest.fixture
def valid_ts() -> str:
    return VALID_TS


@pytest.fixture
def valid_html() -> str:
    return VALID_HTML


@pytest.fixture
def valid_scss() -> str:
    return VALID_SCSS
