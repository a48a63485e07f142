"""Synthetic tool payloads for the simulated tool branch.

Each category in the action table has its own request and result variant.
Variants are tagged with a ``category`` literal and combined into pydantic
discriminated unions, so a category without a payload variant fails when
the table is built rather than at run time.
"""

import json
from datetime import datetime
from typing import Annotated, Any, Literal, get_args

from pydantic import BaseModel, Field, TypeAdapter

from agent_console.orchestrator.types import Category, utc_now

DEFAULT_ACTION = "execute_action"

TOOL_ACTIONS: dict[str, str] = {
    "email": "send_email",
    "web": "web_search",
    "docs": "create_document",
}

# Provider names that differ from the category id.
TOOL_PROVIDERS: dict[str, str] = {
    "email": "email_service",
}

PayloadTag = Literal["email", "web", "docs", "default"]


class EmailRequest(BaseModel):
    category: Literal["email"] = "email"
    to: str = "user@example.com"
    subject: str = "Response to your inquiry"
    body: str = "Thank you for your message..."


class WebSearchRequest(BaseModel):
    category: Literal["web"] = "web"
    query: str
    type: str = "comprehensive"


class DocumentRequest(BaseModel):
    category: Literal["docs"] = "docs"
    action: str = "process_request"


class GenericRequest(BaseModel):
    category: Literal["default"] = "default"
    action: str = "process_request"


ToolRequest = Annotated[
    EmailRequest | WebSearchRequest | DocumentRequest | GenericRequest,
    Field(discriminator="category"),
]


class _ResultBase(BaseModel):
    success: bool = True
    executed_at: datetime = Field(default_factory=utc_now)
    category_label: str = Field("General", serialization_alias="category")


class EmailResult(_ResultBase):
    category: Literal["email"] = Field("email", exclude=True)
    message_id: str = "msg_abc123"


class WebSearchResult(_ResultBase):
    category: Literal["web"] = Field("web", exclude=True)
    results_count: int = 5


class DocumentResult(_ResultBase):
    category: Literal["docs"] = Field("docs", exclude=True)
    operation_id: str = "op_xyz789"


class GenericResult(_ResultBase):
    category: Literal["default"] = Field("default", exclude=True)
    operation_id: str = "op_xyz789"


ToolResultPayload = Annotated[
    EmailResult | WebSearchResult | DocumentResult | GenericResult,
    Field(discriminator="category"),
]

_request_adapter: TypeAdapter[Any] = TypeAdapter(ToolRequest)
_result_adapter: TypeAdapter[Any] = TypeAdapter(ToolResultPayload)

SUCCESS_MESSAGES: dict[str, str] = {
    "email": "Email sent successfully!",
    "web": "Web search completed!",
    "docs": "Document created!",
    "default": "Operation completed successfully!",
}


def payload_tag(category: Category | None) -> PayloadTag:
    """Map a category to its payload variant tag."""
    if category is not None and category.id in ("email", "web", "docs"):
        return category.id  # type: ignore[return-value]
    return "default"


def tool_action(category: Category | None) -> str:
    if category is None:
        return DEFAULT_ACTION
    return TOOL_ACTIONS.get(category.id, DEFAULT_ACTION)


def tool_provider(category: Category | None) -> str:
    if category is None:
        return "tool"
    return TOOL_PROVIDERS.get(category.id, category.id)


def build_request(category: Category | None, user_input: str) -> BaseModel:
    """Synthesize the request payload for ``category``.

    Web searches carry the request text as their query.
    """
    tag = payload_tag(category)
    data: dict[str, Any] = {"category": tag}
    if tag == "web":
        data["query"] = user_input
    return _request_adapter.validate_python(data)


def build_result(category: Category | None, executed_at: datetime | None = None) -> BaseModel:
    """Synthesize the success result payload for ``category``."""
    data: dict[str, Any] = {
        "category": payload_tag(category),
        "category_label": category.label if category else "General",
    }
    if executed_at is not None:
        data["executed_at"] = executed_at
    return _result_adapter.validate_python(data)


def render_invocation(provider: str, action: str, request: BaseModel) -> str:
    """Render a tool call as ``provider.action({...})`` for the step log."""
    arguments = request.model_dump(exclude={"category"})
    return f"{provider}.{action}({json.dumps(arguments, indent=2)})"


def result_to_dict(result: BaseModel) -> dict[str, Any]:
    """Serialize a result payload for Step.tool_result."""
    return result.model_dump(mode="json", by_alias=True)


def success_message(category: Category | None) -> str:
    return SUCCESS_MESSAGES[payload_tag(category)]


def _check_table() -> None:
    tags = get_args(PayloadTag)
    for category_id in TOOL_ACTIONS:
        if category_id not in tags or category_id not in SUCCESS_MESSAGES:
            raise RuntimeError(f"No payload variant for tool category '{category_id}'")


_check_table()
