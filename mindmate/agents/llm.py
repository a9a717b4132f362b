"""Chat model construction, invocation and reply parsing shared by every agent."""

import json
import logging
from typing import Any, Callable, TypeVar

from langchain_anthropic import ChatAnthropic
from langchain_aws import ChatBedrock
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from mindmate.config.settings import Settings
from mindmate.errors import (
    ConfigurationError,
    MindmateError,
    UpstreamParseError,
    UpstreamServiceError,
    ValidationError,
)
from mindmate.utils import strip_code_fences

logger = logging.getLogger(__name__)

API_KEY_MISSING = "LLM API key is not configured"

# Called as make_llm(settings, temperature=..., json_mode=..., max_tokens=...)
ChatModelFactory = Callable[..., Runnable]

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def build_chat_model(
    settings: Settings,
    *,
    temperature: float,
    json_mode: bool = False,
    max_tokens: int | None = None,
) -> Runnable:
    """
    Create the chat model for the configured provider.

    Client-side retries are disabled so that every failure reaches the
    caller on the first attempt.

    Args:
        settings: Application settings
        temperature: Sampling temperature for this request kind
        json_mode: Ask the provider for a strict JSON object reply
        max_tokens: Optional cap on the reply length

    Returns:
        A runnable chat model

    Raises:
        ConfigurationError: If the provider's credential is missing
    """
    if not settings.api_key_configured():
        raise ConfigurationError(API_KEY_MISSING)

    if settings.llm_provider == "openai":
        llm = ChatOpenAI(
            model=settings.model_name,
            temperature=temperature,
            api_key=settings.openai_api_key,
            max_tokens=max_tokens,
            timeout=settings.request_timeout,
            max_retries=0,
        )
        if json_mode:
            return llm.bind(response_format={"type": "json_object"})
        return llm

    if settings.llm_provider == "anthropic":
        extra: dict[str, Any] = {}
        if max_tokens is not None:
            extra["max_tokens"] = max_tokens
        return ChatAnthropic(
            model=settings.model_name,
            temperature=temperature,
            api_key=settings.anthropic_api_key,
            timeout=settings.request_timeout,
            max_retries=0,
            **extra,
        )

    # Bedrock has no JSON mode; the prompt contract and fence stripping cover it
    return ChatBedrock(
        model=settings.model_name,
        temperature=temperature,
        region=settings.aws_default_region,
        aws_access_key_id=settings.aws_api_key_id,
        aws_secret_access_key=settings.aws_api_key_secret,
        max_tokens=max_tokens,
    )


def require_text(value: Any, field: str = "Text") -> str:
    """Reject missing, non-string or blank input before any outbound call."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required and must be a non-empty string")
    return value


def upstream_status(error: Exception) -> int:
    """Pull the HTTP status an upstream SDK attached to its exception."""
    status = getattr(error, "status_code", None)
    if status is None:
        # botocore ClientError keeps it in the response metadata
        response = getattr(error, "response", None)
        if isinstance(response, dict):
            status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    if isinstance(status, int) and 400 <= status <= 599:
        return status
    return 500


def message_text(message: Any) -> str:
    """Flatten a chat reply into plain text."""
    content = getattr(message, "content", message)
    if isinstance(content, list):
        # Anthropic returns a list of content blocks
        content = "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return (content or "").strip()


def invoke_model(llm: Runnable, messages: list[BaseMessage], kind: str) -> str:
    """
    Send messages to the model and return the reply text.

    Args:
        llm: Chat model (or bound runnable)
        messages: Conversation to send
        kind: Request kind, used for logging

    Returns:
        The reply text, possibly empty

    Raises:
        UpstreamServiceError: If the model call itself fails
    """
    try:
        reply = llm.invoke(messages)
    except MindmateError:
        raise
    except Exception as e:
        status = upstream_status(e)
        detail = getattr(e, "message", None) or str(e)
        logger.error("%s request failed upstream (status %s): %s", kind, status, detail)
        raise UpstreamServiceError(f"LLM API error: {detail}", status) from e
    return message_text(reply)


def parse_json_reply(content: str, schema: type[SchemaT], failure_message: str) -> SchemaT:
    """
    Parse a model reply as a JSON object and validate it against a schema.

    Args:
        content: Raw reply text
        schema: Pydantic model the reply must match
        failure_message: User-facing message raised on any parse failure

    Returns:
        The validated schema instance

    Raises:
        UpstreamParseError: If the reply is empty, not JSON or mismatched
    """
    content = strip_code_fences(content) if content else ""
    if not content:
        logger.error("Empty model reply for %s", schema.__name__)
        raise UpstreamParseError(failure_message)

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error("Model reply is not JSON: %s. Raw: %s", e, content[:400])
        raise UpstreamParseError(failure_message) from e

    if not isinstance(data, dict):
        logger.error("Model reply is JSON but not an object: %s", content[:400])
        raise UpstreamParseError(failure_message)

    try:
        return schema.model_validate(data)
    except SchemaError as e:
        logger.error("Model reply does not match %s: %s", schema.__name__, e)
        raise UpstreamParseError(failure_message) from e


def generate_structured(
    settings: Settings,
    make_llm: ChatModelFactory,
    *,
    kind: str,
    system_prompt: str,
    user_content: str,
    schema: type[SchemaT],
    failure_message: str,
    temperature: float,
) -> SchemaT:
    """Run one JSON-mode request and return the validated reply."""
    llm = make_llm(settings, temperature=temperature, json_mode=True)

    messages = [
        SystemMessage(content=system_prompt),
        HumanMessage(content=user_content),
    ]

    content = invoke_model(llm, messages, kind)
    return parse_json_reply(content, schema, failure_message)
