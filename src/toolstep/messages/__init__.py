from .args import find_tool_call_args
from .convert import to_model_messages
from .provider_compat import (
    Provider,
    apply_provider_compat,
    ensure_anthropic_compatible_messages,
    ensure_gemini_compatible_messages,
    get_openai_reasoning_item_id,
    has_openai_reasoning_item_id,
)

__all__ = [
    "Provider",
    "apply_provider_compat",
    "ensure_anthropic_compatible_messages",
    "ensure_gemini_compatible_messages",
    "find_tool_call_args",
    "get_openai_reasoning_item_id",
    "has_openai_reasoning_item_id",
    "to_model_messages",
]
