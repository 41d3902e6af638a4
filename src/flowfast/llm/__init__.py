"""LLM client and prompts for workout plan generation."""

from .providers import LLMClient, LLMMetrics, RetryConfig
from .prompts import WORKOUT_TOOL_NAME, WORKOUT_TOOL_SCHEMA, build_system_prompt, build_user_prompt

__all__ = [
    "LLMClient",
    "LLMMetrics",
    "RetryConfig",
    "WORKOUT_TOOL_NAME",
    "WORKOUT_TOOL_SCHEMA",
    "build_system_prompt",
    "build_user_prompt",
]
