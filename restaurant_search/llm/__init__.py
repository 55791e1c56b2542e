"""LLM client module."""

from restaurant_search.llm.client import LLMClient, OpenAICompatibleClient
from restaurant_search.llm.models import GenerationResult, Message, Role
from restaurant_search.llm.prompts import SummaryPromptTemplate

__all__ = [
    "GenerationResult",
    "LLMClient",
    "Message",
    "OpenAICompatibleClient",
    "Role",
    "SummaryPromptTemplate",
]
