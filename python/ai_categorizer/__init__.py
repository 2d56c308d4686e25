"""
AI Categorizer Module

LLM-backed fallback categorization with provider selection, batching and a
process-wide TTL cache.
"""

from .cache import TTLCache, cache_key
from .categorizer import AICategorizer
from .prompts import BatchItem, build_system_prompt, build_user_prompt
from .providers import AIProvider, AnthropicProvider, OpenAIProvider
from .vocabulary import DEFAULT_EXPENSE_CATEGORY, DEFAULT_INCOME_CATEGORY, CategoryVocabulary

__all__ = [
    "AICategorizer",
    "AIProvider",
    "AnthropicProvider",
    "OpenAIProvider",
    "BatchItem",
    "build_system_prompt",
    "build_user_prompt",
    "CategoryVocabulary",
    "DEFAULT_EXPENSE_CATEGORY",
    "DEFAULT_INCOME_CATEGORY",
    "TTLCache",
    "cache_key",
]
