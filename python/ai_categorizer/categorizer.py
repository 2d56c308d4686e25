"""
AI Categorizer Module

Fallback categorization for transactions the keyword mapper could not place.
Results are cached, uncached descriptions are sent in batches to a single
active provider, and every failure degrades to the default category.
"""

import logging

from statement_parser.errors import ProviderCallFailed, ProviderUnavailable

from .cache import TTLCache, cache_key
from .prompts import BatchItem
from .providers import AIProvider, AnthropicProvider, OpenAIProvider
from .vocabulary import CategoryVocabulary

logger = logging.getLogger(__name__)

# Shared across categorizer instances for the lifetime of the process
_shared_cache = TTLCache()


class AICategorizer:
    """Batching, caching front end over the configured AI providers."""

    BATCH_SIZE = 100

    def __init__(
        self,
        providers: list[AIProvider] | None = None,
        preferred: str = "anthropic",
        cache: TTLCache | None = None,
        vocabulary: CategoryVocabulary | None = None,
    ):
        """Initialize the categorizer.

        Args:
            providers: Candidate providers in fallback order
            preferred: Name of the provider to try first
            cache: Result cache; the process-wide cache when None
            vocabulary: Default vocabulary when a call does not pass one
        """
        self.providers = providers or []
        self.preferred = (preferred or "").lower()
        self.cache = cache if cache is not None else _shared_cache
        self.vocabulary = vocabulary or CategoryVocabulary()

    @classmethod
    def from_settings(cls, settings, vocabulary: CategoryVocabulary | None = None) -> "AICategorizer":
        """Build providers from ImportSettings."""
        providers = [
            AnthropicProvider(
                api_key=settings.anthropic_api_key,
                model=settings.anthropic_model,
                timeout=settings.ai_timeout,
            ),
            OpenAIProvider(
                api_key=settings.openai_api_key,
                model=settings.openai_model,
                timeout=settings.ai_timeout,
            ),
        ]
        return cls(providers=providers, preferred=settings.ai_provider, vocabulary=vocabulary)

    def candidates(self) -> list[AIProvider]:
        """Providers in try order: the preferred one first, then the rest."""
        return sorted(self.providers, key=lambda p: p.name != self.preferred)

    def active_provider(self) -> AIProvider | None:
        for provider in self.candidates():
            if provider.is_available():
                return provider
        return None

    def is_available(self) -> bool:
        return self.active_provider() is not None

    def categorize_transactions(
        self,
        transactions: list,
        vocabulary: CategoryVocabulary | None = None,
    ) -> dict[str, str]:
        """Categorize transactions by description.

        Args:
            transactions: Objects with direction and description attributes
            vocabulary: Allowed categories; the instance vocabulary when None

        Returns:
            Mapping of description to a category from the vocabulary
        """
        vocabulary = vocabulary or self.vocabulary
        result: dict[str, str] = {}
        uncached: dict[str, BatchItem] = {}
        # Every spelling of a description sharing one cache key
        spellings: dict[str, list[str]] = {}

        for txn in transactions:
            key = cache_key(txn.direction, txn.description)
            cached = self.cache.get(key)

            # A cached category is only reused while it is still in the vocabulary
            if cached and vocabulary.is_valid(cached, txn.direction):
                result[txn.description] = cached
                continue

            if key not in uncached:
                uncached[key] = BatchItem(
                    id=len(uncached),
                    direction=txn.direction,
                    description=txn.description,
                )
            spellings.setdefault(key, []).append(txn.description)

        if not uncached:
            logger.debug("All transactions found in cache")
            return result

        pending = list(uncached.values())

        provider = self.active_provider()
        if provider is None:
            logger.warning("No AI provider available, using defaults")
            answered = {}
        else:
            answered = self._process_batches(pending, provider, vocabulary)
            logger.info(
                f"Categorized {len(pending)} transactions via {provider.name} "
                f"({len(transactions) - len(pending)} from cache or repeated)"
            )

        for key, item in uncached.items():
            category = answered.get(str(item.id))
            if category:
                self.cache.set(key, category)
            else:
                category = vocabulary.default(item.direction)
            for description in spellings[key]:
                result[description] = category

        return result

    def _process_batches(
        self,
        items: list[BatchItem],
        provider: AIProvider,
        vocabulary: CategoryVocabulary,
    ) -> dict[str, str]:
        """Send items in batches; a failed batch contributes no answers."""
        answered: dict[str, str] = {}

        for start in range(0, len(items), self.BATCH_SIZE):
            batch = items[start:start + self.BATCH_SIZE]
            batch_number = start // self.BATCH_SIZE + 1

            try:
                answered.update(provider.categorize(batch, vocabulary))
            except (ProviderCallFailed, ProviderUnavailable) as e:
                logger.error(f"Batch {batch_number} failed: {e}")

        return answered
