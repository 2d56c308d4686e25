"""
Category Mapper Module

Deterministic keyword mapping of transaction descriptions to the system's
category vocabulary. A low-confidence result marks a transaction as a
candidate for AI categorization.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .models import Confidence, Direction

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = {
    Direction.EXPENSE: "Прочие расходы",
    Direction.INCOME: "Прочие доходы",
}

RULES_FILE = "category_rules.yaml"


@dataclass
class CategorizationResult:
    """Category name with the confidence tier that produced it."""

    name: str
    confidence: Confidence

    @property
    def is_confident(self) -> bool:
        return self.confidence == Confidence.HIGH


@dataclass
class CategoryRule:
    """Keyword set mapped to a single category."""

    category: str
    keywords: list[str] = field(default_factory=list)

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


class CategoryMapper:
    """Maps descriptions to categories with ordered, direction-specific rules."""

    def __init__(self, config_dir: Path | str | None = None):
        """Initialize the mapper.

        Args:
            config_dir: Directory holding category_rules.yaml
        """
        self.config_dir = (
            Path(config_dir) if config_dir else Path(__file__).parent.parent.parent / "config"
        )
        self._defaults: dict[Direction, str] = dict(DEFAULT_CATEGORIES)
        self._categories: dict[Direction, list[str]] = {d: [] for d in Direction}
        self._rules: dict[Direction, list[CategoryRule]] = {d: [] for d in Direction}
        self._aliases: dict[Direction, dict[str, str]] = {d: {} for d in Direction}
        self._load_rules()

    def _load_rules(self) -> None:
        """Load rules, vocabulary and bank label aliases from YAML."""
        rules_file = self.config_dir / RULES_FILE

        if not rules_file.exists():
            logger.warning(f"Category rules file not found: {rules_file}")
            self._ensure_defaults()
            return

        try:
            with open(rules_file, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load category rules: {e}")
            self._ensure_defaults()
            return

        for direction in Direction:
            key = direction.value

            default = (data.get("defaults") or {}).get(key)
            if default:
                self._defaults[direction] = default

            self._categories[direction] = list((data.get("categories") or {}).get(key) or [])

            self._rules[direction] = [
                CategoryRule(
                    category=rule["category"],
                    keywords=[str(k).lower() for k in rule.get("keywords", [])],
                )
                for rule in (data.get("rules") or {}).get(key) or []
            ]

            aliases = (data.get("bank_category_aliases") or {}).get(key) or {}
            self._aliases[direction] = {
                str(label).strip().lower(): target for label, target in aliases.items()
            }

        self._ensure_defaults()

        logger.info(
            f"Loaded {sum(len(r) for r in self._rules.values())} category rules, "
            f"{sum(len(a) for a in self._aliases.values())} bank label aliases"
        )

    def _ensure_defaults(self) -> None:
        # The default category is always part of the vocabulary
        for direction, default in self._defaults.items():
            if default not in self._categories[direction]:
                self._categories[direction].append(default)

    def default_category(self, direction: Direction) -> str:
        return self._defaults[Direction(direction)]

    def known_categories(self, direction: Direction) -> list[str]:
        """Category vocabulary for a direction, default included."""
        return list(self._categories[Direction(direction)])

    def is_known(self, name: str, direction: Direction) -> bool:
        return name in self._categories[Direction(direction)]

    def map_category(
        self,
        description: str,
        direction: Direction,
        source_category: str | None = None,
    ) -> CategorizationResult:
        """Map a description to a category.

        Args:
            description: Transaction description
            direction: INCOME or EXPENSE
            source_category: Label printed by the bank, used only when no
                keyword rule matches

        Returns:
            CategorizationResult; confidence is LOW when the default was used
        """
        direction = Direction(direction)
        text = (description or "").lower()

        for rule in self._rules[direction]:
            if rule.matches(text):
                return CategorizationResult(name=rule.category, confidence=Confidence.HIGH)

        if source_category:
            alias = self._aliases[direction].get(source_category.strip().lower())
            if alias and alias != self._defaults[direction]:
                return CategorizationResult(name=alias, confidence=Confidence.HIGH)

        return CategorizationResult(name=self._defaults[direction], confidence=Confidence.LOW)
