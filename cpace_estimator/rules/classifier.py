from __future__ import annotations

import re

from ..models.eligibility import Classification, EligibilityCategory, PaceEligibility
from .eligibility import DEFAULT_CONFIG, ClassifierConfig

"""Keyword rule engine assigning an eligibility category to a description.

Algorithm:
1. Any not_eligible keyword of sufficient length in the text -> not_eligible (0.9)
2. Exclusion triggers remove categories from the candidate list
3. Each remaining category (priority order) scores its keywords:
   substring hit = 2 x len, whole-word hit adds 1 x len
4. Strictly highest score wins (ties keep the earlier category)
5. confidence = min(score / confidence_scale, 1); no hit -> not_eligible (0)
"""

__all__ = [
    "EligibilityClassifier",
    "default_classifier",
    "classify_line_item",
    "get_eligibility_info",
    "calculate_eligible_amount",
]


class EligibilityClassifier:
    """Stateless classifier over an immutable ClassifierConfig.

    Safe to share between threads; the only per-instance data are the
    precompiled word-boundary patterns derived from the config.
    """

    def __init__(self, config: ClassifierConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        # ASCII word boundaries, case-insensitive against the original text
        self._word_patterns: dict[str, re.Pattern[str]] = {
            kw: re.compile(rf"\b{re.escape(kw)}\b", re.IGNORECASE | re.ASCII)
            for keywords in config.keywords.values()
            for kw in keywords
        }
        self._short_circuit = tuple(
            kw.lower()
            for kw in config.keywords.get(EligibilityCategory.NOT_ELIGIBLE, ())
            if len(kw) >= config.short_circuit_min_length
        )

    def excluded_categories(self, description: str) -> set[EligibilityCategory]:
        lower = description.lower()
        excluded: set[EligibilityCategory] = set()
        for trigger, categories in self.config.exclusion_rules:
            if trigger in lower:
                excluded.update(categories)
        return excluded

    def score(self, description: str, category: EligibilityCategory) -> int:
        lower = description.lower()
        total = 0
        for kw in self.config.keywords.get(category, ()):
            if kw.lower() in lower:
                total += len(kw) * 2
                if self._word_patterns[kw].search(description):
                    total += len(kw)
        return total

    def classify(self, description: str) -> Classification:
        lower = description.lower()
        if any(kw in lower for kw in self._short_circuit):
            return Classification(EligibilityCategory.NOT_ELIGIBLE, self.config.short_circuit_confidence)

        excluded = self.excluded_categories(description)
        best_category = EligibilityCategory.NOT_ELIGIBLE
        best_score = 0
        for category in self.config.category_order:
            if category in excluded:
                continue
            s = self.score(description, category)
            if s > best_score:
                best_score = s
                best_category = category

        confidence = min(best_score / self.config.confidence_scale, 1.0) if best_score > 0 else 0.0
        return Classification(best_category, confidence)

    def eligibility_info(self, category: EligibilityCategory) -> PaceEligibility:
        return self.config.eligibility[category]

    def eligible_amount(self, amount: float, category: EligibilityCategory) -> float:
        return amount * self.config.eligibility[category].percentage


default_classifier = EligibilityClassifier()


def classify_line_item(description: str) -> Classification:
    return default_classifier.classify(description)


def get_eligibility_info(category: EligibilityCategory) -> PaceEligibility:
    return default_classifier.eligibility_info(category)


def calculate_eligible_amount(amount: float, category: EligibilityCategory) -> float:
    return default_classifier.eligible_amount(amount, category)
