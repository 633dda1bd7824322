"""Domain classification of parsed points."""

from econorm.classification.taxonomy import CLASSIFICATION_RULES, Rule, classify

__all__ = ["CLASSIFICATION_RULES", "Rule", "classify"]
