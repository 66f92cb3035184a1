"""Voice pipeline: transcript understanding and batch execution of built actions."""

from .executor import DomainServices, execute_actions
from .nutrition import NutritionEnricher
from .parser import parse_transcript

__all__ = [
    "DomainServices",
    "NutritionEnricher",
    "execute_actions",
    "parse_transcript",
]
