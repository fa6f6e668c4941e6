"""Candidate ranking shared by the heuristic strategies.

The style, structural and text-proximity strategies all collect
``(price, score)`` pairs and pick a winner; they differ only in their
weight tables and in how repeated sightings of one price combine.
"""

import operator
from decimal import Decimal
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

Aggregate = Callable[[float, float], float]

SUM: Aggregate = operator.add
MAX: Aggregate = max


class ScoreBoard:
    """Accumulates scores per distinct price.

    Ties on the final score go to the price seen first.
    """

    def __init__(self, aggregate: Aggregate = SUM):
        self._aggregate = aggregate
        self._scores: Dict[Decimal, float] = {}

    def add(self, value: Decimal, score: float) -> None:
        if value in self._scores:
            self._scores[value] = self._aggregate(self._scores[value], score)
        else:
            self._scores[value] = score

    def __len__(self) -> int:
        return len(self._scores)

    def items(self) -> Iterable[Tuple[Decimal, float]]:
        return self._scores.items()

    def best(self) -> Optional[Decimal]:
        best_value: Optional[Decimal] = None
        best_score: Optional[float] = None
        for value, score in self._scores.items():
            if best_score is None or score > best_score:
                best_value, best_score = value, score
        return best_value


def keyword_score(text: str, weights: Mapping[Tuple[str, ...], int]) -> int:
    """Sum the weight of every keyword group with at least one hit in ``text``."""
    text = (text or "").lower()
    return sum(weight for keywords, weight in weights.items() if any(k in text for k in keywords))
