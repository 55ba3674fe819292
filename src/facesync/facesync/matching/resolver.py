from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Sequence

import numpy as np

from ..core.constants import DEFAULT_MATCH_THRESHOLD
from .model import NO_MATCH, FaceTemplate, MatchResult
from .normalizer import LandmarkNormalizer
from .similarity import cosine_similarity

logger = logging.getLogger(__name__)

Scorer = Callable[[Sequence[float], Sequence[float]], float]


class IdentityResolver:
    """Pick the enrolled template closest to a live landmark sample.

    Templates are scanned in ascending ``template_id``; a candidate replaces
    the current best only on a strictly higher score, so on ties the lowest
    id wins.
    """

    def __init__(
        self,
        normalizer: Optional[LandmarkNormalizer] = None,
        *,
        scorer: Scorer = cosine_similarity,
        threshold: float = DEFAULT_MATCH_THRESHOLD,
    ):
        self._normalizer = normalizer or LandmarkNormalizer()
        self._scorer = scorer
        self._threshold = float(threshold)

    @property
    def threshold(self) -> float:
        return self._threshold

    def resolve(
        self,
        sample: Sequence[float],
        templates: Iterable[FaceTemplate],
        threshold: Optional[float] = None,
    ) -> MatchResult:
        limit = self._threshold if threshold is None else float(threshold)
        ordered = sorted(templates, key=lambda t: t.template_id)
        if not ordered:
            return NO_MATCH

        live = self._normalizer.normalize(sample)

        best: Optional[FaceTemplate] = None
        best_score = -np.inf
        for template in ordered:
            score = self._scorer(template.vector, live)
            if score > best_score:
                best, best_score = template, score

        if best is None or best_score < limit:
            logger.debug("No match (best=%.4f, threshold=%.2f, templates=%d)", best_score, limit, len(ordered))
            return NO_MATCH

        return MatchResult(owner_id=best.owner_id, template_id=best.template_id, score=float(best_score))
