"""Block only confident spam or gibberish."""

from __future__ import annotations

from .models import Classification, ClassificationResult, Decision

BLOCKABLE = frozenset({Classification.SPAM, Classification.GIBBERISH})


def decide(result: ClassificationResult | None, threshold: float) -> Decision:
    """Return :attr:`Decision.BLOCK` iff *result* is SPAM/GIBBERISH at or above *threshold*.

    Everything else is forwarded, including SALES pitches and low-confidence
    spam: the recipient can still discard those by hand, while a wrongly
    blocked message is lost.  ``None`` (classification disabled) always
    forwards.
    """
    if result is None:
        return Decision.FORWARD
    if result.classification in BLOCKABLE and result.confidence >= threshold:
        return Decision.BLOCK
    return Decision.FORWARD
