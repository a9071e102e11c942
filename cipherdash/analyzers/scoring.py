"""
Strength Scorer
================

Heuristic, additive strength score (0-100) for a plaintext/ciphertext
pair and the pipeline that produced it.

The score is built in a fixed order:

1. Base credibility score (60).
2. Entropy gain, ``min(20, max(0, H(ct) - H(pt)) * 8)``.
3. Diffusion, ``min(12, pct_changed * 0.12)``.
4. Key space, ``min(8, sum(log2(multiplicity)))`` over the nodes.
5. Independent penalties: identity, exact reversal, low diffusion,
   suspiciously uniform letter frequencies, empty pipeline.
6. Clamp to ``[0, 100]``.

Every cap and weight is read from :class:`dashcore.config.ScoringConfig`.
The score is meant to give monotonic, explainable feedback. It says
nothing about real cryptanalytic difficulty.

References:
    - Shannon, C. E. (1949). Communication Theory of Secrecy Systems.
      Bell System Technical Journal, 28(4), 656-715 (confusion and
      diffusion).
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Iterable

from dashcore.config import ScoringConfig
from dashcore.math_utils import dispersion_ratio, letter_counts, shannon_entropy
from cipherdash.core.models import NodeKind, ScoreBreakdown

if TYPE_CHECKING:
    from cipherdash.core.pipeline import CipherPipeline


# Per-node key multiplicities shared with the brute-force estimator.
# Polygon and any future kind fall back to DEFAULT_MULTIPLICITY.
KEY_MULTIPLICITY: dict[NodeKind, int] = {
    NodeKind.SHIFT: 26,
    NodeKind.MULTIPLY: 12,
    NodeKind.REVERSE: 2,
}
DEFAULT_MULTIPLICITY: int = 2


def node_multiplicity(node: Any) -> int:
    """Number of distinct keys an attacker must try for *node*."""
    return KEY_MULTIPLICITY.get(getattr(node, "kind", None), DEFAULT_MULTIPLICITY)


# ===================================================================== #
#  Text measures
# ===================================================================== #


def percent_changed(plaintext: str, ciphertext: str, length_mismatch: float = 50.0) -> float:
    """Percentage (0-100) of same-index characters that differ.

    Strings of different length get the flat *length_mismatch* value;
    two empty strings count as unchanged.
    """
    if len(plaintext) != len(ciphertext):
        return length_mismatch
    if not plaintext:
        return 0.0
    changes = sum(1 for a, b in zip(plaintext, ciphertext) if a != b)
    return changes / len(plaintext) * 100.0


def frequency_skew(text: str) -> float:
    """Std/mean ratio (x100, capped at 100) of the uppercase letter counts.

    Low values mean a suspiciously flat distribution. Text without
    uppercase letters scores 100.
    """
    counts = letter_counts(text)
    if not counts:
        return 100.0
    return min(100.0, dispersion_ratio(list(counts.values())))


def key_space_bits(nodes: Iterable[Any]) -> float:
    """Sum of ``log2(multiplicity)`` over *nodes*."""
    return sum(math.log2(node_multiplicity(node)) for node in nodes)


# ===================================================================== #
#  Scorer
# ===================================================================== #


class StrengthScorer:
    """Scores a transformation and turns the score into feedback.

    Usage::

        scorer = StrengthScorer()
        breakdown = scorer.evaluate("HELLO", "KHOOR", pipeline)
        scorer.check_pass(breakdown.final)
        scorer.feedback(breakdown)
    """

    # Feedback bands on the final score
    EXCELLENT: float = 80.0
    GOOD: float = 60.0
    WEAK: float = 40.0

    # Insight thresholds on individual terms
    HIGH_ENTROPY: float = 15.0
    GOOD_DIFFUSION: float = 10.0
    LARGE_KEY_SPACE: float = 5.0

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.config = config or ScoringConfig()

    # ------------------------------------------------------------------ #
    #  Scoring
    # ------------------------------------------------------------------ #

    def evaluate(
        self, plaintext: str, ciphertext: str, pipeline: CipherPipeline
    ) -> ScoreBreakdown:
        """Compute the full :class:`ScoreBreakdown`.

        Args:
            plaintext: Text fed into the pipeline.
            ciphertext: Text the pipeline produced.
            pipeline: The pipeline itself, read for its node kinds only.

        Returns:
            Breakdown with every term, the clamped final score and one
            reason per triggered penalty.
        """
        cfg = self.config

        entropy_gain = max(0.0, shannon_entropy(ciphertext) - shannon_entropy(plaintext))
        entropy = min(cfg.entropy_cap, entropy_gain * cfg.entropy_weight)

        changed = percent_changed(plaintext, ciphertext, cfg.length_mismatch_diffusion)
        diffusion = min(cfg.diffusion_cap, changed * cfg.diffusion_weight)

        key_space = min(cfg.key_space_cap, key_space_bits(pipeline.nodes))

        terms = self.penalty_terms(plaintext, ciphertext, pipeline)
        penalties = -sum(amount for amount, _ in terms)

        total = cfg.base_score + entropy + diffusion + key_space + penalties
        return ScoreBreakdown(
            base=cfg.base_score,
            entropy=entropy,
            diffusion=diffusion,
            key_space=key_space,
            penalties=penalties,
            final=max(0.0, min(100.0, total)),
            reasons=[f"{reason} (-{amount:g})" for amount, reason in terms],
        )

    def penalty_terms(
        self, plaintext: str, ciphertext: str, pipeline: CipherPipeline
    ) -> list[tuple[float, str]]:
        """Every triggered penalty as ``(magnitude, reason)``, in evaluation order.

        The penalties are independent; any combination may fire.
        """
        cfg = self.config
        changed = percent_changed(plaintext, ciphertext, cfg.length_mismatch_diffusion)
        terms: list[tuple[float, str]] = []

        if ciphertext == plaintext:
            terms.append((cfg.identical_penalty, "Ciphertext identical to plaintext"))

        if ciphertext == plaintext[::-1]:
            terms.append((cfg.reversal_penalty, "Ciphertext is a simple reversal"))

        if changed < cfg.low_diffusion_threshold:
            terms.append((
                cfg.low_diffusion_penalty,
                f"Low diffusion: {changed:.1f}% of characters changed",
            ))

        if frequency_skew(ciphertext) < cfg.uniformity_threshold:
            terms.append((cfg.uniform_frequency_penalty, "Suspiciously uniform letter frequencies"))

        if pipeline.is_empty():
            terms.append((cfg.empty_pipeline_penalty, "Empty pipeline: no transformation applied"))

        return terms

    # ------------------------------------------------------------------ #
    #  Pass / feedback
    # ------------------------------------------------------------------ #

    def check_pass(self, score: float, threshold: float | None = None) -> bool:
        """``score >= threshold``; the threshold defaults to the configured pass mark."""
        if threshold is None:
            threshold = self.config.pass_threshold
        return score >= threshold

    def feedback(self, breakdown: ScoreBreakdown) -> str:
        """One-line verdict on *breakdown* plus insights on strong terms."""
        score = breakdown.final
        if score >= self.EXCELLENT:
            text = "Excellent cipher! Very strong encryption."
        elif score >= self.GOOD:
            text = "Good signal encryption. Ready to transmit!"
        elif score >= self.WEAK:
            text = "Weak cipher. Vulnerable to frequency analysis."
        else:
            text = "Critical weakness. Signal will be intercepted."

        if breakdown.entropy > self.HIGH_ENTROPY:
            text += " | High entropy detected."
        if breakdown.diffusion > self.GOOD_DIFFUSION:
            text += " | Good diffusion."
        if breakdown.key_space > self.LARGE_KEY_SPACE:
            text += " | Large key space."
        return text

    @staticmethod
    def dynamic_threshold(pipeline: CipherPipeline) -> float:
        """Pass mark scaled by the polygon nodes in *pipeline*.

        Starts at 15. Each polygon adds 5, plus ``0.8 * sides`` for 3-8
        sides or a flat 10 above 8, plus 8 for side variance above 3 (4
        above 1.5), plus 2 when convex. The result is clamped to
        ``[10, 35]``.
        """
        threshold = 15.0
        for node in pipeline.nodes:
            if node.kind is not NodeKind.POLYGON:
                continue

            extra = 5.0
            sides = node.num_sides
            if 3 <= sides <= 8:
                extra += sides * 0.8
            elif sides > 8:
                extra += 10.0

            if node.side_variance > 3:
                extra += 8.0
            elif node.side_variance > 1.5:
                extra += 4.0

            if node.convex:
                extra += 2.0

            threshold += extra

        return max(10.0, min(35.0, threshold))
