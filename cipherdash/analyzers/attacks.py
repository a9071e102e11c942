"""
Attack Simulator
=================

Two toy cryptanalysis estimators plus a non-scoring pattern detector.

* **Frequency analysis** measures how far the most common ciphertext
  letter rises above a 15% baseline. A monoalphabetic cipher keeps the
  plaintext's letter distribution, so a dominant letter gives it away.
* **Brute force** multiplies the per-node key multiplicities (Shift 26,
  Multiply 12, everything else 2) and converts the product into an
  exhaustive-search time at a fixed test rate.
* **Pattern detection** flags repeated digrams and ascending runs of
  three character codes.

Penalties of the two attacks are summed and capped. The report's
``show_animation`` flag is a presentation hint only.

References:
    - Sinkov, A. (1966). Elementary Cryptanalysis: A Mathematical
      Approach. Mathematical Association of America.
    - Singh, S. (1999). The Code Book, ch. 1 (frequency analysis).
"""

from __future__ import annotations

import math
from collections import Counter
from typing import TYPE_CHECKING, Any

from dashcore.config import AttackConfig
from dashcore.math_utils import letter_counts, round_half_up
from cipherdash.analyzers.scoring import DEFAULT_MULTIPLICITY, node_multiplicity
from cipherdash.core.models import AttackReport, AttackResult, NodeKind

if TYPE_CHECKING:
    from cipherdash.core.pipeline import CipherPipeline


_COMPONENT_LABELS: dict[NodeKind, str] = {
    NodeKind.SHIFT: "Shift (26 keys)",
    NodeKind.MULTIPLY: "Multiply (12 keys)",
    NodeKind.REVERSE: "Reverse (2 states)",
    NodeKind.POLYGON: f"Polygon ({DEFAULT_MULTIPLICITY} states)",
}

# (upper bound in seconds, penalty); anything slower costs nothing
_BRUTE_FORCE_BUCKETS: tuple[tuple[float, int], ...] = (
    (1.0, 40),
    (60.0, 30),
    (3600.0, 15),
    (86400.0, 5),
)


def format_duration(seconds: float) -> str:
    """Human-readable exhaustive-search time: ``97ms``, ``3.4s``,
    ``2.0m``, ``1.5h`` or ``3.2 days``."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = seconds / 60
    if minutes < 60:
        return f"{minutes:.1f}m"
    hours = minutes / 60
    if hours < 24:
        return f"{hours:.1f}h"
    return f"{hours / 24:.1f} days"


def brute_force_penalty(seconds: float) -> int:
    for limit, penalty in _BRUTE_FORCE_BUCKETS:
        if seconds < limit:
            return penalty
    return 0


class AttackSimulator:
    """Runs the simulated attacks against a pipeline and its output.

    Usage::

        simulator = AttackSimulator()
        report = simulator.run_attacks(plaintext, ciphertext, pipeline)
        for attack in report.attacks:
            print(attack.name, attack.penalty, attack.description)
    """

    def __init__(self, config: AttackConfig | None = None) -> None:
        self.config = config or AttackConfig()

    # ------------------------------------------------------------------ #
    #  Individual attacks
    # ------------------------------------------------------------------ #

    def frequency_analysis(self, ciphertext: str) -> AttackResult:
        """Penalise a dominant uppercase letter in *ciphertext*.

        ``penalty = round(min(cap, max(0, top - baseline) * 100))`` with
        halves rounded up; no letters means no penalty.
        """
        counts = letter_counts(ciphertext)
        total = sum(counts.values())
        if total == 0:
            return AttackResult(
                name="Frequency Analysis",
                penalty=0,
                description="No letters to analyze.",
                details={"letters": 0},
            )

        top_letter, top_count = counts.most_common(1)[0]
        top_freq = top_count / total
        domination = max(0.0, top_freq - self.config.frequency_baseline)
        penalty = round_half_up(min(self.config.frequency_cap, domination * 100))

        return AttackResult(
            name="Frequency Analysis",
            penalty=penalty,
            description=f"Top letter frequency: {top_freq * 100:.1f}% - Pattern detected!",
            details={
                "letters": total,
                "top_letter": top_letter,
                "top_frequency": top_freq,
            },
        )

    def brute_force(self, pipeline: CipherPipeline) -> AttackResult:
        """Estimate exhaustive key search time over the pipeline's nodes."""
        combinations = math.prod(node_multiplicity(node) for node in pipeline.nodes)
        seconds = combinations / self.config.test_rate
        time_needed = format_duration(seconds)

        return AttackResult(
            name="Brute Force Estimation",
            penalty=brute_force_penalty(seconds),
            description=f"Brute force would take ~{time_needed}",
            details={
                "combinations": combinations,
                "seconds": seconds,
                "time_needed": time_needed,
                "components": [self._component_label(node) for node in pipeline.nodes],
            },
        )

    @staticmethod
    def _component_label(node: Any) -> str:
        kind = getattr(node, "kind", None)
        if kind in _COMPONENT_LABELS:
            return _COMPONENT_LABELS[kind]
        return f"{type(node).__name__} ({node_multiplicity(node)} states)"

    # ------------------------------------------------------------------ #
    #  Combined report
    # ------------------------------------------------------------------ #

    def run_attacks(
        self, plaintext: str, ciphertext: str, pipeline: CipherPipeline
    ) -> AttackReport:
        """Run every attack and combine the penalties.

        ``total_penalty`` is capped; the threat level in ``summary`` is
        the uncapped sum relative to the cap and may exceed 100%.
        *plaintext* is accepted for symmetry with the scorer; the
        current attacks only look at the ciphertext and the pipeline.
        """
        attacks = [
            self.frequency_analysis(ciphertext),
            self.brute_force(pipeline),
        ]
        raw_total = sum(attack.penalty for attack in attacks)
        cap = self.config.total_penalty_cap
        total = int(min(cap, raw_total))
        threat = raw_total / cap * 100 if cap else 0.0

        return AttackReport(
            attacks=attacks,
            total_penalty=total,
            summary=f"{len(attacks)} attacks simulated. Total threat level: {threat:.0f}%",
            show_animation=total > 0,
        )

    # ------------------------------------------------------------------ #
    #  Pattern detection (non-scoring)
    # ------------------------------------------------------------------ #

    @staticmethod
    def detect_patterns(ciphertext: str) -> list[str]:
        """Structural warnings about *ciphertext*.

        * Any two-character substring seen more than once (overlapping
          occurrences count) is reported as a digram weakness, listing
          every repeated pair in first-seen order.
        * The first run of three characters whose codes ascend by one
          (``ABC``, ``XYZ``, ``123``) is reported as a sequence weakness.
        """
        warnings: list[str] = []

        digrams = Counter(ciphertext[i:i + 2] for i in range(len(ciphertext) - 1))
        repeated = [digram for digram, count in digrams.items() if count > 1]
        if repeated:
            warnings.append(
                "Repeating letter pairs detected (digram weakness): " + ", ".join(repeated)
            )

        for i in range(len(ciphertext) - 2):
            a, b, c = (ord(ch) for ch in ciphertext[i:i + 3])
            if b == a + 1 and c == b + 1:
                warnings.append(
                    "Alphabetic sequence detected (structural weakness): "
                    + ciphertext[i:i + 3]
                )
                break

        return warnings
