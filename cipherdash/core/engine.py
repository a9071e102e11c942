"""
CipherDash Engine
==================

Central orchestrator for the CipherDash toolkit. The CipherDashEngine
class builds pipelines from node specifications, runs the strength
scorer and the attack simulator, and returns unified ScanResult objects
compatible with the shared model layer.

Architecture follows the Facade pattern (Gamma et al., 1994), providing
a simplified interface over the geometry analyzer, the scorer and the
attack simulator. Every operation is synchronous: the core performs no
I/O and has nothing to wait on.

References:
    - Gamma, E., Helm, R., Johnson, R., & Vlissides, J. (1994).
      Design Patterns: Elements of Reusable Object-Oriented Software.
      Addison-Wesley.
    - Shannon, C. E. (1949). Communication Theory of Secrecy Systems.
"""

from __future__ import annotations

import time
from typing import Any, Iterable, Optional, Union

from dashcore.config import DashConfig
from dashcore.logger import DashLogger
from dashcore.models import Finding, Risk, ScanResult, Severity

from cipherdash.analyzers.attacks import AttackSimulator
from cipherdash.analyzers.geometry import PolygonAnalyzer
from cipherdash.analyzers.scoring import StrengthScorer
from cipherdash.core.models import EvaluationReport
from cipherdash.core.nodes import CipherNode, InvalidPolygonError
from cipherdash.core.pipeline import CipherPipeline
from cipherdash.parsers.node_parser import NodeSpecError, parse_node_spec, parse_vertices

NodeSpec = Union[str, CipherNode]

TOOL_NAME = "cipherdash"


class CipherDashEngine:
    """Orchestrates every CipherDash operation.

    Usage::

        engine = CipherDashEngine()
        pipeline = engine.build_pipeline(["shift:3", "reverse"])
        report = engine.assess("HELLO", pipeline)
        result = engine.evaluate("HELLO", ["polygon:0,0;60,80;140,0;60,-80"])
        result = engine.analyze_polygon("0,0; 40,0; 20,30")

    Attributes:
        config: CipherDash configuration instance.
        logger: Logger for the engine.
    """

    def __init__(self, config: Optional[DashConfig] = None) -> None:
        self.config = config or DashConfig()
        settings = self.config.global_settings
        self.logger = DashLogger(
            "cipherdash.engine",
            log_level="DEBUG" if settings.debug else settings.log_level,
            log_file=settings.log_file or None,
            json_logs=settings.log_json,
        )

        geometry = self.config.geometry
        self._polygon_analyzer = PolygonAnalyzer(
            min_vertices=geometry.min_vertices,
            max_vertices=geometry.max_vertices,
            min_distance=geometry.min_vertex_distance,
            min_area=geometry.min_area,
        )
        self._scorer = StrengthScorer(self.config.scoring)
        self._attack_simulator = AttackSimulator(self.config.attacks)

    @property
    def polygon_analyzer(self) -> PolygonAnalyzer:
        return self._polygon_analyzer

    @property
    def scorer(self) -> StrengthScorer:
        return self._scorer

    @property
    def attack_simulator(self) -> AttackSimulator:
        return self._attack_simulator

    # ------------------------------------------------------------------ #
    #  Pipeline construction
    # ------------------------------------------------------------------ #

    def build_pipeline(self, specs: Iterable[NodeSpec]) -> CipherPipeline:
        """Build a pipeline from node specs and/or ready-made nodes.

        String specs are parsed with :func:`parse_node_spec`; polygon
        vertices are validated against the configured thresholds.

        Raises:
            NodeSpecError: For an unparseable spec.
            InvalidPolygonError: For a polygon that fails validation.
        """
        pipeline = CipherPipeline()
        for spec in specs:
            if isinstance(spec, CipherNode):
                pipeline.add_node(spec)
            else:
                pipeline.add_node(parse_node_spec(spec, self._polygon_analyzer))
        self.logger.debug(f"Built pipeline: {pipeline.describe()}")
        return pipeline

    def _as_pipeline(self, pipeline: CipherPipeline | Iterable[NodeSpec]) -> CipherPipeline:
        if isinstance(pipeline, CipherPipeline):
            return pipeline
        return self.build_pipeline(pipeline)

    # ------------------------------------------------------------------ #
    #  Encryption and assessment
    # ------------------------------------------------------------------ #

    def encrypt(self, plaintext: str, pipeline: CipherPipeline | Iterable[NodeSpec]) -> str:
        """Run *plaintext* through *pipeline*."""
        return self._as_pipeline(pipeline).encrypt(plaintext)

    def assess(
        self,
        plaintext: str,
        pipeline: CipherPipeline | Iterable[NodeSpec],
        threshold: Optional[float] = None,
    ) -> EvaluationReport:
        """Encrypt, score and attack *plaintext* in one go.

        Args:
            plaintext: Text to encrypt.
            pipeline: A pipeline or node specs to build one from.
            threshold: Pass mark; defaults to the configured one.

        Returns:
            EvaluationReport with ciphertext, score breakdown, attack
            report, pattern warnings and pass/fail verdict.
        """
        pipeline = self._as_pipeline(pipeline)
        if threshold is None:
            threshold = self.config.scoring.pass_threshold

        with self.logger.operation("assess"):
            ciphertext = pipeline.encrypt(plaintext)
            breakdown = self._scorer.evaluate(plaintext, ciphertext, pipeline)
            with self.logger.timed("attack simulation"):
                attacks = self._attack_simulator.run_attacks(plaintext, ciphertext, pipeline)
            patterns = self._attack_simulator.detect_patterns(ciphertext)

        return EvaluationReport(
            plaintext=plaintext,
            ciphertext=ciphertext,
            pipeline=pipeline.describe(),
            breakdown=breakdown,
            attacks=attacks,
            patterns=patterns,
            threshold=threshold,
            dynamic_threshold=self._scorer.dynamic_threshold(pipeline),
            passed=self._scorer.check_pass(breakdown.final, threshold),
            feedback=self._scorer.feedback(breakdown),
        )

    def evaluate(
        self,
        plaintext: str,
        pipeline: CipherPipeline | Iterable[NodeSpec],
        threshold: Optional[float] = None,
    ) -> ScanResult:
        """Assess a cipher and report it as findings.

        One finding is produced per triggered penalty, per successful
        attack and per pattern warning, plus an informational verdict.
        The overall risk is the score's complement (``100 - final``).
        Invalid specs and polygons are recorded as findings rather than
        raised.
        """
        start_time = time.monotonic()
        result = ScanResult(tool_name=TOOL_NAME, target=plaintext or "<empty>")
        self.logger.info(f"Starting cipher evaluation: {len(plaintext)} characters")

        try:
            built = self._as_pipeline(pipeline)
            report = self.assess(plaintext, built, threshold)
            result.metadata = report.model_dump()

            breakdown = report.breakdown
            result.add_finding(Finding(
                title="Cipher Strength Score",
                description=(
                    f"Score {breakdown.final:.1f}/100 against a pass mark of "
                    f"{report.threshold:g}. {report.feedback}"
                ),
                severity=Severity.INFO,
                evidence={
                    "ciphertext": report.ciphertext,
                    "base": breakdown.base,
                    "entropy": breakdown.entropy,
                    "diffusion": breakdown.diffusion,
                    "key_space": breakdown.key_space,
                    "penalties": breakdown.penalties,
                    "final": breakdown.final,
                },
            ))

            for amount, reason in self._scorer.penalty_terms(plaintext, report.ciphertext, built):
                result.add_finding(Finding(
                    title="Scoring Penalty",
                    description=f"{reason}: {amount:g} points deducted.",
                    severity=self._penalty_severity(amount),
                    recommendation="Add nodes that change more characters, such as Multiply or a convex Polygon.",
                ))

            for attack in report.attacks.attacks:
                if attack.penalty <= 0:
                    continue
                result.add_finding(Finding(
                    title=f"Attack Succeeded: {attack.name}",
                    description=f"{attack.description} (-{attack.penalty} points)",
                    severity=self._penalty_severity(attack.penalty),
                    evidence=attack.details,
                    recommendation="Chain more keyed nodes to enlarge the key space.",
                ))

            for warning in report.patterns:
                result.add_finding(Finding(
                    title="Pattern Weakness",
                    description=warning,
                    severity=Severity.LOW,
                    evidence={"ciphertext": report.ciphertext},
                ))

            result.risk = Risk(
                score=100.0 - breakdown.final,
                factors=breakdown.reasons + [report.attacks.summary],
            )
            verdict = "PASS" if report.passed else "FAIL"
            result.summary = (
                f"Score {breakdown.final:.1f}/100 ({verdict} at {report.threshold:g}). "
                f"{report.attacks.summary}"
            )

        except (NodeSpecError, InvalidPolygonError) as exc:
            self.logger.error(f"Invalid pipeline: {exc}")
            result.add_finding(Finding(
                title="Invalid Pipeline",
                description=f"The pipeline could not be built: {exc}",
                severity=Severity.HIGH,
            ))
            result.summary = f"Error: invalid pipeline ({exc})"
        except Exception as exc:
            self.logger.exception(f"Cipher evaluation failed: {exc}")
            result.add_finding(Finding(
                title="Analysis Error",
                description=f"Unexpected error during cipher evaluation: {exc}",
                severity=Severity.MEDIUM,
            ))
            result.summary = f"Error during cipher evaluation: {exc}"

        elapsed = time.monotonic() - start_time
        result.finalize(result.summary)
        self.logger.info(f"Cipher evaluation completed in {elapsed:.3f}s")
        return result

    # ------------------------------------------------------------------ #
    #  Polygon analysis
    # ------------------------------------------------------------------ #

    def analyze_polygon(self, vertices: Union[str, Iterable[Any]]) -> ScanResult:
        """Validate a vertex list and describe the key it would produce.

        *vertices* is either vertex-grammar text (``"0,0; 40,0; 20,30"``)
        or an iterable of points, pairs or ``{"x", "y"}`` mappings.
        """
        start_time = time.monotonic()
        target = vertices if isinstance(vertices, str) else "<vertex list>"
        result = ScanResult(tool_name=TOOL_NAME, target=target or "<empty>")
        self.logger.info(f"Starting polygon analysis: {target}")

        try:
            points = parse_vertices(vertices) if isinstance(vertices, str) else list(vertices)
            validation = self._polygon_analyzer.validate(points)
            analysis = self._polygon_analyzer.analyze(points)
            result.metadata = {
                "validation": validation.model_dump(),
                "analysis": analysis.model_dump(),
            }

            if validation.valid:
                stage_two = (
                    f"then multiply by {analysis.multiply_key}"
                    if analysis.multiply_key is not None
                    else "with no multiply stage"
                )
                result.add_finding(Finding(
                    title="Polygon Accepted",
                    description=(
                        f"{analysis.vertices}-gon, area {analysis.area:.1f}: "
                        f"shift by {analysis.shift_key} {stage_two}."
                    ),
                    severity=Severity.INFO,
                    evidence={"notes": analysis.notes},
                ))
                if analysis.variance > PolygonAnalyzer.HIGH_IRREGULARITY:
                    result.add_finding(Finding(
                        title="Irregular Shape",
                        description=f"Side-length deviation {analysis.variance:.2f} is high.",
                        severity=Severity.LOW,
                        recommendation="Irregular shapes are unpredictable but may reduce entropy.",
                    ))
                result.summary = (
                    f"Valid {analysis.vertices}-gon "
                    f"({'convex' if analysis.convex else 'concave'}, "
                    f"variance {analysis.variance:.1f})"
                )
            else:
                result.add_finding(Finding(
                    title="Invalid Polygon",
                    description=validation.error,
                    severity=Severity.MEDIUM,
                    evidence={"reason": validation.reason.value if validation.reason else ""},
                    recommendation="Redraw the shape with well-separated vertices.",
                ))
                result.summary = f"Invalid polygon: {validation.error}"

        except NodeSpecError as exc:
            self.logger.error(f"Invalid vertex list: {exc}")
            result.add_finding(Finding(
                title="Invalid Vertex List",
                description=str(exc),
                severity=Severity.HIGH,
            ))
            result.summary = f"Error: {exc}"
        except Exception as exc:
            self.logger.exception(f"Polygon analysis failed: {exc}")
            result.add_finding(Finding(
                title="Analysis Error",
                description=f"Unexpected error during polygon analysis: {exc}",
                severity=Severity.MEDIUM,
            ))
            result.summary = f"Error during polygon analysis: {exc}"

        elapsed = time.monotonic() - start_time
        result.finalize(result.summary)
        self.logger.info(f"Polygon analysis completed in {elapsed:.3f}s")
        return result

    # ------------------------------------------------------------------ #
    #  Severity mapping
    # ------------------------------------------------------------------ #

    @staticmethod
    def _penalty_severity(amount: float) -> Severity:
        if amount >= 30:
            return Severity.HIGH
        if amount >= 15:
            return Severity.MEDIUM
        return Severity.LOW
