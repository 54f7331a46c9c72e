"""
Decision Pipeline — telemetry in, governed GO / ITERATE / KILL out.

Stages:
    VALIDATING → INVALID (terminal error)
               | DERIVING_SIGNALS → RULE_CHECK
                 → MATCHED (terminal rule override, recommendations only)
                 | MODEL_SCORING → CONFIDENCE → TEMPORAL (∥ counterfactual)
                   → EXPLAIN → RECOMMEND → LEDGER → COMPLETE

The rule match is the only branch. Stages never retry; any stage failure
ends the run with a structured PipelineFailure. run() never raises.
"""

import asyncio
import time
from contextlib import contextmanager
from enum import StrEnum
from typing import Any, Iterator, Optional, Sequence, Union

import structlog

from launchsense.config import Settings, settings as default_settings
from launchsense.decisions.explanation import ExplanationBuilder
from launchsense.decisions.ledger import build_ledger_entry
from launchsense.decisions.recommendations import RecommendationGenerator
from launchsense.decisions.schemas import (
    ConfidenceLevel,
    DecisionSource,
    PipelineFailure,
    PipelineResult,
    PipelineSource,
)
from launchsense.engine.cohort import CohortComparator
from launchsense.engine.confidence import calculate_confidence
from launchsense.engine.counterfactual import CounterfactualSet, CounterfactualSimulator
from launchsense.engine.insights import InsightExtractor, Insights
from launchsense.engine.risk_model import RiskAssessment, RiskModel
from launchsense.engine.rules import RuleCheck, RuleOverrideEvaluator
from launchsense.engine.signals import DerivedSignals, SignalDeriver
from launchsense.engine.temporal import MomentumProfile, TemporalAnalyzer, TemporalProfile
from launchsense.exceptions import (
    ErrorCode,
    InvalidInputError,
    PipelineError,
    StoreUnavailableError,
)
from launchsense.observability.metrics import InMemoryMetricsRecorder, MetricsRecorder
from launchsense.pipeline.validator import validate_decision_input
from launchsense.schemas.telemetry import DecisionInput, HistoryRecord, risk_values
from launchsense.store.base import DataStore

logger = structlog.get_logger(__name__)


class PipelineStage(StrEnum):
    VALIDATING = "VALIDATING"
    INVALID = "INVALID"
    DERIVING_SIGNALS = "DERIVING_SIGNALS"
    RULE_CHECK = "RULE_CHECK"
    MATCHED = "MATCHED"
    MODEL_SCORING = "MODEL_SCORING"
    CONFIDENCE = "CONFIDENCE"
    TEMPORAL = "TEMPORAL"
    EXPLAIN = "EXPLAIN"
    RECOMMEND = "RECOMMEND"
    LEDGER = "LEDGER"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"


Outcome = Union[PipelineResult, PipelineFailure]


def rule_metrics(data: DecisionInput, signals: DerivedSignals) -> dict[str, float]:
    """Metrics offered to rules: raw counts plus every normalized signal."""
    metrics = {
        "early_quit_rate": 1.0 if data.early_quit else 0.0,
        "deaths": float(data.deaths),
        "restarts": float(data.restarts),
        "playtime": float(data.playtime),
        "sessions": float(len(data.sessions)),
    }
    metrics.update(signals.normalized)
    return metrics


class DecisionPipeline:
    """
    Production decision pipeline.

    Orchestrates: Validate → Signals/Insights → Rules → Risk Model → Confidence
    → Temporal ∥ Counterfactual → Explanation → Recommendations → Ledger
    """

    def __init__(
        self,
        signal_deriver: Optional[SignalDeriver] = None,
        insight_extractor: Optional[InsightExtractor] = None,
        rule_evaluator: Optional[RuleOverrideEvaluator] = None,
        risk_model: Optional[RiskModel] = None,
        temporal: Optional[TemporalAnalyzer] = None,
        cohort: Optional[CohortComparator] = None,
        counterfactual: Optional[CounterfactualSimulator] = None,
        explanation_builder: Optional[ExplanationBuilder] = None,
        recommendation_generator: Optional[RecommendationGenerator] = None,
        metrics: Optional[MetricsRecorder] = None,
        strict_rule_store: bool = False,
        history_limit: int = 20,
    ):
        self.signal_deriver = signal_deriver or SignalDeriver()
        self.insight_extractor = insight_extractor or InsightExtractor()
        self.rule_evaluator = rule_evaluator or RuleOverrideEvaluator()
        self.risk_model = risk_model or RiskModel()
        self.temporal = temporal or TemporalAnalyzer()
        self.cohort = cohort or CohortComparator()
        self.counterfactual = counterfactual or CounterfactualSimulator()
        self.explanation_builder = explanation_builder or ExplanationBuilder()
        self.recommendation_generator = recommendation_generator or RecommendationGenerator()
        self.metrics = metrics or MetricsRecorder()
        self.strict_rule_store = strict_rule_store
        self.history_limit = history_limit

    @classmethod
    def from_settings(
        cls,
        cfg: Optional[Settings] = None,
        metrics: Optional[MetricsRecorder] = None,
    ) -> "DecisionPipeline":
        cfg = cfg or default_settings
        return cls(
            risk_model=RiskModel(
                short_session_minutes=cfg.short_session_minutes,
                early_quit_rate_threshold=cfg.early_quit_rate_threshold,
                avg_deaths_threshold=cfg.avg_deaths_threshold,
                restart_rate_threshold=cfg.restart_rate_threshold,
                weights={
                    "short_sessions": cfg.weight_short_sessions,
                    "early_quit": cfg.weight_early_quit,
                    "difficulty": cfg.weight_difficulty,
                    "frustration": cfg.weight_frustration,
                },
                iterate_threshold=cfg.iterate_threshold,
                kill_threshold=cfg.kill_threshold,
            ),
            temporal=TemporalAnalyzer(
                min_points=cfg.temporal_min_points,
                trend_threshold=cfg.trend_threshold,
                shock_threshold=cfg.shock_threshold,
            ),
            metrics=metrics or InMemoryMetricsRecorder(slow_seconds=cfg.slow_pipeline_seconds),
            strict_rule_store=cfg.strict_rule_store,
            history_limit=cfg.history_limit,
        )

    @contextmanager
    def _stage(self, stages: list[str], stage: PipelineStage) -> Iterator[None]:
        stages.append(stage.value)
        started = time.perf_counter()
        try:
            yield
        finally:
            self.metrics.record_stage(stage.value, time.perf_counter() - started)

    async def run(
        self,
        raw_input: Any,
        store: DataStore,
        history: Optional[Sequence[HistoryRecord]] = None,
    ) -> Outcome:
        """
        Run the full pipeline for one telemetry record.

        Args:
            raw_input: Payload dict (or an already-validated DecisionInput)
            store: Rule/weight/history/ledger collaborator
            history: Past decisions, newest first. Fetched from the store
                when omitted.
        """
        started = time.perf_counter()
        stages: list[str] = []

        # ── 1. Validation ───────────────────────────────────────────
        with self._stage(stages, PipelineStage.VALIDATING):
            data, details = validate_decision_input(raw_input)

        if data is None:
            stages.append(PipelineStage.INVALID.value)
            err = InvalidInputError(details)
            self.metrics.record_error(err.code.value, time.perf_counter() - started)
            return PipelineFailure(error=err.code.value, details=err.details, stages=stages)

        try:
            outcome = await self._run_validated(data, store, history, stages)
        except StoreUnavailableError as exc:
            outcome = self._failure(exc.code, exc.details, stages)
        except Exception as exc:
            stage = stages[-1] if stages else PipelineStage.VALIDATING.value
            err = PipelineError(stage, str(exc))
            logger.error(
                "decision_pipeline_failed",
                game_id=data.game_id,
                stage=stage,
                error=str(exc),
                exc_info=True,
            )
            outcome = self._failure(err.code, err.details, stages)

        duration = time.perf_counter() - started
        if isinstance(outcome, PipelineFailure):
            self.metrics.record_error(outcome.error, duration)
        else:
            self.metrics.record_decision(outcome.source.value, outcome.decision.value, duration)
        return outcome

    async def _run_validated(
        self,
        data: DecisionInput,
        store: DataStore,
        history: Optional[Sequence[HistoryRecord]],
        stages: list[str],
    ) -> Outcome:
        # ── 2. Signals + insights ───────────────────────────────────
        with self._stage(stages, PipelineStage.DERIVING_SIGNALS):
            if history is None:
                history = await self._load_history(store, data.game_id)
            history = list(history)
            signals = self.signal_deriver.derive(data, history)
            insights = self.insight_extractor.extract(data)

        # ── 3. Rule override ────────────────────────────────────────
        with self._stage(stages, PipelineStage.RULE_CHECK):
            check = await self.rule_evaluator.evaluate(store, rule_metrics(data, signals))
            if check.store_failed and self.strict_rule_store:
                raise check.error

        if check.matched:
            stages.append(PipelineStage.MATCHED.value)
            return self._override_result(data, check, signals, insights, stages)

        # ── 4. Risk model ───────────────────────────────────────────
        with self._stage(stages, PipelineStage.MODEL_SCORING):
            assessment = self.risk_model.assess(data)

        # ── 5. Confidence ───────────────────────────────────────────
        with self._stage(stages, PipelineStage.CONFIDENCE):
            weights = await self._load_weights(store)
            confidence = calculate_confidence(signals.levels, PipelineSource.MODEL.value, weights)

        # ── 6. Temporal ∥ counterfactual ────────────────────────────
        with self._stage(stages, PipelineStage.TEMPORAL):
            values = risk_values(history)
            temporal, (momentum, counterfactuals) = await asyncio.gather(
                self._analyze_temporal(values),
                self._simulate_counterfactuals(assessment, confidence, values),
            )
            cohort = self.cohort.compare(assessment.risk_score, values)

        # ── 7. Explanation ──────────────────────────────────────────
        with self._stage(stages, PipelineStage.EXPLAIN):
            explanation = self.explanation_builder.build(data, assessment.decision, signals.levels)

        # ── 8. Recommendations ──────────────────────────────────────
        with self._stage(stages, PipelineStage.RECOMMEND):
            recommendations = self.recommendation_generator.generate(
                assessment.decision, assessment.risk_score, insights
            )

        # ── 9. Ledger ───────────────────────────────────────────────
        with self._stage(stages, PipelineStage.LEDGER):
            entry = build_ledger_entry(
                game_id=data.game_id,
                decision=assessment.decision,
                source=DecisionSource.AI,
                input_data=data,
                risk_score=assessment.risk_score,
                confidence=confidence,
                explanation_id=explanation.explanation_id,
                temporal=temporal,
            )
            await store.append_ledger(entry)

        stages.append(PipelineStage.COMPLETE.value)

        logger.info(
            "decision_generated",
            game_id=data.game_id,
            decision=assessment.decision.value,
            risk_score=assessment.risk_score,
            confidence=confidence,
            safest_decision=counterfactuals.safest_decision.value,
            ledger_id=entry.ledger_id,
        )

        return PipelineResult(
            decision=assessment.decision,
            risk_score=assessment.risk_score,
            confidence=confidence,
            source=PipelineSource.MODEL,
            insights=insights.to_dict(),
            signals=signals.to_dict(),
            assessment=assessment.to_dict(),
            temporal=temporal.to_dict(),
            trend=momentum.to_dict(),
            cohort=cohort.to_dict(),
            counterfactuals=counterfactuals.to_dict(),
            recommendations=recommendations,
            explanation=explanation,
            ledger=entry,
            stages=stages,
        )

    async def _analyze_temporal(self, values: list[float]) -> TemporalProfile:
        return self.temporal.analyze(values)

    async def _simulate_counterfactuals(
        self,
        assessment: RiskAssessment,
        confidence: float,
        values: list[float],
    ) -> tuple[MomentumProfile, CounterfactualSet]:
        momentum = self.temporal.momentum(values)
        counterfactuals = self.counterfactual.simulate(
            risk=assessment.risk_score / 100,
            confidence=confidence,
            momentum=momentum.slope,
        )
        return momentum, counterfactuals

    async def _load_history(self, store: DataStore, game_id: str) -> list[HistoryRecord]:
        try:
            return await store.fetch_history(game_id, limit=self.history_limit)
        except Exception as exc:
            logger.warning("history_unavailable", game_id=game_id, error=str(exc))
            return []

    async def _load_weights(self, store: DataStore) -> dict[str, float]:
        try:
            return await store.fetch_signal_weights()
        except Exception as exc:
            logger.warning("signal_weights_unavailable", error=str(exc))
            return {}

    def _override_result(
        self,
        data: DecisionInput,
        check: RuleCheck,
        signals: DerivedSignals,
        insights: Insights,
        stages: list[str],
    ) -> PipelineResult:
        match = check.match
        recommendations = self.recommendation_generator.generate(match.decision, None, insights)
        logger.info(
            "decision_overridden_by_rule",
            game_id=data.game_id,
            decision=match.decision.value,
            rule_key=match.matched_rule,
            priority=match.priority,
        )
        return PipelineResult(
            decision=match.decision,
            risk_score=None,
            confidence=ConfidenceLevel.HIGH,
            source=PipelineSource.RULE_ENGINE,
            insights=insights.to_dict(),
            signals=signals.to_dict(),
            recommendations=recommendations,
            rule=match,
            stages=stages,
        )

    @staticmethod
    def _failure(code: ErrorCode, details: dict, stages: list[str]) -> PipelineFailure:
        stages.append(PipelineStage.FAILED.value)
        return PipelineFailure(error=code.value, details=details, stages=stages)


async def run_decision_pipeline(
    raw_input: Any,
    store: DataStore,
    history: Optional[Sequence[HistoryRecord]] = None,
    metrics: Optional[MetricsRecorder] = None,
) -> Outcome:
    """Run one request through a pipeline configured from settings."""
    pipeline = DecisionPipeline.from_settings(metrics=metrics)
    return await pipeline.run(raw_input, store, history)
