"""
Greedy local search over per-flight time/altitude edits.

Each iteration recomputes hotspots with the accepted edits applied, takes the
worst-scoring cell and tries a fixed set of replacement edits on up to
``max_candidate_flights`` of its flights. The single best trial is accepted
when it improves the scenario score; otherwise the search stops.

Candidate evaluation inside one iteration is independent, so it can be
spread over a process pool (``n_jobs > 1``). Results are reduced in the
same (flight, candidate) order as the serial loop, so the outcome does not
depend on the worker count.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from project_crosswind.config import SeparationMinima
from project_crosswind.hotspots.analyzer import compute_hotspots
from project_crosswind.optimize.objective import ScenarioMetrics, compute_metrics, score_scenario
from project_crosswind.stateman.edit_table import EditTable
from project_crosswind.trajectory.types import AirportTable, Flight
from .config import GreedyConfig

logger = logging.getLogger(__name__)

Trial = Tuple[str, Dict[str, float]]


@dataclass
class AcceptedMove:
    iteration: int
    acid: str
    changes: Dict[str, float]
    score: float


@dataclass
class OptimizationResult:
    edits: EditTable
    base_metrics: ScenarioMetrics
    final_metrics: ScenarioMetrics
    iterations: int = 0
    stop_reason: str = "converged"
    history: List[AcceptedMove] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "edits": self.edits.to_dict(),
            "baseMetrics": self.base_metrics.to_dict(),
            "finalMetrics": self.final_metrics.to_dict(),
        }


def default_time_range(flights: Sequence[Flight]) -> Tuple[float, float]:
    """Earliest departure to latest (possibly defaulted) arrival."""
    t_start = min(f.departure_time for f in flights)
    t_end = max(f.effective_arrival_time for f in flights)
    return t_start, t_end


# --- process-pool plumbing ----------------------------------------------------
_WORKER_CONTEXT: Optional[Dict[str, Any]] = None


def _init_worker(context: Dict[str, Any]) -> None:
    global _WORKER_CONTEXT
    _WORKER_CONTEXT = context


def _evaluate_in_worker(trial_edits: EditTable) -> Tuple[ScenarioMetrics, float]:
    ctx = _WORKER_CONTEXT
    if ctx is None:
        raise RuntimeError("worker context was not initialised")
    metrics = compute_metrics(ctx["flights"], trial_edits, **ctx["metric_kwargs"])
    return metrics, score_scenario(metrics, ctx["weights"])


class GreedyOptimizer:
    def __init__(
        self,
        *,
        flights: Sequence[Flight],
        airports: AirportTable,
        config: Optional[GreedyConfig] = None,
        weights: Optional[Mapping[str, float]] = None,
        separation: Optional[SeparationMinima] = None,
        t_start: Optional[float] = None,
        t_end: Optional[float] = None,
        method: str = "geodesic",
    ) -> None:
        self.flights = list(flights)
        self.airports = airports
        self.config = config or GreedyConfig()
        self.weights = dict(weights) if weights else None
        self.separation = separation
        self.method = method
        self._known = {f.acid for f in self.flights}

        if self.flights:
            default_start, default_end = default_time_range(self.flights)
        else:
            default_start = default_end = 0.0
        self.t_start = default_start if t_start is None else t_start
        self.t_end = default_end if t_end is None else t_end

    # Utility
    def _metric_kwargs(self) -> Dict[str, Any]:
        return {
            "airports": self.airports,
            "t_start": self.t_start,
            "t_end": self.t_end,
            "time_bucket_s": self.config.time_bucket_s,
            "separation": self.separation,
            "busy_bucket_threshold": self.config.busy_bucket_threshold,
            "method": self.method,
        }

    def evaluate(self, edits: EditTable) -> Tuple[ScenarioMetrics, float]:
        metrics = compute_metrics(self.flights, edits, **self._metric_kwargs())
        return metrics, score_scenario(metrics, self.weights)

    def candidate_changes(self) -> List[Dict[str, float]]:
        changes: List[Dict[str, float]] = []
        for mins in self.config.time_deltas_min:
            changes.append({"departure_time_delta_s": float(mins) * 60.0})
        for delta in self.config.altitude_deltas_ft:
            changes.append({"altitude_delta_ft": float(delta)})
        return changes

    def _trials(self, acids: Sequence[str]) -> List[Trial]:
        trials: List[Trial] = []
        for acid in acids:
            if acid not in self._known:
                continue
            for change in self.candidate_changes():
                trials.append((acid, change))
        return trials

    def _evaluate_trials(self, edits: EditTable, trials: Sequence[Trial],
                         executor: Optional[ProcessPoolExecutor]) -> List[Tuple[ScenarioMetrics, float]]:
        trial_tables = [edits.with_edit(acid, **change) for acid, change in trials]
        if executor is None:
            return [self.evaluate(t) for t in trial_tables]
        return list(executor.map(_evaluate_in_worker, trial_tables))

    def _make_executor(self) -> Optional[ProcessPoolExecutor]:
        if self.config.n_jobs is None or self.config.n_jobs <= 1:
            return None
        context = {
            "flights": self.flights,
            "metric_kwargs": self._metric_kwargs(),
            "weights": self.weights,
        }
        return ProcessPoolExecutor(
            max_workers=int(self.config.n_jobs),
            initializer=_init_worker,
            initargs=(context,),
        )

    # Search
    def run(self) -> OptimizationResult:
        if not self.flights:
            empty = ScenarioMetrics()
            return OptimizationResult(
                edits=EditTable(), base_metrics=empty, final_metrics=empty,
                iterations=0, stop_reason="no_flights",
            )

        edits = EditTable()
        base_metrics, best_score = self.evaluate(edits)
        logger.info("Baseline score %.3f (%s)", best_score, base_metrics)

        deadline = None
        if self.config.time_budget_s is not None:
            deadline = time.monotonic() + float(self.config.time_budget_s)

        history: List[AcceptedMove] = []
        stop_reason = "max_iterations"
        iterations = 0
        executor = self._make_executor()
        try:
            for it in range(self.config.max_iterations):
                if deadline is not None and time.monotonic() >= deadline:
                    stop_reason = "time_budget"
                    break

                hotspots = compute_hotspots(
                    self.flights,
                    self.t_start,
                    self.t_end,
                    airports=self.airports,
                    edits=edits,
                    cell_nm=self.config.cell_nm,
                    cell_ft=self.config.cell_ft,
                    time_bucket_s=self.config.time_bucket_s,
                    method=self.method,
                )
                if not hotspots:
                    stop_reason = "converged"
                    break
                iterations += 1

                worst = hotspots[0]
                trials = self._trials(worst.flights[: self.config.max_candidate_flights])
                results = self._evaluate_trials(edits, trials, executor)

                chosen: Optional[Tuple[Trial, float]] = None
                for trial, (_, trial_score) in zip(trials, results):
                    if trial_score >= best_score:
                        continue
                    if chosen is None or trial_score < chosen[1]:
                        chosen = (trial, trial_score)

                if chosen is None:
                    stop_reason = "no_improvement"
                    logger.debug("Iteration %d: no improving edit on cell %s", it, worst.key)
                    break

                (acid, change), new_score = chosen
                edits = edits.with_edit(acid, **change)
                history.append(AcceptedMove(iteration=it, acid=acid, changes=dict(change), score=new_score))
                logger.info("Iteration %d: %s %s -> score %.3f", it, acid, change, new_score)
                best_score = new_score
        finally:
            if executor is not None:
                executor.shutdown()

        final_metrics, final_score = self.evaluate(edits)
        logger.info("Finished after %d iterations (%s), score %.3f", iterations, stop_reason, final_score)
        return OptimizationResult(
            edits=edits,
            base_metrics=base_metrics,
            final_metrics=final_metrics,
            iterations=iterations,
            stop_reason=stop_reason,
            history=history,
        )


def optimize_schedule(
    flights: Sequence[Flight],
    *,
    airports: AirportTable,
    config: Optional[GreedyConfig] = None,
    weights: Optional[Mapping[str, float]] = None,
    separation: Optional[SeparationMinima] = None,
    t_start: Optional[float] = None,
    t_end: Optional[float] = None,
    method: str = "geodesic",
) -> OptimizationResult:
    return GreedyOptimizer(
        flights=flights,
        airports=airports,
        config=config,
        weights=weights,
        separation=separation,
        t_start=t_start,
        t_end=t_end,
        method=method,
    ).run()
