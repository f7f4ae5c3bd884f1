"""Concurrent analyzer fan-out with per-analyzer failure isolation.

The orchestrator is the only component that waits. Every requested category
gets exactly one AnalyzerResult: analyzers that raise, return the wrong type,
or are still running when the run is cancelled are recorded as failed
results with score 0 instead of being dropped.
"""

from __future__ import annotations

import concurrent.futures
import threading
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Union

from ..analyzers import AnalyzerContext, AnalyzerRegistry, default_registry
from ..categories import CATEGORY_DEFINITIONS
from ..config import ScoringConfig
from ..exceptions import AnalysisCancelledError, UnknownCategoryError
from ..logging_config import get_logger
from ..models import AnalyzerResult, Category, ProjectMetadata

logger = get_logger(__name__)

CANCELLED = "cancelled"

# How often the waiting thread re-checks the cancel flag.
POLL_INTERVAL = 0.1

ProgressCallback = Callable[[str], None]


class AnalyzerOrchestrator:
    """Runs the configured analyzers and collects their raw results.

    Args:
        config: Immutable run configuration
        registry: Analyzers to draw from (default: the built-in seven)
        on_progress: Called from the orchestrating thread with short status
            messages as analyzers finish
    """

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        registry: Optional[AnalyzerRegistry] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.config = config or ScoringConfig()
        self.registry = registry if registry is not None else default_registry()
        self.on_progress = on_progress
        self._cancel_event = threading.Event()

    def resolve_categories(
        self, requested: Union[None, str, Iterable[Any]] = None
    ) -> tuple[Category, ...]:
        """Validate ``requested`` against the registry.

        ``None`` or ``"all"`` selects every registered category. The result
        follows registration order with duplicates removed.

        Raises:
            UnknownCategoryError: If any requested category is not registered
        """
        if requested is None:
            return self.registry.categories
        if isinstance(requested, str):
            items = [p.strip() for p in requested.split(",") if p.strip()]
        else:
            items = list(requested)
        if not items or any(str(item).strip().lower() == "all" for item in items):
            return self.registry.categories

        available = [c.value for c in self.registry.categories]
        wanted = set()
        for item in items:
            category = Category.parse(item)
            if category not in self.registry:
                raise UnknownCategoryError(category.value, available)
            wanted.add(category)
        return tuple(c for c in self.registry.categories if c in wanted)

    def cancel(self) -> None:
        """Ask the analyzers of the current run to stop. Safe to call from any thread.

        Each ``run()`` starts with a fresh flag, so a cancel only affects the
        run in progress (or the last one, if none is running).
        """
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        """Whether the current (or last) run was cancelled or timed out."""
        return self._cancel_event.is_set()

    def run(
        self,
        metadata: ProjectMetadata,
        categories: Union[None, str, Iterable[Any]] = None,
    ) -> dict[Category, AnalyzerResult]:
        """Run analyzers concurrently and return results in registry order.

        Args:
            metadata: Discovered project facts
            categories: Subset to run (default: the configured categories)
        """
        selected = self.resolve_categories(
            categories if categories is not None else self.config.categories
        )
        if not selected:
            return {}

        cancel_event = threading.Event()
        self._cancel_event = cancel_event

        workers = min(self.config.max_concurrency, len(selected))
        logger.info(f"Running {len(selected)} analyzers with {workers} worker(s)")
        self._progress(f"Running {len(selected)} analyzers")

        results: dict[Category, AnalyzerResult] = {}
        deadline = time.monotonic() + self.config.timeout_seconds
        executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="qualigate-analyzer"
        )
        try:
            futures = {
                executor.submit(
                    self._run_one, category, self._context(metadata, category, cancel_event)
                ): category
                for category in selected
            }
            pending = set(futures)
            while pending:
                if cancel_event.is_set():
                    logger.warning("Analysis cancelled")
                    break
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.warning(
                        f"Analysis exceeded {self.config.timeout_seconds}s timeout, cancelling "
                        f"{len(pending)} analyzer(s)"
                    )
                    cancel_event.set()
                    break
                done, pending = concurrent.futures.wait(
                    pending,
                    timeout=min(remaining, POLL_INTERVAL),
                    return_when=concurrent.futures.FIRST_COMPLETED,
                )
                for future in done:
                    category = futures[future]
                    results[category] = future.result()
                    self._progress(_finished_message(results[category]))

            for future in pending:
                if future.done() and not future.cancelled():
                    results[futures[future]] = future.result()
        except BaseException:
            # Interrupted while waiting: stop the analyzers still running.
            cancel_event.set()
            raise
        finally:
            # Stragglers notice the cancel flag on their next check.
            executor.shutdown(wait=not cancel_event.is_set(), cancel_futures=True)

        ordered: dict[Category, AnalyzerResult] = {}
        for category in selected:
            result = results.get(category)
            if result is None:
                logger.warning(f"Analyzer {category} did not finish: {CANCELLED}")
                result = AnalyzerResult.failure(category, _weight(category), CANCELLED)
            ordered[category] = result
        return ordered

    def _context(
        self, metadata: ProjectMetadata, category: Category, cancel_event: threading.Event
    ) -> AnalyzerContext:
        return AnalyzerContext(
            project_root=Path(metadata.project_root),
            max_score=_weight(category),
            project_type=metadata.project_type,
            verbose=self.config.verbose,
            max_file_size=self.config.max_file_size_bytes,
            extra_skip_dirs=self.config.extra_skip_dirs,
            cancel_event=cancel_event,
        )

    def _run_one(self, category: Category, context: AnalyzerContext) -> AnalyzerResult:
        """Run one analyzer on a worker thread. Never raises."""
        max_score = context.max_score
        if context.cancelled:
            return AnalyzerResult.failure(category, max_score, CANCELLED)

        logger.debug(f"Analyzer {category} started")
        start = time.perf_counter()
        try:
            analyzer = self.registry.create(category)
            result = analyzer.run(context)
        except AnalysisCancelledError:
            logger.debug(f"Analyzer {category} stopped: {CANCELLED}")
            return AnalyzerResult.failure(
                category, max_score, CANCELLED, time.perf_counter() - start
            )
        except Exception as e:
            reason = str(e) or e.__class__.__name__
            logger.warning(f"Analyzer {category} failed: {reason}")
            return AnalyzerResult.failure(category, max_score, reason, time.perf_counter() - start)
        duration = time.perf_counter() - start

        if not isinstance(result, AnalyzerResult):
            reason = f"analyzer returned {type(result).__name__}, expected AnalyzerResult"
            logger.warning(f"Analyzer {category} failed: {reason}")
            return AnalyzerResult.failure(category, max_score, reason, duration)

        result = _normalize(result, category, max_score, duration)
        logger.debug(
            f"Analyzer {category} finished: {result.score}/{result.max_score} in {duration:.2f}s"
        )
        return result

    def _progress(self, message: str) -> None:
        if self.on_progress is not None:
            self.on_progress(message)


def _weight(category: Category) -> float:
    return CATEGORY_DEFINITIONS[category].max_score


def _normalize(
    result: AnalyzerResult, category: Category, max_score: float, duration: float
) -> AnalyzerResult:
    """Force the category weight and clamp the score into [0, max_score]."""
    score = min(max_score, max(0.0, float(result.score)))
    if score != result.score:
        logger.debug(f"Analyzer {category} score {result.score} clamped to {score}")
    return replace(
        result,
        category=category,
        score=score,
        max_score=max_score,
        duration_seconds=duration,
    )


def _finished_message(result: AnalyzerResult) -> str:
    if result.failed:
        return f"{result.category}: failed ({result.error})"
    return f"{result.category}: {result.score:g}/{result.max_score:g}"
