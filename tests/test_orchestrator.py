"""Tests for the concurrent analyzer orchestrator."""

import threading
import time
from functools import partial

import pytest

from conftest import FixedAnalyzer, RaisingAnalyzer, fixed_registry, make_metadata
from qualigate.config import ScoringConfig
from qualigate.exceptions import AnalysisCancelledError, UnknownCategoryError
from qualigate.models import AnalyzerResult, Category
from qualigate.scoring import AnalyzerOrchestrator
from qualigate.scoring.orchestrator import CANCELLED


class WrongTypeAnalyzer:
    category = Category.QUALITY

    def run(self, context):
        return {"score": 20}


class BlockingAnalyzer:
    """Waits on the cancel flag, then bails out like a real analyzer would."""

    def __init__(self, category, started=None):
        self.category = category
        self.started = started

    def run(self, context):
        if self.started is not None:
            self.started.set()
        context.cancel_event.wait(5)
        context.check_cancelled(self.category)
        return AnalyzerResult(self.category, context.max_score, context.max_score)


class CancellingAnalyzer:
    def __init__(self, category):
        self.category = category

    def run(self, context):
        raise AnalysisCancelledError(self.category.value)


class TestResolveCategories:
    def test_all(self):
        orchestrator = AnalyzerOrchestrator(registry=fixed_registry())
        assert orchestrator.resolve_categories(None) == tuple(Category)
        assert orchestrator.resolve_categories("all") == tuple(Category)

    def test_registry_order_and_dedup(self):
        orchestrator = AnalyzerOrchestrator(registry=fixed_registry())
        assert orchestrator.resolve_categories("testing,quality,testing") == (
            Category.QUALITY,
            Category.TESTING,
        )

    def test_unregistered_category(self):
        registry = fixed_registry()
        registry.unregister("security")
        orchestrator = AnalyzerOrchestrator(registry=registry)
        with pytest.raises(UnknownCategoryError) as exc:
            orchestrator.resolve_categories(["security"])
        assert "security" not in exc.value.available

    def test_unknown_name(self):
        with pytest.raises(UnknownCategoryError):
            AnalyzerOrchestrator(registry=fixed_registry()).resolve_categories("speed")


class TestRun:
    def test_one_result_per_category_in_registry_order(self):
        orchestrator = AnalyzerOrchestrator(registry=fixed_registry())
        results = orchestrator.run(make_metadata())
        assert list(results) == list(Category)
        assert results[Category.STRUCTURE].score == 18
        assert results[Category.COMPLETENESS].max_score == 5

    def test_uses_configured_categories(self):
        config = ScoringConfig(categories="security,quality")
        results = AnalyzerOrchestrator(config, fixed_registry()).run(make_metadata())
        assert list(results) == [Category.QUALITY, Category.SECURITY]

    def test_explicit_subset(self):
        results = AnalyzerOrchestrator(registry=fixed_registry()).run(
            make_metadata(), categories=["testing"]
        )
        assert list(results) == [Category.TESTING]

    def test_failure_is_isolated(self):
        registry = fixed_registry(
            overrides={Category.SECURITY: partial(RaisingAnalyzer, Category.SECURITY, "timeout")}
        )
        results = AnalyzerOrchestrator(registry=registry).run(make_metadata())
        failed = results[Category.SECURITY]
        assert failed.failed
        assert failed.score == 0
        assert failed.max_score == 15
        assert failed.error == "timeout"
        assert failed.issues == ("Analysis failed: timeout",)
        assert results[Category.QUALITY].score == 12

    def test_exception_without_message_uses_class_name(self):
        def boom():
            raise ValueError()

        class Silent:
            category = Category.QUALITY

            def run(self, context):
                boom()

        registry = fixed_registry(overrides={Category.QUALITY: Silent})
        results = AnalyzerOrchestrator(registry=registry).run(make_metadata())
        assert results[Category.QUALITY].error == "ValueError"

    def test_wrong_return_type(self):
        registry = fixed_registry(overrides={Category.QUALITY: WrongTypeAnalyzer})
        result = AnalyzerOrchestrator(registry=registry).run(make_metadata())[Category.QUALITY]
        assert result.failed
        assert result.error == "analyzer returned dict, expected AnalyzerResult"

    def test_score_clamped_and_weight_enforced(self):
        registry = fixed_registry(
            overrides={Category.QUALITY: partial(FixedAnalyzer, Category.QUALITY, 55)}
        )
        result = AnalyzerOrchestrator(registry=registry).run(make_metadata())[Category.QUALITY]
        assert result.score == 20
        assert result.max_score == 20

    def test_category_forced_to_requested(self):
        registry = fixed_registry(
            overrides={Category.QUALITY: partial(FixedAnalyzer, Category.TESTING, 10)}
        )
        result = AnalyzerOrchestrator(registry=registry).run(make_metadata())[Category.QUALITY]
        assert result.category is Category.QUALITY

    def test_analysis_cancelled_error_is_recorded(self):
        registry = fixed_registry(
            overrides={Category.TESTING: partial(CancellingAnalyzer, Category.TESTING)}
        )
        result = AnalyzerOrchestrator(registry=registry).run(make_metadata())[Category.TESTING]
        assert result.error == CANCELLED
        assert result.issues == ("Analysis failed: cancelled",)

    def test_progress_messages(self):
        messages = []
        registry = fixed_registry(
            overrides={Category.SECURITY: partial(RaisingAnalyzer, Category.SECURITY, "boom")}
        )
        AnalyzerOrchestrator(registry=registry, on_progress=messages.append).run(make_metadata())
        assert messages[0] == "Running 7 analyzers"
        assert "structure: 18/20" in messages
        assert "security: failed (boom)" in messages
        assert len(messages) == 8

    def test_runs_analyzers_concurrently(self):
        barrier = threading.Barrier(2, timeout=5)

        class Rendezvous:
            def __init__(self, category):
                self.category = category

            def run(self, context):
                barrier.wait()
                return AnalyzerResult(self.category, 1, context.max_score)

        registry = fixed_registry(
            overrides={
                Category.QUALITY: partial(Rendezvous, Category.QUALITY),
                Category.TESTING: partial(Rendezvous, Category.TESTING),
            }
        )
        config = ScoringConfig(categories="quality,testing", max_concurrency=2)
        results = AnalyzerOrchestrator(config, registry).run(make_metadata())
        assert not any(r.failed for r in results.values())


class TestCancellation:
    def test_timeout_marks_stragglers_cancelled(self):
        registry = fixed_registry(
            overrides={Category.TESTING: partial(BlockingAnalyzer, Category.TESTING)}
        )
        config = ScoringConfig(timeout_seconds=0.3)
        orchestrator = AnalyzerOrchestrator(config, registry)
        results = orchestrator.run(make_metadata())
        assert orchestrator.cancelled
        assert len(results) == 7
        assert results[Category.TESTING].error == CANCELLED
        assert results[Category.TESTING].score == 0
        assert results[Category.QUALITY].score == 12

    def test_cancel_from_another_thread(self):
        started = threading.Event()
        registry = fixed_registry(
            overrides={Category.SECURITY: partial(BlockingAnalyzer, Category.SECURITY, started)}
        )
        orchestrator = AnalyzerOrchestrator(registry=registry)

        def cancel_when_started():
            started.wait(5)
            orchestrator.cancel()

        thread = threading.Thread(target=cancel_when_started)
        thread.start()
        results = orchestrator.run(make_metadata())
        thread.join()

        assert results[Category.SECURITY].error == CANCELLED
        assert list(results) == list(Category)

    def test_cancel_before_run_does_not_carry_over(self):
        orchestrator = AnalyzerOrchestrator(registry=fixed_registry())
        orchestrator.cancel()
        results = orchestrator.run(make_metadata())
        assert not any(r.failed for r in results.values())
        assert not orchestrator.cancelled

    def test_next_run_after_timeout_is_clean(self):
        registry = fixed_registry(
            overrides={Category.TESTING: partial(BlockingAnalyzer, Category.TESTING)}
        )
        orchestrator = AnalyzerOrchestrator(ScoringConfig(timeout_seconds=0.3), registry)
        first = orchestrator.run(make_metadata())
        assert first[Category.TESTING].error == CANCELLED

        second = orchestrator.run(make_metadata(), categories="quality,structure")
        assert second[Category.QUALITY].score == 12
        assert second[Category.STRUCTURE].score == 18
        assert not any(r.failed for r in second.values())
        assert not orchestrator.cancelled

    def test_interrupt_while_waiting_stops_running_analyzers(self):
        started = threading.Event()
        saw_cancel = threading.Event()

        class SlowAnalyzer:
            category = Category.TESTING

            def run(self, context):
                started.set()
                if context.cancel_event.wait(3):
                    saw_cancel.set()
                    context.check_cancelled(self.category)
                return AnalyzerResult(self.category, context.max_score, context.max_score)

        def interrupt(message):
            if ": " in message:
                started.wait(1)
                raise KeyboardInterrupt

        registry = fixed_registry(overrides={Category.TESTING: SlowAnalyzer})
        orchestrator = AnalyzerOrchestrator(
            ScoringConfig(max_concurrency=7), registry, on_progress=interrupt
        )

        start = time.monotonic()
        with pytest.raises(KeyboardInterrupt):
            orchestrator.run(make_metadata())
        assert time.monotonic() - start < 2.0
        assert orchestrator.cancelled
        assert saw_cancel.wait(1)
