"""
Target dispatcher for release packaging.

Drives every configured packager and announcer through its pipeline:

    Disabled -> Skipped (disabled)
    Enabled  -> ContextBuilt -> Rendered -> Delivered
                     |              |
                     +----> Failed <+
    Not started, run cancelled -> Skipped (cancelled)
    Not started, run aborted   -> Skipped (aborted after earlier failure)

The enabled check comes first, so a disabled target reports "disabled"
even when the run was cancelled or aborted before it was reached.

Each target gets a freshly built context and shares nothing with the
others. A failing target is recorded and, depending on the fail-fast
policy, either stops targets that have not started yet or lets the rest
of the run continue.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from .errors import ReleasePipelineError
from .target import RenderedOutput, Target

logger = logging.getLogger(__name__)

POOL_POLL_SECONDS = 0.1


class TargetState(Enum):
    """Terminal state of a target after a run."""
    SKIPPED = "skipped"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass
class TargetOutcome:
    """What happened to one target."""
    target: str
    state: TargetState
    reason: str = ""
    outputs: List[RenderedOutput] = field(default_factory=list)

    def describe(self) -> str:
        if self.state == TargetState.FAILED:
            return f"{self.target}: Failed: {self.reason}"
        label = self.state.value.capitalize()
        if self.reason:
            return f"{self.target}: {label} ({self.reason})"
        return f"{self.target}: {label}"


@dataclass
class RunSummary:
    """Outcomes of every target of a run, in target order."""
    outcomes: List[TargetOutcome] = field(default_factory=list)

    def _with_state(self, state: TargetState) -> List[TargetOutcome]:
        return [o for o in self.outcomes if o.state == state]

    @property
    def delivered(self) -> List[TargetOutcome]:
        return self._with_state(TargetState.DELIVERED)

    @property
    def skipped(self) -> List[TargetOutcome]:
        return self._with_state(TargetState.SKIPPED)

    @property
    def failed(self) -> List[TargetOutcome]:
        return self._with_state(TargetState.FAILED)

    def exit_code(self, fail_fast: bool) -> int:
        """Non-zero only when a fail-fast run had a failing target."""
        return 1 if fail_fast and self.failed else 0

    def lines(self) -> List[str]:
        return [o.describe() for o in self.outcomes]


class Dispatcher:
    """
    Runs targets end to end.

    Example usage:
        dispatcher = Dispatcher(dry_run=True, fail_fast=False)
        summary = dispatcher.run(targets)
        for line in summary.lines():
            print(line)
    """

    def __init__(self, dry_run: bool = False, fail_fast: bool = False, max_workers: int = 1):
        """
        Initialize the dispatcher.

        Args:
            dry_run: Render everything but suppress file writes and network sends
            fail_fast: Stop starting new targets after the first failure
            max_workers: Number of targets processed concurrently
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.dry_run = dry_run
        self.fail_fast = fail_fast
        self.max_workers = max_workers
        self._cancelled = threading.Event()
        self._aborted = threading.Event()

    def cancel(self) -> None:
        """Skip every target that has not started yet."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def aborted(self) -> bool:
        """True once a fail-fast run has recorded a failure."""
        return self._aborted.is_set()

    def _not_started_reason(self) -> Optional[str]:
        if self._cancelled.is_set():
            return "cancelled"
        if self._aborted.is_set():
            return "aborted after earlier failure"
        return None

    def process(self, target: Target) -> TargetOutcome:
        """Run one target through build, render and deliver."""
        if not target.is_enabled():
            logger.debug(f"{target.name} is disabled")
            return TargetOutcome(target.name, TargetState.SKIPPED, "disabled")

        reason = self._not_started_reason()
        if reason:
            logger.info(f"Skipping {target.name}: {reason}")
            return TargetOutcome(target.name, TargetState.SKIPPED, reason)

        logger.info(f"Processing {target.name}")
        try:
            context = target.build_context()
            outputs = target.render(context)
            target.deliver(outputs, dry_run=self.dry_run)
        except ReleasePipelineError as e:
            if not e.target:
                e.target = target.name
            logger.error(f"{target.name} failed: {e.message}")
            if self.fail_fast:
                self._aborted.set()
            return TargetOutcome(target.name, TargetState.FAILED, e.message)

        return TargetOutcome(
            target.name,
            TargetState.DELIVERED,
            "dry-run" if self.dry_run else "",
            outputs,
        )

    def _run_pool(self, targets: Sequence[Target]) -> List[TargetOutcome]:
        """
        Process targets on a bounded thread pool.

        Targets already running when the run is interrupted finish; queued
        ones are cancelled and reported as skipped.
        """
        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        futures = [executor.submit(self.process, target) for target in targets]
        try:
            # Short waits so an interrupt reaches the main thread promptly
            while wait(futures, timeout=POOL_POLL_SECONDS).not_done:
                pass
        except KeyboardInterrupt:
            logger.error("Interrupted, cancelling targets that have not started")
            self.cancel()
            executor.shutdown(wait=True, cancel_futures=True)
        else:
            executor.shutdown(wait=True)

        outcomes = []
        for target, future in zip(targets, futures):
            if future.cancelled():
                outcomes.append(TargetOutcome(target.name, TargetState.SKIPPED, "cancelled"))
            else:
                outcomes.append(future.result())
        return outcomes

    def run(self, targets: Sequence[Target]) -> RunSummary:
        """
        Process all targets.

        Returns:
            RunSummary with one outcome per target, in the given order
        """
        if self.max_workers == 1:
            outcomes = []
            for target in targets:
                try:
                    outcomes.append(self.process(target))
                except KeyboardInterrupt:
                    logger.error(f"Interrupted while processing {target.name}")
                    self.cancel()
                    outcomes.append(
                        TargetOutcome(target.name, TargetState.FAILED, "interrupted")
                    )
        else:
            outcomes = self._run_pool(targets)

        summary = RunSummary(outcomes)
        for line in summary.lines():
            logger.info(line)
        return summary
