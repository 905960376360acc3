# provisioner/sequencer.py
# -*- coding: utf-8 -*-
"""
Runs an ordered list of idempotent provisioning steps.

For each step the sequencer checks the step's required commands, evaluates
its precondition, runs its action only when the desired state does not hold
yet, and classifies the outcome. A failed `fatal` step stops the run by
raising FatalStepError; a failed `warn-and-continue` step is logged as a
warning and the run goes on.
"""

import logging
import time
from collections import Counter
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from common.command_utils import log_provision
from provisioner.base_step import (
    BaseStep,
    FailurePolicy,
    StepSkipped,
    StepStatus,
)
from provisioner.context import ProvisionContext

module_logger = logging.getLogger(__name__)


class StepResult(BaseModel):
    """Outcome of one step."""

    tag: str
    name: str
    status: StepStatus
    message: str = ""
    duration_seconds: float = 0.0


class RunResult(BaseModel):
    """Ordered outcomes of a run."""

    results: List[StepResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(r.status != StepStatus.FAILED for r in self.results)

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1

    @property
    def applied(self) -> List[str]:
        return [r.tag for r in self.results if r.status == StepStatus.APPLIED]

    @property
    def warnings(self) -> List[StepResult]:
        return [
            r
            for r in self.results
            if r.status in (StepStatus.WARNED, StepStatus.SKIPPED)
        ]

    def status_of(self, tag: str) -> Optional[StepStatus]:
        for result in self.results:
            if result.tag == tag:
                return result.status
        return None

    def summary(self) -> Dict[str, int]:
        counts = Counter(r.status.value for r in self.results)
        return {status.value: counts.get(status.value, 0) for status in StepStatus}


class FatalStepError(Exception):
    """A `fatal` step failed; the run was aborted after it."""

    def __init__(self, step_result: StepResult, run_result: RunResult):
        super().__init__(
            f"Fatal step '{step_result.tag}' failed: {step_result.message}"
        )
        self.step_result = step_result
        self.run_result = run_result


class ProvisioningSequencer:
    """Executes steps strictly in order, one at a time."""

    def __init__(
        self,
        context: ProvisionContext,
        sequencer_logger: Optional[logging.Logger] = None,
    ):
        self.context = context
        self.app_settings = context.app_settings
        self.logger = sequencer_logger or context.logger or module_logger
        self._last_error: Optional[BaseException] = None

    def _log(
        self,
        message: str,
        level: str = "info",
        exc_info: bool = False,
        symbol: Optional[str] = None,
    ):
        log_provision(
            message, level, self.logger, self.app_settings,
            exc_info=exc_info, symbol=symbol,
        )

    def policy_for(self, step: BaseStep) -> FailurePolicy:
        """The step's failure policy, after per-tag overrides from the settings."""
        override = self.app_settings.failure_policy_overrides.get(step.tag)
        return FailurePolicy(override) if override else step.failure_policy

    def _missing_requirements(self, step: BaseStep) -> List[str]:
        return [
            command
            for command in step.requires
            if not self.context.probe.is_available(command)
        ]

    def _precondition_holds(self, step: BaseStep) -> bool:
        try:
            return bool(step.is_satisfied())
        except Exception as e:
            self._log(
                f"Precondition check for '{step.tag}' raised {e!r}; treating it as not satisfied.",
                "debug",
            )
            return False

    def run_step(self, step: BaseStep, index: int, total: int) -> StepResult:
        """
        Run a single step and classify its outcome. Never raises for action
        failures; the caller decides what a FAILED result means.
        """
        started = time.monotonic()

        def result(status: StepStatus, message: str = "") -> StepResult:
            return StepResult(
                tag=step.tag,
                name=step.display_name,
                status=status,
                message=message,
                duration_seconds=round(time.monotonic() - started, 3),
            )

        self._log(
            f"--- [{index}/{total}] {step.display_name} ({step.tag}) ---",
            symbol="step",
        )

        missing = self._missing_requirements(step)
        if missing:
            message = f"Required command(s) not found: {', '.join(missing)}. Skipping."
            self._log(message, "warning")
            return result(StepStatus.SKIPPED, message)

        if self._precondition_holds(step):
            self._log(f"{step.display_name}: already satisfied.")
            return result(StepStatus.SATISFIED, "already satisfied")

        policy = self.policy_for(step)
        self._last_error = None
        try:
            outcome = step.apply()
        except StepSkipped as skipped:
            self._log(str(skipped), "warning")
            return result(StepStatus.SKIPPED, str(skipped))
        except Exception as e:
            self._last_error = e
            return self._classify_failure(step, policy, f"{type(e).__name__}: {e}", result)

        if outcome is False:
            return self._classify_failure(step, policy, "step reported failure", result)

        self._log(f"{step.display_name}: done.", "success")
        return result(StepStatus.APPLIED, "applied")

    def _classify_failure(self, step, policy, message, result) -> StepResult:
        if policy == FailurePolicy.WARN_AND_CONTINUE:
            self._log(
                f"{step.display_name} failed ({message}); continuing.",
                "warning",
            )
            return result(StepStatus.WARNED, message)
        self._log(
            f"FAILED: {step.display_name} ({step.tag}): {message}",
            "error",
        )
        return result(StepStatus.FAILED, message)

    def execute(self, steps: Sequence[BaseStep]) -> RunResult:
        """
        Execute all steps in sequence.

        Returns:
            The RunResult when no fatal step failed (warnings allowed).

        Raises:
            FatalStepError: As soon as a `fatal` step fails; no later step runs.
        """
        run_result = RunResult()
        total = len(steps)
        self._log(f"Provisioning started: {total} step(s).", symbol="rocket")

        for index, step in enumerate(steps, start=1):
            step_result = self.run_step(step, index, total)
            run_result.results.append(step_result)
            if step_result.status == StepStatus.FAILED:
                self._log(
                    "A fatal step failed. Halting provisioning.",
                    "critical",
                )
                raise FatalStepError(step_result, run_result) from self._last_error

        counts = ", ".join(f"{k}={v}" for k, v in run_result.summary().items() if v)
        self._log(
            f"Provisioning finished ({counts or 'no steps'}).", symbol="sparkles"
        )
        for warned in run_result.warnings:
            self._log(
                f"{warned.name}: {warned.status.value} - {warned.message}",
                "warning",
            )
        return run_result
