"""
Base step class for all provisioning steps.

This module provides the base class that every provisioning step inherits
from. A step is a self-contained unit of precondition check, conditional
action and result classification.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Set, Tuple

from provisioner.context import ProvisionContext


class FailurePolicy(str, Enum):
    """What a failed action means for the rest of the run."""

    FATAL = "fatal"
    WARN_AND_CONTINUE = "warn-and-continue"


class StepStatus(str, Enum):
    """Outcome of a single step within a run."""

    SATISFIED = "satisfied"
    APPLIED = "applied"
    SKIPPED = "skipped"
    WARNED = "warned"
    FAILED = "failed"


class StepSkipped(Exception):
    """
    Raised by `apply()` when the step has nothing to do for a reason that is
    not a failure, e.g. an optional input was not supplied.
    """


class BaseStep(ABC):
    """
    Base class for all provisioning steps.

    Subclasses implement `is_satisfied()` (the side-effect free precondition)
    and `apply()` (the convergence action). `apply()` signals failure by
    raising or by returning False; any other return value is success.
    """

    # Set by StepRegistry.register.
    tag: str = ""
    metadata: Dict[str, Any] = {
        "dependencies": [],  # Tags of steps that must run before this one
        "description": "",
    }

    name: str = ""
    failure_policy: FailurePolicy = FailurePolicy.FATAL
    # Commands that must exist for the step to run at all; otherwise it is skipped.
    requires: Tuple[str, ...] = ()

    def __init__(self, context: ProvisionContext):
        """
        Initialize the step.

        Args:
            context: The provisioning context for this run.
        """
        self.context = context
        self.app_settings = context.app_settings
        self.logger = context.logger or logging.getLogger(self.__class__.__name__)

    @property
    def display_name(self) -> str:
        return self.name or self.tag or self.__class__.__name__

    @abstractmethod
    def is_satisfied(self) -> bool:
        """
        Check whether the desired state already holds.

        Returns:
            True if the action can be skipped, False otherwise.
        """
        pass

    @abstractmethod
    def apply(self) -> Optional[bool]:
        """
        Converge the machine to the desired state.

        Returns:
            False to indicate failure; None or True for success.

        Raises:
            StepSkipped: If there was nothing to do and that is not a failure.
        """
        pass

    def get_dependencies(self) -> Set[str]:
        """
        Get the dependencies of this step.

        Returns:
            A set of step tags that must run before this step.
        """
        return set(self.metadata.get("dependencies", []))

    def get_description(self) -> str:
        return str(self.metadata.get("description", ""))


class FunctionStep(BaseStep):
    """A step assembled from a precondition callable and an action callable."""

    def __init__(
        self,
        context: ProvisionContext,
        tag: str,
        precondition: Callable[[], bool],
        action: Callable[[], Optional[bool]],
        name: str = "",
        failure_policy: FailurePolicy = FailurePolicy.FATAL,
        requires: Sequence[str] = (),
        dependencies: Sequence[str] = (),
    ):
        super().__init__(context)
        self.tag = tag
        self.name = name or tag
        self.failure_policy = failure_policy
        self.requires = tuple(requires)
        self.metadata = {"dependencies": list(dependencies), "description": self.name}
        self._precondition = precondition
        self._action = action

    def is_satisfied(self) -> bool:
        return bool(self._precondition())

    def apply(self) -> Optional[bool]:
        return self._action()
