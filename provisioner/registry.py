"""
Registry for provisioning steps.

This module provides a registry that step classes register themselves with,
and the dependency resolution that keeps any requested step list in an
order where every step runs after the steps it depends on.
"""

from typing import Any, Dict, List, Optional, Set, Type

from provisioner.base_step import BaseStep


class StepRegistry:
    """
    Registry for step classes, keyed by step tag.
    """

    _registry: Dict[str, Type["BaseStep"]] = {}

    @classmethod
    def register(cls, tag: str, metadata: Optional[Dict[str, Any]] = None):
        """
        Decorator for registering step classes.

        Args:
            tag: The unique tag of the step.
            metadata: Optional metadata for the step: its dependencies and description.

        Returns:
            A decorator function that registers the step class.
        """

        def decorator(step_class: Type["BaseStep"]) -> Type["BaseStep"]:
            if tag in cls._registry:
                raise ValueError(f"Step with tag '{tag}' already registered")

            if metadata:
                step_class.metadata = metadata
            step_class.tag = tag

            cls._registry[tag] = step_class
            return step_class

        return decorator

    @classmethod
    def get_step(cls, tag: str) -> Type["BaseStep"]:
        """
        Get a step class by tag.

        Raises:
            KeyError: If no step with the given tag is registered.
        """
        if tag not in cls._registry:
            raise KeyError(f"No step registered with tag '{tag}'")

        return cls._registry[tag]

    @classmethod
    def get_all_steps(cls) -> Dict[str, Type["BaseStep"]]:
        """
        Get all registered steps.

        Returns:
            A dictionary mapping step tags to step classes.
        """
        return cls._registry.copy()

    @classmethod
    def get_step_dependencies(cls, tag: str) -> Set[str]:
        """
        Get the dependencies of a step.

        Raises:
            KeyError: If no step with the given tag is registered.
        """
        step_class = cls.get_step(tag)
        metadata = getattr(step_class, "metadata", {})
        return set(metadata.get("dependencies", []))

    @classmethod
    def resolve_order(
        cls, tags: List[str], include_dependencies: bool = True
    ) -> List[str]:
        """
        Order `tags` so that every step comes after the steps it depends on.

        Steps keep the caller's order wherever the dependencies allow it.
        Dependencies missing from `tags` are pulled in when
        `include_dependencies` is True and ignored otherwise (for steps that
        were skipped on purpose).

        Args:
            tags: A list of step tags.
            include_dependencies: Whether to add unlisted dependencies.

        Returns:
            A list of step tags in the order they should be executed.

        Raises:
            KeyError: If any of the steps or their dependencies are not registered.
            ValueError: If there is a circular dependency.
        """
        requested = set(tags)
        result: List[str] = []
        visited: Set[str] = set()
        temp_visited: Set[str] = set()

        def visit(tag: str):
            if tag in temp_visited:
                raise ValueError(
                    f"Circular dependency detected involving '{tag}'"
                )

            if tag in visited:
                return

            temp_visited.add(tag)

            # Sorted so the result does not depend on set iteration order.
            for dependency in sorted(cls.get_step_dependencies(tag)):
                if include_dependencies or dependency in requested:
                    visit(dependency)

            temp_visited.remove(tag)
            visited.add(tag)
            result.append(tag)

        for tag in tags:
            if tag not in visited:
                visit(tag)

        return result
