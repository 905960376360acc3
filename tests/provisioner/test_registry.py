import itertools

import pytest

from provisioner.base_step import BaseStep
from provisioner.registry import StepRegistry


def _register(tag, dependencies=()):
    @StepRegistry.register(tag, {"dependencies": list(dependencies), "description": tag})
    class _Step(BaseStep):
        def is_satisfied(self):
            return True

        def apply(self):
            return None

    return _Step


@pytest.fixture
def chain(clean_registry):
    _register("t_base")
    _register("t_tools", ["t_base"])
    _register("t_node", ["t_tools"])
    _register("t_npm_pkg", ["t_node"])
    _register("t_ssh")
    return ["t_base", "t_tools", "t_node", "t_npm_pkg", "t_ssh"]


def test_register_sets_tag(clean_registry):
    step_class = _register("t_only")
    assert step_class.tag == "t_only"
    assert StepRegistry.get_step("t_only") is step_class


def test_duplicate_registration_raises(clean_registry):
    _register("t_dup")
    with pytest.raises(ValueError):
        _register("t_dup")


def test_unknown_step_raises_key_error(clean_registry):
    with pytest.raises(KeyError):
        StepRegistry.get_step("t_missing")


def test_dependencies_always_precede_dependents(chain):
    for permutation in itertools.permutations(chain):
        order = StepRegistry.resolve_order(list(permutation))
        assert sorted(order) == sorted(chain)
        for tag in chain:
            for dep in StepRegistry.get_step_dependencies(tag):
                assert order.index(dep) < order.index(tag)


def test_valid_order_is_left_unchanged(chain):
    assert StepRegistry.resolve_order(chain) == chain


def test_missing_dependencies_are_pulled_in(chain):
    assert StepRegistry.resolve_order(["t_node"]) == ["t_base", "t_tools", "t_node"]


def test_missing_dependencies_can_be_left_out(chain):
    assert StepRegistry.resolve_order(
        ["t_ssh", "t_node"], include_dependencies=False
    ) == ["t_ssh", "t_node"]


def test_circular_dependency_raises(clean_registry):
    _register("t_a", ["t_b"])
    _register("t_b", ["t_a"])
    with pytest.raises(ValueError, match="Circular"):
        StepRegistry.resolve_order(["t_a"])
