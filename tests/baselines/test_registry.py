"""
test_registry.py — Tests for baselines/registry.py (PlannerRegistry).

Covers:
    - load_all from callables and "module:attribute" strings
    - failing implementations are logged and skipped
    - discovery unavailable -> empty registry
    - query() reports declared algorithm ids in sorted id order
"""

import logging

import pytest

from baselines.base import BasePlanner
from baselines.interpolation import InterpolationPlanner
from baselines.registry import PlannerRegistry, resolve_factory


def _boom():
    raise RuntimeError("no licence")


class TestResolveFactory:

    def test_callable_passthrough(self):
        assert resolve_factory(InterpolationPlanner) is InterpolationPlanner

    def test_import_string(self):
        assert resolve_factory("baselines.interpolation:InterpolationPlanner") \
            is InterpolationPlanner

    @pytest.mark.parametrize("spec", ["no_colon", 42])
    def test_bad_spec(self, spec):
        with pytest.raises(ValueError):
            resolve_factory(spec)


class TestPlannerRegistry:

    def test_load_and_query(self, scripted_planner, empty_scene):
        registry = PlannerRegistry.load_all(empty_scene, {
            "zeta": lambda: scripted_planner(["z1"]),
            "alpha": "baselines.interpolation:InterpolationPlanner",
        })
        assert registry.ids == ["alpha", "zeta"]
        assert registry.query() == {"alpha": ["linear", "linear_dense"],
                                    "zeta": ["z1"]}
        assert "alpha" in registry and "beta" not in registry
        assert len(registry) == 2

    def test_init_receives_model(self, scripted_planner, empty_scene):
        planner = scripted_planner(["a"])
        registry = PlannerRegistry.load_all(empty_scene, {"p": lambda: planner})
        assert registry.get("p").planner is planner
        assert planner.model is empty_scene

    def test_failures_are_skipped(self, scripted_planner, empty_scene, caplog):
        with caplog.at_level(logging.ERROR):
            registry = PlannerRegistry.load_all(empty_scene, {
                "good": lambda: scripted_planner(["a"]),
                "raises": _boom,
                "missing": "baselines.does_not_exist:Planner",
                "wrong_type": lambda: object(),
            })
        assert registry.ids == ["good"]
        assert "no licence" in caplog.text
        assert "missing" in caplog.text
        assert "wrong_type" in caplog.text

    def test_failing_init_is_skipped(self, empty_scene):
        class BadInit(InterpolationPlanner):
            def init(self, model):
                raise ValueError("model mismatch")

        registry = PlannerRegistry.load_all(empty_scene, {"bad": BadInit})
        assert len(registry) == 0

    def test_discovery_unavailable(self, empty_scene, caplog):
        with caplog.at_level(logging.ERROR):
            registry = PlannerRegistry.load_all(empty_scene, None)
        assert len(registry) == 0
        assert "discovery" in caplog.text

    def test_handle(self, scripted_planner, problem):
        registry = PlannerRegistry()
        handle = registry.add("p", scripted_planner(["a"], accepts=False))
        assert handle.can_service(problem) is False
        assert handle.algorithms == ["a"]
        assert handle.description == "ScriptedPlanner"
        assert isinstance(handle.planner, BasePlanner)
