"""
conftest.py — pytest fixtures shared across the test suite.

Provides a scripted fake planner (outcomes fixed per algorithm id), a
configuration-space BoxScene and registries built from them, so that
individual test modules stay short and focused.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from baselines.base import BasePlanner, Trajectory, TrajectorySegment
from baselines.registry import PlannerRegistry
from bench.models import BenchmarkRequest, PlannerRestriction, PlanningProblem
from bench.scene import BoxScene


# =========================================================================
# Fake planner
# =========================================================================

class ScriptedPlanner(BasePlanner):
    """Returns a fixed outcome per algorithm id and counts solve() calls.

    ``outcomes`` maps algorithm id -> bool (solved or not); ids missing from
    it are solved.  A solved trial returns a straight 3-point trajectory.
    """

    def __init__(self, algorithms, outcomes=None, accepts=True,
                 description=None, segment_time=0.0):
        self._algorithms = list(algorithms)
        self.outcomes = dict(outcomes or {})
        self.accepts = accepts
        self._description = description
        self.segment_time = segment_time
        self.calls = []
        self.model = None

    def init(self, model):
        self.model = model

    @property
    def algorithms(self):
        return list(self._algorithms)

    @property
    def description(self):
        return self._description or super().description

    def can_service(self, problem):
        return self.accepts

    def solve(self, scene, problem):
        self.calls.append(problem.planner_id)
        if not self.outcomes.get(problem.planner_id, True):
            return False, Trajectory()
        path = np.array([[0.0, 0.0], [0.5, 0.0], [1.0, 0.0]])
        return True, Trajectory.single(path, "plan", self.segment_time)


# =========================================================================
# Fixtures
# =========================================================================

@pytest.fixture
def empty_scene():
    """2-DOF scene without obstacles."""
    return BoxScene(ndim=2, name="empty")


@pytest.fixture
def pillar_scene():
    """2-DOF scene with one box at x in [0.4, 0.6], y in [0.5, 1.0]."""
    scene = BoxScene(ndim=2, name="pillar")
    scene.add_obstacle([0.4, 0.5], [0.6, 1.0], name="pillar")
    return scene


@pytest.fixture
def problem():
    return PlanningProblem(group_name="arm", start=[0.0, 0.0], goal=[1.0, 0.0],
                           allowed_planning_time=1.5)


@pytest.fixture
def two_planners():
    """Planner A solves "x", fails "y"; planner B solves "z"."""
    return {
        "A": ScriptedPlanner(["x", "y"], outcomes={"y": False}, description="PlannerA"),
        "B": ScriptedPlanner(["z"], description="PlannerB"),
    }


@pytest.fixture
def registry(two_planners, empty_scene):
    return PlannerRegistry.load_all(
        empty_scene, {pid: (lambda p=p: p) for pid, p in two_planners.items()})


@pytest.fixture
def make_request(problem):
    def _make(restrictions=(), default=1, overrides=(), filename="run.log"):
        return BenchmarkRequest(
            problem=problem,
            planner_interfaces=[PlannerRestriction(name, list(ids))
                                for name, ids in restrictions],
            default_average_count=default,
            average_count=list(overrides),
            filename=filename,
        )
    return _make


@pytest.fixture
def scripted_planner():
    """The ScriptedPlanner class, for tests that build their own planners."""
    return ScriptedPlanner
