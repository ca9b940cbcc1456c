"""
Smoke tests for baselines/interpolation.py and baselines/base.py.
"""

import numpy as np
import pytest

from baselines.base import BasePlanner, Trajectory, TrajectorySegment
from baselines.interpolation import InterpolationPlanner
from bench.models import PlanningProblem


@pytest.fixture
def planner(empty_scene):
    p = InterpolationPlanner(step=0.25)
    p.init(empty_scene)
    return p


class TestTrajectory:

    def test_segment_coerces_array(self):
        seg = TrajectorySegment([[0, 0], [1, 1]], "plan", 0.1)
        assert isinstance(seg.waypoints, np.ndarray)
        assert seg.n_waypoints == 2

    def test_flat_input_is_one_waypoint(self):
        traj = Trajectory.single([0.5, 0.0])
        assert traj.segments[0].waypoints.shape == (1, 2)
        assert traj.n_waypoints == 1
        assert TrajectorySegment([]).n_waypoints == 0

    def test_rejects_higher_rank(self):
        with pytest.raises(ValueError):
            TrajectorySegment(np.zeros((2, 2, 2)))

    def test_totals(self):
        traj = Trajectory([TrajectorySegment([[0.0], [1.0]], "a", 0.1),
                           TrajectorySegment([[1.0], [2.0], [3.0]], "b", 0.2)])
        assert traj.n_waypoints == 5
        assert traj.processing_time == pytest.approx(0.3)
        assert not traj.is_empty
        assert Trajectory().is_empty

    def test_cannot_instantiate_abc(self):
        with pytest.raises(TypeError):
            BasePlanner()  # type: ignore


class TestInterpolationPlanner:

    def test_bad_step(self):
        with pytest.raises(ValueError):
            InterpolationPlanner(step=0.0)

    def test_can_service(self, planner, problem):
        assert planner.can_service(problem)
        assert not planner.can_service(PlanningProblem(start=[0, 0, 0], goal=[1, 1, 1]))
        assert not planner.can_service(PlanningProblem())

    def test_linear(self, planner, empty_scene, problem):
        problem.planner_id = "linear"
        solved, traj = planner.solve(empty_scene, problem)
        assert solved
        wp = traj.segments[0].waypoints
        np.testing.assert_allclose(wp[0], problem.start)
        np.testing.assert_allclose(wp[-1], problem.goal)
        assert traj.segments[0].n_waypoints == 5

    def test_linear_dense_group_qualified(self, planner, empty_scene, problem):
        problem.planner_id = "arm[linear_dense]"
        solved, traj = planner.solve(empty_scene, problem)
        assert solved
        assert [s.description for s in traj.segments] == ["plan", "simplify"]
        assert traj.segments[0].n_waypoints == 17

    def test_blocked(self, planner, pillar_scene):
        problem = PlanningProblem(start=[0.0, 0.75], goal=[1.0, 0.75],
                                  planner_id="linear")
        solved, traj = planner.solve(pillar_scene, problem)
        assert not solved
        assert traj.is_empty

    def test_unknown_algorithm(self, planner, empty_scene, problem):
        problem.planner_id = "RRT"
        assert planner.solve(empty_scene, problem) == (False, Trajectory())
