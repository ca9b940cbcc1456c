"""
test_service.py — Tests for bench/service.py (BenchmarkService).
"""

from bench.models import StatusCode
from bench.report import parse_report
from bench.service import BenchmarkService


class TestBenchmarkService:

    def test_query_interfaces(self, registry, empty_scene, tmp_path):
        service = BenchmarkService(registry, empty_scene, tmp_path)
        descs = service.query_interfaces()
        assert [(d.name, d.planner_ids) for d in descs] == [
            ("A", ["x", "y"]), ("B", ["z"])]

    def test_success(self, registry, empty_scene, make_request, tmp_path):
        service = BenchmarkService(registry, empty_scene, tmp_path)
        response = service.compute_benchmark(make_request(default=2))
        assert response.ok
        assert response.status == StatusCode.SUCCESS
        assert response.filename.endswith("run.log")
        _, groups = parse_report((tmp_path / "run.log").read_text(encoding="utf-8"))
        assert all(len(g["rows"]) == 2 for g in groups)
        assert response.responses["B"] is not None

    def test_no_candidates(self, registry, empty_scene, make_request, tmp_path):
        service = BenchmarkService(registry, empty_scene, tmp_path)
        response = service.compute_benchmark(make_request([("Ghost", [])]))
        assert response.status == StatusCode.FAILURE
        assert not response.ok
        assert response.filename == ""
        assert response.responses == {}
        assert list(tmp_path.iterdir()) == []

    def test_invalid_scene_delta(self, registry, two_planners, empty_scene,
                                 make_request, tmp_path):
        service = BenchmarkService(registry, empty_scene, tmp_path)
        request = make_request()
        request.scene = {"obstacles": [{"min": [0, 0, 0], "max": [1, 1, 1]}]}
        response = service.compute_benchmark(request)
        assert response.status == StatusCode.FAILURE
        assert "3" in response.message and "obstacle_0" in response.message
        assert two_planners["A"].calls == []
        assert empty_scene.n_obstacles == 0
        assert list(tmp_path.iterdir()) == []

    def test_write_failure_is_fatal(self, registry, empty_scene, make_request, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("", encoding="utf-8")
        service = BenchmarkService(registry, empty_scene, blocker)
        response = service.compute_benchmark(make_request())
        assert response.status == StatusCode.FAILURE
        assert "run.log" in response.message
