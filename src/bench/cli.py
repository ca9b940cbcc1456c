"""
bench/cli.py — 命令行入口

用法:
    motion-bench run --config configs/demo_benchmark.json
    motion-bench run --config configs/demo_benchmark.json --runs 10 -v
    motion-bench query --config configs/demo_benchmark.json
    python -m bench run --config ... --output-dir /tmp/bench --filename demo.log
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from baselines.registry import PlannerRegistry
from .config import BenchmarkConfig
from .errors import BenchmarkError
from .scene import make_scene
from .service import BenchmarkService

logger = logging.getLogger(__name__)

LOG_FMT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="motion-bench",
        description="Benchmark interchangeable motion planners on a shared problem")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="DEBUG logging")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="only warnings and errors")
    sub = parser.add_subparsers(dest="command", required=True)

    p_run = sub.add_parser("run", help="run a benchmark and write the report")
    p_run.add_argument("--config", required=True, help="JSON config path")
    p_run.add_argument("--output-dir", default=None,
                       help="override output_dir from the config")
    p_run.add_argument("--runs", type=int, default=None,
                       help="override default_average_count")
    p_run.add_argument("--filename", default=None,
                       help="report file name (default: host + start time)")

    p_query = sub.add_parser("query", help="list loaded planners and algorithms")
    p_query.add_argument("--config", required=True, help="JSON config path")
    return parser


def _setup_logging(args, cfg: Optional[BenchmarkConfig]) -> None:
    level = cfg.log_level.upper() if cfg else "INFO"
    if args.verbose:
        level = "DEBUG"
    elif args.quiet:
        level = "WARNING"
    logging.basicConfig(level=level, format=LOG_FMT, datefmt="%H:%M:%S")


def _make_service(cfg: BenchmarkConfig, output_dir: Optional[str]) -> BenchmarkService:
    scene = make_scene(cfg.scene)
    registry = PlannerRegistry.load_all(scene, cfg.planners)
    return BenchmarkService(registry, scene, output_dir or cfg.output_dir)


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        cfg = BenchmarkConfig.from_json(args.config)
    except BenchmarkError as exc:
        _setup_logging(args, None)
        logger.error("%s", exc)
        return 1
    _setup_logging(args, cfg)

    try:
        if args.command == "query":
            service = _make_service(cfg, None)
            for desc in service.query_interfaces():
                print(f"{desc.name}: {' '.join(desc.planner_ids)}")
            return 0

        service = _make_service(cfg, args.output_dir)
        request = cfg.build_request(runs=args.runs, filename=args.filename)
        response = service.compute_benchmark(request)
    except BenchmarkError as exc:
        logger.error("%s", exc)
        return 1

    if not response.ok:
        return 1
    for planner_id, traj in response.responses.items():
        status = (f"{traj.n_waypoints} waypoints" if traj is not None
                  else "no solution")
        print(f"{planner_id}: {status}")
    print(response.filename)
    return 0


if __name__ == "__main__":
    sys.exit(main())
