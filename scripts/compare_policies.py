"""
CLI entry point for comparing scheduling policies on a task set.

Usage:
    python -m scripts.compare_policies                               # periodic preset, all policies
    python -m scripts.compare_policies --preset hard-realtime        # overloaded set
    python -m scripts.compare_policies --policy edf --show-schedule  # one policy, tick by tick
    python -m scripts.compare_policies --task T1:2:5 --task T2:3:10:8

Runs entirely in-process: no API server needed.
"""

import argparse
import json
import logging

from config.settings import settings
from models.enums import SchedulingPolicy
from models.errors import SchedulerError
from scheduler.engine import RealTimeScheduler
from scheduler.presets import preset_names

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def parse_task(spec: str) -> tuple:
    """'T1:2:5' → ('T1', 2, 5, None); 'T2:3:10:8' → ('T2', 3, 10, 8)."""
    parts = spec.split(":")
    if len(parts) not in (3, 4):
        raise argparse.ArgumentTypeError(
            f"Task must look like ID:C:T or ID:C:T:D, got '{spec}'"
        )
    try:
        numbers = [int(p) for p in parts[1:]]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Non-integer value in task '{spec}'") from None
    deadline = numbers[2] if len(numbers) == 3 else None
    return parts[0], numbers[0], numbers[1], deadline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Real-Time Scheduling Policy Comparison")
    parser.add_argument(
        "--preset", type=str, default="periodic", choices=preset_names(),
        help="Predefined task set (ignored when --task is given)",
    )
    parser.add_argument(
        "--task", type=parse_task, action="append", default=[],
        help="Custom task as ID:C:T[:D]; repeat for several tasks",
    )
    parser.add_argument(
        "--policy", type=str, default="all",
        choices=[p.value for p in SchedulingPolicy] + ["all"],
        help="Which policy to run (default: all)",
    )
    parser.add_argument(
        "--simulation-time", type=int, default=None,
        help="Ticks to simulate (default: hyperperiod)",
    )
    parser.add_argument(
        "--show-schedule", action="store_true",
        help="Print every schedule event",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Dump full results as JSON",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    scheduler = RealTimeScheduler()

    try:
        if args.task:
            for task_id, c, t, d in args.task:
                scheduler.add_task(task_id, c, t, d)
        else:
            scheduler.load_preset(args.preset)

        policies = (
            list(SchedulingPolicy) if args.policy == "all"
            else [SchedulingPolicy(args.policy)]
        )
        comparison = scheduler.compare(policies, args.simulation_time)
    except SchedulerError as e:
        logger.error(str(e))
        return 1

    report = scheduler.analyze()
    print("=== Real-Time Scheduling Comparison ===")
    print(
        f"Tasks: {report.task_count} | U = {report.total_utilization:.4f} | "
        f"RMS bound = {report.rms_utilization_bound:.4f} | "
        f"hyperperiod = {report.hyper_period}\n"
    )

    if args.json:
        print(json.dumps(comparison.to_dict(include_schedule=args.show_schedule), indent=2))
        return 0

    if args.show_schedule:
        for result in comparison.detailed_results.values():
            print(f"--- {result.algorithm} ---")
            for event in result.schedule:
                print(f"  t={event.time:<5} {event.action.value:<16} {event.task_id}")
            print()

    print("{:<6} {:>12} {:>10} {:>8} {:>12} {:>10} {:>8}".format(
        "Policy", "Schedulable", "Success%", "Missed", "Preemptions", "Switches", "CPU%"
    ))
    print("-" * 72)
    for row in comparison.results:
        schedulable = "N/A" if row.schedulable is None else str(row.schedulable)
        print("{:<6} {:>12} {:>10.2f} {:>8} {:>12} {:>10} {:>8.2f}".format(
            row.algorithm, schedulable, row.success_rate, row.missed_deadlines,
            row.preemptions, row.context_switches, row.cpu_utilization,
        ))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
