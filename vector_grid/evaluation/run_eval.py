"""
Evaluation Harness
==================

Plays an agent through every seed of the seed bank and reports how far it
gets. The score of a run is the level it reached.

Usage:
    python -m vector_grid.evaluation.run_eval --agent contestants/baseline_bfs --mode lava
    python -m vector_grid.evaluation.run_eval --agent my_agent.py --only 7 42 --output out.json
"""

from __future__ import annotations

import argparse
import importlib.util
import inspect
import json
import logging
import sys
import time
from collections import Counter
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import numpy as np

from vector_grid.grid_core.env_gym import GridRunEnv
from vector_grid.grid_core.rules import GameMode

logger = logging.getLogger(__name__)

DEFAULT_SEED_BANK = Path(__file__).with_name("seed_bank.json")

ActFn = Callable[[Dict[str, np.ndarray]], int]


@dataclass
class EvalResult:
    """One episode."""
    seed: int
    final_level: int
    steps: int
    penalties: int
    termination_reason: str
    elapsed_time: float
    actions: Optional[List[int]] = None


@dataclass
class EvalSummary:
    """Level statistics over a batch of episodes."""
    mode: str
    mean_level: float
    std_level: float
    min_level: int
    max_level: int
    median_level: float
    total_time: float
    results: List[EvalResult]
    reasons: Dict[str, int] = field(default_factory=dict)


class LoadedAgent:
    """
    Uniform wrapper over the two agent shapes a submission may use.

    Calling it returns an action; reset() is forwarded when the agent
    defines one, so seeded agents replay identically.
    """

    def __init__(self, act: ActFn, reset: Optional[Callable[..., Any]] = None, name: str = "agent"):
        self._act = act
        self._reset = reset
        self.name = name

    def __call__(self, obs: Dict[str, np.ndarray]) -> int:
        return int(self._act(obs))

    def reset(self, seed: int) -> None:
        if self._reset is None:
            return
        if "seed" in inspect.signature(self._reset).parameters:
            self._reset(seed=seed)
        else:
            self._reset()


def load_seed_bank(path: Optional[Union[str, Path]] = None) -> List[int]:
    """Read the "seeds" list from a seed bank JSON file."""
    bank_path = Path(path) if path is not None else DEFAULT_SEED_BANK
    data = json.loads(bank_path.read_text())
    return [int(seed) for seed in data["seeds"]]


def _import_agent_module(agent_file: Path):
    module_name = f"grid_agent_{agent_file.parent.name}"
    module_spec = importlib.util.spec_from_file_location(module_name, agent_file)
    if module_spec is None or module_spec.loader is None:
        raise ImportError(f"Cannot import agent from {agent_file}")

    module = importlib.util.module_from_spec(module_spec)
    sys.modules[module_name] = module
    module_spec.loader.exec_module(module)
    return module


def load_agent(agent_path: Union[str, Path]) -> LoadedAgent:
    """
    Load a submission.

    The module (a directory's agent.py, or the given file) must define a
    GridAgent class with act(obs), or a module-level act(obs) function.

    Raises:
        FileNotFoundError: If no agent file exists at the path.
        AttributeError: If the module defines neither shape.
    """
    path = Path(agent_path)
    agent_file = path / "agent.py" if path.is_dir() else path
    if not agent_file.is_file():
        raise FileNotFoundError(f"No agent at {agent_file}")

    module = _import_agent_module(agent_file)
    name = path.stem if path.is_file() else path.name

    agent_cls = getattr(module, "GridAgent", None)
    if agent_cls is not None:
        instance = agent_cls()
        if not callable(getattr(instance, "act", None)):
            raise AttributeError(f"{agent_file}: GridAgent has no act(obs) method")
        return LoadedAgent(instance.act, getattr(instance, "reset", None), name)

    act = getattr(module, "act", None)
    if callable(act):
        return LoadedAgent(act, None, name)

    raise AttributeError(f"{agent_file}: define a GridAgent class or an act(obs) function")


def evaluate_single_seed(
    agent_fn: ActFn,
    seed: int,
    mode: Union[GameMode, str] = GameMode.CLASSIC,
    record_actions: bool = False,
    config_path: Optional[str] = None
) -> EvalResult:
    """
    Play one episode to termination or the step cap.

    Args:
        agent_fn: Callable mapping an observation to an action index.
        seed: Level generation seed.
        mode: Game mode to play.
        record_actions: Keep the action sequence in the result.
        config_path: Path to game_config.yaml. Uses default if None.

    Returns:
        EvalResult for this seed.
    """
    if isinstance(agent_fn, LoadedAgent):
        agent_fn.reset(seed)

    env = GridRunEnv(mode=mode, config_path=config_path)
    actions: Optional[List[int]] = [] if record_actions else None

    started = time.perf_counter()
    obs, info = env.reset(seed=seed)
    terminated = truncated = False
    while not (terminated or truncated):
        action = int(agent_fn(obs))
        if actions is not None:
            actions.append(action)
        obs, _, terminated, truncated, info = env.step(action)
    elapsed = time.perf_counter() - started
    env.close()

    reason = info["terminated_reason"] or info.get("truncated_reason", "")
    logger.info(
        "seed=%d level=%d steps=%d penalties=%d reason=%s (%.2fs)",
        seed, info["level"], info["steps"], info["penalties"], reason, elapsed
    )
    return EvalResult(
        seed=seed,
        final_level=info["level"],
        steps=info["steps"],
        penalties=info["penalties"],
        termination_reason=reason,
        elapsed_time=elapsed,
        actions=actions,
    )


def summarize(mode: GameMode, results: Sequence[EvalResult], total_time: float) -> EvalSummary:
    """Aggregate per-seed results with numpy."""
    levels = np.array([r.final_level for r in results], dtype=np.int64)
    return EvalSummary(
        mode=mode.value,
        mean_level=float(levels.mean()),
        std_level=float(levels.std()),
        min_level=int(levels.min()),
        max_level=int(levels.max()),
        median_level=float(np.median(levels)),
        total_time=total_time,
        results=list(results),
        reasons=dict(Counter(r.termination_reason for r in results)),
    )


def evaluate_agent(
    agent_fn: ActFn,
    seeds: Optional[Sequence[int]] = None,
    mode: Union[GameMode, str] = GameMode.CLASSIC,
    record_actions: bool = False,
    config_path: Optional[str] = None
) -> EvalSummary:
    """
    Evaluate an agent over a list of seeds.

    Args:
        agent_fn: Callable mapping an observation to an action index.
        seeds: Seeds to play. Uses the bundled seed bank if None.
        mode: Game mode to play.
        record_actions: Keep each episode's action sequence.
        config_path: Path to game_config.yaml. Uses default if None.

    Raises:
        ValueError: If seeds is empty.
    """
    seed_list = list(seeds) if seeds is not None else load_seed_bank()
    if not seed_list:
        raise ValueError("Cannot evaluate on an empty seed list")

    mode = GameMode.parse(mode)
    logger.info("Evaluating %d seeds in %s mode", len(seed_list), mode.value)

    started = time.perf_counter()
    results = [
        evaluate_single_seed(agent_fn, seed, mode, record_actions, config_path)
        for seed in seed_list
    ]
    return summarize(mode, results, time.perf_counter() - started)


def format_summary(summary: EvalSummary) -> str:
    """Human-readable summary block."""
    rule = "-" * 44
    lines = [
        rule,
        f"EVALUATION SUMMARY ({summary.mode})",
        rule,
        f"episodes      {len(summary.results)}",
        f"level mean    {summary.mean_level:.2f} +/- {summary.std_level:.2f}",
        f"level median  {summary.median_level:.1f}",
        f"level range   {summary.min_level} .. {summary.max_level}",
    ]
    for reason, count in sorted(summary.reasons.items()):
        lines.append(f"  {reason or 'unfinished':22s} x{count}")
    lines.append(f"wall time     {summary.total_time:.2f}s")
    lines.append(rule)
    return "\n".join(lines)


def save_results(summary: EvalSummary, agent_name: str, output_path: str) -> None:
    """Write the summary and per-seed results as JSON."""
    payload = {"agent": agent_name, "evaluated_at": time.strftime("%Y-%m-%dT%H:%M:%S")}
    payload.update(asdict(summary))
    Path(output_path).write_text(json.dumps(payload, indent=2))
    logger.info("Wrote %d results to %s", len(summary.results), output_path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Score a grid agent over the seed bank")
    parser.add_argument("--agent", required=True, help="Agent directory or agent.py")
    parser.add_argument(
        "--mode",
        default="classic",
        choices=[m.value.lower() for m in GameMode],
        help="Game mode (default: classic)",
    )
    seeds = parser.add_mutually_exclusive_group()
    seeds.add_argument("--seed-bank", help="Alternative seed bank JSON")
    seeds.add_argument("--only", type=int, nargs="+", metavar="SEED", help="Play just these seeds")
    parser.add_argument("--config", help="Alternative game_config.yaml")
    parser.add_argument("--output", help="Write results JSON here")
    parser.add_argument("--record", action="store_true", help="Store action sequences")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    try:
        agent = load_agent(args.agent)
    except (FileNotFoundError, ImportError, AttributeError) as exc:
        logger.error("Could not load agent: %s", exc)
        return 1

    seeds = args.only if args.only else load_seed_bank(args.seed_bank)
    summary = evaluate_agent(
        agent,
        seeds=seeds,
        mode=args.mode,
        record_actions=args.record,
        config_path=args.config,
    )
    print(format_summary(summary))

    if args.output:
        save_results(summary, agent.name, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
