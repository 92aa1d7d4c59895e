"""独立演示脚本：加载配置，用随机或启发式智能体驱动工业基准若干步。

要点：
- 从配置文件加载常量与边界，不在代码中硬编码（默认使用包内置 default.yaml）
- 实时记录结构化日志；结束时打印指标摘要，可选保存轨迹图与 JSON 记录
"""

from __future__ import annotations

import argparse
import json
import os
from typing import List, Optional

from industrial_benchmark.agents.base_agent import AgentConfig, BaseAgent
from industrial_benchmark.agents.heuristic_agent import HeuristicAgent, HeuristicAgentConfig
from industrial_benchmark.agents.random_agent import RandomAgent
from industrial_benchmark.core.metrics import EpisodeMetrics
from industrial_benchmark.core.runner import Runner
from industrial_benchmark.errors import ConfigurationError
from industrial_benchmark.sim_env.dynamics import IndustrialBenchmarkDynamics
from industrial_benchmark.utils.config_loader import load_benchmark_config
from industrial_benchmark.utils.logger import configure_logging, get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run an industrial benchmark rollout.")
    parser.add_argument("--config", default=None, help="YAML or .properties config (default: bundled default.yaml)")
    parser.add_argument("--steps", type=int, default=1000, help="number of steps to run")
    parser.add_argument("--agent", choices=("random", "heuristic"), default="random")
    parser.add_argument("--seed", type=int, default=None, help="override SEED from the config")
    parser.add_argument("--plot", default=None, metavar="DIR", help="save trajectory plot and records to DIR")
    parser.add_argument("--log-level", default="INFO")
    return parser


def make_agent(kind: str, seed: Optional[int]) -> BaseAgent:
    if kind == "heuristic":
        return HeuristicAgent(HeuristicAgentConfig(seed=seed))
    return RandomAgent(AgentConfig(seed=seed))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    log = get_logger(__name__)

    # 1) 加载配置
    overrides = {"SEED": args.seed} if args.seed is not None else {}
    try:
        cfg = load_benchmark_config(args.config, **overrides)
        dynamics = IndustrialBenchmarkDynamics(cfg)
    except (ConfigurationError, FileNotFoundError) as e:
        log.error("main.config_failed", error=str(e))
        return 2

    # 2) 运行
    runner = Runner(dynamics, make_agent(args.agent, args.seed))
    records = runner.run(args.steps)
    summary = EpisodeMetrics().evaluate(records)
    log.info("main.summary", agent=args.agent, **summary)

    print("\n[Rollout summary]")
    for key, value in summary.items():
        print(f"  {key:>18s}: {value:.4f}")

    # 3) 可选：保存轨迹
    if args.plot:
        from industrial_benchmark.utils.visualization import plot_trajectory

        path = plot_trajectory(records, args.plot, title=f"{args.agent} agent")
        with open(os.path.join(args.plot, "records.json"), "w", encoding="utf-8") as f:
            json.dump({"summary": summary, "records": records}, f, ensure_ascii=False, indent=2)
        print(f"  plot saved to {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
