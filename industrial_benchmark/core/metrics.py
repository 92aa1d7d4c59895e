"""轨迹指标评估：对 Runner 产生的逐步记录做聚合。

返回：
- reward_mean / reward_last / reward_min / reward_max
- fatigue_mean / consumption_mean
- steps
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from industrial_benchmark.sim_env.state import ObservableStateDescription as OSD
from industrial_benchmark.utils import signal_processing as sp


def column(records: Sequence[Dict[str, Any]], key: str) -> List[float]:
    return [float(r[key]) for r in records]


class EpisodeMetrics:
    def evaluate(self, records: Sequence[Dict[str, Any]]) -> Dict[str, float]:
        rewards = column(records, "reward")
        return {
            "steps": float(len(records)),
            "reward_mean": sp.mean(rewards),
            "reward_last": sp.last(rewards),
            "reward_min": sp.minimum(rewards),
            "reward_max": sp.maximum(rewards),
            "fatigue_mean": sp.mean(column(records, OSD.Fatigue)),
            "consumption_mean": sp.mean(column(records, OSD.Consumption)),
        }
