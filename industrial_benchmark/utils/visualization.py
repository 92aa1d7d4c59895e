"""可视化工具：将 Runner 的逐步记录绘制为多子图曲线并保存。

使用说明：
- records 为 Runner.run() 的返回值（每步一个字典，含 step/reward 与可观测变量）
- 默认绘制 SetPoint/Velocity/Gain/Shift、Fatigue/Consumption 与 reward（附滑动平均）
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional, Sequence

import numpy as np

from industrial_benchmark.utils import signal_processing as sp


_PANELS = (
    ("Control", ("SetPoint", "Velocity", "Gain", "Shift")),
    ("Outputs", ("Fatigue", "Consumption")),
    ("Reward", ("reward",)),
)


def plot_trajectory(
    records: Sequence[Dict[str, Any]],
    save_dir: str,
    *,
    filename: str = "trajectory.png",
    title: str = "",
    smoothing_window: int = 20,
) -> Optional[str]:
    """绘制轨迹并保存，返回图片路径；records 为空时返回 None。"""
    if not records:
        return None

    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    os.makedirs(save_dir, exist_ok=True)
    steps = np.asarray([float(r["step"]) for r in records], dtype=float)

    fig, axes = plt.subplots(len(_PANELS), 1, figsize=(9, 2.6 * len(_PANELS)), sharex=True)
    for ax, (panel_title, keys) in zip(axes, _PANELS):
        for key in keys:
            if key not in records[0]:
                continue
            values = np.asarray([float(r[key]) for r in records], dtype=float)
            ax.plot(steps, values, label=key, linewidth=0.9)
            if key == "reward":
                smooth = sp.moving_average(values, smoothing_window)
                if smooth.size:
                    ax.plot(steps[smoothing_window - 1:], smooth, label=f"reward (MA{smoothing_window})")
        ax.set_title(panel_title)
        ax.grid(True)
        ax.legend(loc="best", fontsize="small")
    axes[-1].set_xlabel("Step")
    if title:
        fig.suptitle(title)
    fig.tight_layout()

    save_path = os.path.join(save_dir, filename)
    fig.savefig(save_path, dpi=160)
    plt.close(fig)
    return save_path
