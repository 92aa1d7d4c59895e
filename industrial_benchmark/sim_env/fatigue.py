"""尖峰式疲劳过程（regime-switching spiking noise）。

每步流程：
1. 由 (velocity, gain, setpoint) 计算有效动作 alpha/beta
2. 指数噪声经 logistic 压缩到 (-1, 1)
3. 以 beta/alpha 为概率注入尖峰（概率先夹到 [0.001, 0.999]）
4. 更新增益/速度两个隐变量：超过放大起点后按 1.1 倍放大直至上限 5.0；动作处于容差内则复位
5. 任一隐变量达到上限时使用重尾的"坏"噪声
6. 基础疲劳 dynOld = max(0, DBase/(DVelocity*v + DSetPoint) - DGain*g^2)
7. fatigue = (2*dyn + 1) * dynOld / 3

随机数的抽取顺序固定：exp(gain), exp(velocity), uniform(gain), bernoulli(gain),
uniform(velocity), bernoulli(velocity), [gaussian(bad noise)]。
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from industrial_benchmark.errors import RuntimeConfigError
from industrial_benchmark.sim_env.actions import EffectiveAction
from industrial_benchmark.sim_env.state import DataVector, MarkovianStateDescription as MSD
from industrial_benchmark.utils.config_loader import BenchmarkConfig


EXP_MEAN = 0.1
ACTION_TOLERANCE = 0.05
FATIGUE_AMPLIFICATION = 1.1
FATIGUE_AMPLIFICATION_MAX = 5.0
FATIGUE_AMPLIFICATION_START = 1.2
SPIKE_PROBABILITY_MIN = 0.001
SPIKE_PROBABILITY_MAX = 0.999
BAD_NOISE_MEAN = 0.6
BAD_NOISE_STD = 0.1


@dataclass(frozen=True)
class FatigueResult:
    fatigue: float
    fatigue_base: float
    latent_velocity: float
    latent_gain: float
    velocity_alpha: float
    gain_beta: float


def base_noise(rng: np.random.Generator) -> float:
    return 2.0 * (1.0 / (1.0 + math.exp(-rng.exponential(EXP_MEAN))) - 0.5)


def add_spike(noise: float, effective: float, rng: np.random.Generator) -> float:
    """以概率 effective 注入尖峰：noise += (1 - noise) * U(0,1) * effective。"""
    uniform = rng.uniform(0.0, 1.0)
    p = min(max(SPIKE_PROBABILITY_MIN, effective), SPIKE_PROBABILITY_MAX)
    hit = rng.binomial(1, p)
    return noise + (1.0 - noise) * uniform * hit * effective


def update_latent(latent: float, effective: float, noise: float) -> float:
    if latent >= FATIGUE_AMPLIFICATION_START:
        latent = min(FATIGUE_AMPLIFICATION_MAX, latent * FATIGUE_AMPLIFICATION)
    elif effective > ACTION_TOLERANCE:
        latent = latent * 0.9 + noise / 3.0
    # 执行器处于静止范围时复位
    if effective <= ACTION_TOLERANCE:
        latent = effective
    return latent


class FatigueProcess:
    def __init__(self, config: BenchmarkConfig):
        self._config = config

    def _const(self, key: str) -> float:
        return self._config.get_float(key, error=RuntimeConfigError)

    def base_level(self, velocity: float, gain: float) -> float:
        d_gain = self._const("DGain")
        d_velocity = self._const("DVelocity")
        d_setpoint = self._const("DSetPoint")
        d_base = self._const("DBase")
        return max(0.0, d_base / (d_velocity * velocity + d_setpoint) - d_gain * gain * gain)

    def compute(self, velocity: float, gain: float, setpoint: float, latent_velocity: float, latent_gain: float, rng: np.random.Generator) -> FatigueResult:
        eff = EffectiveAction(velocity, gain, setpoint)
        alpha, beta = eff.velocity_alpha, eff.gain_beta

        noise_gain = base_noise(rng)
        noise_velocity = base_noise(rng)

        noise_gain = add_spike(noise_gain, beta, rng)
        noise_velocity = add_spike(noise_velocity, alpha, rng)

        latent_gain = update_latent(latent_gain, beta, noise_gain)
        latent_velocity = update_latent(latent_velocity, alpha, noise_velocity)

        if max(latent_velocity, latent_gain) == FATIGUE_AMPLIFICATION_MAX:
            dyn = 1.0 / (1.0 + math.exp(-4.0 * rng.normal(BAD_NOISE_MEAN, BAD_NOISE_STD)))
        else:
            dyn = max(noise_gain, noise_velocity)

        dyn_old = self.base_level(velocity, gain)
        fatigue = (2.0 * dyn + 1.0) * dyn_old / 3.0
        return FatigueResult(fatigue, dyn_old, latent_velocity, latent_gain, alpha, beta)

    def update(self, state: DataVector, rng: np.random.Generator) -> FatigueResult:
        """读取状态、计算并写回疲劳相关字段。"""
        result = self.compute(
            state.get(MSD.Velocity),
            state.get(MSD.Gain),
            state.get(MSD.SetPoint),
            state.get(MSD.FatigueLatent1),
            state.get(MSD.FatigueLatent2),
            rng,
        )
        state.set(MSD.Fatigue, result.fatigue)
        state.set(MSD.FatigueBase, result.fatigue_base)
        state.set(MSD.FatigueLatent1, result.latent_velocity)
        state.set(MSD.FatigueLatent2, result.latent_gain)
        state.set(MSD.EffectiveActionVelocityAlpha, result.velocity_alpha)
        state.set(MSD.EffectiveActionGainBeta, result.gain_beta)
        return result
