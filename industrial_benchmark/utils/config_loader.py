"""配置加载工具：集中读取与校验基准配置。

为何需要：
- 避免在动力学类中硬编码常量与边界，提升解耦与可测试性
- 统一加载入口：YAML（推荐）或 key=value 文本（.properties）均归一化为扁平映射

约定：
- YAML 中的嵌套分组（如 state/dynamics/reward）仅用于可读性，加载时按叶子键展平
- 所有数值读取通过 BenchmarkConfig 的类型化访问器完成，缺失的必需键抛出 ConfigurationError
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type

import yaml

from industrial_benchmark.errors import ConfigurationError
from industrial_benchmark.utils.logger import get_logger


log = get_logger(__name__)

REQUIRED = object()

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

# 以最先出现的 = 或 : 作为键值分隔符
_SEPARATOR = re.compile(r"\s*[=:]\s*")


def _read_yaml(p: Path) -> Dict[str, Any]:
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config root must be a mapping: {p}")
    return data


def _read_properties(p: Path) -> Dict[str, Any]:
    """解析 key=value / key: value 文本，忽略 # 与 ! 开头的注释行。"""
    out: Dict[str, Any] = {}
    with p.open("r", encoding="utf-8") as f:
        for lineno, raw in enumerate(f, start=1):
            line = raw.strip()
            if not line or line.startswith(("#", "!")):
                continue
            parts = _SEPARATOR.split(line, maxsplit=1)
            if len(parts) != 2:
                raise ConfigurationError(f"{p}:{lineno}: expected 'key=value', got {line!r}")
            out[parts[0].strip()] = parts[1].strip()
    return out


def _flatten(data: Mapping[str, Any], out: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    out = {} if out is None else out
    for key, value in data.items():
        if isinstance(value, Mapping):
            _flatten(value, out)
            continue
        if key in out:
            raise ConfigurationError(f"Duplicate config key after flattening: {key}")
        out[str(key)] = value
    return out


def load_config(path: str | Path) -> Dict[str, Any]:
    """从 YAML 或 .properties 文件加载配置为扁平字典。"""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")

    if p.suffix.lower() in {".properties", ".txt", ".cfg"}:
        cfg = _read_properties(p)
    else:
        cfg = _flatten(_read_yaml(p))

    log.info("config.loaded", path=str(p), keys=len(cfg))
    return cfg


def default_config_path() -> Path:
    """包内置的默认配置（industrial_benchmark/config/default.yaml）。"""
    return Path(__file__).resolve().parents[1] / "config" / "default.yaml"


def parse_float_array(value: Any) -> List[float]:
    """将 "0.1, 0.2,\\t0.7" 或 [0.1, 0.2, 0.7] 转为 float 列表（忽略空白）。"""
    if isinstance(value, str):
        compact = "".join(value.split())
        parts: Iterable[Any] = compact.split(",") if compact else []
    elif isinstance(value, (list, tuple)):
        parts = value
    else:
        parts = [value]
    try:
        result = [float(x) for x in parts]
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Cannot parse float array from {value!r}: {e}") from e
    if not result:
        raise ConfigurationError(f"Empty float array: {value!r}")
    return result


class BenchmarkConfig:
    """扁平配置映射 + 类型化访问器。

    - get_float/get_int/get_bool：default=REQUIRED 时缺失即抛错
    - error 参数允许调用方指定抛出的异常类型（步进中的惰性常量使用 RuntimeConfigError）
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = dict(values or {})

    @classmethod
    def from_file(cls, path: str | Path) -> "BenchmarkConfig":
        return cls(load_config(path))

    @classmethod
    def default(cls) -> "BenchmarkConfig":
        return cls.from_file(default_config_path())

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __repr__(self) -> str:
        return f"BenchmarkConfig({len(self._values)} keys)"

    def keys(self) -> List[str]:
        return list(self._values.keys())

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def with_overrides(self, **overrides: Any) -> "BenchmarkConfig":
        """返回合并覆盖项后的新配置；值为 None 的覆盖项表示删除该键。"""
        merged = dict(self._values)
        for k, v in overrides.items():
            if v is None:
                merged.pop(k, None)
            else:
                merged[k] = v
        return BenchmarkConfig(merged)

    def get_raw(self, key: str, default: Any = REQUIRED, *, error: Type[ConfigurationError] = ConfigurationError) -> Any:
        value = self._values.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            if default is REQUIRED:
                raise error(f"Missing required config key: {key}")
            return default
        return value

    def get_float(self, key: str, default: Any = REQUIRED, *, error: Type[ConfigurationError] = ConfigurationError) -> float:
        value = self.get_raw(key, default, error=error)
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise error(f"Config key {key} is not a float: {value!r}") from e

    def get_int(self, key: str, default: Any = REQUIRED, *, error: Type[ConfigurationError] = ConfigurationError) -> int:
        value = self.get_raw(key, default, error=error)
        if value is None:
            return None
        if isinstance(value, bool):
            raise error(f"Config key {key} is not an integer: {value!r}")
        if isinstance(value, (int, str)):
            try:
                return int(value)
            except ValueError:
                pass
        try:
            as_float = float(value)
        except (TypeError, ValueError) as e:
            raise error(f"Config key {key} is not an integer: {value!r}") from e
        if not as_float.is_integer():
            raise error(f"Config key {key} is not an integer: {value!r}")
        return int(as_float)

    def get_bool(self, key: str, default: Any = REQUIRED, *, error: Type[ConfigurationError] = ConfigurationError) -> bool:
        value = self.get_raw(key, default, error=error)
        if value is None:
            return None
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise error(f"Config key {key} is not a boolean: {value!r}")

    def get_float_array(self, key: str) -> List[float]:
        return parse_float_array(self.get_raw(key))


def load_benchmark_config(path: str | Path | None = None, **overrides: Any) -> BenchmarkConfig:
    """加载配置文件（默认使用内置 default.yaml）并应用覆盖项。"""
    cfg = BenchmarkConfig.from_file(path) if path is not None else BenchmarkConfig.default()
    if overrides:
        cfg = cfg.with_overrides(**overrides)
    return cfg
