import copy
import pathlib

import yaml

from .core.mission import load_mission, mission_from_dict
from .errors import ConfigurationError


DEFAULT_CONFIG = {
    "steps": 3000,
    "render_every": 5,
    "realtime": False,
    "goal_tolerance": 0.05,
    "bounds": [-5, 5, -5, 5, 0, 4],
    "network": {"loss_prob": 0.0, "seed": 0},
    "params": {},
    "mission_file": None,
    "mission": {
        "agents": [
            {"start": [-3, 0, 1], "goal": [3, 0, 1]},
            {"start": [3, 0, 1], "goal": [-3, 0, 1]},
            {"start": [0, -3, 1], "goal": [0, 3, 1]},
            {"start": [0, 3, 1], "goal": [0, -3, 1]},
        ],
        "obstacles": [
            {"position": [0, 0, 1], "radius": 0.4},
        ],
    },
}


def deep_update(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_update(out[k], v)
        else:
            out[k] = v
    return out


def _merge(base: dict, cfg: dict) -> dict:
    out = deep_update(base, cfg)
    if "mission" in cfg:
        # a mission is replaced as a whole, never merged with an inherited one
        out["mission"] = copy.deepcopy(cfg["mission"])
    return out


def load_config(path: pathlib.Path | None) -> dict:
    """
    Load a run config, deep-merged over DEFAULT_CONFIG or over the file named by
    `inherits:`. Always returns a fresh dict.
    """
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    path = pathlib.Path(path)
    try:
        cfg = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"cannot load config {path}: {exc}") from exc
    if cfg is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    if not isinstance(cfg, dict):
        raise ConfigurationError(f"config {path} must be a mapping")
    if cfg.get("mission_file") and not pathlib.Path(cfg["mission_file"]).is_absolute():
        cfg["mission_file"] = str(path.parent / cfg["mission_file"])
    if "inherits" in cfg:
        base_cfg = load_config(path.parent / cfg["inherits"])
        cfg = {k: v for k, v in cfg.items() if k != "inherits"}
        return _merge(base_cfg, cfg)
    return _merge(copy.deepcopy(DEFAULT_CONFIG), cfg)


def build_mission(cfg):
    if cfg.get("mission_file"):
        return load_mission(cfg["mission_file"], params_override=cfg.get("params"))
    return mission_from_dict(cfg["mission"], params_override=cfg.get("params"))
