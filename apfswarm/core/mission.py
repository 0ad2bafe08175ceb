import logging
import pathlib
from dataclasses import dataclass, field

import numpy as np
import yaml

from .state import ControlParams, Obstacle, as_vec3
from ..errors import ConfigurationError


logger = logging.getLogger(__name__)


@dataclass
class AgentSpec:
    start: np.ndarray
    goal: np.ndarray


@dataclass
class Mission:
    agents: list[AgentSpec]
    obstacles: list[Obstacle] = field(default_factory=list)
    params: ControlParams = field(default_factory=ControlParams)

    @property
    def n_agents(self) -> int:
        return len(self.agents)

    def agent_spec(self, agent_id: int) -> AgentSpec:
        if not 0 <= agent_id < len(self.agents):
            raise ConfigurationError(f"agent_id {agent_id} out of range, mission has {len(self.agents)} agents")
        return self.agents[agent_id]


def _field(record, key, where):
    if not isinstance(record, dict):
        raise ConfigurationError(f"{where} must be a mapping, got {type(record).__name__}")
    if key not in record:
        raise ConfigurationError(f"{where} is missing '{key}'")
    return record[key]


def mission_from_dict(cfg: dict, params_override: dict | None = None) -> Mission:
    """
    Build a Mission from the parsed mission mapping:
      agents:    [{start: [x, y, z], goal: [x, y, z]}, ...]
      obstacles: [{position: [x, y, z], radius: r}, ...]   (optional)
      params:    {zeta: ..., q: ..., ...}                  (optional)
    """
    if not isinstance(cfg, dict):
        raise ConfigurationError("mission must be a mapping")
    agents_cfg = _field(cfg, "agents", "mission")
    if not isinstance(agents_cfg, list) or not agents_cfg:
        raise ConfigurationError("mission 'agents' must be a non-empty list")

    agents = []
    for i, a in enumerate(agents_cfg):
        where = f"agents[{i}]"
        agents.append(AgentSpec(
            start=as_vec3(_field(a, "start", where), f"{where}.start"),
            goal=as_vec3(_field(a, "goal", where), f"{where}.goal"),
        ))

    obstacles_cfg = cfg.get("obstacles") or []
    if not isinstance(obstacles_cfg, list):
        raise ConfigurationError("mission 'obstacles' must be a list")
    obstacles = []
    for k, o in enumerate(obstacles_cfg):
        where = f"obstacles[{k}]"
        radius = _field(o, "radius", where)
        try:
            radius = float(radius)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{where}.radius must be a number, got {radius!r}") from exc
        obstacles.append(Obstacle(center=as_vec3(_field(o, "position", where), f"{where}.position"), radius=radius))

    params_cfg = dict(cfg.get("params") or {})
    params_cfg.update(params_override or {})
    params = ControlParams.from_dict(params_cfg)

    logger.info("Loaded mission: %d agents, %d obstacles", len(agents), len(obstacles))
    return Mission(agents=agents, obstacles=obstacles, params=params)


def load_mission(path: str | pathlib.Path, params_override: dict | None = None) -> Mission:
    path = pathlib.Path(path)
    try:
        cfg = yaml.safe_load(path.read_text())
    except OSError as exc:
        raise ConfigurationError(f"cannot read mission file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"invalid YAML in mission file {path}: {exc}") from exc
    if cfg is None:
        raise ConfigurationError(f"mission file {path} is empty")
    return mission_from_dict(cfg, params_override)
