from dataclasses import dataclass, field
import numpy as np

from ..errors import ConfigurationError


def as_vec3(value, name: str = "vector") -> np.ndarray:
    try:
        vec = np.array(value, dtype=float)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be 3 numbers, got {value!r}") from exc
    if vec.shape != (3,) or not np.all(np.isfinite(vec)):
        raise ConfigurationError(f"{name} must be 3 finite numbers, got {value!r}")
    return vec


@dataclass
class AgentState:
    id: int
    pos: np.ndarray      # shape (3,)
    vel: np.ndarray      # shape (3,)

    def copy(self) -> "AgentState":
        return AgentState(id=self.id, pos=self.pos.copy(), vel=self.vel.copy())


@dataclass
class SwarmState:
    agents: dict[int, AgentState]
    t: float


@dataclass(frozen=True, eq=False)
class Obstacle:
    center: np.ndarray
    radius: float

    def __post_init__(self):
        object.__setattr__(self, "center", as_vec3(self.center, "obstacle position"))
        radius = float(self.radius)
        if radius < 0:
            raise ConfigurationError(f"obstacle radius must be >= 0, got {radius}")
        object.__setattr__(self, "radius", radius)
        self.center.setflags(write=False)


@dataclass(frozen=True)
class ControlParams:
    zeta: float = 1.0          # attraction gain
    damp: float = 1.0          # damping gain
    obs: float = 20.0          # repulsion gain
    q: float = 3.0             # repulsion-zone multiplier
    radius: float = 0.15       # agent body radius (m)
    max_acc: float = 6.0       # per-axis bound (m/s^2)
    dt: float = 0.02           # tick period (s)
    min_distance: float = 1e-3 # floor on repulsion distance, 0 disables
    accumulate_obstacles: bool = True

    def __post_init__(self):
        for name in ("zeta", "damp", "obs", "q", "radius", "max_acc", "dt", "min_distance"):
            if not np.isfinite(getattr(self, name)):
                raise ConfigurationError(f"{name} must be finite, got {getattr(self, name)}")
        if self.radius <= 0:
            raise ConfigurationError(f"radius must be > 0, got {self.radius}")
        if self.dt <= 0:
            raise ConfigurationError(f"dt must be > 0, got {self.dt}")
        if self.q < 1:
            raise ConfigurationError(f"q must be >= 1, got {self.q}")
        if self.max_acc <= 0:
            raise ConfigurationError(f"max_acc must be > 0, got {self.max_acc}")
        if self.min_distance < 0:
            raise ConfigurationError(f"min_distance must be >= 0, got {self.min_distance}")
        # the floor must stay inside the smallest influence zone, q*radius for a zero-radius obstacle
        if self.min_distance >= self.q * self.radius:
            raise ConfigurationError(
                f"min_distance must be < q*radius ({self.q * self.radius}), got {self.min_distance}"
            )

    @classmethod
    def from_dict(cls, cfg: dict | None) -> "ControlParams":
        cfg = dict(cfg or {})
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(cfg) - known)
        if unknown:
            raise ConfigurationError(f"unknown control parameters: {', '.join(unknown)}")
        try:
            values = {k: (bool(v) if k == "accumulate_obstacles" else float(v)) for k, v in cfg.items()}
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"control parameters must be numeric: {exc}") from exc
        return cls(**values)


@dataclass
class PeerPositions:
    """
    Last observed position of every agent, indexed by agent id.
    Slots hold None until a pose is observed, and again after mark_unavailable().
    """
    size: int
    _slots: list = field(init=False, repr=False)

    def __post_init__(self):
        if self.size < 1:
            raise ConfigurationError(f"agent count must be >= 1, got {self.size}")
        self._slots = [None] * self.size

    def __len__(self):
        return self.size

    def _check(self, agent_id: int):
        if not 0 <= agent_id < self.size:
            raise IndexError(f"agent id {agent_id} out of range [0, {self.size})")

    def update(self, agent_id: int, pos):
        self._check(agent_id)
        self._slots[agent_id] = np.array(pos, dtype=float)

    def mark_unavailable(self, agent_id: int):
        self._check(agent_id)
        self._slots[agent_id] = None

    def get(self, agent_id: int) -> np.ndarray | None:
        self._check(agent_id)
        return self._slots[agent_id]

    def is_available(self, agent_id: int) -> bool:
        return self.get(agent_id) is not None

    def available(self, exclude: int | None = None):
        """Yield (agent_id, pos) for every populated slot."""
        for j, pos in enumerate(self._slots):
            if j == exclude or pos is None:
                continue
            yield j, pos
