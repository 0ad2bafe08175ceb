import logging

import numpy as np

from .base import Policy
from ..core.state import AgentState, ControlParams, Obstacle, PeerPositions, as_vec3


logger = logging.getLogger(__name__)


def attraction(pos: np.ndarray, goal: np.ndarray, zeta: float) -> np.ndarray:
    """
    Conic attraction: quadratic well inside unit distance of the goal, constant
    magnitude zeta outside it. Both branches agree at r = 1.
    """
    d = goal - pos
    r = np.linalg.norm(d)
    if r < 1:
        return zeta * d
    return zeta * d / r


def repulsion_gradient(source: np.ndarray, pos: np.ndarray, Q: float, gain: float, min_distance: float = 0.0):
    """
    Gradient of 0.5*gain*(1/distance - 1/Q)^2 for a source closer than Q, else zero.
    The result points from the source towards pos. Distances below min_distance are
    floored to it when computing the magnitude, never past Q.
    """
    diff = source - pos
    distance = np.linalg.norm(diff)
    if distance >= Q:
        return np.zeros(3)
    if distance == 0.0:
        logger.warning("Repulsion source coincides with agent position, direction undefined")
        return np.zeros(3)
    d = min(max(distance, min_distance), Q)
    return gain * (1.0 / Q - 1.0 / d) * (1.0 / (d * d)) * diff / distance


def peer_repulsion(pos: np.ndarray, peers: PeerPositions, self_id: int, params: ControlParams) -> np.ndarray:
    Q = params.q * (2 * params.radius)
    u = np.zeros(3)
    for _, peer_pos in peers.available(exclude=self_id):
        u += repulsion_gradient(peer_pos, pos, Q, params.obs, params.min_distance)
    return u


def obstacles_in_range(pos: np.ndarray, obstacles: list[Obstacle], params: ControlParams):
    """Yield (obstacle, Q) for obstacles whose influence zone contains pos."""
    for obstacle in obstacles:
        Q = params.q * (params.radius + obstacle.radius)
        if np.linalg.norm(obstacle.center - pos) < Q:
            yield obstacle, Q


def obstacle_repulsion(pos: np.ndarray, obstacles: list[Obstacle], params: ControlParams) -> np.ndarray:
    """
    Sum of obstacle gradients. With accumulate_obstacles=False only the last
    in-range obstacle counts.
    """
    u = np.zeros(3)
    for obstacle, Q in obstacles_in_range(pos, obstacles, params):
        grad = repulsion_gradient(obstacle.center, pos, Q, params.obs, params.min_distance)
        if params.accumulate_obstacles:
            u += grad
        else:
            u = grad
    return u


def damping(vel: np.ndarray, damp: float) -> np.ndarray:
    return -damp * vel


def saturate(u: np.ndarray, max_acc: float) -> np.ndarray:
    # per axis, direction may change for large commands
    return np.clip(u, -max_acc, max_acc)


class ApfPolicy(Policy):
    def __init__(self, goal, params: ControlParams, obstacles: list[Obstacle] | None = None):
        self.goal = as_vec3(goal, "goal")
        self.params = params
        self.obstacles = list(obstacles or [])

    def build_observation(self, self_state: AgentState, peers: PeerPositions, obstacles=None):
        return (self_state, peers, self.obstacles if obstacles is None else obstacles)

    def act(self, obs):
        self_state, peers, obstacles = obs
        p = self.params
        u_goal = attraction(self_state.pos, self.goal, p.zeta)
        u_obs = peer_repulsion(self_state.pos, peers, self_state.id, p)
        u_obstacles = obstacle_repulsion(self_state.pos, obstacles, p)
        if p.accumulate_obstacles:
            u_obs = u_obs + u_obstacles
        elif next(obstacles_in_range(self_state.pos, obstacles, p), None) is not None:
            # legacy mode: an in-range obstacle replaces the peer terms as well
            u_obs = u_obstacles
        u_damp = damping(self_state.vel, p.damp)
        return saturate(u_goal + u_obs + u_damp, p.max_acc)
