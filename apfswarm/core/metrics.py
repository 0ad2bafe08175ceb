import logging
from dataclasses import dataclass, field

import numpy as np

from .state import AgentState, ControlParams, Obstacle, PeerPositions, SwarmState


logger = logging.getLogger(__name__)


@dataclass
class CollisionReport:
    agent_id: int
    peer_hits: list[tuple[int, float]] = field(default_factory=list)       # (peer id, distance)
    obstacle_hits: list[tuple[int, float]] = field(default_factory=list)   # (obstacle idx, distance)
    min_peer_distance: float = float("inf")

    @property
    def collided(self) -> bool:
        return bool(self.peer_hits or self.obstacle_hits)


def check_collisions(
    state: AgentState,
    peers: PeerPositions,
    obstacles: list[Obstacle],
    params: ControlParams,
) -> CollisionReport:
    """
    Report (never prevent) contact with peers or obstacles. Touching counts:
    peer distance <= 2*radius, obstacle distance <= radius + obstacle radius.
    Unavailable peers are skipped.
    """
    report = CollisionReport(agent_id=state.id)
    for j, peer_pos in peers.available(exclude=state.id):
        d = float(np.linalg.norm(peer_pos - state.pos))
        report.min_peer_distance = min(report.min_peer_distance, d)
        if d <= 2 * params.radius:
            report.peer_hits.append((j, d))
            logger.warning("Collision! agent%d - agent%d distance: %.4f", state.id, j, d)

    for idx, obstacle in enumerate(obstacles):
        d = float(np.linalg.norm(obstacle.center - state.pos))
        if d <= params.radius + obstacle.radius:
            report.obstacle_hits.append((idx, d))
            logger.warning("Collision! agent%d - obstacle%d distance: %.4f", state.id, idx, d)
    return report


def min_pairwise_distance(state: SwarmState) -> float:
    """
    Smallest distance between any two agents, inf with fewer than two agents.
    """
    positions = [a.pos for a in state.agents.values()]
    if len(positions) < 2:
        return float("inf")
    positions = np.array(positions)
    dists = np.linalg.norm(positions[:, None, :] - positions[None, :, :], axis=-1)
    np.fill_diagonal(dists, np.inf)
    return float(dists.min())


def collision_count(state: SwarmState, threshold: float) -> int:
    """
    Count number of agent pairs at or closer than threshold.
    """
    positions = [a.pos for a in state.agents.values()]
    if len(positions) < 2:
        return 0
    positions = np.array(positions)
    dists = np.linalg.norm(positions[:, None, :] - positions[None, :, :], axis=-1)
    collisions = (dists <= threshold).astype(int)
    # zero diagonal and double counted pairs
    collisions = np.triu(collisions, k=1)
    return int(collisions.sum())
