import logging

import numpy as np

from .state import AgentState, ControlParams, Obstacle, PeerPositions
from .dynamics import integrate
from .metrics import check_collisions, CollisionReport
from ..policies.base import Policy
from ..comms.messages import PoseMessage
from ..errors import UnavailablePeer


logger = logging.getLogger(__name__)


class Agent:
    def __init__(
        self,
        state: AgentState,
        policy: Policy,
        n_agents: int,
        params: ControlParams,
        obstacles: list[Obstacle] | None = None,
    ):
        self.state = state
        self.policy = policy
        self.params = params
        self.obstacles = list(obstacles or [])
        self.peers = PeerPositions(n_agents)
        self.peers.update(state.id, state.pos)
        logger.info("Agent%d is ready.", state.id)

    def listen(self, source):
        """
        Refresh peer slots from source.lookup(id). A failed lookup leaves that
        slot unavailable for this tick only.
        """
        for j in range(len(self.peers)):
            if j == self.state.id:
                self.peers.update(j, self.state.pos)
                continue
            try:
                self.peers.update(j, source.lookup(j))
            except UnavailablePeer as exc:
                logger.warning("Could not look up agent%d pose: %s", j, exc)
                self.peers.mark_unavailable(j)

    def step(self, dt: float | None = None) -> tuple[np.ndarray, CollisionReport]:
        """
        Single-threaded, no locks. Compute u from current peers, report
        collisions, then integrate.
        """
        dt = self.params.dt if dt is None else dt
        obs = self.policy.build_observation(self.state, self.peers, self.obstacles)
        u = self.policy.act(obs)
        report = check_collisions(self.state, self.peers, self.obstacles, self.params)
        integrate(self.state, u, dt)
        logger.debug("agent%d u=%s pos=%s", self.state.id, u, self.state.pos)
        return u, report

    def tick(self, source, sink, t: float, dt: float | None = None):
        self.listen(source)
        u, report = self.step(dt)
        sink.publish(self.to_message(t))
        return u, report

    def to_message(self, t: float = 0.0) -> PoseMessage:
        return PoseMessage.from_state(self.state, t)
