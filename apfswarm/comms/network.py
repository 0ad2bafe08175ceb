import random

from .messages import PoseMessage
from ..errors import UnavailablePeer


class PoseBus:
    """
    Shared pose exchange. Agents publish their pose once per tick and look up
    everyone else's latest pose. Lookups may be dropped with loss_prob.
    """

    def __init__(self, loss_prob=0.0, seed=None):
        self.loss_prob = loss_prob
        self.rng = random.Random(seed)
        self._latest: dict[int, PoseMessage] = {}

    def publish(self, msg: PoseMessage):
        prev = self._latest.get(msg.sender_id)
        if prev is None or msg.t >= prev.t:
            self._latest[msg.sender_id] = msg

    def lookup(self, agent_id: int):
        msg = self._latest.get(agent_id)
        if msg is None:
            raise UnavailablePeer(agent_id)
        if self.loss_prob and self.rng.random() < self.loss_prob:
            raise UnavailablePeer(agent_id, "lookup dropped")
        return msg.pos.copy()

    def snapshot(self) -> "PoseBus":
        """Frozen copy sharing the RNG, so every agent in a tick reads the same poses."""
        snap = PoseBus.__new__(PoseBus)
        snap.loss_prob = self.loss_prob
        snap.rng = self.rng
        snap._latest = dict(self._latest)
        return snap

    def known_ids(self):
        return sorted(self._latest)
