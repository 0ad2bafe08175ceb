from dataclasses import dataclass
import numpy as np
from ..core.state import AgentState


@dataclass
class PoseMessage:
    sender_id: int
    pos: np.ndarray
    t: float

    @classmethod
    def from_state(cls, state: AgentState, t: float = 0.0):
        return cls(sender_id=state.id, pos=state.pos.copy(), t=t)
