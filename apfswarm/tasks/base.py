from abc import ABC, abstractmethod
from ..core.state import SwarmState


class Task(ABC):
    """
    Progress metric over a SwarmState, e.g. distance of every agent to its goal.
    Reporting only, never fed back into control.
    """

    @abstractmethod
    def reset(self, state: SwarmState):
        ...

    @abstractmethod
    def compute(self, state: SwarmState) -> dict:
        ...
