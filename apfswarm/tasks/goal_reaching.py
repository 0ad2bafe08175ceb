import numpy as np
from .base import Task
from ..core.state import SwarmState


class GoalReachingTask(Task):
    def __init__(self, goals: dict, tolerance: float = 0.1):
        """
        goals: {agent_id: goal position}
        """
        self.goals = {i: np.asarray(g, dtype=float) for i, g in goals.items()}
        self.tolerance = tolerance
        self._initial_mean = 0.0

    @classmethod
    def from_mission(cls, mission, tolerance: float = 0.1):
        return cls({i: a.goal for i, a in enumerate(mission.agents)}, tolerance)

    def _distances(self, state: SwarmState) -> np.ndarray:
        return np.array([
            np.linalg.norm(st.pos - self.goals[i]) for i, st in state.agents.items() if i in self.goals
        ])

    def reset(self, state: SwarmState):
        dists = self._distances(state)
        self._initial_mean = float(dists.mean()) if len(dists) else 0.0

    def compute(self, state: SwarmState) -> dict:
        dists = self._distances(state)
        if len(dists) == 0:
            return {"mean_dist": 0.0, "max_dist": 0.0, "arrived": 0, "success": False, "progress": 0.0}
        mean_dist = float(dists.mean())
        arrived = int((dists <= self.tolerance).sum())
        progress = 1.0 - mean_dist / self._initial_mean if self._initial_mean > 0 else 1.0
        return {
            "mean_dist": mean_dist,
            "max_dist": float(dists.max()),
            "arrived": arrived,
            "success": arrived == len(dists),
            "progress": progress,
        }
