import json
from pathlib import Path
from ..core.state import SwarmState


class SwarmLogger:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.records = []

    def log_state(self, state: SwarmState, reports=None, metrics=None):
        snapshot = {
            "t": state.t,
            "agents": {
                aid: {
                    "pos": st.pos.tolist(),
                    "vel": st.vel.tolist(),
                }
                for aid, st in state.agents.items()
            },
        }
        if reports is not None:
            snapshot["collisions"] = {
                aid: {"peers": [j for j, _ in r.peer_hits], "obstacles": [k for k, _ in r.obstacle_hits]}
                for aid, r in reports.items()
                if r.collided
            }
        if metrics is not None:
            snapshot["metrics"] = metrics
        self.records.append(snapshot)

    def flush(self):
        with self.path.open("w") as f:
            json.dump(self.records, f, indent=2)
