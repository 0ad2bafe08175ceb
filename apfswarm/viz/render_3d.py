import matplotlib.pyplot as plt
import numpy as np
from ..core.state import SwarmState


def _sphere(center, radius, n=12):
    u, v = np.mgrid[0:2 * np.pi:complex(0, 2 * n), 0:np.pi:complex(0, n)]
    x = center[0] + radius * np.cos(u) * np.sin(v)
    y = center[1] + radius * np.sin(u) * np.sin(v)
    z = center[2] + radius * np.cos(v)
    return x, y, z


class SwarmRenderer3D:
    """
    Agents as translucent blue spheres of diameter 2*radius, obstacles as grey
    spheres, goals as green crosses.
    """

    def __init__(self, bounds, radius: float, obstacles=None, goals=None):
        self.bounds = bounds  # [xmin, xmax, ymin, ymax, zmin, zmax]
        self.radius = radius
        self.obstacles = obstacles or []
        self.goals = np.array(goals) if goals is not None and len(goals) else None
        self.fig = plt.figure(figsize=(7, 7))
        self.ax = self.fig.add_subplot(projection="3d")
        backend = plt.get_backend().lower()
        self._interactive = backend not in {"agg", "pdf", "svg"}
        if self._interactive:
            plt.ion()
        self.agent_surfaces = {}
        self._set_limits()
        self._draw_static()

    def _set_limits(self):
        xmin, xmax, ymin, ymax, zmin, zmax = self.bounds
        self.ax.set_xlim(xmin, xmax)
        self.ax.set_ylim(ymin, ymax)
        self.ax.set_zlim(zmin, zmax)
        self.ax.set_box_aspect((xmax - xmin, ymax - ymin, zmax - zmin))

    def _draw_static(self):
        for obs in self.obstacles:
            self.ax.plot_surface(*_sphere(obs.center, obs.radius), color="gray", alpha=1.0, linewidth=0)
        if self.goals is not None:
            self.ax.scatter(self.goals[:, 0], self.goals[:, 1], self.goals[:, 2], c="green", marker="x", s=20)

    def render(self, swarm_state: SwarmState, collided=None):
        collided = collided or set()
        for aid, st in swarm_state.agents.items():
            surf = self.agent_surfaces.pop(aid, None)
            if surf is not None:
                surf.remove()
            color = "red" if aid in collided else "blue"
            self.agent_surfaces[aid] = self.ax.plot_surface(
                *_sphere(st.pos, self.radius, n=6), color=color, alpha=0.3, linewidth=0
            )
        self.ax.set_title(f"t={swarm_state.t:.2f}")
        if self._interactive:
            plt.pause(0.001)

    def save(self, path):
        self.fig.savefig(path)
