import numpy as np

from .state import AgentState


def integrate(state: AgentState, u: np.ndarray, dt: float) -> AgentState:
    """
    Double-integrator step, in place:
      pos <- pos + vel*dt + 0.5*u*dt^2
      vel <- vel + u*dt
    """
    state.pos = state.pos + state.vel * dt + 0.5 * u * dt * dt
    state.vel = state.vel + u * dt
    return state
