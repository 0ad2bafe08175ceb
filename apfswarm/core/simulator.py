import logging
import time

import numpy as np

from .state import SwarmState, AgentState
from .agent import Agent
from .mission import Mission
from ..comms.network import PoseBus
from ..policies.apf import ApfPolicy


logger = logging.getLogger(__name__)


class Simulator:
    """
    Tick driver for a set of independent agents sharing one PoseBus.
    """

    def __init__(self, agents: list[Agent], network: PoseBus, dt=0.02, task=None, clock=time.monotonic, sleep=time.sleep):
        self.agents = {a.state.id: a for a in agents}
        self.network = network
        self.dt = dt
        self.task = task
        self.t = 0.0
        self._clock = clock
        self._sleep = sleep
        for a in self.agents.values():
            self.network.publish(a.to_message(self.t))

    @classmethod
    def from_mission(cls, mission: Mission, network: PoseBus | None = None, task=None, **kwargs):
        agents = []
        for i, spec in enumerate(mission.agents):
            st = AgentState(id=i, pos=spec.start.copy(), vel=np.zeros(3))
            policy = ApfPolicy(goal=spec.goal, params=mission.params, obstacles=mission.obstacles)
            agents.append(Agent(st, policy, n_agents=mission.n_agents, params=mission.params, obstacles=mission.obstacles))
        return cls(agents, network or PoseBus(), dt=mission.params.dt, task=task, **kwargs)

    def step(self, return_logs: bool = False):
        # every agent reads the poses published before this tick started
        source = self.network.snapshot()
        step_logs = {}
        reports = {}
        for i, agent in self.agents.items():
            u, report = agent.tick(source, self.network, self.t + self.dt, self.dt)
            reports[i] = report
            step_logs[i] = {"u": u, "collided": report.collided}

        self.t += self.dt
        swarm_state = self.snapshot()
        if return_logs:
            return swarm_state, reports, step_logs
        return swarm_state, reports

    def snapshot(self) -> SwarmState:
        return SwarmState(agents={i: a.state.copy() for i, a in self.agents.items()}, t=self.t)

    def done(self, state: SwarmState | None = None) -> bool:
        if self.task is None:
            return False
        return bool(self.task.compute(state or self.snapshot())["success"])

    def run(self, steps: int, realtime: bool = False, callback=None, stop_when_done: bool = False):
        """
        Run up to `steps` ticks. With realtime=True ticks are paced to dt of wall
        time; a late tick is never skipped, the next one just starts immediately.
        """
        state = self.snapshot()
        next_tick = self._clock()
        for step in range(steps):
            state, reports = self.step()
            if callback is not None:
                callback(step, state, reports)
            if stop_when_done and self.done(state):
                logger.info("All agents reached their goals at t=%.2f", state.t)
                break
            if realtime:
                next_tick += self.dt
                delay = next_tick - self._clock()
                if delay > 0:
                    self._sleep(delay)
                else:
                    logger.debug("Tick %d overran by %.4fs", step, -delay)
        return state
