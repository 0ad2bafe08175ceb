import numpy as np
import pytest

from apfswarm.comms.network import PoseBus
from apfswarm.core.metrics import min_pairwise_distance
from apfswarm.core.mission import mission_from_dict
from apfswarm.core.simulator import Simulator
from apfswarm.tasks.goal_reaching import GoalReachingTask


@pytest.fixture
def head_on():
    return mission_from_dict({
        "agents": [
            {"start": [-2, 0, 1], "goal": [2, 0.05, 1]},
            {"start": [2, 0, 1], "goal": [-2, -0.05, 1]},
        ],
    })


@pytest.fixture
def single_agent():
    return mission_from_dict({
        "agents": [{"start": [0, 0, 0], "goal": [1.5, -0.5, 0.5]}],
        "obstacles": [{"position": [5, 5, 5], "radius": 0.5}],
    })


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, delay):
        self.sleeps.append(delay)
        self.now += delay


class TestSimulator:
    def test_step_advances_time(self, head_on):
        sim = Simulator.from_mission(head_on)
        state, reports = sim.step()
        assert state.t == pytest.approx(head_on.params.dt)
        assert set(reports) == {0, 1}
        assert state.agents[0].pos[0] > -2

    def test_agents_read_poses_from_before_the_tick(self, head_on):
        sim = Simulator.from_mission(head_on)
        sim.step()
        # agent 1 saw agent 0 at its start, not its post-tick pose
        np.testing.assert_array_equal(sim.agents[1].peers.get(0), [-2, 0, 1])

    def test_head_on_agents_keep_apart(self, head_on):
        sim = Simulator.from_mission(head_on)
        closest = np.inf
        for _ in range(600):
            state, _ = sim.step()
            closest = min(closest, min_pairwise_distance(state))
            for st in state.agents.values():
                assert np.all(np.isfinite(st.pos))
        assert closest > 0

    def test_single_agent_reaches_goal(self, single_agent):
        task = GoalReachingTask.from_mission(single_agent, tolerance=0.05)
        sim = Simulator.from_mission(single_agent, task=task)
        task.reset(sim.snapshot())
        state = sim.run(3000, stop_when_done=True)
        result = task.compute(state)
        assert result["success"]
        assert result["arrived"] == 1
        assert state.t < 3000 * single_agent.params.dt

    def test_lossy_network_does_not_stop_the_loop(self, head_on):
        sim = Simulator.from_mission(head_on, network=PoseBus(loss_prob=0.5, seed=1))
        state = sim.run(50)
        assert state.t == pytest.approx(50 * head_on.params.dt)

    def test_realtime_pacing(self, single_agent):
        clock = FakeClock()
        sim = Simulator.from_mission(single_agent, clock=clock, sleep=clock.sleep)
        sim.run(3, realtime=True)
        assert clock.sleeps == pytest.approx([single_agent.params.dt] * 3)

    def test_callback_sees_every_tick(self, single_agent):
        seen = []
        sim = Simulator.from_mission(single_agent)
        sim.run(4, callback=lambda step, state, reports: seen.append((step, reports[0].collided)))
        assert seen == [(0, False), (1, False), (2, False), (3, False)]


class TestGoalReachingTask:
    def test_progress(self, single_agent):
        task = GoalReachingTask.from_mission(single_agent, tolerance=0.1)
        sim = Simulator.from_mission(single_agent)
        task.reset(sim.snapshot())
        start = task.compute(sim.snapshot())
        assert start["progress"] == pytest.approx(0.0)
        assert not start["success"]
        state = sim.run(100)
        assert task.compute(state)["progress"] > 0
