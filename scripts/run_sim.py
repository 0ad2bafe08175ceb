import argparse
import logging
import pathlib
import sys

# Ensure repository root is on PYTHONPATH when running without installation.
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from apfswarm.config import build_mission, deep_update, load_config
from apfswarm.core.simulator import Simulator
from apfswarm.core.metrics import min_pairwise_distance
from apfswarm.comms.network import PoseBus
from apfswarm.tasks.goal_reaching import GoalReachingTask
from apfswarm.viz.logger import SwarmLogger
from apfswarm.errors import ConfigurationError


logger = logging.getLogger("run_sim")


def main():
    parser = argparse.ArgumentParser(description="Run APF multi-agent simulation.")
    parser.add_argument("--config", type=pathlib.Path, help="Path to YAML config.")
    parser.add_argument("--mission", type=pathlib.Path, help="Path to YAML mission file (overrides config).")
    parser.add_argument("--no-render", action="store_true", help="Disable live rendering (headless).")
    parser.add_argument("--log", type=pathlib.Path, help="Optional path to write JSON log.")
    parser.add_argument("--steps", type=int, help="Override total simulation steps.")
    parser.add_argument("--dt", type=float, help="Override control period.")
    parser.add_argument("--render-every", type=int, dest="render_every", help="Render every N steps.")
    parser.add_argument("--realtime", action="store_true", help="Pace ticks to wall-clock time.")
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        cfg = load_config(args.config)
        if args.mission is not None:
            cfg["mission_file"] = str(args.mission)
        if args.steps is not None:
            cfg["steps"] = args.steps
        if args.dt is not None:
            cfg["params"] = deep_update(cfg.get("params") or {}, {"dt": args.dt})
        if args.render_every is not None:
            cfg["render_every"] = args.render_every
        mission = build_mission(cfg)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        sys.exit(1)

    net = PoseBus(
        loss_prob=cfg["network"].get("loss_prob", 0.0),
        seed=cfg["network"].get("seed"),
    )
    task = GoalReachingTask.from_mission(mission, tolerance=cfg["goal_tolerance"])
    sim = Simulator.from_mission(mission, network=net, task=task)
    task.reset(sim.snapshot())

    renderer = None
    if not args.no_render:
        from apfswarm.viz.render_3d import SwarmRenderer3D
        renderer = SwarmRenderer3D(
            bounds=cfg["bounds"],
            radius=mission.params.radius,
            obstacles=mission.obstacles,
            goals=[a.goal for a in mission.agents],
        )
    swarm_log = SwarmLogger(args.log) if args.log else None

    def on_tick(step, state, reports):
        collided = {i for i, r in reports.items() if r.collided}
        if renderer and step % cfg["render_every"] == 0:
            renderer.render(state, collided=collided)
        if swarm_log:
            metrics = task.compute(state)
            metrics["min_pairwise_distance"] = min_pairwise_distance(state)
            swarm_log.log_state(state, reports=reports, metrics=metrics)

    state = sim.run(cfg["steps"], realtime=args.realtime or cfg["realtime"], callback=on_tick, stop_when_done=True)
    result = task.compute(state)
    print(f"t={state.t:.2f} arrived {result['arrived']}/{mission.n_agents} mean goal distance {result['mean_dist']:.3f}")

    if swarm_log:
        swarm_log.flush()


if __name__ == "__main__":
    main()
