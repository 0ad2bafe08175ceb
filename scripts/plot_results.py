import json
import sys
import matplotlib.pyplot as plt


def load_log(path):
    with open(path, "r") as f:
        return json.load(f)


def main(log_path="logs/sim.json"):
    data = load_log(log_path)
    ts = [entry["t"] for entry in data if "metrics" in entry]
    goal_dist = [entry["metrics"]["mean_dist"] for entry in data if "metrics" in entry]
    min_dist = [entry["metrics"]["min_pairwise_distance"] for entry in data if "metrics" in entry]

    fig, (ax0, ax1) = plt.subplots(2, 1, sharex=True)
    ax0.plot(ts, goal_dist)
    ax0.set_ylabel("mean goal distance")
    ax1.plot(ts, min_dist)
    ax1.set_ylabel("min pairwise distance")
    ax1.set_xlabel("time")
    ax0.set_title("APF swarm run")
    plt.show()


if __name__ == "__main__":
    log = sys.argv[1] if len(sys.argv) > 1 else "logs/sim.json"
    main(log)
