from abc import ABC, abstractmethod


class Policy(ABC):
    @abstractmethod
    def build_observation(self, self_state, peers, obstacles=None):
        ...

    @abstractmethod
    def act(self, obs):
        """Return acceleration command u."""
        ...
