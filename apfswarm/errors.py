class ApfError(Exception):
    """Base class for controller errors."""


class ConfigurationError(ApfError):
    """Mission or parameter data is malformed. Fatal before the control loop starts."""


class UnavailablePeer(ApfError):
    def __init__(self, agent_id: int, reason: str = "no pose published"):
        super().__init__(f"agent{agent_id}: {reason}")
        self.agent_id = agent_id
        self.reason = reason
