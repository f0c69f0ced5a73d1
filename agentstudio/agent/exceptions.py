# file: agentstudio/agentstudio/agent/exceptions.py

class UnknownAgentError(KeyError):
    """Raised when an agent id does not exist in the pool."""
    def __init__(self, agent_id: str):
        self.agent_id = agent_id
        super().__init__(f"Unknown agent: {agent_id}")

    def __str__(self) -> str:
        return self.args[0]
