from abc import ABC, abstractmethod
from typing import Dict, Any


class BaseAgent(ABC):
    """
    Base interface for the synchronous, deterministic agents of the SEO pipeline.

    Agents should be stateless: the same input always yields the same output.
    LLM-backed generation lives in ContentGenerator, which takes its model by
    injection instead of going through this interface.
    """

    name: str

    @abstractmethod
    def run(self, input: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute the agent.

        Args:
            input: Structured input dictionary defined by the agent schema.

        Returns:
            Structured output dictionary defined by the agent schema.
        """
        raise NotImplementedError
