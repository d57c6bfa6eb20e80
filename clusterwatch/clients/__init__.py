from .agent import AgentClient

__all__ = ['AgentClient']
