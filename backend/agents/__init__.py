from .base_agent import BaseAgent

__all__ = ["BaseAgent"]
