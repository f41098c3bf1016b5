from .deepseek_client import DeepSeekClient

__all__ = ["DeepSeekClient"]
