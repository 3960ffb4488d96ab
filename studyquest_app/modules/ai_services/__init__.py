"""Language model access: provider clients, prompts, parsing and schemas."""

from .services.ai_gateway import AIGateway
from .services.service_manager import AIServiceManager

__all__ = ['AIGateway', 'AIServiceManager']
