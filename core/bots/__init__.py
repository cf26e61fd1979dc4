"""Bot definitions"""

from .welcome import WelcomeBot

__all__ = ['WelcomeBot']
