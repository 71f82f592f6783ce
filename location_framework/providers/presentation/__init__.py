"""
Presentation collaborators (notices, confirmation, navigation).
"""

from .console import ConsoleNotifier, ConsoleConfirmation, ConsoleNavigator

__all__ = ['ConsoleNotifier', 'ConsoleConfirmation', 'ConsoleNavigator']
