"""Dict-backed request, session, NLU and response collaborators"""

from .session import Session
from .nlu import Nlu
from .request import Request
from .response import Response

__all__ = [
    'Session',
    'Nlu',
    'Request',
    'Response',
]
