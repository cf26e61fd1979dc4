"""Request dispatch: registries, interceptors and the dispatch controller"""

from .interfaces import RequestContext, SessionAccessor, NluResult, ResponseBuilder
from .context import DispatchContext
from .registry import HandlerRegistry, EventRegistry, HandlerEntry, RequestTypeTag, TagKind
from .intercept import Interceptor, LoggingInterceptor, InterceptChain
from .controller import DispatchController

__all__ = [
    'RequestContext',
    'SessionAccessor',
    'NluResult',
    'ResponseBuilder',
    'DispatchContext',
    'HandlerRegistry',
    'EventRegistry',
    'HandlerEntry',
    'RequestTypeTag',
    'TagKind',
    'Interceptor',
    'LoggingInterceptor',
    'InterceptChain',
    'DispatchController',
]
