from .handler import ResourceEventHandler, LoggingEventHandler
from .guard import ArmingGuard
from .informer import ResourceInformer
from .factory import ResourceInformerFactory
from .manager import InformerManager

__all__ = [
    "ResourceEventHandler",
    "LoggingEventHandler",
    "ArmingGuard",
    "ResourceInformer",
    "ResourceInformerFactory",
    "InformerManager",
]
