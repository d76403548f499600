from fleetshard.types.base import BaseModel


class StrimziVersionStatus(BaseModel):
    """An installed Strimzi operator version and its readiness"""

    version: str
    ready: bool
