from types import SimpleNamespace
from typing import Any, Dict
from marshmallow import EXCLUDE, INCLUDE, Schema, post_load

JSON = Dict[str, Any]

__all__ = ["BaseModel", "BaseSchema", "EXCLUDE", "INCLUDE", "JSON"]


class BaseModel(SimpleNamespace):
    """Attribute bag loaded from a Kubernetes resource field.

    Subclasses only declare the attributes they carry; values come from the
    schema that loads them. Equality is by value, which keeps snapshots easy
    to compare.
    """


class BaseSchema(Schema):
    """Loads into `__model__` instead of a plain dict."""

    __model__: Any = BaseModel

    class Meta:
        unknown = INCLUDE

    @post_load
    def make_object(self, data: JSON, **kwargs: Any) -> Any:
        return self.__model__(**data)
