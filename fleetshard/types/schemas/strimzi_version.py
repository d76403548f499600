from marshmallow import fields
from fleetshard.types.base import BaseSchema
from fleetshard.types.models.strimzi_version import StrimziVersionStatus


class StrimziVersionStatusSchema(BaseSchema):
    __model__ = StrimziVersionStatus

    version = fields.Str(data_key="version", required=True)
    ready = fields.Bool(data_key="ready", load_default=False)
