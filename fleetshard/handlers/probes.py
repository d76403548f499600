import kopf

from fleetshard.utils.helpers import now


# Liveness probe
@kopf.on.probe(id='now')
def get_current_timestamp(**kwargs):
    return now()


@kopf.on.probe(id='strimziVersions')
def get_strimzi_versions(memo: kopf.Memo = None, **kwargs):
    registry = getattr(memo, "registry", None)
    return registry.versions() if registry is not None else []
