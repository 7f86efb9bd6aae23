"""Namespace prefix resolution and remote path construction."""
from typing import Optional


def resolve(config_override: Optional[str], service_name: str, stage: str) -> str:
    """
    Return the namespace prefix for a service's secrets.

    An explicit, non-empty override wins; otherwise the prefix is
    derived from the service name and stage.
    """
    if config_override:
        return config_override
    return f"/{service_name}-{stage}/secrets/"


def join_path(prefix: str, name: str) -> str:
    """Build the remote path for name under prefix."""
    return prefix.rstrip("/") + "/" + name


def strip_prefix(prefix: str, path: str) -> str:
    """Recover the local secret name from a remote path under prefix."""
    base = join_path(prefix, "")
    if path.startswith(base):
        return path[len(base):]
    return path
