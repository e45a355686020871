"""Shared field transforms for free-text inputs."""


def blank_to_none(v):
    """Strip strings; empty results become None."""
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v
