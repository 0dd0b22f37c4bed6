"""Primary keys for snapshots, tenures, check-ins and milestone attainments."""

from cuid2 import cuid_wrapper

_next_id = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new CUID2; used as the ORM column default and for new check-ins."""
    return _next_id()
