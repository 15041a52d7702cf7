"""ID generators (CUID2 and audit record keys)."""

from cuid2 import cuid_wrapper

from ecomind.shared.utils.datetime import epoch_millis

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def audit_record_key(operation_kind: str) -> str:
    """Return ``{operation_kind}_{epoch_ms}_{cuid}``.

    The millisecond component keeps keys time-ordered; the cuid suffix keeps two
    records written in the same millisecond from overwriting each other.
    """
    return f"{operation_kind}_{epoch_millis()}_{generate_cuid()}"
