"""Small shared helpers: UTC datetimes and id generation."""

from ecomind.shared.utils.datetime import ensure_utc, epoch_millis, utc_now, utc_now_iso
from ecomind.shared.utils.generators import audit_record_key, generate_cuid

__all__ = [
    "audit_record_key",
    "ensure_utc",
    "epoch_millis",
    "generate_cuid",
    "utc_now",
    "utc_now_iso",
]
