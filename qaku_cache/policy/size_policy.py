"""Size policy deciding which datasets get replicated."""

from dataclasses import dataclass

from ..config import PolicyConfig
from ..models import DatasetManifest

TOO_LARGE = "too_large"


@dataclass(frozen=True)
class Permit:
    """Dataset may be replicated."""


@dataclass(frozen=True)
class Deny:
    """Dataset exceeds the size threshold."""

    size_bytes: int
    max_size_bytes: int
    reason: str = TOO_LARGE


Decision = Permit | Deny


def evaluate(manifest: DatasetManifest, config: PolicyConfig) -> Decision:
    """Permit iff the dataset size does not exceed the configured maximum."""
    if manifest.dataset_size_bytes <= config.max_dataset_size_bytes:
        return Permit()
    return Deny(
        size_bytes=manifest.dataset_size_bytes,
        max_size_bytes=config.max_dataset_size_bytes,
    )
