"""Storage network manifest model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DatasetManifest:
    """Metadata of a dataset stored in the Codex network."""

    content_id: str
    dataset_size_bytes: int
    block_size_bytes: int = 0
    is_protected: bool = False
    merkle_tree_id: str = ""
    uploaded_at: str = ""

    @property
    def dataset_size_kb(self) -> float:
        return self.dataset_size_bytes / 1024
