"""Tests for the size policy."""

import pytest

from qaku_cache.config import PolicyConfig
from qaku_cache.models import DatasetManifest
from qaku_cache.policy import TOO_LARGE, Deny, Permit, evaluate


def _manifest(size: int) -> DatasetManifest:
    return DatasetManifest(content_id="zCID1", dataset_size_bytes=size)


class TestEvaluate:
    """Tests for evaluate()."""

    def test_permit_below_threshold(self):
        """Test that small datasets are permitted."""
        assert evaluate(_manifest(1000), PolicyConfig(2000)) == Permit()

    def test_permit_at_threshold(self):
        """Test that the threshold itself is inclusive."""
        assert isinstance(evaluate(_manifest(2000), PolicyConfig(2000)), Permit)

    def test_deny_above_threshold(self):
        """Test that Deny carries observed size and threshold."""
        decision = evaluate(_manifest(2001), PolicyConfig(2000))

        assert isinstance(decision, Deny)
        assert decision.size_bytes == 2001
        assert decision.max_size_bytes == 2000
        assert decision.reason == TOO_LARGE

    def test_default_threshold_is_5_mib(self):
        """Test the built-in default."""
        config = PolicyConfig()
        assert config.max_dataset_size_bytes == 5 * 1024 * 1024
        assert isinstance(evaluate(_manifest(2_000_000), config), Permit)
        assert isinstance(evaluate(_manifest(20_000_000), config), Deny)


class TestPolicyConfig:
    """Tests for PolicyConfig validation."""

    @pytest.mark.parametrize("size", [0, -1])
    def test_rejects_non_positive(self, size):
        """Test that a non-positive maximum is refused."""
        with pytest.raises(ValueError):
            PolicyConfig(size)
