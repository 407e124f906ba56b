"""Tests for runtime settings."""

import pytest
from pydantic import ValidationError

from famdocs import DowngradePolicy, FamdocsSettings


class TestFamdocsSettings:

    def test_defaults(self):
        settings = FamdocsSettings()

        assert settings.max_batch_size == 100
        assert settings.bulk_downgrade_policy is DowngradePolicy.RETAIN
        assert settings.version_header == "ETag"
        assert settings.precondition_header == "If-Match"

    def test_batch_size_cannot_exceed_hard_cap(self):
        with pytest.raises(ValidationError):
            FamdocsSettings(max_batch_size=101)

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("FAMDOCS_MAX_BATCH_SIZE", "25")
        monkeypatch.setenv("FAMDOCS_BULK_DOWNGRADE_POLICY", "apply")

        settings = FamdocsSettings()

        assert settings.max_batch_size == 25
        assert settings.bulk_downgrade_policy is DowngradePolicy.APPLY

    def test_page_size_cannot_exceed_hard_cap(self):
        with pytest.raises(ValidationError):
            FamdocsSettings(max_page_size=101)
