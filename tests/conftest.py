"""Shared test fixtures."""

import pytest

from guestlog.config import Settings
from guestlog.store.guest_log import GuestLog
from guestlog.store.working_file import WorkingFile

from helpers import SECRET


@pytest.fixture
def dest_file(tmp_path):
    """Path of a guest accounts file that does not exist yet."""
    return tmp_path / "guest_accounts.jsonl"


@pytest.fixture
def test_settings(dest_file):
    """Create settings pointing to the temp file."""
    return Settings(port=8080, auth=SECRET, dest_file=dest_file)


@pytest.fixture
def guest_log(dest_file):
    return GuestLog(WorkingFile(dest_file))
