from __future__ import annotations

import pytest

from cardlink.domain.models import FetchOptions
from tests.fakes import ManualClock, RecordingSleep


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def fast_options() -> FetchOptions:
    return FetchOptions(timeout_seconds=5.0, max_retries=2, retry_delay_seconds=0.0)
