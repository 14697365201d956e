from __future__ import annotations

from collections.abc import Iterator

import pytest

from pystoremap._reactivity import get_scheduler
from pystoremap.config import reset_config
from pystoremap.store import set_active_root


@pytest.fixture(autouse=True)
def _isolate_shared_state() -> Iterator[None]:
    reset_config()
    set_active_root(None)
    get_scheduler().clear()
    yield
    reset_config()
    set_active_root(None)
    get_scheduler().clear()
