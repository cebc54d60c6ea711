from __future__ import annotations

import pytest


@pytest.fixture
def status_payload() -> dict:
    return {
        "online": True,
        "host": "play.example.com",
        "players": {
            "online": 2,
            "max": 20,
            "list": [{"name_clean": "Alice"}, {"name_clean": "Bob"}],
        },
        "version": {"name_clean": "1.20.4"},
    }
