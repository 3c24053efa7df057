import json
import logging
from unittest.mock import Mock

import pytest
import requests


@pytest.fixture(autouse=True)
def restore_root_logger():
    """configure_logging installs handlers on the root logger; drop them after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for h in list(root.handlers):
        if type(h) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


@pytest.fixture
def make_response():
    """Factory for fake ``requests.Response`` objects."""

    def _make(status=200, payload=None, text=None):
        resp = Mock(spec=requests.Response)
        resp.status_code = status
        if text is None:
            resp.text = json.dumps(payload)
            resp.json.return_value = payload
        else:
            resp.text = text
            resp.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        return resp

    return _make


@pytest.fixture
def make_activity():
    """Factory for activity dicts shaped like Strava's SummaryActivity."""
    counter = iter(range(1, 100000))

    def _make(distance=1000.0, activity_type="Run", **extra):
        activity_id = next(counter)
        data = {
            "id": activity_id,
            "name": f"Activity {activity_id}",
            "distance": distance,
            "moving_time": 600,
            "elapsed_time": 660,
            "total_elevation_gain": 12.5,
            "type": activity_type,
            "sport_type": activity_type,
            "start_date": "2024-01-02T08:00:00Z",
        }
        data.update(extra)
        return data

    return _make


@pytest.fixture
def token_payload():
    return {
        "token_type": "Bearer",
        "access_token": "access-abc",
        "refresh_token": "refresh-xyz",
        "expires_at": 1704088800,
        "expires_in": 21600,
        "athlete": {
            "id": 12345,
            "username": "rider",
            "firstname": "Alex",
            "lastname": "Smith",
            "city": "Utrecht",
            "state": None,
            "country": "Netherlands",
        },
    }
