"""Test doubles shared across the suite."""

import json
from unittest.mock import MagicMock

import requests

from travel_safety.models import Unavailable


class FakeProvider:
    """Stands in for an upstream adapter; records every fetch."""

    def __init__(self, source, result=None):
        self.source = source
        self.result = result if result is not None else Unavailable(source=source, reason='offline')
        self.calls = []

    def fetch(self, location):
        self.calls.append(location.key)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def make_response(status=200, json_data=None, text=None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.ok = status < 400
    if json_data is not None:
        response.json.return_value = json_data
        response.text = text if text is not None else json.dumps(json_data)
    else:
        response.json.side_effect = ValueError('No JSON object could be decoded')
        response.text = text or ''
    return response
