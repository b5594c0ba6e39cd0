# edugpt/client/test_api_client.py
from unittest.mock import MagicMock

import pytest
import requests

from edugpt.client.api import ApiClient
from edugpt.core.exceptions import ApiError


def make_response(status_code=200, body=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = body if body is not None else {}
    return response

@pytest.fixture
def http():
    return MagicMock()

@pytest.fixture
def api(http):
    return ApiClient('http://localhost:5000/', timeout=3, session=http)


def test_authenticated_request_sends_bearer_token(api, http):
    http.request.return_value = make_response(body={'success': True, 'dashboard': {'progress': 0}})

    assert api.get_dashboard('id-token', 'uid-1') == {'progress': 0}
    http.request.assert_called_once_with(
        'GET', 'http://localhost:5000/api/users/uid-1/dashboard', json=None,
        headers={'Content-Type': 'application/json', 'Authorization': 'Bearer id-token'}, timeout=3
    )

def test_chat_request_body(api, http):
    http.request.return_value = make_response(body={'success': True, 'response': 'hi', 'timestamp': 'now'})
    api.send_chat_message('uid-1', 'hello')
    assert http.request.call_args.kwargs['json'] == {'userId': 'uid-1', 'message': 'hello'}

def test_failure_envelope_raises_api_error(api, http):
    http.request.return_value = make_response(404, {'success': False, 'error': 'User not found'})
    with pytest.raises(ApiError) as exc_info:
        api.get_progress('nobody')
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == 'User not found'

def test_network_error_raises_api_error(api, http):
    http.request.side_effect = requests.ConnectionError('refused')
    with pytest.raises(ApiError) as exc_info:
        api.health()
    assert exc_info.value.status_code == 0
