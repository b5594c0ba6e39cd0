# edugpt/client/test_client_storage.py
import json

from edugpt.client.storage import ClientStorage, TOKEN_KEY, USER_KEY, EMAIL_KEY, ROLE_KEY

USER = {'uid': 'uid-1', 'email': 'a@b.com', 'displayName': 'Ann Lee', 'role': 'student'}


def test_store_auth_writes_all_four_keys():
    storage = ClientStorage()
    storage.store_auth(USER, 'id-token')

    assert storage.load_token() == 'id-token'
    assert storage.load_user() == USER
    assert storage.get_item(EMAIL_KEY) == 'a@b.com'
    assert storage.get_item(ROLE_KEY) == 'student'

def test_clear_removes_auth_keys_only():
    storage = ClientStorage()
    storage.store_auth(USER, 'id-token')
    storage.set_item('edugpt_theme', 'dark')

    storage.clear()

    for key in (TOKEN_KEY, USER_KEY, EMAIL_KEY, ROLE_KEY):
        assert storage.get_item(key) is None
    assert storage.get_item('edugpt_theme') == 'dark'

def test_file_backed_storage_persists(tmp_path):
    path = tmp_path / 'storage.json'
    ClientStorage(str(path)).store_auth(USER, 'id-token')

    reopened = ClientStorage(str(path))
    assert reopened.load_token() == 'id-token'
    assert reopened.load_user()['displayName'] == 'Ann Lee'
    assert json.loads(path.read_text(encoding='utf-8'))[EMAIL_KEY] == 'a@b.com'

def test_corrupted_user_record_reads_as_none():
    storage = ClientStorage()
    storage.set_item(USER_KEY, '{not json')
    assert storage.load_user() is None

def test_unreadable_file_starts_empty(tmp_path):
    path = tmp_path / 'storage.json'
    path.write_text('garbage', encoding='utf-8')
    assert ClientStorage(str(path)).load_token() is None
