import pytest
import requests

from snappwd.api import (
    ApiError, FilePayload, SecretMetadata, SecretPayload, SnapPwdApi, parse_response)
from snappwd.envelope import FileMetadata

API_URL = 'https://api.snappwd.invalid/api/v1'

METADATA = FileMetadata(original_filename='a.txt', content_type='text/plain', iv='AAAAAAAAAAAAAAAA')


@pytest.fixture()
def api() -> SnapPwdApi:
    return SnapPwdApi(API_URL + '/')


def test_base_url_is_stripped(api):
    assert api.base_url == API_URL


def test_create_secret(api, requests_mock):
    requests_mock.post(f'{API_URL}/secrets', json={'secretId': 'sp-123'})

    assert api.create_secret('c2VjcmV0', expiration=60) == 'sp-123'
    assert requests_mock.last_request.json() == {'encryptedSecret': 'c2VjcmV0', 'expiration': 60}


def test_create_secret_default_expiration(api, requests_mock):
    requests_mock.post(f'{API_URL}/secrets', json={'secretId': 'sp-123'})
    api.create_secret('c2VjcmV0')
    assert requests_mock.last_request.json()['expiration'] == 3600


def test_create_secret_without_id(api, requests_mock):
    requests_mock.post(f'{API_URL}/secrets', json={})
    with pytest.raises(ApiError, match="secretId"):
        api.create_secret('c2VjcmV0')


def test_get_secret(api, requests_mock):
    requests_mock.get(f'{API_URL}/secrets/sp-123', json={'encryptedSecret': 'c2VjcmV0'})
    assert api.get_secret('sp-123') == SecretPayload(encrypted_secret='c2VjcmV0')
    assert 'peek' not in requests_mock.last_request.qs


def test_peek_secret(api, requests_mock):
    requests_mock.get(
        f'{API_URL}/secrets/sp-123',
        json={'createdAt': 1700000000, 'ttlSeconds': 300, 'metadata': None})

    assert api.get_secret('sp-123', peek=True) == SecretMetadata(created_at=1700000000, ttl_seconds=300)
    assert requests_mock.last_request.qs == {'peek': ['true']}


def test_upload_file(api, requests_mock):
    requests_mock.post(f'{API_URL}/files', json={'fileId': 'spf-123'})

    assert api.upload_file(METADATA, 'ZGF0YQ==') == 'spf-123'
    assert requests_mock.last_request.json() == {
        'metadata': {'originalFilename': 'a.txt', 'contentType': 'text/plain', 'iv': 'AAAAAAAAAAAAAAAA'},
        'encryptedData': 'ZGF0YQ==',
        'expiration': 86400,
    }


def test_get_file(api, requests_mock):
    requests_mock.get(f'{API_URL}/files/spf-123', json={
        'metadata': METADATA.to_json(),
        'encryptedData': 'ZGF0YQ==',
    })
    assert api.get_file('spf-123') == FilePayload(metadata=METADATA, encrypted_data='ZGF0YQ==')


def test_error_message_from_body(api, requests_mock):
    requests_mock.get(f'{API_URL}/secrets/sp-404', status_code=404, json={'error': 'Secret not found'})

    with pytest.raises(ApiError, match=r"API Error \(404\): Secret not found") as error:
        api.get_secret('sp-404')
    assert error.value.status == 404


def test_error_message_from_reason(api, requests_mock):
    requests_mock.get(f'{API_URL}/secrets/sp-500', status_code=500, text='<html>', reason='Server Error')

    with pytest.raises(ApiError, match=r"API Error \(500\): Server Error"):
        api.get_secret('sp-500')


def test_connection_error(api, requests_mock):
    requests_mock.get(f'{API_URL}/secrets/sp-123', exc=requests.exceptions.ConnectTimeout)

    with pytest.raises(ApiError, match="Could not reach"):
        api.get_secret('sp-123')


def test_invalid_json(api, requests_mock):
    requests_mock.get(f'{API_URL}/secrets/sp-123', text='not json')

    with pytest.raises(ApiError, match="invalid JSON"):
        api.get_secret('sp-123')


@pytest.mark.parametrize('document', [[], 'text', {'unexpected': True}])
def test_parse_unexpected_response(document):
    with pytest.raises(ApiError, match="Unexpected response"):
        parse_response(document)


def test_parse_metadata_with_custom_fields():
    response = parse_response({'createdAt': 1, 'ttlSeconds': -1, 'metadata': {'team': 'ops'}})
    assert response == SecretMetadata(created_at=1, ttl_seconds=-1, metadata={'team': 'ops'})


def test_parse_metadata_with_null_created_at():
    response = parse_response({'createdAt': None, 'ttlSeconds': 5})
    assert response == SecretMetadata(created_at=0, ttl_seconds=5)
