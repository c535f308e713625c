"""Tests for the identity backends and backend selection."""

import base64
import json
from unittest.mock import MagicMock

import pytest
import requests

from bioalgos.client.storage import BROKER_USER_KEY, SESSION_USER_KEY, USERS_KEY
from bioalgos.config import TestingConfig
from bioalgos.identity import (
    BrokerIdentityProvider,
    LocalCredentialProvider,
    Principal,
    select_identity_provider,
)
from bioalgos.identity.keycloak import decode_token_claims


def _jwt(claims):
    def seg(obj):
        return base64.urlsafe_b64encode(json.dumps(obj).encode()).rstrip(b'=').decode()
    return f"{seg({'alg': 'RS256'})}.{seg(claims)}.signature"


def _ok(payload=None, status=200):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


class BrokerConfig(TestingConfig):
    IDENTITY_BACKEND = 'keycloak'
    KEYCLOAK_URL = 'http://sso.test/'
    KEYCLOAK_REALM = 'bioalgos'
    KEYCLOAK_CLIENT_ID = 'bioalgos-client'


class TestPrincipal:
    def test_record_roundtrip(self):
        p = Principal(id='u1', name='Ada', email='ada@example.org', is_admin=True, last_activity=5)
        assert Principal.from_record(p.to_record()) == p

    def test_from_record_defaults(self):
        p = Principal.from_record({'id': 7})
        assert p.id == '7'
        assert p.is_admin is False


class TestLocalCredentialProvider:
    @pytest.fixture
    def provider(self, storage):
        return LocalCredentialProvider(storage, admin_key='test-admin-key')

    def test_signup_signs_in(self, provider, storage):
        assert provider.signup('Ada', 'ada@example.org', 'lovelace') is True
        assert provider.user.email == 'ada@example.org'
        assert provider.is_admin is False

        stored = storage.read(USERS_KEY)[0]
        assert stored['passwordHash'] != 'lovelace'
        assert 'password' not in stored
        assert storage.read(SESSION_USER_KEY)['email'] == 'ada@example.org'
        assert 'passwordHash' not in storage.read(SESSION_USER_KEY)

    def test_duplicate_email_rejected(self, provider, storage):
        provider.signup('Ada', 'ada@example.org', 'a')
        assert provider.signup('Other', 'ada@example.org', 'b') is False
        assert len(storage.read(USERS_KEY)) == 1

    def test_login_and_logout(self, provider, storage):
        provider.signup('Ada', 'ada@example.org', 'lovelace')
        provider.logout()
        assert provider.user is None
        assert storage.read(SESSION_USER_KEY) is None

        assert provider.login('ada@example.org', 'wrong') is False
        assert provider.login('nobody@example.org', 'lovelace') is False
        assert provider.login('ada@example.org', 'lovelace') is True
        assert provider.user.last_activity is not None
        assert storage.read(USERS_KEY)[0]['lastActivity'] == provider.user.last_activity

    def test_session_restored_on_startup(self, provider, storage):
        provider.signup('Ada', 'ada@example.org', 'lovelace')
        restored = LocalCredentialProvider(storage)
        assert restored.user.email == 'ada@example.org'

    def test_update_user_activity(self, provider, storage):
        provider.signup('Ada', 'ada@example.org', 'lovelace')
        storage.mutate(USERS_KEY, lambda users: [dict(u, lastActivity=1) for u in users])
        provider.update_user_activity()
        stamp = storage.read(USERS_KEY)[0]['lastActivity']
        assert stamp > 1
        assert storage.read(SESSION_USER_KEY)['lastActivity'] == stamp

    def test_upgrade_to_admin_requires_key(self, provider):
        provider.signup('Ada', 'ada@example.org', 'lovelace')
        assert provider.upgrade_to_admin('ada@example.org', 'lovelace', 'bad-key') is False
        assert provider.upgrade_to_admin('ada@example.org', 'wrong', 'test-admin-key') is False
        assert provider.is_admin is False

        assert provider.upgrade_to_admin('ada@example.org', 'lovelace', 'test-admin-key') is True
        assert provider.is_admin is True

    def test_make_user_admin_only_by_admin(self, provider, storage):
        provider.signup('Bob', 'bob@example.org', 'pw')
        bob_id = provider.user.id
        provider.logout()
        provider.signup('Ada', 'ada@example.org', 'lovelace')
        assert provider.make_user_admin(bob_id) is False

        provider.upgrade_to_admin('ada@example.org', 'lovelace', 'test-admin-key')
        assert provider.make_user_admin(bob_id) is True
        assert provider.make_user_admin('missing') is False
        bob = [u for u in storage.read(USERS_KEY) if u['id'] == bob_id][0]
        assert bob['isAdmin'] is True


class TestBrokerIdentityProvider:
    def test_unreachable_restores_cached_profile(self, storage, notifier):
        storage.write(BROKER_USER_KEY, {'id': 'kc-1', 'name': 'Ada', 'isAdmin': True})
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError('down')

        provider = BrokerIdentityProvider(BrokerConfig, storage, notifier=notifier, session=session)

        assert provider.available is False
        assert provider.user.id == 'kc-1'
        assert provider.is_admin is True
        assert notifier.received == [('info', 'Using local authentication (Keycloak not available)')]
        assert provider.login('ada@example.org', 'pw') is False

    def test_unreachable_without_cache(self, storage, notifier):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError('down')
        provider = BrokerIdentityProvider(BrokerConfig, storage, notifier=notifier, session=session)
        assert provider.user is None
        assert notifier.received == []

    def test_login_reads_profile_and_roles(self, storage):
        session = MagicMock()
        token = _jwt({'sub': 'kc-9', 'realm_access': {'roles': ['user', 'admin']}})
        session.get.side_effect = [
            _ok({'realm': 'bioalgos'}),
            _ok({'sub': 'kc-9', 'given_name': 'Rosalind', 'family_name': 'Franklin',
                 'email': 'rf@example.org'}),
        ]
        session.post.return_value = _ok({'access_token': token, 'refresh_token': 'r1'})

        provider = BrokerIdentityProvider(BrokerConfig, storage, session=session)
        assert provider.login('rf@example.org', 'photo51') is True

        assert provider.user.name == 'Rosalind Franklin'
        assert provider.is_admin is True
        assert storage.read(BROKER_USER_KEY)['id'] == 'kc-9'
        token_url = session.post.call_args[0][0]
        assert token_url == 'http://sso.test/realms/bioalgos/protocol/openid-connect/token'

    def test_login_bad_credentials(self, storage):
        session = MagicMock()
        session.get.return_value = _ok({'realm': 'bioalgos'})
        session.post.return_value = _ok({'error': 'invalid_grant'}, status=401)
        provider = BrokerIdentityProvider(BrokerConfig, storage, session=session)
        assert provider.login('x@example.org', 'nope') is False
        assert provider.user is None

    def test_logout_clears_profile(self, storage):
        session = MagicMock()
        session.get.return_value = _ok({})
        provider = BrokerIdentityProvider(BrokerConfig, storage, session=session)
        provider._tokens = {'refresh_token': 'r1'}
        provider._user = Principal(id='kc-1')
        storage.write(BROKER_USER_KEY, provider._user.to_record())

        provider.logout()

        assert provider.user is None
        assert storage.read(BROKER_USER_KEY) is None
        assert session.post.call_args[0][0].endswith('/protocol/openid-connect/logout')

    def test_make_user_admin_requires_admin(self, storage, notifier):
        session = MagicMock()
        session.get.return_value = _ok({})
        provider = BrokerIdentityProvider(BrokerConfig, storage, notifier=notifier, session=session)
        provider._user = Principal(id='kc-1', is_admin=False)
        assert provider.make_user_admin('kc-2') is False
        assert ('error', 'Permission denied') in notifier.received

    def test_make_user_admin_maps_realm_role(self, storage):
        session = MagicMock()
        session.get.return_value = _ok({'id': 'role-1', 'name': 'admin'})
        session.post.return_value = _ok(None, status=204)
        provider = BrokerIdentityProvider(BrokerConfig, storage, session=session)
        provider._user = Principal(id='kc-1', is_admin=True)

        assert provider.make_user_admin('kc-2') is True
        url = session.post.call_args[0][0]
        assert url == 'http://sso.test/admin/realms/bioalgos/users/kc-2/role-mappings/realm'
        assert session.post.call_args[1]['json'] == [{'id': 'role-1', 'name': 'admin'}]

    def test_decode_token_claims_garbage(self):
        assert decode_token_claims('not-a-jwt') == {}


class TestSelectIdentityProvider:
    def test_local_backend(self, storage):
        provider = select_identity_provider(TestingConfig, storage)
        assert isinstance(provider, LocalCredentialProvider)
        assert provider.admin_key == 'test-admin-key'

    def test_unknown_backend(self, storage):
        class Bad(TestingConfig):
            IDENTITY_BACKEND = 'ldap'
        with pytest.raises(ValueError, match='Unknown identity backend'):
            select_identity_provider(Bad, storage)
