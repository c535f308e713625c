from __future__ import annotations

import base64
import json
import logging

import requests

from bioalgos.client.notices import Notifier
from bioalgos.client.storage import BROKER_USER_KEY, StoreFacade

from .base import IdentityProvider, Principal

logger = logging.getLogger(__name__)

ADMIN_ROLE = 'admin'


def decode_token_claims(token: str) -> dict:
    """Read the claims segment of a JWT without verifying its signature.

    The token comes straight from the broker's token endpoint over the
    configured connection; it is only used to read the realm roles.
    """
    try:
        payload = token.split('.')[1]
        payload += '=' * (-len(payload) % 4)
        return json.loads(base64.urlsafe_b64decode(payload))
    except (IndexError, ValueError) as e:
        logger.warning(f'Could not decode access token claims: {e}')
        return {}


class BrokerIdentityProvider(IdentityProvider):
    """OpenID Connect identity broker (Keycloak).

    When the broker cannot be reached at startup the last known profile is
    restored from ``currentUser`` in the local store.
    """

    BACKEND_NAME = "keycloak"

    def __init__(self, config, storage: StoreFacade, notifier: Notifier = None,
                 session: requests.Session = None):
        super().__init__()
        self.storage = storage
        self.notifier = notifier or Notifier()
        self.server_url = config.KEYCLOAK_URL.rstrip('/')
        self.realm = config.KEYCLOAK_REALM
        self.client_id = config.KEYCLOAK_CLIENT_ID
        self.timeout = getattr(config, 'KEYCLOAK_TIMEOUT', 5.0)
        self.session = session or requests.Session()
        self._tokens: dict = {}
        self.available = self._probe()
        if not self.available:
            self._fallback_to_local_storage()

    @property
    def realm_url(self) -> str:
        return f'{self.server_url}/realms/{self.realm}'

    @property
    def oidc_url(self) -> str:
        return f'{self.realm_url}/protocol/openid-connect'

    @property
    def admin_url(self) -> str:
        return f'{self.server_url}/admin/realms/{self.realm}'

    def _probe(self) -> bool:
        try:
            resp = self.session.get(self.realm_url, timeout=self.timeout)
            resp.raise_for_status()
            return True
        except requests.RequestException as e:
            logger.error(f'Failed to reach identity broker at {self.realm_url}: {e}')
            return False

    def _fallback_to_local_storage(self) -> None:
        logger.info('Using local fallback for authentication')
        stored = self.storage.read(BROKER_USER_KEY)
        if isinstance(stored, dict) and stored.get('id'):
            self._user = Principal.from_record(stored)
            self.notifier.info(
                'Using local authentication (Keycloak not available)',
                notice_id='identity-fallback',
            )

    def _auth_headers(self) -> dict:
        return {'Authorization': f"Bearer {self._tokens.get('access_token', '')}"}

    def login(self, email: str, password: str) -> bool:
        if not self.available:
            logger.warning('Identity broker unavailable; login refused')
            return False
        try:
            resp = self.session.post(
                f'{self.oidc_url}/token',
                data={
                    'grant_type': 'password',
                    'client_id': self.client_id,
                    'username': email,
                    'password': password,
                    'scope': 'openid profile email',
                },
                timeout=self.timeout,
            )
            if resp.status_code in (400, 401):
                return False
            resp.raise_for_status()
            self._tokens = resp.json()

            info = self.session.get(
                f'{self.oidc_url}/userinfo',
                headers=self._auth_headers(),
                timeout=self.timeout,
            )
            info.raise_for_status()
            profile = info.json()
        except requests.RequestException as e:
            logger.error(f'Broker login failed for {email}: {e}')
            self._tokens = {}
            return False

        claims = decode_token_claims(self._tokens.get('access_token', ''))
        roles = claims.get('realm_access', {}).get('roles', [])
        name = ' '.join(
            part for part in (profile.get('given_name'), profile.get('family_name')) if part
        )
        self._user = Principal(
            id=profile.get('sub', ''),
            name=name or profile.get('preferred_username', ''),
            email=profile.get('email', ''),
            is_admin=ADMIN_ROLE in roles,
        )
        self.update_user_activity()
        self.storage.write(BROKER_USER_KEY, self._user.to_record())
        logger.info(f'User authenticated via broker: {self._user.email}')
        return True

    def logout(self) -> None:
        refresh_token = self._tokens.get('refresh_token')
        if self.available and refresh_token:
            try:
                self.session.post(
                    f'{self.oidc_url}/logout',
                    data={'client_id': self.client_id, 'refresh_token': refresh_token},
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                logger.warning(f'Broker logout request failed: {e}')
        self._tokens = {}
        self._user = None
        self.storage.remove(BROKER_USER_KEY)

    def make_user_admin(self, user_id: str) -> bool:
        if not self.is_admin:
            logger.error('Only admin users can make other users admin')
            self.notifier.error('Permission denied')
            return False
        if not self.available:
            logger.warning('Identity broker unavailable; cannot change roles')
            self.notifier.error('Failed to update user role')
            return False
        try:
            role = self.session.get(
                f'{self.admin_url}/roles/{ADMIN_ROLE}',
                headers=self._auth_headers(),
                timeout=self.timeout,
            )
            role.raise_for_status()
            resp = self.session.post(
                f'{self.admin_url}/users/{user_id}/role-mappings/realm',
                headers=self._auth_headers(),
                json=[role.json()],
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f'Error making user {user_id} admin: {e}')
            self.notifier.error('Failed to update user role')
            return False
        self.notifier.success('User is now an admin')
        return True
