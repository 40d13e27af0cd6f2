import json
import socket
import tempfile
import urllib.parse
from unittest import mock

import unittest

import requests

from linkedin_publisher.app.config import OAuthConfig, redirect_uri_for
from linkedin_publisher.app.linkedin.linkedin_client import LinkedInTransportError
from linkedin_publisher.app.linkedin.linkedin_oauth import LinkedInOAuth
from linkedin_publisher.app.oauth import AuthorizationError, CredentialError, Credentials, CredentialsStore, \
    OAuthFlow, TokenRequestError


def response_of(status_code: int, body=None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.reason = 'OK' if status_code < 400 else 'Bad Request'
    response.encoding = 'utf-8'
    if body is None:
        response._content = b''
    elif isinstance(body, str):
        response._content = body.encode('utf-8')
    else:
        response._content = json.dumps(body).encode('utf-8')
    return response


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(('localhost', 0))
        return sock.getsockname()[1]


TOKEN_RESPONSE = {
    'access_token': 'new-access-token',
    'expires_in': 5184000,
    'refresh_token': 'new-refresh-token',
    'refresh_token_expires_in': 31536000,
    'scope': 'openid,profile,w_member_social'
}


class LinkedInOAuthTest(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.store = CredentialsStore(dir_path=self.tmp_dir.name, legacy_dir_paths=[])
        self.config = OAuthConfig(client_id='test-client-id',
                                  client_secret='test-client-secret',
                                  redirect_uri=redirect_uri_for(4002),
                                  scopes=['openid', 'profile', 'w_member_social'],
                                  callback_port=4002)
        self.oauth = LinkedInOAuth(self.config, self.store)

    def tearDown(self):
        self.tmp_dir.cleanup()

    def test_build_authorization_url(self):
        url = urllib.parse.urlparse(self.oauth.build_authorization_url('test-state'))
        self.assertEqual(f"{url.scheme}://{url.netloc}{url.path}", LinkedInOAuth.authorization_url)
        self.assertIn('scope=openid%20profile%20w_member_social', url.query)

        params = urllib.parse.parse_qs(url.query)
        self.assertEqual(params['response_type'], ['code'])
        self.assertEqual(params['client_id'], ['test-client-id'])
        self.assertEqual(params['redirect_uri'], ['http://localhost:4002/callback'])
        self.assertEqual(params['state'], ['test-state'])
        self.assertEqual(params['scope'], ['openid profile w_member_social'])

    def test_generate_csrf_token(self):
        tokens = {LinkedInOAuth.generate_csrf_token() for _ in range(100)}
        self.assertEqual(len(tokens), 100)
        for token in tokens:
            self.assertGreaterEqual(len(token), 43)
            self.assertRegex(token, r'^[A-Za-z0-9_-]+$')

    def test_exchange_code_for_token(self):
        with mock.patch.object(requests, 'post', return_value=response_of(200, TOKEN_RESPONSE)) as mock_post:
            credentials = self.oauth.exchange_code_for_token('test-code')

        self.assertEqual(credentials.access_token, 'new-access-token')
        self.assertEqual(credentials.refresh_token, 'new-refresh-token')
        self.assertIsNotNone(credentials.created_at)

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], LinkedInOAuth.token_url)
        self.assertEqual(kwargs['headers']['Content-Type'], 'application/x-www-form-urlencoded')
        self.assertEqual(kwargs['data'], {
            'grant_type': 'authorization_code',
            'code': 'test-code',
            'redirect_uri': 'http://localhost:4002/callback',
            'client_id': 'test-client-id',
            'client_secret': 'test-client-secret'
        })

    def test_exchange_code_for_token_given_rejection(self):
        body = '{"error":"invalid_grant","error_description":"authorization code expired"}'
        with mock.patch.object(requests, 'post', return_value=response_of(400, body)):
            with self.assertRaises(TokenRequestError) as context:
                self.oauth.exchange_code_for_token('test-code')
        self.assertEqual(context.exception.status_code, 400)
        self.assertIn('authorization code expired', str(context.exception))

    def test_exchange_code_for_token_given_no_access_token(self):
        with mock.patch.object(requests, 'post', return_value=response_of(200, {'expires_in': 60})):
            with self.assertRaises(TokenRequestError):
                self.oauth.exchange_code_for_token('test-code')

    def test_exchange_code_for_token_given_network_failure(self):
        with mock.patch.object(requests, 'post', side_effect=requests.exceptions.ConnectionError("unreachable")):
            with self.assertRaises(LinkedInTransportError):
                self.oauth.exchange_code_for_token('test-code')

    def test_refresh_access_token(self):
        with mock.patch.object(requests, 'post', return_value=response_of(200, TOKEN_RESPONSE)) as mock_post:
            credentials = self.oauth.refresh_access_token('old-refresh-token')
        self.assertEqual(credentials.access_token, 'new-access-token')
        self.assertEqual(mock_post.call_args.kwargs['data'], {
            'grant_type': 'refresh_token',
            'refresh_token': 'old-refresh-token',
            'client_id': 'test-client-id',
            'client_secret': 'test-client-secret'
        })

    def test_manual_login_saves_credentials(self):
        with mock.patch.object(requests, 'post', return_value=response_of(200, TOKEN_RESPONSE)) as mock_post:
            with mock.patch('builtins.input', return_value='  pasted-code \n'):
                credentials = self.oauth.login(manual=True)
        self.assertEqual(mock_post.call_args.kwargs['data']['code'], 'pasted-code')
        self.assertEqual(self.store.load(), credentials)

    def test_manual_login_cancelled(self):
        with mock.patch.object(requests, 'post') as mock_post:
            with mock.patch('builtins.input', side_effect=EOFError):
                with self.assertRaises(AuthorizationError):
                    self.oauth.login(manual=True)
        mock_post.assert_not_called()
        self.assertIsNone(self.store.load())

    def test_manual_login_given_empty_code(self):
        with mock.patch('builtins.input', return_value='   '):
            with self.assertRaises(AuthorizationError):
                self.oauth.login(manual=True)
        self.assertIsNone(self.store.load())

    def test_login_given_failed_exchange(self):
        with mock.patch.object(requests, 'post', return_value=response_of(401, 'invalid client')):
            with mock.patch('builtins.input', return_value='pasted-code'):
                with self.assertRaises(TokenRequestError):
                    self.oauth.login(manual=True)
        self.assertIsNone(self.store.load())

    def test_refresh(self):
        self.store.save(Credentials.stamped({'access_token': 'old', 'expires_in': 60, 'refresh_token': 'old-refresh'}))
        with mock.patch.object(requests, 'post', return_value=response_of(200, TOKEN_RESPONSE)):
            credentials = self.oauth.refresh()
        self.assertEqual(self.store.load(), credentials)
        self.assertEqual(credentials.access_token, 'new-access-token')

    def test_failed_refresh_keeps_stored_credentials(self):
        stored = Credentials.stamped({'access_token': 'old', 'expires_in': 60, 'refresh_token': 'old-refresh'})
        self.store.save(stored)
        with mock.patch.object(requests, 'post', return_value=response_of(400, 'invalid refresh token')):
            with self.assertRaises(TokenRequestError):
                self.oauth.refresh()
        self.assertEqual(self.store.load(), stored)

    def test_refresh_given_no_refresh_token(self):
        self.store.save(Credentials.stamped({'access_token': 'old', 'expires_in': 60}))
        with mock.patch.object(requests, 'post') as mock_post:
            with self.assertRaises(CredentialError):
                self.oauth.refresh()
        mock_post.assert_not_called()

    def test_refresh_given_no_credentials(self):
        with self.assertRaises(CredentialError):
            self.oauth.refresh()


class LinkedInOAuthCallbackTest(unittest.TestCase):
    """Logs in through the local callback listener, with the browser played by a request."""
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.store = CredentialsStore(dir_path=self.tmp_dir.name, legacy_dir_paths=[])
        self.port = free_port()
        self.oauth = LinkedInOAuth(OAuthConfig(client_id='test-client-id',
                                               client_secret='test-client-secret',
                                               redirect_uri=redirect_uri_for(self.port),
                                               callback_port=self.port), self.store)

    def tearDown(self):
        self.tmp_dir.cleanup()

    def redirect(self, **params):
        def open_browser(auth_url):
            query = urllib.parse.parse_qs(urllib.parse.urlparse(auth_url).query)
            if 'state' not in params:
                params['state'] = query['state'][0]
            session = requests.Session()
            session.trust_env = False
            with session:
                session.get(f"http://127.0.0.1:{self.port}/callback", params=params, timeout=5)
        return open_browser

    def assert_port_released(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(('localhost', self.port))

    def test_login(self):
        with mock.patch.object(OAuthFlow, 'open_browser', side_effect=self.redirect(code='browser-code')):
            with mock.patch.object(requests, 'post', return_value=response_of(200, TOKEN_RESPONSE)) as mock_post:
                credentials = self.oauth.login()

        self.assertEqual(mock_post.call_args.kwargs['data']['code'], 'browser-code')
        self.assertEqual(self.store.load(), credentials)
        self.assert_port_released()

    def test_login_given_forged_state(self):
        with mock.patch.object(OAuthFlow, 'open_browser', side_effect=self.redirect(code='browser-code',
                                                                                     state='forged')):
            with mock.patch.object(requests, 'post') as mock_post:
                with self.assertRaises(AuthorizationError):
                    self.oauth.login()

        mock_post.assert_not_called()
        self.assertIsNone(self.store.load())
        self.assert_port_released()

    def test_login_given_denied(self):
        with mock.patch.object(OAuthFlow, 'open_browser', side_effect=self.redirect(error='access_denied')):
            with self.assertRaises(AuthorizationError) as context:
                self.oauth.login()
        self.assertIn('access_denied', str(context.exception))
        self.assertIsNone(self.store.load())

    def test_authorization_timeout(self):
        with mock.patch.object(OAuthFlow, 'open_browser'):
            with self.assertRaises(AuthorizationError) as context:
                self.oauth.prompt_user_to_authorize_app('https://example.com', 'test-state', timeout=0.2)
        self.assertIn('timeout', str(context.exception))
        self.assert_port_released()


if __name__ == '__main__':
    unittest.main()
