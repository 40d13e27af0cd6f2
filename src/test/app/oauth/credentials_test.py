from datetime import datetime, timedelta, timezone

import unittest

from linkedin_publisher.app.oauth.credentials import Credentials, CredentialsStore, CredentialsParseError

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def credentials_created(seconds_ago: float, expires_in: int, **extra) -> Credentials:
    return Credentials({
        'access_token': 'test-access-token',
        'token_type': 'Bearer',
        'expires_in': expires_in,
        'scope': 'openid profile w_member_social',
        'created_at': (NOW - timedelta(seconds=seconds_ago)).isoformat(),
        **extra
    })


class CredentialsTest(unittest.TestCase):
    def test_data(self):
        credentials = credentials_created(0, 3600, refresh_token='test-refresh-token')
        self.assertEqual(credentials.access_token, 'test-access-token')
        self.assertEqual(credentials.refresh_token, 'test-refresh-token')
        self.assertEqual(credentials.token_type, 'Bearer')
        self.assertEqual(credentials.scopes, ['openid', 'profile', 'w_member_social'])
        self.assertEqual(credentials.expires_at, NOW + timedelta(seconds=3600))
        self.assertTrue(credentials.is_refreshable())

    def test_no_data(self):
        credentials = Credentials({})
        self.assertIsNone(credentials.access_token)
        self.assertEqual(credentials.scopes, [])
        self.assertEqual(credentials.expires_in, 0)
        self.assertFalse(credentials.is_refreshable())

    def test_missing_created_at(self):
        with self.assertRaises(CredentialsParseError):
            _ = Credentials({'access_token': 'test-access-token'}).created_at

    def test_invalid_created_at(self):
        with self.assertRaises(CredentialsParseError):
            _ = Credentials({'access_token': 'test-access-token', 'created_at': 'yesterday'}).created_at

    def test_created_at_with_z_suffix(self):
        credentials = Credentials({'access_token': 'x', 'created_at': '2026-01-15T12:00:00.000Z'})
        self.assertEqual(credentials.created_at, NOW)

    def test_naive_created_at_is_utc(self):
        credentials = Credentials({'access_token': 'x', 'created_at': '2026-01-15T12:00:00'})
        self.assertEqual(credentials.created_at, NOW)

    def test_stamped(self):
        credentials = Credentials.stamped({'access_token': 'x', 'expires_in': 60}, now=NOW)
        self.assertEqual(credentials.created_at, NOW)
        self.assertEqual(credentials.expires_in, 60)

    def test_data_is_a_copy(self):
        credentials = credentials_created(0, 3600)
        credentials.data['access_token'] = 'changed'
        self.assertEqual(credentials.access_token, 'test-access-token')

    def test_str_hides_tokens(self):
        credentials = credentials_created(0, 3600, refresh_token='test-refresh-token')
        self.assertNotIn('test-access-token', str(credentials))
        self.assertNotIn('test-refresh-token', str(credentials))

    def test_seconds_remaining(self):
        self.assertEqual(credentials_created(600, 3600).seconds_remaining(NOW), 3000)
        self.assertEqual(credentials_created(7200, 3600).seconds_remaining(NOW), 0)

    def test_equality(self):
        self.assertEqual(credentials_created(0, 3600), credentials_created(0, 3600))
        self.assertNotEqual(credentials_created(0, 3600), credentials_created(1, 3600))


class CredentialsExpiryTest(unittest.TestCase):
    def test_not_expired_given_fresh(self):
        self.assertFalse(CredentialsStore.is_expired(credentials_created(0, 3600), NOW))

    def test_not_expired_just_before_margin(self):
        self.assertFalse(CredentialsStore.is_expired(credentials_created(3299, 3600), NOW))

    def test_expired_at_margin(self):
        self.assertTrue(CredentialsStore.is_expired(credentials_created(3300, 3600), NOW))

    def test_expired_within_margin(self):
        self.assertTrue(CredentialsStore.is_expired(credentials_created(3594, 3600), NOW))

    def test_expired_given_past(self):
        self.assertTrue(CredentialsStore.is_expired(credentials_created(7200, 3600), NOW))

    def test_expired_given_zero(self):
        self.assertTrue(CredentialsStore.is_expired(credentials_created(0, 0), NOW))

    def test_expiring_soon_given_five_days_left(self):
        self.assertTrue(CredentialsStore.is_expiring_soon(credentials_created(0, 5 * 24 * 3600), NOW))

    def test_not_expiring_soon_given_sixty_days_left(self):
        self.assertFalse(CredentialsStore.is_expiring_soon(credentials_created(0, 60 * 24 * 3600), NOW))

    def test_expiring_soon_given_expired(self):
        self.assertTrue(CredentialsStore.is_expiring_soon(credentials_created(7200, 3600), NOW))


if __name__ == '__main__':
    unittest.main()
