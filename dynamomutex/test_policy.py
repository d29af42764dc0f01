#!/usr/bin/env python
import json
import unittest
from datetime import timedelta

import mock

from dynamomutex.policy import MutexPolicy, to_seconds

class MutexPolicyTest(unittest.TestCase):

    def test_policy_defaults(self):
        policy = MutexPolicy()
        self.assertEqual(policy.acquire_timeout, 10.0)
        self.assertEqual(policy.retry_period, 0.1)
        self.assertEqual(policy.max_retry_period, 2.0)
        self.assertEqual(policy.lock_duration, 60000)
        self.assertEqual(policy.release_attempts, 3)

    def test_policy_accepts_seconds_and_timedeltas(self):
        policy = MutexPolicy(acquire_timeout=2, lock_duration=timedelta(seconds=5))
        self.assertEqual(policy.acquire_timeout, 2.0)
        self.assertEqual(policy.lock_duration, 5000)

    def test_to_seconds(self):
        self.assertEqual(to_seconds(timedelta(milliseconds=250)), 0.25)
        self.assertEqual(to_seconds(3), 3.0)

    def test_name_validity(self):
        policy = MutexPolicy()
        self.assertTrue(policy.is_name_valid("job-42"))
        self.assertFalse(policy.is_name_valid(""))
        self.assertFalse(policy.is_name_valid(None))
        self.assertFalse(policy.is_name_valid(42))

    def test_owners_are_unique(self):
        policy = MutexPolicy()
        self.assertNotEqual(policy.get_new_owner(), policy.get_new_owner())

    def test_timestamp_is_in_millis(self):
        policy = MutexPolicy()
        with mock.patch('dynamomutex.policy.time.time', return_value=1406929231.5):
            self.assertEqual(policy.get_new_timestamp(), 1406929231500)

    def test_backoff_grows_and_is_capped(self):
        policy = MutexPolicy(retry_period=0.1, max_retry_period=1)
        with mock.patch('dynamomutex.policy.random.uniform', side_effect=lambda low, high: high):
            self.assertAlmostEqual(policy.get_backoff(0), 0.1)
            self.assertAlmostEqual(policy.get_backoff(1), 0.2)
            self.assertAlmostEqual(policy.get_backoff(2), 0.4)
            self.assertAlmostEqual(policy.get_backoff(10), 1.0)
            self.assertAlmostEqual(policy.get_backoff(5000), 1.0)

    def test_backoff_is_jittered_within_bounds(self):
        policy = MutexPolicy(retry_period=0.1, max_retry_period=1)
        for attempt in range(20):
            delay = policy.get_backoff(attempt)
            ceiling = min(0.1 * (2 ** attempt), 1.0)
            self.assertGreaterEqual(delay, ceiling / 2.0)
            self.assertLessEqual(delay, ceiling)

    def test_policy_to_string(self):
        policy = MutexPolicy(release_attempts=5)
        self.assertEqual(json.loads(str(policy))['release_attempts'], 5)

#---------------------------------------------------------------------------#
# main
#---------------------------------------------------------------------------#
if __name__ == "__main__":
    unittest.main()
