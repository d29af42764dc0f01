#!/usr/bin/env python
import unittest

from dynamomutex.errors import ConditionalCheckFailed
from dynamomutex.lock import LockRecord
from dynamomutex.memory import MemoryStore

class MemoryStoreTest(unittest.TestCase):

    def setUp(self):
        self.store  = MemoryStore()
        self.record = LockRecord('job-42', 'owner-1', 1000, 6000)

    def test_put_if_absent(self):
        self.assertTrue(self.store.put_if_absent(self.record))
        self.assertEqual(self.store.get('job-42'), self.record)

    def test_put_if_absent_rejects_existing(self):
        self.store.put_if_absent(self.record)
        with self.assertRaises(ConditionalCheckFailed):
            self.store.put_if_absent(self.record._replace(owner='owner-2'))
        self.assertEqual(self.store.get('job-42').owner, 'owner-1')

    def test_get_missing(self):
        self.assertIsNone(self.store.get('job-42'))

    def test_delete_by_owner(self):
        self.store.put_if_absent(self.record)
        self.assertTrue(self.store.delete('job-42', 'owner-1'))
        self.assertIsNone(self.store.get('job-42'))

    def test_delete_missing_is_success(self):
        self.assertTrue(self.store.delete('job-42', 'owner-1'))

    def test_delete_by_other_owner_is_rejected(self):
        self.store.put_if_absent(self.record)
        with self.assertRaises(ConditionalCheckFailed):
            self.store.delete('job-42', 'owner-2')
        self.assertEqual(self.store.get('job-42'), self.record)

#---------------------------------------------------------------------------#
# main
#---------------------------------------------------------------------------#
if __name__ == "__main__":
    unittest.main()
