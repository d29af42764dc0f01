'''
The LockRecord represents a single lock entry as it is stored in the
backing table. It is an immutable tuple: a record is written once by a
successful acquire and is only ever deleted afterwards, never updated.

The LockAttempt is the outcome of a single non-blocking acquire, which
lets the caller tell contention apart from a failing backend.
'''
from collections import namedtuple

#--------------------------------------------------------------------------------
# constants
#--------------------------------------------------------------------------------

ACQUIRED     = 'acquired'
ALREADY_HELD = 'already_held'
ERROR        = 'error'

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

LockRecord = namedtuple('LockRecord',
    ['name', 'owner', 'created', 'expires'])

LockAttempt = namedtuple('LockAttempt',
    ['status', 'record', 'error'])
