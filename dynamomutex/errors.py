'''
The error hierarchy for the mutex. Contention is not an error for
callers of `lock`, it only drives the retry loop; everything that
reaches the caller derives from MutexError.
'''

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class MutexError(Exception):
    ''' Base class for every error raised by the mutex or its stores. '''


class SerializationError(MutexError):
    ''' The lock record could not be encoded for the backing store.
    This is never retried.
    '''


class ConditionalCheckFailed(MutexError):
    ''' A conditional write was rejected because the lock record
    already exists (or is owned by someone else).
    '''


class TransportError(MutexError):
    ''' The backing store could not be reached or returned a fault
    that is not a conditional check failure.
    '''


class LockTimeout(MutexError):
    ''' The lock could not be acquired before the deadline passed
    because another owner kept holding it.
    '''

    def __init__(self, name, waited):
        ''' Initialize a new instance of the LockTimeout error

        :param name: The name of the lock that could not be acquired
        :param waited: The number of seconds spent trying
        '''
        super(LockTimeout, self).__init__(
            "timed out after %.2f secs acquiring lock %s" % (waited, name))
        self.name   = name
        self.waited = waited
