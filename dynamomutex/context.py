#--------------------------------------------------------------------------------
# logging
#--------------------------------------------------------------------------------

import logging
_logger = logging.getLogger(__name__)

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class MutexContext(object):
    ''' A context manager to help using a mutex in a `with` statement.

    .. code-block:: python

        from dynamomutex import locker

        with locker(mutex=mutex, timeout=5) as handle:
            pass # perform locked activity here
        # upon leaving the lock will be removed
    '''

    def __init__(self, **kwargs):
        ''' Initialize a new instance of the MutexContext

        :param mutex: The mutex to acquire
        :param timeout: How long to wait for the lock, default the mutex policy
        '''
        self.mutex   = kwargs.get('mutex')
        self.timeout = kwargs.get('timeout', None)
        self.record  = None

    def __enter__(self):
        ''' On enter of the context manager, this will acquire
        the specified lock. When the lock has been acquired,
        this will return.
        '''
        self.record = self.mutex.lock(self.timeout)
        return self

    def __exit__(self, ex_type, value, traceback):
        ''' On exit of the context manager, this will release
        the currently held lock. Errors from the body are
        never suppressed.
        '''
        if not self.mutex.unlock():
            _logger.warning("lock %s was no longer ours on exit", self.mutex.name)
        self.record = None
        return False
