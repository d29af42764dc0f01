import time
import uuid
import json
import random
import socket
from datetime import timedelta

#--------------------------------------------------------------------------------
# logging
#--------------------------------------------------------------------------------

import logging
_logger = logging.getLogger(__name__)

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class MutexPolicy(object):
    '''
    Along with the timing policy, this class also includes the policy
    for getting a new owner token, the current timestamp, the backoff
    between attempts, and checking if a lock name is valid. All of these
    can be overridden to customize the use case for the system::

        import os
        import uuid
        from dynamomutex import MutexPolicy

        class MyPolicy(MutexPolicy):

            def is_name_valid(self, name):
                return name.startswith("application.")

            def get_new_owner(self):
                return "%s:%d:%s" % (os.getenv('HOST'), os.getpid(), uuid.uuid4())
    '''

    def __init__(self, **kwargs):
        ''' Initialize a new instance of the MutexPolicy class

        :param acquire_timeout: The amount of time to wait trying to get a lock
        :param retry_period: The initial time to wait between acquire attempts
        :param max_retry_period: The longest time to wait between attempts
        :param lock_duration: The default amount of time a lock is held for
        :param release_attempts: How many times to try a delete on transport errors
        '''
        acquire_timeout  = kwargs.get('acquire_timeout', timedelta(seconds=10))
        retry_period     = kwargs.get('retry_period', timedelta(milliseconds=100))
        max_retry_period = kwargs.get('max_retry_period', timedelta(seconds=2))
        lock_duration    = kwargs.get('lock_duration', timedelta(minutes=1))
        self.release_attempts = kwargs.get('release_attempts', 3)

        self.acquire_timeout  = to_seconds(acquire_timeout)
        self.retry_period     = to_seconds(retry_period)
        self.max_retry_period = to_seconds(max_retry_period)
        self.lock_duration    = int(to_seconds(lock_duration) * 1000)

    def is_name_valid(self, name):
        ''' Helper method to check if the supplied name is valid
        to use as a key or not.

        :param name: The name to check for validity
        :returns: True if a valid name, False otherwise
        '''
        return bool(name) and isinstance(name, str)

    def get_new_owner(self):
        ''' Helper method to retrieve a new owner token that is
        unique to this acquisition. It is written with the lock
        and must match on release.

        :returns: A new owner token
        '''
        return "%s.%s" % (socket.gethostname(), uuid.uuid4())

    def get_new_timestamp(self):
        ''' Helper method to retrieve the current time since
        the epoch in milliseconds.

        :returns: The current time in milliseconds
        '''
        return int(time.time() * 1000)

    def get_backoff(self, attempt):
        ''' Helper method to compute how long to wait after the
        given failed attempt (starting at 0). The delay doubles
        with each attempt up to `max_retry_period`, and a random
        half of it is jittered away so racing clients spread out.

        :param attempt: The number of attempts already failed
        :returns: The delay in seconds
        '''
        delay = min(self.retry_period * (2 ** min(attempt, 32)), self.max_retry_period)
        return random.uniform(delay / 2.0, delay)

    def sleep(self, seconds):
        ''' Helper method to suspend the caller between attempts.

        :param seconds: The number of seconds to sleep
        '''
        time.sleep(seconds)

    # ------------------------------------------------------------
    # magic methods
    # ------------------------------------------------------------

    def __str__(self):
        return json.dumps(self.__dict__)

    __repr__ = __str__

#--------------------------------------------------------------------------------
# helpers
#--------------------------------------------------------------------------------

def to_seconds(value):
    ''' Convert a timedelta or a plain number of seconds into
    a float number of seconds.

    :param value: The duration to convert
    :returns: The duration in seconds
    '''
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)
