from .lock   import LockRecord, LockAttempt, ACQUIRED, ALREADY_HELD, ERROR
from .errors import MutexError, ConditionalCheckFailed, TransportError, LockTimeout
from .policy import MutexPolicy, to_seconds

#--------------------------------------------------------------------------------
# logging
#--------------------------------------------------------------------------------

import logging
_logger = logging.getLogger(__name__)

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class DistributedMutex(object):
    ''' A mutual exclusion lock whose state lives in a shared store,
    so that unrelated processes can coordinate on a named resource.

    .. code-block:: python

        from datetime import timedelta
        from dynamomutex import DistributedMutex, DynamoDBStore

        store = DynamoDBStore()
        mutex = DistributedMutex(store, "job-42", ttl=timedelta(seconds=30))
        mutex.lock(timeout=5)
        try:
            pass # perform locked activity here
        finally:
            mutex.unlock()

    A lock that is never released is reclaimed by the next `lock` call
    once its ttl has passed. A handle is meant to be used by a single
    holder; the store client behind it can be shared freely.
    '''

    def __init__(self, store, name, **kwargs):
        ''' Initialize a new instance of the DistributedMutex class.
        This does not touch the store.

        :param store: The store the lock records are kept in
        :param name: The name of the resource to lock
        :param ttl: How long a lock lives, default the policy lock_duration
        :param policy: The timing policy for taking and timing out locks
        '''
        self.policy = kwargs.get('policy', None) or MutexPolicy()
        if not self.policy.is_name_valid(name):
            raise ValueError("invalid lock name: %r" % (name,))

        ttl = kwargs.get('ttl', None)
        self.ttl    = self.policy.lock_duration if ttl is None else int(to_seconds(ttl) * 1000)
        self.store  = store
        self.name   = name
        self.record = None # the record written by our last acquire

        if self.ttl <= 0:
            raise ValueError("lock ttl must be positive: %r ms" % (self.ttl,))

    # ------------------------------------------------------------
    # lock validation methods
    # ------------------------------------------------------------

    def is_record_expired(self, record):
        ''' Given a record, test if it is expired or not. This is
        equivalent to `not is_record_active(record)`.

        :param record: The record to check if it is expired
        :returns: True if the record is expired, False otherwise
        '''
        return self.policy.get_new_timestamp() > record.expires

    def is_record_active(self, record):
        ''' Given a record, test if it is still active based on
        our current time information.

        :param record: The record to check if it is active
        :returns: True if the record is active, False otherwise
        '''
        return self.policy.get_new_timestamp() <= record.expires

    # ------------------------------------------------------------
    # locking methods
    # ------------------------------------------------------------

    def lock(self, timeout=None):
        ''' Block until the lock is acquired or the timeout passes.

        Each attempt first reclaims an expired record, then tries
        the conditional insert. Contention is retried with a growing
        jittered delay; any other store failure is raised at once.

        :param timeout: How long to keep trying, default the policy acquire_timeout
        :returns: The record of the acquired lock
        :raises LockTimeout: If the lock stayed held until the deadline
        :raises TransportError: If the store could not be reached
        '''
        timeout  = self.policy.acquire_timeout if timeout is None else to_seconds(timeout)
        started  = self.policy.get_new_timestamp()
        deadline = started + int(timeout * 1000)
        attempt  = 0

        while True:
            self._prune_quietly()
            record = self._create_entry()
            if record:
                return record

            now = self.policy.get_new_timestamp()
            if now >= deadline:
                raise LockTimeout(self.name, (now - started) / 1000.0)

            delay = min(self.policy.get_backoff(attempt), (deadline - now) / 1000.0)
            _logger.debug("waiting %.3f secs to acquire lock %s, attempt %d", delay, self.name, attempt)
            self.policy.sleep(delay)
            attempt += 1

    def try_lock(self):
        ''' Make a single attempt at the lock without waiting and
        without reclaiming expired records.

        :returns: A LockAttempt describing the outcome
        :raises SerializationError: If the record could not be encoded
        '''
        try:
            record = self._create_entry()
        except TransportError as ex:
            _logger.warning("failed trying lock %s: %s", self.name, ex)
            return LockAttempt(ERROR, None, ex)

        if record:
            return LockAttempt(ACQUIRED, record, None)
        return LockAttempt(ALREADY_HELD, None, None)

    def unlock(self):
        ''' Release the lock held by this handle. Only the record
        carrying our owner token is removed, and releasing a lock
        that is already gone counts as success.

        If this handle holds nothing, nothing is deleted and the
        result tells whether the lock is free.

        :returns: True if released or absent, False if held by another owner
        :raises TransportError: If the store kept failing
        '''
        if self.record is None:
            _logger.debug("no lock %s held by this handle", self.name)
            record = self._with_retries(self.store.get, self.name)
            return not (record and self.is_record_active(record))

        released = self._delete_entry(self.record.owner)
        self.record = None
        if released:
            _logger.debug("released lock %s", self.name)
        else:
            _logger.warning("lock %s was taken over by another owner", self.name)
        return released

    def prune_expired(self):
        ''' Delete the record for our name if its ttl has passed.
        This reclaims locks left behind by processes that crashed or
        lost connectivity before unlocking. The delete is guarded by
        the expired record's owner, so a fresh lock taken in between
        is left alone.

        :returns: True if an expired record was reclaimed, False otherwise
        :raises TransportError: If the store kept failing
        '''
        return self._prune_entry(self.policy.release_attempts)

    def exists(self):
        ''' Check if an active lock with our name exists in the
        store. This is for diagnostics only, as the answer can be
        stale as soon as it is returned.

        :returns: True if the lock is currently held, False otherwise
        '''
        return bool(self.retrieve())

    def retrieve(self):
        ''' Retrieve the current lock record strictly to view its
        data. Expired records are treated as not existing.

        :returns: The active LockRecord or None
        '''
        record = self.store.get(self.name)
        if record and self.is_record_active(record):
            return record
        return None

    # ------------------------------------------------------------
    # internal methods
    # ------------------------------------------------------------

    def _create_entry(self):
        ''' Attempt to write a new record for our name.

        :returns: The written record on success, None if already held
        '''
        now    = self.policy.get_new_timestamp()
        record = LockRecord(
            name=self.name,
            owner=self.policy.get_new_owner(),
            created=now,
            expires=now + self.ttl)

        try:
            self.store.put_if_absent(record)
        except ConditionalCheckFailed:
            return None

        _logger.debug("acquired lock %s until %d", self.name, record.expires)
        self.record = record
        return record

    def _prune_entry(self, attempts):
        record = self._with_retries(self.store.get, self.name, attempts=attempts)
        if (record is None) or (not self.is_record_expired(record)):
            return False

        _logger.debug("pruning expired lock %s owned by %s", self.name, record.owner)
        pruned = self._delete_entry(record.owner, attempts=attempts)
        if pruned and self.record and (self.record.owner == record.owner):
            self.record = None
        return pruned

    def _prune_quietly(self):
        # a single try, so only the backoff in lock sleeps
        try:
            self._prune_entry(1)
        except MutexError as ex:
            _logger.warning("ignoring failure pruning lock %s: %s", self.name, ex)

    def _with_retries(self, operation, *args, attempts=None):
        attempts = max(1, self.policy.release_attempts if attempts is None else attempts)
        for attempt in range(attempts):
            try:
                return operation(*args)
            except TransportError as ex:
                _logger.warning("store failure on lock %s (attempt %d of %d): %s",
                    self.name, attempt + 1, attempts, ex)
                if attempt + 1 >= attempts:
                    raise
                self.policy.sleep(self.policy.get_backoff(attempt))

    def _delete_entry(self, owner, attempts=None):
        ''' Attempt to delete our record as long as it still
        carries the supplied owner token.

        :param owner: The owner token the record must carry
        :param attempts: How many tries to make, default the policy release_attempts
        :returns: True if deleted or absent, False if owned by another
        '''
        try:
            return self._with_retries(self.store.delete, self.name, owner, attempts=attempts)
        except ConditionalCheckFailed:
            return False
