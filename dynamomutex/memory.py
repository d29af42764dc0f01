from threading import Lock

from .errors import ConditionalCheckFailed
from .store  import KeyValueStore

#--------------------------------------------------------------------------------
# logging
#--------------------------------------------------------------------------------

import logging
_logger = logging.getLogger(__name__)

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class MemoryStore(KeyValueStore):
    ''' A store that keeps the lock records in process memory. It
    offers the same guarantees as the DynamoDB store between threads
    of a single process, and is what the tests run against.
    '''

    def __init__(self, **kwargs):
        ''' Initialize a new instance of the MemoryStore class

        :param records: The initial records keyed by name, default {}
        '''
        self.records = kwargs.get('records', {})
        self._guard  = Lock()

    def put_if_absent(self, record):
        with self._guard:
            if record.name in self.records:
                raise ConditionalCheckFailed("lock entry already exists for: %s" % record.name)
            self.records[record.name] = record
            return True

    def get(self, name):
        with self._guard:
            return self.records.get(name, None)

    def delete(self, name, owner):
        with self._guard:
            current = self.records.get(name, None)
            if current is None:
                return True
            if current.owner != owner:
                raise ConditionalCheckFailed("lock entry %s is not owned by %s" % (name, owner))
            del self.records[name]
            return True
