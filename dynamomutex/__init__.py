from .lock    import LockRecord, LockAttempt, ACQUIRED, ALREADY_HELD, ERROR
from .errors  import MutexError, SerializationError, ConditionalCheckFailed, TransportError, LockTimeout
from .policy  import MutexPolicy
from .schema  import MutexSchema
from .store   import KeyValueStore, DynamoDBStore
from .memory  import MemoryStore
from .mutex   import DistributedMutex
from .context import MutexContext as locker
