import json
from decimal import Decimal

from .lock import LockRecord

#--------------------------------------------------------------------------------
# logging
#--------------------------------------------------------------------------------

import logging
_logger = logging.getLogger(__name__)

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class MutexSchema(object):
    ''' A collection of the schema names for the underlying
    locks table. This can be overridden by simply supplying
    new names in the constructor::

        from dynamomutex import MutexSchema

        schema = MutexSchema(name="id", table_name="service_locks")
    '''

    def __init__(self, **kwargs):
        ''' Initializes a new instance of the MutexSchema class

        :param name: The database schema name for the lock name (hash key)
        :param owner: The database schema name for the fencing token
        :param created: The database schema name for the creation time
        :param expires: The database schema name for the expiry time
        :param table_name: The name of the database locks table
        :param read_capacity: The expected read capacity for the table
        :param write_capacity: The expected write capacity for the table
        '''
        self.name           = kwargs.get('name',       'N')
        self.owner          = kwargs.get('owner',      'O')
        self.created        = kwargs.get('created',    'C')
        self.expires        = kwargs.get('expires',    'E')
        self.table_name     = kwargs.get('table_name', 'Locks')
        self.read_capacity  = kwargs.get('read_capacity', 1)
        self.write_capacity = kwargs.get('write_capacity', 1)

    # ------------------------------------------------------------
    # schema operations
    # ------------------------------------------------------------
    # These methods convert to and from the underlying table
    # schema
    # ------------------------------------------------------------

    def to_schema(self, params):
        ''' Given a dict of record fields, convert them to the
        underlying schema and remove fields that are not used.

        :param params: The record fields to convert
        :returns: The converted item attributes
        '''
        schema = {}
        if 'name'    in params: schema[self.name]    = params['name']
        if 'owner'   in params: schema[self.owner]   = params['owner']
        if 'created' in params: schema[self.created] = params['created']
        if 'expires' in params: schema[self.expires] = params['expires']
        return schema

    def to_dict(self, schema):
        ''' Given a stored item, convert it to a dict of
        the record field names. Numbers read back from the
        table are turned into plain integers.

        :param schema: The item to convert to a dict
        :returns: The converted dict with record field names
        '''
        return {
            'name'    : schema.get(self.name,    None),
            'owner'   : schema.get(self.owner,   None),
            'created' : _to_int(schema.get(self.created, None)),
            'expires' : _to_int(schema.get(self.expires, None)),
        }

    def to_record(self, schema):
        ''' Given a stored item, build the LockRecord it describes.

        :param schema: The item to convert
        :returns: The matching LockRecord
        '''
        return LockRecord(**self.to_dict(schema))

    def key(self, name):
        ''' Build the key attributes that address a single lock.

        :param name: The name of the lock
        :returns: The key attributes
        '''
        return { self.name: name }

    def __str__(self):
        return json.dumps(self.__dict__)

    __repr__ = __str__

#--------------------------------------------------------------------------------
# helpers
#--------------------------------------------------------------------------------

def _to_int(value):
    if isinstance(value, Decimal):
        return int(value)
    return value
