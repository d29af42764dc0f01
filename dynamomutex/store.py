'''
The stores hold the lock records on behalf of the mutex. A store only
has to offer three primitives: an atomic insert that fails when the key
already exists, a strongly consistent point lookup, and a delete that is
guarded by the owner of the record. All arbitration between competing
processes happens inside the store, so the mutual exclusion guarantee is
only as strong as the store's conditional write. DynamoDB conditional
writes are strongly consistent; an eventually consistent backend would
only offer a best-effort lock.
'''
import boto3
from boto3.dynamodb.types import TypeSerializer, TypeDeserializer
from botocore.exceptions import BotoCoreError, ClientError

from .errors import ConditionalCheckFailed, SerializationError, TransportError
from .schema import MutexSchema

#--------------------------------------------------------------------------------
# logging
#--------------------------------------------------------------------------------

import logging
_logger = logging.getLogger(__name__)

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class KeyValueStore(object):
    ''' The contract every lock store has to honour. Implementations
    must be safe to share between threads and mutex instances.
    '''

    def put_if_absent(self, record):
        ''' Atomically write the record unless a record with the same
        name already exists.

        :param record: The LockRecord to write
        :returns: True once written
        :raises ConditionalCheckFailed: If the name is already taken
        '''
        raise NotImplementedError("put_if_absent")

    def get(self, name):
        ''' Read the current record for the supplied name.

        :param name: The name of the lock to read
        :returns: The LockRecord if it exists, None otherwise
        '''
        raise NotImplementedError("get")

    def delete(self, name, owner):
        ''' Delete the record for the supplied name if it is absent
        or still owned by the supplied owner.

        :param name: The name of the lock to delete
        :param owner: The owner token the record must carry
        :returns: True once deleted, or if there was nothing to delete
        :raises ConditionalCheckFailed: If the record is owned by another
        '''
        raise NotImplementedError("delete")


class DynamoDBStore(KeyValueStore):
    ''' The store backed by a DynamoDB table. One instance can be
    shared by every mutex in the process::

        import boto3
        from dynamomutex import DynamoDBStore, DistributedMutex

        store = DynamoDBStore(client=boto3.client('dynamodb'))
        mutex = DistributedMutex(store, "job-42")
    '''

    def __init__(self, **kwargs):
        ''' Initialize a new instance of the DynamoDBStore class

        :param client: The low level dynamodb client to use (created if missing)
        :param schema: The schema of the database table to work with
        :param session: The boto3 session to create the client from
        :param region_name: The region to create the client in
        :param endpoint_url: The endpoint to create the client against
        '''
        self.schema = kwargs.get('schema', None) or MutexSchema()
        self.client = kwargs.get('client', None) or self._create_client(**kwargs)
        self._serializer   = TypeSerializer()
        self._deserializer = TypeDeserializer()

    # ------------------------------------------------------------
    # store methods
    # ------------------------------------------------------------

    def put_if_absent(self, record):
        item = self._encode(self.schema.to_schema(record._asdict()))
        query = {
            'TableName': self.schema.table_name,
            'Item': item,
            'ConditionExpression': 'attribute_not_exists(#n)',
            'ExpressionAttributeNames': { '#n': self.schema.name },
        }

        try:
            self.client.put_item(**query)
            return True
        except ClientError as ex:
            if _is_conditional_failure(ex):
                raise ConditionalCheckFailed("lock entry already exists for: %s" % record.name) from ex
            raise TransportError("failed to create lock entry for: %s" % record.name) from ex
        except BotoCoreError as ex:
            raise TransportError("failed to create lock entry for: %s" % record.name) from ex

    def get(self, name):
        query = {
            'TableName': self.schema.table_name,
            'Key': self._encode(self.schema.key(name)),
            'ConsistentRead': True,
        }

        try:
            response = self.client.get_item(**query)
        except (ClientError, BotoCoreError) as ex:
            raise TransportError("failed to retrieve lock entry for: %s" % name) from ex

        if 'Item' not in response:
            return None
        return self.schema.to_record(self._decode(response['Item']))

    def delete(self, name, owner):
        query = {
            'TableName': self.schema.table_name,
            'Key': self._encode(self.schema.key(name)),
            'ConditionExpression': 'attribute_not_exists(#n) OR #o = :o',
            'ExpressionAttributeNames': { '#n': self.schema.name, '#o': self.schema.owner },
            'ExpressionAttributeValues': self._encode({ ':o': owner }),
        }

        try:
            self.client.delete_item(**query)
            return True
        except ClientError as ex:
            if _is_conditional_failure(ex):
                raise ConditionalCheckFailed("lock entry %s is not owned by %s" % (name, owner)) from ex
            raise TransportError("failed to delete lock entry for: %s" % name) from ex
        except BotoCoreError as ex:
            raise TransportError("failed to delete lock entry for: %s" % name) from ex

    # ------------------------------------------------------------
    # table methods
    # ------------------------------------------------------------

    def create_table(self, wait=True):
        ''' Create the underlying dynamodb table for writing
        locks to if it does not exist, otherwise uses the existing
        table. We use the `describe_table` call to verify if the
        table exists or not.

        :param wait: True to block until the table is active
        :returns: The description of the table
        '''
        table_name = self.schema.table_name
        try:
            table = self.client.describe_table(TableName=table_name)['Table']
            _logger.debug("current table description:\n%s", table)
            return table
        except self.client.exceptions.ResourceNotFoundException:
            _logger.info("table %s does not exist, creating it", table_name)
        except (ClientError, BotoCoreError) as ex:
            raise TransportError("failed to describe table: %s" % table_name) from ex

        try:
            table = self.client.create_table(
                TableName=table_name,
                KeySchema=[ { 'AttributeName': self.schema.name, 'KeyType': 'HASH' } ],
                AttributeDefinitions=[ { 'AttributeName': self.schema.name, 'AttributeType': 'S' } ],
                ProvisionedThroughput={
                    'ReadCapacityUnits':  self.schema.read_capacity,
                    'WriteCapacityUnits': self.schema.write_capacity,
                })['TableDescription']
            if wait:
                self.client.get_waiter('table_exists').wait(TableName=table_name)
        except (ClientError, BotoCoreError) as ex:
            raise TransportError("failed to create table: %s" % table_name) from ex
        _logger.debug("current table description:\n%s", table)
        return table

    # ------------------------------------------------------------
    # raw dynamo methods
    # ------------------------------------------------------------

    def _create_client(self, **kwargs):
        session = kwargs.get('session', None) or boto3.session.Session()
        params  = {
            'region_name':  kwargs.get('region_name', None),
            'endpoint_url': kwargs.get('endpoint_url', None),
        }
        return session.client('dynamodb', **params)

    def _encode(self, values):
        try:
            return { k : self._serializer.serialize(v) for k, v in values.items() }
        except (TypeError, ValueError) as ex:
            raise SerializationError("failed to encode lock entry: %r" % (values,)) from ex

    def _decode(self, item):
        return { k : self._deserializer.deserialize(v) for k, v in item.items() }

#--------------------------------------------------------------------------------
# helpers
#--------------------------------------------------------------------------------

def _is_conditional_failure(ex):
    return ex.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException'
