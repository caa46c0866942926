from typing import Any

from botocore.client import BaseClient


# Type aliases for Python dictionaries
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type AppConfigDocument = dict[str, Any]
type ComponentConfiguration = dict[str, Any]

# Type aliases for boto3 clients
type AppConfigDataClient = BaseClient
