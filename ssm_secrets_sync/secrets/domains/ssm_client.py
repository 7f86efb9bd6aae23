"""AWS SSM Parameter Store client wrapper."""
import asyncio
import json
import logging
import os
from typing import List, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import RemoteFetchError, RemoteWriteError
from .models import RemoteParameter

logger = logging.getLogger(__name__)

SECURE_STRING = "SecureString"
DEFAULT_KMS_KEY = "alias/aws/ssm"

# DeleteParameters accepts at most this many names per request
DELETE_BATCH_SIZE = 10


def _debug_enabled() -> bool:
    """Raw response logging, toggled with SECRETS_SYNC_DEBUG=*."""
    return os.getenv("SECRETS_SYNC_DEBUG") == "*"


def _log_response(operation: str, response) -> None:
    if _debug_enabled():
        logger.info(f"SSM {operation} response: {json.dumps(response, default=str)}")


class RemoteStore(Protocol):
    """Key-value parameter store consumed by the sync workflows."""

    async def get_parameter(self, name: str, with_decryption: bool = True) -> RemoteParameter:
        ...

    async def put_parameter(self, name: str, value: str) -> None:
        ...

    async def get_parameters_by_path(
        self, prefix: str, with_decryption: bool = True
    ) -> List[RemoteParameter]:
        ...

    async def delete_parameters(self, names: List[str]) -> None:
        ...


class SSMParameterStore:
    """RemoteStore backed by AWS SSM Parameter Store.

    boto3 calls block, so each one runs in a worker thread and the
    per-secret tasks of a sync run can interleave.
    """

    def __init__(self, region: str = "us-east-1", client=None):
        self.region = region
        self._client = client

    @property
    def client(self):
        """Lazy-initialize client."""
        if self._client is None:
            self._client = boto3.client("ssm", region_name=self.region)
        return self._client

    async def get_parameter(self, name: str, with_decryption: bool = True) -> RemoteParameter:
        """
        Fetch one parameter.

        Raises:
            RemoteFetchError: If the parameter is missing or cannot be read
        """
        try:
            response = await asyncio.to_thread(
                self.client.get_parameter, Name=name, WithDecryption=with_decryption
            )
        except (ClientError, BotoCoreError) as e:
            raise RemoteFetchError(f"Failed to get parameter {name}: {e}") from e

        _log_response("GetParameter", response)
        return self._to_parameter(response["Parameter"])

    async def put_parameter(self, name: str, value: str) -> None:
        """
        Store value at name as an encrypted SecureString, overwriting any existing value.

        Raises:
            RemoteWriteError: If the write is rejected
        """
        try:
            response = await asyncio.to_thread(
                self.client.put_parameter,
                Name=name,
                Value=value,
                Type=SECURE_STRING,
                KeyId=DEFAULT_KMS_KEY,
                Overwrite=True,
            )
        except (ClientError, BotoCoreError) as e:
            raise RemoteWriteError(f"Failed to put parameter {name}: {e}", [name]) from e

        _log_response("PutParameter", response)

    async def get_parameters_by_path(
        self, prefix: str, with_decryption: bool = True
    ) -> List[RemoteParameter]:
        """
        List every parameter below prefix, recursively, across all pages.

        Raises:
            RemoteFetchError: If listing fails
        """
        def _list():
            paginator = self.client.get_paginator("get_parameters_by_path")
            pages = paginator.paginate(
                Path=prefix, Recursive=True, WithDecryption=with_decryption
            )
            return list(pages)

        try:
            pages = await asyncio.to_thread(_list)
        except (ClientError, BotoCoreError) as e:
            raise RemoteFetchError(f"Failed to list parameters under {prefix}: {e}") from e

        parameters = []
        for page in pages:
            _log_response("GetParametersByPath", page)
            parameters.extend(self._to_parameter(p) for p in page.get("Parameters", []))
        return parameters

    async def delete_parameters(self, names: List[str]) -> None:
        """
        Delete the named parameters.

        Raises:
            RemoteWriteError: If any delete request fails
        """
        for start in range(0, len(names), DELETE_BATCH_SIZE):
            batch = names[start:start + DELETE_BATCH_SIZE]
            try:
                response = await asyncio.to_thread(
                    self.client.delete_parameters, Names=batch
                )
            except (ClientError, BotoCoreError) as e:
                raise RemoteWriteError(f"Failed to delete parameters: {e}", batch) from e

            _log_response("DeleteParameters", response)
            invalid = response.get("InvalidParameters", [])
            if invalid:
                logger.warning(f"Parameters already gone: {', '.join(invalid)}")

    @staticmethod
    def _to_parameter(data) -> RemoteParameter:
        return RemoteParameter(
            path=data["Name"],
            raw_value=data["Value"],
            encrypted=data.get("Type") == SECURE_STRING,
        )
