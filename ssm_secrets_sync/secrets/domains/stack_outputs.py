"""Lookup of outputs recorded on a deployed CloudFormation stack."""
import asyncio
import logging
from typing import Optional

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

# Output under which a deployed stack records its secrets prefix
SECRETS_PATH_OUTPUT = "SecretsSsmPath"


class CloudFormationStackOutputs:
    """Reads stack outputs from CloudFormation."""

    def __init__(self, region: str = "us-east-1", client=None):
        self.region = region
        self._client = client

    @property
    def client(self):
        """Lazy-initialize client."""
        if self._client is None:
            self._client = boto3.client("cloudformation", region_name=self.region)
        return self._client

    async def get_output(self, stack_name: str, output_key: str = SECRETS_PATH_OUTPUT) -> Optional[str]:
        """
        Return the value of output_key on stack_name.

        Returns:
            The output value, or None if the stack or the output does not exist
        """
        try:
            response = await asyncio.to_thread(
                self.client.describe_stacks, StackName=stack_name
            )
        except ClientError as e:
            if "does not exist" in str(e):
                logger.debug(f"Stack {stack_name} not found")
                return None
            raise

        for stack in response.get("Stacks", []):
            for output in stack.get("Outputs", []):
                if output.get("OutputKey") == output_key:
                    return output.get("OutputValue")

        logger.debug(f"Stack {stack_name} has no {output_key} output")
        return None
