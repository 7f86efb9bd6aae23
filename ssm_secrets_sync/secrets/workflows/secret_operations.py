"""Workflows that sync the local secrets file with the parameter store."""
import asyncio
import logging
from typing import Dict, List, Optional

from ..domains import codec
from ..domains.diff import has_changed
from ..domains.errors import InvalidFormatError, MissingConfigError, RemoteWriteError
from ..domains.models import (
    RemovalReport,
    SecretEntry,
    SecretsDocument,
    SyncConfig,
    SyncOutcome,
)
from ..domains.paths import join_path, resolve, strip_prefix
from ..domains.ssm_client import RemoteStore
from ..domains.stack_outputs import SECRETS_PATH_OUTPUT

logger = logging.getLogger(__name__)

UPDATED = "updated"
UNCHANGED = "unchanged"


def _require_file(config: SyncConfig) -> str:
    if not config.file:
        raise MissingConfigError("Please specify a secrets file (custom.secrets.file)")
    return config.file


async def _deploy_entry(store: RemoteStore, prefix: str, entry: SecretEntry) -> SyncOutcome:
    path = join_path(prefix, entry.name)

    if not await has_changed(store, path, entry.value):
        logger.info(f"- {entry.name} secret unchanged")
        return SyncOutcome(entry.name, UNCHANGED)

    logger.info(f"- {entry.name} secret changed")
    await store.put_parameter(path, codec.encode_value(entry.value))
    logger.info(f"  {entry.name} secret successfully updated")
    return SyncOutcome(entry.name, UPDATED)


async def deploy(config: SyncConfig, store: RemoteStore, stack_outputs=None) -> List[SyncOutcome]:
    """
    Upload every changed secret from the local file.

    Each entry is diffed and written in its own task. All entries are
    attempted even when some writes fail; the failures are then raised
    together.

    Args:
        config: Settings for this run
        store: RemoteStore to sync against
        stack_outputs: Unused, accepted so all operations share one signature

    Returns:
        One SyncOutcome per entry, in document order

    Raises:
        MissingConfigError: If no secrets file is configured
        InvalidFormatError: If the secrets file is not a mapping
        RemoteWriteError: If writing one or more entries failed
    """
    file_path = _require_file(config)
    prefix = resolve(config.ssm_path, config.service, config.stage)

    document = codec.load_secrets_file(file_path)
    if document is None:
        logger.info("Secrets file not found, skipping...")
        return []

    # TODO: delete remote entries that are no longer in the local file
    entries = list(codec.entries(document))
    results = await asyncio.gather(
        *(_deploy_entry(store, prefix, entry) for entry in entries),
        return_exceptions=True,
    )

    outcomes = []
    failures = []
    for entry, result in zip(entries, results):
        if isinstance(result, BaseException):
            logger.error(f"  {entry.name} secret failed to update: {result}")
            failures.append((entry.name, result))
        else:
            outcomes.append(result)

    if failures:
        names = [name for name, _ in failures]
        raise RemoteWriteError(
            f"Failed to update {len(names)} secret(s): {', '.join(names)}", names
        ) from failures[0][1]

    return outcomes


async def remove(config: SyncConfig, store: RemoteStore, stack_outputs) -> RemovalReport:
    """
    Delete every secret under the prefix the deployed stack recorded.

    The prefix comes from the stack, not from current configuration, so
    secrets are found even if ssmPath changed since the last deploy.

    Returns:
        RemovalReport with the prefix used and the number of secrets deleted

    Raises:
        MissingConfigError: If no stack output lookup is given
    """
    if stack_outputs is None:
        raise MissingConfigError("Removing secrets needs a stack output lookup")

    prefix = await stack_outputs.get_output(config.deployed_stack_name, SECRETS_PATH_OUTPUT)
    if not prefix:
        logger.info(f"No deployed secrets recorded for {config.deployed_stack_name}, nothing to remove")
        return RemovalReport(prefix=None)

    parameters = await store.get_parameters_by_path(prefix, with_decryption=False)
    names = [parameter.path for parameter in parameters]

    if names:
        await store.delete_parameters(names)

    logger.info(f"Removed {len(names)} secrets from {prefix}")
    return RemovalReport(prefix=prefix, removed=len(names))


async def pull(config: SyncConfig, store: RemoteStore, stack_outputs=None) -> SecretsDocument:
    """
    Overwrite the local secrets file with the secrets held remotely.

    Returns:
        The document written to the secrets file

    Raises:
        MissingConfigError: If no secrets file is configured
    """
    file_path = _require_file(config)
    prefix = resolve(config.ssm_path, config.service, config.stage)

    parameters = await store.get_parameters_by_path(prefix, with_decryption=True)

    document: SecretsDocument = {}
    for parameter in sorted(parameters, key=lambda p: p.path):
        name = strip_prefix(prefix, parameter.path)
        try:
            document[name] = codec.decode_value(parameter.raw_value)
        except InvalidFormatError as e:
            logger.warning(f"Keeping raw value for {name}, could not decode it: {e}")
            document[name] = parameter.raw_value

    codec.write_secrets_file(file_path, document)
    logger.info(f"Pulled {len(document)} secrets from {prefix} into {file_path}")
    return document


OPERATIONS = {
    "deploy": deploy,
    "remove": remove,
    "pull": pull,
}

# Host lifecycle events that chain into an operation
LIFECYCLE_HOOKS: Dict[str, str] = {
    "after:deploy:deploy": "deploy",
    "before:remove:remove": "remove",
}


async def run_operation(name: str, config: SyncConfig, store, stack_outputs=None):
    """Run the operation registered under name."""
    try:
        operation = OPERATIONS[name]
    except KeyError:
        raise ValueError(f"Unknown operation: {name}") from None
    return await operation(config, store, stack_outputs)


async def run_lifecycle_event(event: str, config: SyncConfig, store, stack_outputs=None) -> Optional[object]:
    """Run the operation chained to a host lifecycle event, if any."""
    name = LIFECYCLE_HOOKS.get(event)
    if name is None:
        logger.debug(f"No secrets operation hooked to {event}")
        return None
    return await run_operation(name, config, store, stack_outputs)
