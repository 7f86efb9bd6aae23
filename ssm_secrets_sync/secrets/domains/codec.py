"""YAML codec for the local secrets file."""
import json
import logging
import os
from datetime import date
from typing import Any, Optional

import yaml

from .errors import InvalidFormatError
from .models import SecretEntry, SecretsDocument

logger = logging.getLogger(__name__)


def decode(content: str) -> SecretsDocument:
    """
    Parse secrets file content into a name -> value mapping.

    YAML is a superset of JSON, so either format is accepted.

    Args:
        content: Raw text of the secrets file

    Returns:
        Mapping of secret name to scalar or nested value, in file order

    Raises:
        InvalidFormatError: If the text is not valid YAML or its root is not a mapping
    """
    try:
        secrets = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise InvalidFormatError(f"Failed to parse secrets: {e}") from e

    if not isinstance(secrets, dict):
        raise InvalidFormatError(
            "Secrets file must be valid yaml or json containing key-value pairs."
        )

    document = {}
    for name, value in secrets.items():
        if name is None or str(name) == "":
            raise InvalidFormatError("Secret names cannot be empty")
        if str(name) in document:
            raise InvalidFormatError(f"Duplicate secret name: {name}")
        document[str(name)] = value

    return document


def encode(document: SecretsDocument) -> str:
    """Serialize a secrets document back to YAML text."""
    return yaml.safe_dump(
        dict(document),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def decode_value(raw_value: str) -> Any:
    """Re-hydrate a value stored remotely in its textual form."""
    try:
        return yaml.safe_load(raw_value)
    except yaml.YAMLError as e:
        raise InvalidFormatError(f"Failed to parse stored value: {e}") from e


def encode_value(value: Any) -> str:
    """
    Serialize a secret value to the string stored remotely.

    Mappings and sequences become JSON, strings are stored as-is and
    other scalars become their JSON literal. Dates have no JSON form, so
    they are written as YAML timestamps, alone or inside flow-style YAML.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, date):
        return value.isoformat()
    if _contains_date(value):
        return yaml.safe_dump(
            value, default_flow_style=True, sort_keys=False, allow_unicode=True, width=float("inf")
        ).strip()
    return json.dumps(value)


def _contains_date(value: Any) -> bool:
    if isinstance(value, date):
        return True
    if isinstance(value, dict):
        return any(_contains_date(item) for item in value.values())
    if isinstance(value, list):
        return any(_contains_date(item) for item in value)
    return False


def entries(document: SecretsDocument):
    """Iterate a document as SecretEntry objects, in document order."""
    for name, value in document.items():
        yield SecretEntry(name=name, value=value)


def load_secrets_file(file_path: str) -> Optional[SecretsDocument]:
    """
    Read and decode the secrets file at file_path.

    Returns:
        The decoded document, or None if the file does not exist
    """
    if not os.path.exists(file_path):
        return None

    with open(file_path, 'r', encoding='utf-8') as f:
        content = f.read()

    return decode(content)


def write_secrets_file(file_path: str, document: SecretsDocument) -> None:
    """Overwrite file_path with the encoded document."""
    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(encode(document))
    logger.debug(f"Wrote {len(document)} secrets to {file_path}")
