"""Configuration loader for ssm-secrets-sync."""
import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .models import SyncConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SECRETS_SYNC_CONFIG"
DEFAULT_CONFIG_NAMES = ("serverless.yml", "secrets-sync.yml")


def _get_config_path(config_path: Optional[str] = None) -> str:
    """
    Get config file path.

    Priority order:
    1. Explicit path (--config)
    2. SECRETS_SYNC_CONFIG environment variable
    3. serverless.yml, then secrets-sync.yml, in the working directory

    Returns:
        Absolute path to config file

    Raises:
        ConfigError: If no config file exists at any location
    """
    explicit = config_path or os.getenv(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit).expanduser()
        if not path.exists():
            raise ConfigError(f"Configuration file not found at: {path}")
        logger.debug(f"Using config from {path}")
        return str(path.resolve())

    for name in DEFAULT_CONFIG_NAMES:
        candidate = Path.cwd() / name
        if candidate.exists():
            logger.debug(f"Using default config location: {candidate}")
            return str(candidate)

    raise ConfigError(
        "Configuration file not found. Please set up your config file using one of these methods:\n\n"
        "1. Run from the directory holding your serverless.yml\n\n"
        "2. Create secrets-sync.yml in the working directory:\n"
        "   service: my-service\n"
        "   custom:\n"
        "     secrets:\n"
        "       file: secrets.yml\n\n"
        f"3. Point to an existing config file with --config or {CONFIG_ENV_VAR}\n"
    )


def _read_yaml(config_path: str) -> Dict[str, Any]:
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}")

    if not config:
        raise ConfigError(f"Config file at {config_path} is empty")

    if not isinstance(config, dict):
        raise ConfigError(f"Config file at {config_path} must contain a mapping")

    return config


def load_config(
    config_path: Optional[str] = None,
    stage: Optional[str] = None,
    region: Optional[str] = None,
    ssm_path: Optional[str] = None,
) -> SyncConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        config_path: Explicit config file path (discovered if not provided)
        stage: Stage override (takes precedence over provider.stage)
        region: Region override (takes precedence over provider.region)
        ssm_path: Namespace prefix override (takes precedence over custom.secrets.ssmPath)

    Returns:
        SyncConfig for one run

    Raises:
        ConfigError: If config file is missing, invalid, or lacks a service name
    """
    # Resolved on every call so a changed file takes effect immediately
    path = _get_config_path(config_path)
    config = _read_yaml(path)

    service = config.get('service')
    if isinstance(service, dict):
        service = service.get('name')
    if not service:
        raise ConfigError(
            f"Missing 'service' in config at {path}\n"
            f"Required format:\n"
            f"service: my-service"
        )

    provider = config.get('provider') or {}
    if not isinstance(provider, dict):
        raise ConfigError(f"'provider' in config at {path} must be a mapping")

    custom = config.get('custom') or {}
    if not isinstance(custom, dict):
        raise ConfigError(f"'custom' in config at {path} must be a mapping")

    secrets = custom.get('secrets') or {}
    if not isinstance(secrets, dict):
        raise ConfigError(f"'custom.secrets' in config at {path} must be a mapping")

    file_path = secrets.get('file')
    if file_path:
        file_path = str(Path(path).parent / Path(file_path).expanduser())

    sync_config = SyncConfig(
        service=str(service),
        stage=str(stage or provider.get('stage') or "dev"),
        region=str(region or provider.get('region') or "us-east-1"),
        file=file_path,
        ssm_path=ssm_path or secrets.get('ssmPath'),
        stack_name=secrets.get('stackName'),
    )

    logger.debug(f"Configuration loaded successfully from {path}")
    logger.debug(f"Using service {sync_config.service}, stage {sync_config.stage}")

    return sync_config
