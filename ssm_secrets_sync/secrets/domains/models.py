"""Domain models for secret sync."""
from dataclasses import dataclass
from typing import Any, Dict, Optional

# Ordered name -> value mapping decoded from one secrets file
SecretsDocument = Dict[str, Any]


@dataclass(frozen=True)
class SecretEntry:
    """One named secret from the local file."""
    name: str
    value: Any


@dataclass(frozen=True)
class RemoteParameter:
    """A parameter as held by the remote store."""
    path: str
    raw_value: str
    encrypted: bool = True


@dataclass(frozen=True)
class SyncConfig:
    """Settings for one sync run, passed explicitly to every operation."""
    service: str
    stage: str = "dev"
    region: str = "us-east-1"
    file: Optional[str] = None
    ssm_path: Optional[str] = None
    stack_name: Optional[str] = None

    @property
    def deployed_stack_name(self) -> str:
        return self.stack_name or f"{self.service}-{self.stage}"


@dataclass(frozen=True)
class SyncOutcome:
    """Result of deploying a single entry."""
    name: str
    status: str  # "updated" or "unchanged"


@dataclass(frozen=True)
class RemovalReport:
    """What a remove run deleted, and where."""
    prefix: Optional[str]
    removed: int = 0
