"""Shared fixtures: in-memory stand-ins for the parameter store and stack lookup."""
import pytest

from ssm_secrets_sync.secrets.domains.errors import RemoteFetchError, RemoteWriteError
from ssm_secrets_sync.secrets.domains.models import RemoteParameter, SyncConfig


class FakeParameterStore:
    """RemoteStore holding parameters in a dict and recording every call."""

    def __init__(self, parameters=None, fail_reads=False, fail_writes=()):
        self.parameters = dict(parameters or {})
        self.fail_reads = fail_reads
        self.fail_writes = set(fail_writes)
        self.calls = []

    @property
    def writes(self):
        return [call for call in self.calls if call[0] == "put_parameter"]

    async def get_parameter(self, name, with_decryption=True):
        self.calls.append(("get_parameter", name))
        if self.fail_reads:
            raise RemoteFetchError(f"AccessDenied for {name}")
        if name not in self.parameters:
            raise RemoteFetchError(f"ParameterNotFound: {name}")
        return RemoteParameter(path=name, raw_value=self.parameters[name])

    async def put_parameter(self, name, value):
        self.calls.append(("put_parameter", name, value))
        if name in self.fail_writes:
            raise RemoteWriteError(f"Throttled writing {name}", [name])
        self.parameters[name] = value

    async def get_parameters_by_path(self, prefix, with_decryption=True):
        self.calls.append(("get_parameters_by_path", prefix))
        return [
            RemoteParameter(path=name, raw_value=value)
            for name, value in self.parameters.items()
            if name.startswith(prefix)
        ]

    async def delete_parameters(self, names):
        self.calls.append(("delete_parameters", list(names)))
        for name in names:
            self.parameters.pop(name, None)


class FakeStackOutputs:
    """Stack lookup returning a fixed set of outputs per stack."""

    def __init__(self, outputs=None):
        self.outputs = outputs or {}
        self.lookups = []

    async def get_output(self, stack_name, output_key="SecretsSsmPath"):
        self.lookups.append((stack_name, output_key))
        return self.outputs.get(stack_name, {}).get(output_key)


@pytest.fixture
def store():
    return FakeParameterStore()


@pytest.fixture
def secrets_file(tmp_path):
    return tmp_path / "secrets.yml"


@pytest.fixture
def sync_config(secrets_file):
    """Config for service my-api, stage dev, using the default prefix."""
    return SyncConfig(service="my-api", stage="dev", file=str(secrets_file))


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so boto3 never reaches real AWS."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
