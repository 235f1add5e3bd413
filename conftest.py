import pytest
from provisioner.factories import ArtifactFactory


@pytest.fixture
def artifact(tmp_path):
    return ArtifactFactory(dest=tmp_path / "bedrock-server.zip")


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "MINECRAFT_VERSION",
        "MINECRAFT_DIR",
        "FETCH_MIN_SIZE",
        "FETCH_TIMEOUT",
        "FETCH_ATTEMPTS",
        "FETCH_RETRY_DELAY",
        "FETCH_RESOLVERS",
        "FETCH_CONTAINER_IMAGE",
        "FETCH_CONTAINER_PATH",
        "FETCH_CONTAINER_SUDO",
        "FETCH_PROGRESS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
