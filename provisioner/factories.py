import tempfile
from pathlib import Path

import factory

from provisioner.fetchers.base import Artifact, FetchResult


class ArtifactFactory(factory.Factory):
    class Meta:
        model = Artifact

    name = "bedrock-server"
    version = factory.Sequence(lambda n: f"1.21.{n}.01")
    dest = factory.LazyAttribute(
        lambda o: Path(tempfile.gettempdir()) / f"{o.name}-{o.version}.zip"
    )
    min_size = 1024


class FetchResultFactory(factory.Factory):
    class Meta:
        model = FetchResult

    path = factory.LazyFunction(lambda: Path(tempfile.gettempdir()) / "artifact.zip")
    size_bytes = 4096
    strategy_used = "direct"
    source = factory.Sequence(lambda n: f"https://cdn-{n}.example.com/artifact.zip")
