"""Shared pytest fixtures for jobreg tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from jobreg.config.settings import RegistrySettings
from jobreg.domain.entities import Application, Cluster, Command
from jobreg.domain.types import ApplicationStatus, ClusterStatus, CommandStatus
from jobreg.infrastructure.registry import Registry
from jobreg.services.telemetry import disable_telemetry


def _stamp(day: int) -> str:
    return f"2014-07-{day:02d}T00:00:00.000000+00:00"


# Reference data set. Recency (updated, newest first):
#   applications: app3, app2, app1
#   commands:     command2, command3, command1
#   clusters:     cluster2, cluster1
APPLICATIONS = [
    Application(
        id="app1",
        name="tez",
        user="tgianos",
        version="1.2.3",
        status=ApplicationStatus.INACTIVE,
        tags=frozenset({"app1", "tez", "prod", "yarn"}),
        configs=frozenset({"s3://mybucket/tez/config1.xml", "s3://mybucket/tez/config2.xml"}),
        jars=frozenset({"s3://mybucket/tez/tez.jar", "s3://mybucket/tez/tez-api.jar"}),
        created=_stamp(1),
        updated=_stamp(1),
    ),
    Application(
        id="app2",
        name="spark",
        user="amsharma",
        version="4.5.6",
        status=ApplicationStatus.ACTIVE,
        tags=frozenset({"app2", "spark", "prod", "yarn"}),
        configs=frozenset({"s3://mybucket/spark/config1.xml", "s3://mybucket/spark/config2.xml"}),
        jars=frozenset({"s3://mybucket/spark/spark.jar"}),
        created=_stamp(1),
        updated=_stamp(2),
    ),
    Application(
        id="app3",
        name="storm",
        user="tgianos",
        version="7.8.9",
        status=ApplicationStatus.DEPRECATED,
        tags=frozenset({"app3", "storm", "prod"}),
        configs=frozenset({"s3://mybucket/storm/config1.xml"}),
        jars=frozenset({"s3://mybucket/storm/storm.jar", "s3://mybucket/storm/storm-kafka.jar"}),
        created=_stamp(1),
        updated=_stamp(3),
    ),
]

COMMANDS = [
    Command(
        id="command1",
        name="pig_13_prod",
        user="tgianos",
        version="1.2.3",
        status=CommandStatus.ACTIVE,
        executable="pig",
        job_type="yarn",
        tags=frozenset({"command1", "pig_13_prod", "prod", "pig", "tez"}),
        configs=frozenset({"s3://mybucket/pig/13/pig.properties", "s3://mybucket/pig/13/log4j"}),
        created=_stamp(1),
        updated=_stamp(1),
    ),
    Command(
        id="command2",
        name="hive_11_prod",
        user="amsharma",
        version="4.5.6",
        status=CommandStatus.INACTIVE,
        executable="hive",
        job_type="yarn",
        tags=frozenset({"command2", "hive_11_prod", "prod", "hive"}),
        configs=frozenset({"s3://mybucket/hive/11/hive-site.xml"}),
        created=_stamp(1),
        updated=_stamp(3),
    ),
    Command(
        id="command3",
        name="pig_11_prod",
        user="tgianos",
        version="7.8.9",
        status=CommandStatus.DEPRECATED,
        executable="pig",
        job_type="yarn",
        tags=frozenset({"command3", "pig_11_prod", "prod", "pig", "yarn"}),
        configs=frozenset({"s3://mybucket/pig/11/pig.properties"}),
        created=_stamp(1),
        updated=_stamp(2),
    ),
]

CLUSTERS = [
    Cluster(
        id="cluster1",
        name="h2prod",
        user="tgianos",
        version="2.4.0",
        status=ClusterStatus.UP,
        cluster_type="yarn",
        tags=frozenset({"cluster1", "h2prod", "prod", "yarn"}),
        configs=frozenset({"s3://mybucket/h2prod/yarn-site.xml"}),
        created=_stamp(1),
        updated=_stamp(1),
    ),
    Cluster(
        id="cluster2",
        name="h2query",
        user="amsharma",
        version="2.4.0",
        status=ClusterStatus.OUT_OF_SERVICE,
        cluster_type="yarn",
        tags=frozenset({"cluster2", "h2query", "query", "yarn"}),
        configs=frozenset({"s3://mybucket/h2query/yarn-site.xml"}),
        created=_stamp(1),
        updated=_stamp(2),
    ),
]

CLUSTER_MEMBERS = {
    "cluster1": ["command1", "command2", "command3"],
    "cluster2": ["command2", "command3"],
}


def seed_reference_data(registry: Registry) -> None:
    """Load the reference data set directly through the store.

    Timestamps are written as given so recency order is deterministic.
    """
    with registry.transaction() as txn:
        for entity in [*APPLICATIONS, *COMMANDS, *CLUSTERS]:
            txn.store.save(entity)
        txn.store.set_owner("command1", "app1", _stamp(1))
        for cluster_id, command_ids in CLUSTER_MEMBERS.items():
            for command_id in command_ids:
                txn.store.link(cluster_id, command_id)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep host JOBREG_* settings and telemetry state out of every test."""
    monkeypatch.delenv("JOBREG_CONFIG", raising=False)
    monkeypatch.delenv("JOBREG_ROOT", raising=False)
    monkeypatch.delenv("JOBREG_DATABASE__PATH", raising=False)
    yield
    disable_telemetry()


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo the root handler and level changes made when the CLI configures logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    root_level = root.level
    jobreg_level = logging.getLogger("jobreg").level
    yield
    root.handlers = handlers
    root.setLevel(root_level)
    logging.getLogger("jobreg").setLevel(jobreg_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> RegistrySettings:
    return RegistrySettings.from_cli(root=tmp_path)


@pytest.fixture
def registry(settings: RegistrySettings) -> Iterator[Registry]:
    """Fresh, empty registry on a temp directory."""
    reg = Registry(settings)
    try:
        yield reg
    finally:
        reg.close()


@pytest.fixture
def seeded(registry: Registry) -> Registry:
    """Registry loaded with the reference applications, commands, and clusters."""
    seed_reference_data(registry)
    return registry


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated registry.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)
