"""Pytest fixtures for MongoDB integration tests.

A single-node MongoDB replica set is started once per session with
testcontainers, so appends run inside multi-document transactions the way
they do in production. Tests are skipped when no container runtime is
available.
"""

import time
from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
from docker.errors import DockerException
from testcontainers.core.container import DockerContainer

from turnstile.application import EventCodec
from turnstile.integrations.mongodb import MongoConfiguration, MongoEventStore, MongoUserReadModel
from turnstile.users import USER_EVENTS

MONGO_PORT = 27017

# Initiates the replica set on first run; exits non-zero until this node is primary.
REPLICA_SET_READY = (
    "try { rs.status() } catch (e) { "
    f"rs.initiate({{_id: 'rs0', members: [{{_id: 0, host: 'localhost:{MONGO_PORT}'}}]}}) "
    "} "
    "if (!db.hello().isWritablePrimary) { quit(1) }"
)


@pytest.fixture(scope="session")
def mongodb_container() -> Iterator[DockerContainer]:
    """Start a single-node MongoDB replica set for the test session."""
    try:
        container = DockerContainer("mongo:7")
        container.with_exposed_ports(MONGO_PORT)
        container.with_command("--replSet rs0 --bind_ip_all")
        container.start()
    except DockerException as e:
        pytest.skip(f"MongoDB container unavailable: {e}")

    try:
        max_attempts = 60
        for _ in range(max_attempts):
            result = container.exec(["mongosh", "--quiet", "--eval", REPLICA_SET_READY])
            if result.exit_code == 0:
                break
            time.sleep(1)
        else:
            raise TimeoutError(
                f"MongoDB replica set did not elect a primary within {max_attempts} seconds"
            )
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="session")
def mongodb_uri(mongodb_container: DockerContainer) -> str:
    host = mongodb_container.get_container_host_ip()
    port = mongodb_container.get_exposed_port(MONGO_PORT)
    # The member is registered as localhost inside the container.
    return f"mongodb://{host}:{port}/?directConnection=true"


@pytest_asyncio.fixture
async def mongo_config(
    request: pytest.FixtureRequest, mongodb_uri: str
) -> AsyncIterator[MongoConfiguration]:
    """Create a MongoConfiguration with a fresh database per test."""
    config = MongoConfiguration(
        uri=mongodb_uri,
        database=f"test_{request.node.name}"[:63],
        server_selection_timeout_ms=5_000,
    )
    await config.client.drop_database(config.database)
    try:
        yield config
    finally:
        await config.on_shutdown()


@pytest.fixture
def mongo_event_store(mongo_config: MongoConfiguration) -> MongoEventStore:
    return MongoEventStore(mongo_config, EventCodec(*USER_EVENTS))


@pytest.fixture
def mongo_read_model(mongo_config: MongoConfiguration) -> MongoUserReadModel:
    return MongoUserReadModel(mongo_config)
