from __future__ import annotations

from typing import Any, Dict, List, Optional

import pyarrow as pa
import pytest
from influxdb3_mcp.core.config import InfluxConfig, ProductType
from influxdb3_mcp.core.connection import ConnectionContext
from influxdb3_mcp.core.dispatch import Dispatchers

CORE_URL = "http://influx.test:8181"
CLUSTER_HOST = "https://clu-1.a.influxdb.io"
MGMT_BASE = (
    "https://console.influxdata.com/api/v0/accounts/acc-1/clusters/clu-1"
)


class FakeFlightClient:
    """Stand-in for InfluxDBClient3: answers query_async with an arrow table."""

    def __init__(
        self,
        batches: Optional[List[List[Dict[str, Any]]]] = None,
        error: Optional[BaseException] = None,
        by_query: Optional[Dict[str, List[Dict[str, Any]]]] = None,
    ):
        self.batches = batches or []
        self.error = error
        self.by_query = by_query or {}
        self.calls: List[Dict[str, Any]] = []

    async def query_async(self, query, language="sql", mode="all", database=None):
        self.calls.append(
            {"query": query, "language": language, "mode": mode, "database": database}
        )
        if self.error is not None:
            raise self.error
        if query in self.by_query:
            rows = self.by_query[query]
            return pa.Table.from_pylist(rows) if rows else pa.table({})
        record_batches = [pa.RecordBatch.from_pylist(b) for b in self.batches if b]
        if not record_batches:
            return pa.table({})
        return pa.Table.from_batches(record_batches)


def core_config(**overrides) -> InfluxConfig:
    values = dict(product=ProductType.CORE, url=CORE_URL, token="core-token")
    values.update(overrides)
    return InfluxConfig(**values)


def cloud_config(**overrides) -> InfluxConfig:
    values = dict(
        product=ProductType.CLOUD_DEDICATED,
        token="data-token",
        cluster_id="clu-1",
        account_id="acc-1",
        management_token="mgmt-token",
    )
    values.update(overrides)
    return InfluxConfig(**values)


def make_connection(config: InfluxConfig, fake=None) -> ConnectionContext:
    handle = fake if fake is not None else FakeFlightClient()
    return ConnectionContext(config, client_factory=lambda host, token: handle)


def make_dispatchers(config: InfluxConfig, fake=None) -> Dispatchers:
    return Dispatchers.from_connection(make_connection(config, fake))


@pytest.fixture
def core():
    return make_dispatchers(core_config())


@pytest.fixture
def enterprise():
    return make_dispatchers(core_config(product=ProductType.ENTERPRISE))


@pytest.fixture
def flight():
    return FakeFlightClient()


@pytest.fixture
def cloud(flight):
    return make_dispatchers(cloud_config(), flight)
