import json

import pytest
import respx
from conftest import (
    CORE_URL,
    MGMT_BASE,
    cloud_config,
    core_config,
    make_dispatchers,
)
from httpx import Response
from influxdb3_mcp.core.errors import (
    CapabilityError,
    ConflictError,
    MalformedResponseError,
    NotFoundError,
)

DB_URL = f"{CORE_URL}/api/v3/configure/database"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        [{"iox::database": "_internal"}, {"iox::database": "sensors"}],
        {"databases": ["_internal", "sensors"]},
        {"data": {"databases": ["_internal", "sensors"]}},
    ],
)
async def test_core_list_databases_shapes(core, payload):
    async with respx.mock:
        route = respx.get(DB_URL).mock(return_value=Response(200, json=payload))
        databases = await core.databases.list_databases()

    assert [d.name for d in databases] == ["_internal", "sensors"]
    assert route.calls[0].request.url.params["format"] == "json"


@pytest.mark.asyncio
@respx.mock
async def test_unrecognized_list_shape_is_malformed(core):
    respx.get(DB_URL).mock(return_value=Response(200, json={"items": ["sensors"]}))

    with pytest.raises(MalformedResponseError):
        await core.databases.list_databases()


@pytest.mark.asyncio
async def test_list_databases_without_any_credentials_is_empty():
    influx = make_dispatchers(core_config(token=""))
    async with respx.mock:
        assert await influx.databases.list_databases() == []
        assert respx.calls.call_count == 0


@pytest.mark.asyncio
@respx.mock
async def test_core_create_database(core):
    route = respx.post(DB_URL).mock(return_value=Response(200))

    assert await core.databases.create_database("sensors") is True
    assert json.loads(route.calls[0].request.content) == {"db": "sensors"}


@pytest.mark.asyncio
@respx.mock
async def test_core_create_existing_database_is_conflict(core):
    respx.post(DB_URL).mock(
        return_value=Response(409, json={"error": "attempted to create a resource that already exists"})
    )

    with pytest.raises(ConflictError) as exc:
        await core.databases.create_database("sensors")

    assert "Database 'sensors' already exists" in exc.value.message


@pytest.mark.asyncio
@respx.mock
async def test_core_delete_database(core):
    route = respx.delete(DB_URL).mock(return_value=Response(200))

    assert await core.databases.delete_database("sensors") is True
    assert route.calls[0].request.url.params["db"] == "sensors"


@pytest.mark.asyncio
@respx.mock
async def test_core_delete_missing_database_is_not_found(core):
    respx.delete(DB_URL).mock(return_value=Response(404, text="database not found"))

    with pytest.raises(NotFoundError) as exc:
        await core.databases.delete_database("ghost")

    assert "ghost" in exc.value.message


@pytest.mark.asyncio
@respx.mock
async def test_cloud_database_lifecycle_uses_management_api(cloud):
    list_route = respx.get(f"{MGMT_BASE}/databases").mock(
        return_value=Response(200, json=[{"name": "sensors", "maxTables": 500}])
    )
    create_route = respx.post(f"{MGMT_BASE}/databases").mock(
        return_value=Response(200, json={"name": "metrics"})
    )
    delete_route = respx.delete(f"{MGMT_BASE}/databases/metrics").mock(
        return_value=Response(204)
    )

    databases = await cloud.databases.list_databases()
    await cloud.databases.create_database("metrics")
    await cloud.databases.delete_database("metrics")

    assert [d.name for d in databases] == ["sensors"]
    assert json.loads(create_route.calls[0].request.content) == {"name": "metrics"}
    assert delete_route.called
    for route in (list_route, create_route, delete_route):
        assert route.calls[0].request.headers["Authorization"] == "Bearer mgmt-token"


@pytest.mark.asyncio
async def test_cloud_with_data_token_only_cannot_manage_databases():
    influx = make_dispatchers(cloud_config(management_token="", account_id=""))

    async with respx.mock:
        with pytest.raises(CapabilityError) as exc:
            await influx.databases.list_databases()
        with pytest.raises(CapabilityError):
            await influx.databases.create_database("sensors")
        with pytest.raises(CapabilityError):
            await influx.databases.delete_database("sensors")
        assert respx.calls.call_count == 0

    assert "INFLUX_DB_MANAGEMENT_TOKEN" in exc.value.message
