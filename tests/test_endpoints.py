import itertools

import pytest
from conftest import cloud_config, core_config, make_connection
from influxdb3_mcp.core.config import InfluxConfig, ProductType
from influxdb3_mcp.core.endpoints import (
    CLOUD_DEDICATED_MANAGEMENT_URL,
    RequestKind,
    resolve_endpoint,
)
from influxdb3_mcp.core.errors import ConfigurationError


@pytest.mark.parametrize("product", [ProductType.CORE, ProductType.ENTERPRISE])
def test_self_hosted_planes_share_url_and_token(product):
    config = core_config(product=product, url="http://influx.test:8181/")

    data = resolve_endpoint(config, RequestKind.DATA)
    mgmt = resolve_endpoint(config, RequestKind.MANAGEMENT)

    assert data.base_url == mgmt.base_url == "http://influx.test:8181"
    assert data.credential == mgmt.credential == "core-token"
    assert data.authorization == "Token core-token"


def test_cloud_planes_differ_in_host_and_credential():
    # url/token fields that would look valid for self-hosted are ignored
    config = cloud_config(url="http://influx.test:8181")

    data = resolve_endpoint(config, RequestKind.DATA)
    mgmt = resolve_endpoint(config, RequestKind.MANAGEMENT)

    assert data.base_url == "https://clu-1.a.influxdb.io"
    assert data.credential == "data-token"
    assert mgmt.base_url == CLOUD_DEDICATED_MANAGEMENT_URL
    assert mgmt.credential == "mgmt-token"
    assert mgmt.authorization == "Bearer mgmt-token"
    assert data.base_url != mgmt.base_url


def test_resolution_is_deterministic():
    config = cloud_config()
    for kind in RequestKind:
        assert resolve_endpoint(config, kind) == resolve_endpoint(config, kind)


def test_credential_not_in_repr():
    endpoint = resolve_endpoint(core_config(), RequestKind.DATA)
    assert "core-token" not in repr(endpoint)


@pytest.mark.parametrize(
    "config, kind",
    [
        (core_config(token=""), RequestKind.DATA),
        (core_config(url=""), RequestKind.MANAGEMENT),
        (cloud_config(cluster_id=""), RequestKind.DATA),
        (cloud_config(token=""), RequestKind.DATA),
        (cloud_config(management_token=""), RequestKind.MANAGEMENT),
        (cloud_config(account_id=""), RequestKind.MANAGEMENT),
    ],
)
def test_missing_prerequisites_raise_configuration_error(config, kind):
    with pytest.raises(ConfigurationError):
        resolve_endpoint(config, kind)


FIELDS = ("url", "token", "cluster_id", "account_id", "management_token")


def _partial_configs(product):
    for mask in itertools.product([False, True], repeat=len(FIELDS)):
        values = {f: (f"{f}-value" if on else "") for f, on in zip(FIELDS, mask)}
        yield InfluxConfig(product=product, **values)


@pytest.mark.parametrize("product", list(ProductType))
def test_capabilities_follow_minimum_credential_sets(product):
    for config in _partial_configs(product):
        conn = make_connection(config)
        if product is ProductType.CLOUD_DEDICATED:
            expect_data = bool(config.token and config.cluster_id)
            expect_mgmt = bool(
                config.management_token and config.account_id and config.cluster_id
            )
        else:
            expect_data = expect_mgmt = bool(config.url and config.token)

        assert conn.has_data_capabilities() is expect_data, config
        assert conn.has_management_capabilities() is expect_mgmt, config
        # handle exists iff the data prerequisites are met
        assert (conn.get_client() is not None) is expect_data, config
