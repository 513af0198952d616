from __future__ import annotations

import asyncio
import logging

from mcp.server.fastmcp import FastMCP

from influxdb3_mcp.core.config import load_env_config
from influxdb3_mcp.core.dispatch import Dispatchers
from influxdb3_mcp.core.logging import bind_product, setup_logging
from influxdb3_mcp.core.registry import register_discovered_tools

SERVER_NAME = "influxdb3-mcp"

log = logging.getLogger("influxdb3_mcp.server")


def create_app(influx: Dispatchers) -> FastMCP:
    app = FastMCP(SERVER_NAME)
    register_discovered_tools(app, influx)
    return app


# --- Entry point ----------------------------------------------------------- #


async def main() -> None:
    setup_logging()
    config = load_env_config(use_dotenv=True)
    bind_product(config.product.value)
    influx = Dispatchers.from_config(config)

    connection = influx.connection
    if not connection.has_data_capabilities():
        log.warning(
            "No data-plane credentials for %s; query/write tools will fail",
            config.product.value,
        )
    if not connection.has_management_capabilities():
        log.warning(
            "No management credentials for %s; database/token tools will fail",
            config.product.value,
        )

    app = create_app(influx)
    await app.run_stdio_async()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
