from __future__ import annotations

import asyncio
import os
import sys
import time
from typing import Optional

from influxdb3_mcp.core.config import load_env_config
from influxdb3_mcp.core.dispatch import Dispatchers
from influxdb3_mcp.core.errors import OperationError
from influxdb3_mcp.tools.databases import create_database, delete_database
from influxdb3_mcp.tools.health import health_check
from influxdb3_mcp.tools.query import (
    execute_query,
    get_measurement_schema,
    get_measurements,
)
from influxdb3_mcp.tools.write import write_line_protocol


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(name)
    return val if val else default


def _print_step(title: str) -> None:
    print(f"\n== {title}")


def _fail(msg: str) -> int:
    print(f"FAILED: {msg}")
    return 1


async def run_smoke_test() -> int:
    # --- Config ---
    try:
        config = load_env_config()
    except OperationError as exc:
        return _fail(exc.message)

    database = _env("SMOKE_TEST_DATABASE", f"mcp_smoke_{int(time.time())}")
    cleanup = _env("SMOKE_TEST_CLEANUP", "1") == "1"

    print("Config:")
    print(f"  config: {config!r}")
    print(f"  database: {database}")
    print(f"  cleanup: {cleanup}")

    influx = Dispatchers.from_config(config)

    # --- Health ---
    _print_step("Health")
    health = await health_check(influx)
    print(f"status={health['status']} ping={health['ping']}")
    if health["status"] != "healthy":
        return _fail("Instance is not healthy.")

    # --- Create database ---
    _print_step("Create database")
    try:
        await create_database(influx, database)
    except OperationError as exc:
        return _fail(f"Create failed: [{exc.kind}] {exc.message}")
    print(f"Created database '{database}'")

    try:
        # --- Write ---
        _print_step("Write line protocol")
        lines = "\n".join(
            f"smoke,host=h{i} value={i}i,ok=t" for i in range(3)
        )
        await write_line_protocol(influx, database, lines, precision="auto")
        print("Wrote 3 points")

        # --- Query ---
        _print_step("Query")
        out = await execute_query(
            influx, database, "SELECT host, value FROM smoke ORDER BY host"
        )
        rows = out["result"]
        print(f"Rows: {rows}")
        if len(rows) != 3:
            return _fail(f"Expected 3 rows, got {len(rows)}")

        # --- Schema ---
        _print_step("Schema")
        measurements = await get_measurements(influx, database)
        names = [m["name"] for m in measurements["measurements"]]
        if "smoke" not in names:
            return _fail(f"Measurement 'smoke' missing from {names}")
        schema = await get_measurement_schema(influx, database, "smoke")
        columns = sorted(c["name"] for c in schema["columns"])
        print(f"Columns: {columns}")
    except OperationError as exc:
        return _fail(f"[{exc.kind}] {exc.message}")
    finally:
        # --- Cleanup (optional) ---
        _print_step("Cleanup")
        if cleanup:
            try:
                await delete_database(influx, database)
                print(f"Deleted database '{database}'")
            except OperationError as exc:
                print(f"Cleanup failed: [{exc.kind}] {exc.message}")
        else:
            print("Cleanup skipped (SMOKE_TEST_CLEANUP=0). Database left in place.")

    print("\nPASSED smoke test.")
    return 0


def main() -> None:
    exit_code = asyncio.run(run_smoke_test())
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
