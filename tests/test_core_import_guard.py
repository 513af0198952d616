import importlib.util
from pathlib import Path


def _load_guard():
    script = (
        Path(__file__).resolve().parent.parent / "scripts" / "check_core_imports.py"
    )
    spec = importlib.util.spec_from_file_location("check_core_imports", script)
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None  # for mypy
    spec.loader.exec_module(module)
    return module


def test_core_import_guard_passes():
    exit_code = _load_guard().main()
    assert exit_code == 0, "core import guard failed"


def test_core_import_guard_flags_tool_layer_imports(tmp_path):
    guard = _load_guard()
    bad = tmp_path / "bad.py"
    bad.write_text(
        "from influxdb3_mcp.tools import execute_query\n"
        "import mcp.server.fastmcp\n"
        "from . import sql\n"
    )

    errors = guard.scan_file(bad)

    assert len(errors) == 2
    assert "influxdb3_mcp.tools" in errors[0]


def test_core_import_guard_resolves_relative_imports(tmp_path):
    guard = _load_guard()
    bad = tmp_path / "services.py"
    bad.write_text(
        "from ..tools import get_help\n"
        "from .. import server\n"
        "from ..models import ConnectionInfo\n"
        "from .errors import NotFoundError\n"
    )

    errors = guard.scan_file(bad, package="influxdb3_mcp.core.services")

    assert len(errors) == 2
    assert "influxdb3_mcp.tools" in errors[0]
    assert "influxdb3_mcp.server" in errors[1]


def test_core_import_guard_forbids_mcp_sdk(tmp_path):
    guard = _load_guard()
    bad = tmp_path / "types.py"
    bad.write_text("from mcp.types import TextContent\nimport mcp\n")

    errors = guard.scan_file(bad)

    assert len(errors) == 2
    assert ":1:" in errors[0]
