#!/usr/bin/env python3
"""
Fail if the InfluxDB core imports the MCP layer.

Everything under src/influxdb3_mcp/core/ must stay usable without an MCP
runtime: no mcp SDK, no ASGI stack, and nothing from influxdb3_mcp.server or
influxdb3_mcp.tools. Relative imports are resolved against the file's package,
so ``from ..tools import x`` inside core is caught as well.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path
from typing import Optional

REPO_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = REPO_ROOT / "src"
CORE_DIR = SRC_DIR / "influxdb3_mcp" / "core"

FORBIDDEN_PREFIXES = (
    "mcp",
    "fastmcp",
    "starlette",
    "uvicorn",
    "influxdb3_mcp.server",
    "influxdb3_mcp.tools",
)


def is_forbidden(module: str) -> bool:
    return any(
        module == prefix or module.startswith(prefix + ".")
        for prefix in FORBIDDEN_PREFIXES
    )


def package_of(path: Path, root: Path = SRC_DIR) -> str:
    """Dotted package containing ``path``; core files outside src/ count as core."""
    try:
        parts = list(path.resolve().relative_to(root.resolve()).parent.parts)
    except ValueError:
        return "influxdb3_mcp.core"
    return ".".join(parts)


def resolve_from(node: ast.ImportFrom, package: str) -> Optional[str]:
    if node.level == 0:
        return node.module
    parts = package.split(".") if package else []
    if node.level - 1 > len(parts):
        return None
    base = parts[: len(parts) - (node.level - 1)]
    if node.module:
        base.append(node.module)
    return ".".join(base) or None


def scan_file(path: Path, package: Optional[str] = None) -> list[str]:
    package = package if package is not None else package_of(path)
    errors: list[str] = []
    tree = ast.parse(path.read_text())
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if is_forbidden(alias.name):
                    errors.append(f"{path}:{node.lineno}: forbidden import '{alias.name}'")
        elif isinstance(node, ast.ImportFrom):
            mod = resolve_from(node, package)
            if not mod:
                continue
            # "from influxdb3_mcp import tools" names the module in the alias
            targets = [mod] + [f"{mod}.{a.name}" for a in node.names]
            hit = next((t for t in targets if is_forbidden(t)), None)
            if hit:
                errors.append(f"{path}:{node.lineno}: forbidden import '{hit}'")
    return errors


def main() -> int:
    violations: list[str] = []
    for py_file in sorted(CORE_DIR.rglob("*.py")):
        violations.extend(scan_file(py_file))

    if violations:
        for v in violations:
            print(v, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
