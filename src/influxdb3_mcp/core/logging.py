import logging
import os
import sys
from typing import Any, Optional

LOG_EXTRA_FIELDS = (
    "product",
    "kind",
    "method",
    "endpoint",
    "status",
    "duration_ms",
    "tool",
    "database",
    "resource",
    "lines",
    "bytes",
)


class ProductFilter(logging.Filter):
    """Stamps the configured product on records that do not carry one."""

    def __init__(self, product: str):
        super().__init__()
        self.product = product

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "product", None) is None:
            record.product = self.product
        return True


class LogfmtFormatter(logging.Formatter):
    """logfmt lines: level, logger, event, then the known extras in a fixed order."""

    def format(self, record: logging.LogRecord) -> str:
        kv: list[str] = [
            f"level={record.levelname.lower()}",
            f"logger={record.name}",
        ]

        msg = record.getMessage()
        if msg:
            kv.append(f"event={self._fmt_val(msg)}")

        for key in LOG_EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is None:
                continue
            kv.append(f"{key}={self._fmt_val(val)}")

        if record.exc_info and record.exc_info[0] is not None:
            kv.append(f"exc_type={record.exc_info[0].__name__}")
            kv.append(f"exc={self._fmt_val(record.exc_info[1])}")

        return " ".join(kv)

    @staticmethod
    def _fmt_val(val: Any) -> str:
        if isinstance(val, bool):
            return "true" if val else "false"
        if isinstance(val, (int, float)):
            return str(val)
        # backend errors quote multi-line line protocol; keep one record per line
        s = str(val).replace("\\", "\\\\").replace("\n", "\\n")
        if not s or any(c in s for c in ' ="'):
            s = '"' + s.replace('"', '\\"') + '"'
        return s


def setup_logging(level: Optional[str] = None) -> None:
    """Root logging in logfmt on stderr; stdout carries the MCP stdio stream."""

    level = level or os.getenv("LOG_LEVEL", "INFO")
    root = logging.getLogger()
    # Avoid duplicate handlers if called twice
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(LogfmtFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def bind_product(product: str) -> None:
    """Tag every record emitted through the root handlers with the product."""
    for handler in logging.getLogger().handlers:
        for existing in [f for f in handler.filters if isinstance(f, ProductFilter)]:
            handler.removeFilter(existing)
        handler.addFilter(ProductFilter(product))


__all__ = [
    "setup_logging",
    "bind_product",
    "LogfmtFormatter",
    "ProductFilter",
    "LOG_EXTRA_FIELDS",
]
