"""SQL quoting for the few statements built from caller input."""


def literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def identifier(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def contains(column: str, needle: str) -> str:
    """Case-insensitive substring predicate; needle is bound as a literal."""
    return f"strpos(lower({column}), lower({literal(needle)})) > 0"
