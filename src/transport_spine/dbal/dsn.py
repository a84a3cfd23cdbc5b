"""Connection descriptor normalization.

Turns whatever the caller configured a database transport with (a DSN
string, an options mapping, or nothing at all) into a single canonical
:class:`ConnectionDescriptor` the connection factory can hand to the driver.

Accepted input
--------------
==============================================  ==================================
Input                                           Result
==============================================  ==================================
``None`` / ``""`` / ``{}``                      same as ``"mysql:"``
``"mysql:"``                                    ``mysql://root@localhost``
``"mysql+pdo://user:pw@host:3306/db"``          ``pdo_mysql://user:pw@host:3306/db``
``{"dsn": "pgsql+pdo://h/db", "lazy": False}``  DSN url, caller keeps ``lazy``
``{"connection": {"url": ...}}``                passed through over defaults
==============================================  ==================================

Usage
-----
::

    from transport_spine.dbal.dsn import normalize_config

    descriptor = normalize_config("sqlite+pdo:")
    descriptor.connection   # {'url': 'pdo_sqlite://root@localhost'}
    descriptor.table_name   # 'enqueue'

Tags:
    transport-spine, dbal, dsn, configuration, normalization

Doc-Types:
    api-reference
"""

from __future__ import annotations

import copy
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import SplitResult, urlsplit

from transport_spine.core.errors import (
    InvalidArgumentError,
    InvalidDsnError,
    UnsupportedSchemeError,
)

DEFAULT_DSN = "mysql:"

DEFAULTS: dict[str, Any] = {
    "connection": {},
    "table_name": "enqueue",
    "polling_interval": 1000,
    "lazy": True,
}

# DSN scheme -> driver id handed to the driver layer
SUPPORTED_SCHEMES: dict[str, str] = {
    "db2": "db2",
    "ibm-db2": "ibm-db2",
    "mssql": "mssql",
    "sqlsrv+pdo": "pdo_sqlsrv",
    "mysql": "mysql",
    "mysql2": "mysql2",
    "mysql+pdo": "pdo_mysql",
    "pgsql": "pgsql",
    "postgres": "postgres",
    "pgsql+pdo": "pdo_pgsql",
    "sqlite": "sqlite",
    "sqlite3": "sqlite3",
    "sqlite+pdo": "pdo_sqlite",
}

_SCHEME_PATTERN = re.compile(r"^[a-z0-9+.-]*$")

_KNOWN_KEYS = frozenset(DEFAULTS) | {"dsn"}


# ── Descriptor ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ParsedDsn:
    """A validated connection string."""

    scheme: str
    driver_id: str
    url: str

    def to_config(self) -> dict[str, Any]:
        """The configuration fragment a DSN contributes."""
        return {"lazy": True, "connection": {"url": self.url}}


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Canonical, defaults-applied connection configuration."""

    connection: dict[str, Any] = field(default_factory=dict)
    table_name: str = "enqueue"
    polling_interval: int = 1000
    lazy: bool = True

    scheme: str | None = None
    """Lower-cased DSN scheme, ``None`` when configured without a DSN."""

    driver_id: str | None = None
    """Driver id the scheme maps to, ``None`` when configured without a DSN."""

    extra: dict[str, Any] = field(default_factory=dict)
    """Caller keys this layer does not interpret, kept verbatim."""

    @property
    def url(self) -> str | None:
        return self.connection.get("url")

    def to_dict(self) -> dict[str, Any]:
        """The merged configuration as a plain mapping."""
        return {
            **copy.deepcopy(self.extra),
            "connection": copy.deepcopy(self.connection),
            "table_name": self.table_name,
            "polling_interval": self.polling_interval,
            "lazy": self.lazy,
        }


# ── Merging ──────────────────────────────────────────────────────────────


def deep_replace(base: Mapping[str, Any], *replacements: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively replace values of *base* with those of *replacements*.

    Nested mappings merge key by key; every other value, lists included,
    replaces the earlier one.  Inputs are never mutated.
    """
    merged = copy.deepcopy(dict(base))
    for replacement in replacements:
        for key, value in replacement.items():
            current = merged.get(key)
            if isinstance(current, Mapping) and isinstance(value, Mapping):
                merged[key] = deep_replace(current, value)
            else:
                merged[key] = copy.deepcopy(value)
    return merged


# ── Parsing ──────────────────────────────────────────────────────────────


def _has_empty_authority(dsn: str, parts: SplitResult) -> bool:
    """``scheme://`` followed by no host: ``mysql://``, ``mysql:///``, ``mysql://:3306``.

    ``sqlite:///path/to.db`` has no host either but names a path, which is accepted.
    """
    if not parts.scheme or not dsn[len(parts.scheme) + 1 :].startswith("//"):
        return False
    if parts.netloc:
        return not parts.hostname
    return not parts.path.strip("/")


def parse_dsn(dsn: str) -> ParsedDsn:
    """Validate *dsn* and map its scheme onto a driver id.

    Raises
    ------
    InvalidDsnError
        No ``:`` separator, unparseable URL, no host after ``//``, or illegal
        characters in the scheme.
    UnsupportedSchemeError
        The scheme is not one of :data:`SUPPORTED_SCHEMES`.
    """
    if ":" not in dsn:
        raise InvalidDsnError(
            'The DSN is invalid. It does not have scheme separator ":".'
        ).with_context(dsn=dsn)

    try:
        parts = urlsplit(dsn)
        # .port validates the netloc; urlsplit alone accepts "host:abc"
        parts.port
    except ValueError as exc:
        raise InvalidDsnError(f'Failed to parse DSN "{dsn}"', cause=exc).with_context(dsn=dsn) from exc

    if _has_empty_authority(dsn, parts):
        raise InvalidDsnError(f'Failed to parse DSN "{dsn}"').with_context(dsn=dsn)

    scheme = dsn.split(":", 1)[0].lower()
    if not _SCHEME_PATTERN.match(scheme):
        raise InvalidDsnError(
            "The DSN is invalid. Scheme contains illegal symbols."
        ).with_context(dsn=dsn)

    if scheme not in SUPPORTED_SCHEMES:
        raise UnsupportedSchemeError(scheme, SUPPORTED_SCHEMES).with_context(dsn=dsn)

    driver_id = SUPPORTED_SCHEMES[scheme]
    remainder = dsn[len(scheme):]
    if remainder == ":":
        url = f"{driver_id}://root@localhost"
    else:
        url = driver_id + remainder

    return ParsedDsn(scheme=scheme, driver_id=driver_id, url=url)


def _coerce_interval(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(
            f"The polling_interval option must be an integer number of milliseconds, got {value!r}",
            cause=exc,
        ) from exc


def normalize_config(config: Mapping[str, Any] | str | None = None) -> ConnectionDescriptor:
    """Normalize a DSN string, an options mapping, or ``None``.

    A mapping may carry a ``dsn`` key: its url lands in ``connection.url``
    while every other key the caller set (``lazy`` included) wins over
    what the DSN implies.  The result is merged over :data:`DEFAULTS`.

    Raises
    ------
    InvalidArgumentError
        *config* is neither a mapping, a string, nor empty.
    """
    parsed: ParsedDsn | None = None

    if config is None or (isinstance(config, (str, Mapping)) and not config):
        parsed = parse_dsn(DEFAULT_DSN)
        options = parsed.to_config()
    elif isinstance(config, str):
        parsed = parse_dsn(config)
        options = parsed.to_config()
    elif isinstance(config, Mapping):
        options = dict(config)
        if "dsn" in options:
            dsn = options.pop("dsn")
            if not isinstance(dsn, str):
                raise InvalidArgumentError(
                    f"The dsn option must be a string, got {type(dsn).__name__}"
                )
            parsed = parse_dsn(dsn)
            options = deep_replace(parsed.to_config(), options, {"connection": {"url": parsed.url}})
    else:
        raise InvalidArgumentError(
            "The config must be either a mapping of options, a DSN string or None"
        )

    merged = deep_replace(DEFAULTS, options)
    if not isinstance(merged["connection"], Mapping):
        raise InvalidArgumentError("The connection option must be a mapping of driver options")

    return ConnectionDescriptor(
        connection=dict(merged["connection"]),
        table_name=merged["table_name"],
        polling_interval=_coerce_interval(merged["polling_interval"]),
        lazy=bool(merged["lazy"]),
        scheme=parsed.scheme if parsed else None,
        driver_id=parsed.driver_id if parsed else None,
        extra={key: value for key, value in merged.items() if key not in _KNOWN_KEYS},
    )


__all__ = [
    "DEFAULTS",
    "DEFAULT_DSN",
    "SUPPORTED_SCHEMES",
    "ConnectionDescriptor",
    "ParsedDsn",
    "deep_replace",
    "normalize_config",
    "parse_dsn",
]
