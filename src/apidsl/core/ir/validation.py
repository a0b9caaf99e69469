"""
Validation (constraint) records for apidsl IR.

A ``ValidationSpec`` is attached to an attribute the first time a validation
DSL function targets it and is then filled in field by field.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ValidationFormat(StrEnum):
    """String formats understood by the ``format_`` validation."""

    DATE = "date"  # RFC3339 date
    DATE_TIME = "date-time"  # RFC3339 date time
    UUID = "uuid"  # RFC4122 uuid
    EMAIL = "email"  # RFC5322 email address
    HOSTNAME = "hostname"  # RFC1035 internet host name
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    IP = "ip"  # IPv4 or IPv6
    URI = "uri"  # RFC3986 URI
    MAC = "mac"  # IEEE 802 MAC-48, EUI-48 or EUI-64
    CIDR = "cidr"  # RFC4632 or RFC4291 CIDR notation
    REGEXP = "regexp"
    JSON = "json"
    RFC1123 = "rfc1123"  # RFC1123 date time


class ValidationSpec(BaseModel):
    """
    Constraints attached to an attribute.

    Every field is replaced wholesale by the call that sets it, except
    ``required`` which accumulates across calls.

    Attributes:
        values: Allowed values (enum), stored as given
        format: String format tag
        pattern: Regular expression the value must match
        minimum: Inclusive lower bound, always a float
        maximum: Inclusive upper bound, always a float
        min_length: Minimum length of a string, bytes, array or map
        max_length: Maximum length of a string, bytes, array or map
        required: Names of required object fields, in call order
    """

    values: list[Any] | None = None
    format: str | None = None
    pattern: str | None = None
    minimum: float | None = None
    maximum: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    required: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=False)

    def add_required(self, *names: str, dedupe: bool = False) -> None:
        """Append required field names, optionally skipping ones already present."""
        for name in names:
            if dedupe and name in self.required:
                continue
            self.required.append(name)
