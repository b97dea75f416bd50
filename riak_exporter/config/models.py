"""Pydantic configuration models for the Riak exporter."""

from pydantic import BaseModel, Field, field_validator
from typing import Tuple
import re


class WebConfig(BaseModel):
    """Configuration for the metrics HTTP endpoint."""
    listen_address: str = ":9203"
    telemetry_path: str = "/metrics"

    @field_validator('listen_address')
    @classmethod
    def validate_listen_address(cls, v: str) -> str:
        """Validate host:port format."""
        cls.split_address(v)
        return v

    @field_validator('telemetry_path')
    @classmethod
    def validate_telemetry_path(cls, v: str) -> str:
        """Validate telemetry path format."""
        if not v.startswith('/'):
            raise ValueError('Telemetry path must start with /')
        return v

    @staticmethod
    def split_address(address: str) -> Tuple[str, int]:
        """
        Split a listen address into host and port.

        Accepts ``host:port``, ``:port`` and ``[v6addr]:port``. An empty host
        binds all IPv4 interfaces.

        Raises:
            ValueError: If the address has no valid port
        """
        host, sep, port = address.rpartition(':')
        if not sep or not port.isdigit():
            raise ValueError(f'Listen address must be host:port, got {address!r}')
        port_number = int(port)
        if port_number > 65535:
            raise ValueError(f'Port out of range: {port_number}')
        if host.startswith('[') and host.endswith(']'):
            host = host[1:-1]
        return host or "0.0.0.0", port_number

    @property
    def host(self) -> str:
        return self.split_address(self.listen_address)[0]

    @property
    def port(self) -> int:
        return self.split_address(self.listen_address)[1]


class RiakConfig(BaseModel):
    """Configuration for the scraped Riak node."""
    uri: str = "http://localhost:8098"
    timeout_ms: int = Field(default=5000, ge=100)

    @field_validator('uri')
    @classmethod
    def validate_uri(cls, v: str) -> str:
        """Validate URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v.rstrip('/')


class ExporterConfig(BaseModel):
    """Root configuration model for the exporter."""
    web: WebConfig = Field(default_factory=WebConfig)
    riak: RiakConfig = Field(default_factory=RiakConfig)
    namespace: str = "riak"
    log_level: str = "INFO"

    @field_validator('namespace')
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Namespace becomes a metric name prefix."""
        if not re.match(r'^[a-zA-Z_][a-zA-Z0-9_]*$', v):
            raise ValueError('Namespace must be a valid metric name prefix')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate log level."""
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'Unknown log level: {v}')
        return level
