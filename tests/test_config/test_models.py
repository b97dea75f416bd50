"""Tests for configuration models."""

import pytest
from pydantic import ValidationError

from riak_exporter.config.models import ExporterConfig, RiakConfig, WebConfig


class TestWebConfig:
    """Listen address and telemetry path validation."""

    def test_defaults(self):
        web = WebConfig()

        assert web.listen_address == ":9203"
        assert web.host == "0.0.0.0"
        assert web.port == 9203
        assert web.telemetry_path == "/metrics"

    @pytest.mark.parametrize("address,host,port", [
        ("127.0.0.1:9300", "127.0.0.1", 9300),
        ("localhost:80", "localhost", 80),
        (":0", "0.0.0.0", 0),
        ("[::]:9203", "::", 9203),
        ("[::1]:9203", "::1", 9203),
    ])
    def test_split_address(self, address, host, port):
        web = WebConfig(listen_address=address)

        assert web.host == host
        assert web.port == port

    @pytest.mark.parametrize("address", ["9203", "localhost", "host:", "host:http", ":70000"])
    def test_invalid_address(self, address):
        with pytest.raises(ValidationError):
            WebConfig(listen_address=address)

    def test_telemetry_path_must_be_absolute(self):
        with pytest.raises(ValidationError):
            WebConfig(telemetry_path="metrics")


class TestRiakConfig:
    """Upstream URI and timeout validation."""

    def test_defaults(self):
        riak = RiakConfig()

        assert riak.uri == "http://localhost:8098"
        assert riak.timeout_ms == 5000

    def test_trailing_slash_stripped(self):
        assert RiakConfig(uri="https://riak:8098/").uri == "https://riak:8098"

    @pytest.mark.parametrize("uri", ["localhost:8098", "ftp://riak", ""])
    def test_invalid_uri(self, uri):
        with pytest.raises(ValidationError):
            RiakConfig(uri=uri)

    def test_timeout_lower_bound(self):
        with pytest.raises(ValidationError):
            RiakConfig(timeout_ms=10)


class TestExporterConfig:
    """Root model validation."""

    def test_defaults(self):
        config = ExporterConfig()

        assert config.namespace == "riak"
        assert config.log_level == "INFO"
        assert config.web.port == 9203
        assert config.riak.uri == "http://localhost:8098"

    def test_log_level_normalized(self):
        assert ExporterConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            ExporterConfig(log_level="verbose")

    @pytest.mark.parametrize("namespace", ["riak-kv", "1riak", "riak kv", ""])
    def test_invalid_namespace(self, namespace):
        with pytest.raises(ValidationError):
            ExporterConfig(namespace=namespace)
