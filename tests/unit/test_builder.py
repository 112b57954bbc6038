"""Unit tests for ContainerBuilder."""

import pytest
from unittest.mock import AsyncMock, patch

from disposable.models.container import RuntimeInspection
from disposable.models.errors import RuntimeCallError, SpecError
from disposable.services.container.builder import ContainerBuilder


class TestBuilderSpec:
    """Test spec accumulation."""

    def test_infers_protocol_from_image(self):
        """Test well-known images get their protocol."""
        assert ContainerBuilder("mongo").spec.protocol == "mongodb"
        assert ContainerBuilder("docker.io/library/redis:7").spec.protocol == "redis"

    def test_unknown_image_has_no_protocol(self):
        """Test unknown images start without a protocol."""
        assert ContainerBuilder("alpine").spec.protocol is None

    def test_protocol_override(self):
        """Test an explicit protocol replaces the inferred one."""
        builder = ContainerBuilder("mongo").protocol("mongodb+srv")
        assert builder.spec.protocol == "mongodb+srv"

    def test_empty_image_rejected(self):
        """Test an empty image reference raises SpecError."""
        with pytest.raises(SpecError):
            ContainerBuilder("")

    def test_methods_return_new_builder(self):
        """Test earlier builders are never modified."""
        base = ContainerBuilder("mongo", host_ip="localhost")
        bound = base.bind_port("28017", "27017")
        named = bound.name("db")

        assert base.spec.port_bindings == {}
        assert bound.spec.name is None
        assert named.spec.name == "db"
        assert "27017/tcp" in named.spec.port_bindings

    def test_bind_port_canonicalizes(self):
        """Test container ports are stored with their protocol."""
        builder = ContainerBuilder("mongo", host_ip="localhost").bind_port("28017", "27017")
        binding = builder.spec.port_bindings["27017/tcp"][0]
        assert binding.container_port == "27017/tcp"
        assert binding.host_port == "28017"
        assert binding.host_ip == "localhost"

    def test_bind_port_none_reuses_container_port(self):
        """Test an omitted host port reuses the container port number."""
        builder = ContainerBuilder("mongo").bind_port(None, "27017/tcp")
        assert builder.spec.port_bindings["27017/tcp"][0].host_port == "27017"

    def test_bind_port_auto(self):
        """Test host port 0 is kept for the runtime to assign."""
        builder = ContainerBuilder("mongo").bind_port(0, 27017)
        assert builder.spec.port_bindings["27017/tcp"][0].host_port == "0"

    def test_bind_same_port_twice_appends(self):
        """Test a port can be published on several host ports."""
        builder = (
            ContainerBuilder("mongo")
            .bind_port("28017", "27017")
            .bind_port("29017", "27017")
        )
        bindings = builder.spec.port_bindings["27017/tcp"]
        assert [b.host_port for b in bindings] == ["28017", "29017"]

    @pytest.mark.parametrize(
        "host_port,container_port",
        [("abc", "27017"), ("28017", "abc"), ("70000", "27017"), ("-1", "27017")],
    )
    def test_invalid_ports_rejected(self, host_port, container_port):
        """Test non-numeric or out-of-range ports raise SpecError."""
        with pytest.raises(SpecError):
            ContainerBuilder("mongo").bind_port(host_port, container_port)

    def test_bind_port_as_default(self):
        """Test the default port is recorded canonically."""
        builder = ContainerBuilder("mongo").bind_port_as_default("0", "27017")
        assert builder.spec.default_port == "27017/tcp"
        assert builder.spec.port_bindings["27017/tcp"][0].host_port == "0"

    def test_bind_volume(self):
        """Test volume specs are kept in order."""
        builder = (
            ContainerBuilder("mongo")
            .bind_volume("/tmp/a:/data/a")
            .bind_volume("/tmp/b:/data/b:ro")
        )
        assert builder.spec.volumes == ("/tmp/a:/data/a", "/tmp/b:/data/b:ro")

    def test_empty_name_rejected(self):
        """Test an empty name raises SpecError."""
        with pytest.raises(SpecError):
            ContainerBuilder("mongo").name("")

    def test_port_mapping_is_deprecated(self):
        """Test the legacy port_mapping warns and still binds."""
        with pytest.warns(DeprecationWarning):
            builder = ContainerBuilder("mongo").port_mapping(28017, 27017)
        assert builder.spec.port_bindings["27017/tcp"][0].host_port == "28017"

    def test_host_ip_defaults_to_settings(self):
        """Test the host interface comes from configuration."""
        with patch("disposable.services.container.builder.settings") as mock_settings:
            mock_settings.container_host_ip = "192.168.1.10"
            builder = ContainerBuilder("mongo")
        assert builder.host_ip == "192.168.1.10"


class TestBuildDisposable:
    """Test launching through a runtime client."""

    @pytest.mark.asyncio
    async def test_default_url_with_fixed_port(self, mock_runtime_client):
        """Test a mongo container bound to 28017 yields its URL."""
        builder = ContainerBuilder("mongo", host_ip="localhost").bind_port_as_default(
            "28017", "27017"
        )

        async with await builder.build_disposable(mock_runtime_client) as handle:
            assert handle.url() == "mongodb://localhost:28017/"

        mock_runtime_client.create_container.assert_awaited_once_with(builder.spec)
        mock_runtime_client.stop_container.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_default_url_with_auto_port(self, mock_runtime_client, attrs_factory):
        """Test an auto-assigned port is read back from inspection."""
        mock_runtime_client.inspect_container.return_value = RuntimeInspection.from_attrs(
            attrs_factory(ports={"27017/tcp": [{"HostIp": "0.0.0.0", "HostPort": "49153"}]})
        )
        builder = ContainerBuilder("mongo", host_ip="localhost").bind_port_as_default(
            "0", "27017"
        )

        async with builder.disposable(mock_runtime_client) as handle:
            assert handle.default_host_port == "49153"
            assert handle.url() == "mongodb://localhost:49153/"

    @pytest.mark.asyncio
    async def test_calls_in_order(self, mock_runtime_client, container_id):
        """Test create, start and inspect run in sequence."""
        builder = ContainerBuilder("mongo")

        async with builder.disposable(mock_runtime_client):
            pass

        mock_runtime_client.start_container.assert_awaited_once_with(container_id)
        mock_runtime_client.inspect_container.assert_awaited_once_with(container_id)

    @pytest.mark.asyncio
    async def test_name_from_runtime(self, mock_runtime_client):
        """Test a runtime-assigned name is used without its slash."""
        async with ContainerBuilder("mongo").disposable(mock_runtime_client) as handle:
            assert handle.name == "quirky_turing"

    @pytest.mark.asyncio
    async def test_explicit_name_kept(self, mock_runtime_client):
        """Test an explicit name wins over the inspected one."""
        builder = ContainerBuilder("mongo").name("test-db")
        async with builder.disposable(mock_runtime_client) as handle:
            assert handle.name == "test-db"

    @pytest.mark.asyncio
    async def test_unresolved_default_port(self, mock_runtime_client):
        """Test a default port missing from inspection makes url() fail."""
        builder = ContainerBuilder("mongo", host_ip="192.168.1.10").bind_port_as_default(
            "28017", "27017"
        )

        async with builder.disposable(mock_runtime_client) as handle:
            assert handle.default_host_port is None
            with pytest.raises(SpecError):
                handle.url()

    @pytest.mark.asyncio
    async def test_default_url_with_loopback_ip(self, mock_runtime_client, attrs_factory):
        """Test 127.0.0.1 resolves the wildcard binding the daemon reports."""
        mock_runtime_client.inspect_container.return_value = RuntimeInspection.from_attrs(
            attrs_factory(ports={"27017/tcp": [{"HostIp": "0.0.0.0", "HostPort": "49153"}]})
        )
        builder = ContainerBuilder("mongo", host_ip="127.0.0.1").bind_port_as_default(
            "0", "27017"
        )

        async with builder.disposable(mock_runtime_client) as handle:
            assert handle.default_host_port == "49153"
            assert handle.url() == "mongodb://127.0.0.1:49153/"

    @pytest.mark.asyncio
    async def test_uses_factory_client_by_default(self, mock_runtime_client):
        """Test the configured backend is used when no client is passed."""
        with patch(
            "disposable.services.container.builder.DockerClientFactory.create_runtime_client",
            return_value=mock_runtime_client,
        ) as mock_create:
            async with ContainerBuilder("mongo").disposable() as handle:
                assert handle.client is mock_runtime_client

        mock_create.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_create_failure_propagates(self, mock_runtime_client):
        """Test a failed create raises and nothing else is called."""
        mock_runtime_client.create_container.side_effect = RuntimeCallError("create")

        with pytest.raises(RuntimeCallError):
            await ContainerBuilder("mongo").build_disposable(mock_runtime_client)

        mock_runtime_client.start_container.assert_not_awaited()
        mock_runtime_client.stop_container.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_start_failure_propagates(self, mock_runtime_client):
        """Test a failed start raises without inspecting."""
        mock_runtime_client.start_container.side_effect = RuntimeCallError("start")

        with pytest.raises(RuntimeCallError):
            await ContainerBuilder("mongo").build_disposable(mock_runtime_client)

        mock_runtime_client.inspect_container.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_inspect_failure_reports_container_id(
        self, mock_runtime_client, container_id
    ):
        """Test the running container's id is attached to the error."""
        mock_runtime_client.inspect_container.side_effect = RuntimeCallError("inspect")

        with pytest.raises(RuntimeCallError) as exc_info:
            await ContainerBuilder("mongo").build_disposable(mock_runtime_client)

        assert exc_info.value.container_id == container_id
        mock_runtime_client.stop_container.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disposable_stops_on_error(self, mock_runtime_client):
        """Test the container is stopped when the block raises."""
        with pytest.raises(ValueError):
            async with ContainerBuilder("mongo").disposable(mock_runtime_client):
                raise ValueError("test failure")

        mock_runtime_client.stop_container.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_builder_reusable(self, mock_runtime_client):
        """Test one builder can launch several containers."""
        mock_runtime_client.create_container = AsyncMock(side_effect=["first", "second"])
        builder = ContainerBuilder("mongo")

        async with builder.disposable(mock_runtime_client) as first:
            async with builder.disposable(mock_runtime_client) as second:
                assert first.container_id == "first"
                assert second.container_id == "second"

        assert mock_runtime_client.stop_container.await_count == 2
