"""Unbound remote-control client implementation."""

import asyncio
import logging
import ssl

from unbound_webhook.config import ProviderConfiguration
from unbound_webhook.core.base import BaseResolverClient
from unbound_webhook.core.errors import ConfigurationError, ResolverError, UpstreamUnavailableError
from unbound_webhook.core.models import ResourceRecord, normalize_name

logger = logging.getLogger(__name__)

DEFAULT_CONTROL_PORT = 8953
PROTOCOL_HEADER = "UBCT1 "


class UnboundControlClient(BaseResolverClient):
    """
    Client for the local data store of an Unbound resolver.

    Speaks the unbound-control protocol directly: one connection per command,
    ``UBCT1 <command>`` followed by a newline, response read until EOF. The
    channel is mutual TLS when certificates are configured (``control-use-cert``)
    and plain TCP otherwise. A host given as an absolute path is a Unix socket.
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_CONTROL_PORT,
        ssl_context: ssl.SSLContext | None = None,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.ssl_context = ssl_context
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ProviderConfiguration) -> "UnboundControlClient":
        """Build a client, loading TLS material up front."""
        if not config.host:
            raise ConfigurationError("Unbound host is required")

        host, port = parse_host(config.host)
        ssl_context = None
        if config.ca_pem_path or config.cert_pem_path or config.key_pem_path:
            ssl_context = build_ssl_context(
                config.ca_pem_path, config.cert_pem_path, config.key_pem_path
            )

        return cls(host, port, ssl_context=ssl_context)

    @property
    def address(self) -> str:
        if self.host.startswith("/"):
            return self.host
        return f"{self.host}@{self.port}"

    async def _open(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        if self.host.startswith("/"):
            return await asyncio.open_unix_connection(self.host)
        return await asyncio.open_connection(
            self.host,
            self.port,
            ssl=self.ssl_context,
            server_hostname="" if self.ssl_context else None,
        )

    async def _run_control(self, command: str) -> str:
        """Send one control command and return the raw response."""
        try:
            reader, writer = await asyncio.wait_for(self._open(), timeout=self.timeout)
        except (OSError, ssl.SSLError, asyncio.TimeoutError) as e:
            raise UpstreamUnavailableError(f"Cannot reach unbound at {self.address}: {e}") from e

        try:
            writer.write(f"{PROTOCOL_HEADER}{command}\n".encode())
            await writer.drain()
            data = await asyncio.wait_for(reader.read(), timeout=self.timeout)
        except (OSError, ssl.SSLError, asyncio.TimeoutError) as e:
            raise UpstreamUnavailableError(f"Lost connection to unbound at {self.address}: {e}") from e
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except (OSError, ssl.SSLError):
                pass

        output = data.decode()
        if output.startswith("error"):
            raise ResolverError(f"unbound rejected '{command}': {output.strip()}")
        return output

    # ========================================================================
    # Local Data
    # ========================================================================

    async def list_records(self) -> list[ResourceRecord]:
        """List local data via ``list_local_data``."""
        output = await self._run_control("list_local_data")

        records: list[ResourceRecord] = []
        for line in output.splitlines():
            record = parse_local_data(line)
            if record is not None:
                records.append(record)
        return records

    async def add_record(self, record: ResourceRecord) -> None:
        await self._run_control(f"local_data {record.to_local_data()}")

    async def remove_record(self, record: ResourceRecord) -> None:
        """Remove a single record.

        ``local_data_remove`` drops every record of a name, so the other
        records of that name are added back afterwards.
        """
        same_name = [
            r for r in await self.list_records()
            if normalize_name(r.name) == normalize_name(record.name)
        ]
        if not any(r.same_data(record) for r in same_name):
            logger.debug(f"Record {record.name} {record.type} {record.value} already absent")
            return

        await self._run_control(f"local_data_remove {record.name}")
        for sibling in same_name:
            if not sibling.same_data(record):
                await self.add_record(sibling)


def parse_host(host: str) -> tuple[str, int]:
    """Split ``host``, ``host:port``, ``host@port`` or ``[v6]:port``."""
    if host.startswith("/"):
        return host, 0

    if "@" in host:
        name, _, port = host.rpartition("@")
    elif host.startswith("["):
        name, _, rest = host[1:].partition("]")
        port = rest.lstrip(":")
    elif host.count(":") == 1:
        name, _, port = host.partition(":")
    else:
        name, port = host, ""

    if not port:
        return name, DEFAULT_CONTROL_PORT
    try:
        return name, int(port)
    except ValueError as e:
        raise ConfigurationError(f"Invalid unbound control port in '{host}'") from e


def build_ssl_context(ca_path: str, cert_path: str, key_path: str) -> ssl.SSLContext:
    """TLS context for the control channel.

    Unbound's self-signed server certificate does not carry the host name,
    so only the chain is verified.
    """
    try:
        context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH, cafile=ca_path or None)
        context.check_hostname = False
        if cert_path:
            context.load_cert_chain(cert_path, key_path or None)
    except (OSError, ssl.SSLError) as e:
        raise ConfigurationError(f"Cannot load unbound TLS material: {e}") from e
    return context


def parse_local_data(line: str) -> ResourceRecord | None:
    """Parse one ``list_local_data`` line: ``name ttl class type rdata``."""
    parts = line.split(None, 4)
    if len(parts) < 5:
        return None

    name, ttl, _rrclass, rtype, value = parts
    try:
        ttl_value = int(ttl)
    except ValueError:
        return None

    return ResourceRecord(name=name, type=rtype.upper(), ttl=ttl_value, value=value.strip())
