"""Record listing command."""

import json

from rich import box
from rich.console import Console
from rich.table import Table

from unbound_webhook.config import ProviderConfiguration
from unbound_webhook.core.provider import UnboundProvider

console = Console()


async def show(options):
    """Print the endpoints the provider reports to external-dns."""
    provider = UnboundProvider.from_config(ProviderConfiguration.from_env())
    endpoints = await provider.records()

    if options is not None and options.output.value == "json":
        console.print_json(json.dumps([e.to_wire() for e in endpoints]))
        return

    table = Table(title="Unbound Local Data", box=box.ROUNDED)
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("TTL", justify="right")
    table.add_column("Target", style="green")

    for endpoint in endpoints:
        table.add_row(
            endpoint.dns_name,
            endpoint.record_type,
            str(endpoint.record_ttl),
            ", ".join(endpoint.targets),
        )

    console.print(table)
    console.print(f"\n{len(endpoints)} record(s)")
