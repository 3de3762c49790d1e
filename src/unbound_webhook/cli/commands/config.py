"""Configuration display command."""

from rich import box
from rich.console import Console
from rich.table import Table

from unbound_webhook.config import ProviderConfiguration, ServerOptions

console = Console()


def show(options):
    """Print provider and server settings resolved from the environment."""
    provider = ProviderConfiguration.from_env()
    server = ServerOptions.from_env()

    if options is not None and options.output.value == "json":
        console.print_json(data={"provider": provider.model_dump(), "server": server.model_dump()})
        return

    table = Table(title="Effective Configuration", box=box.ROUNDED, show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Unbound host", provider.host)
    table.add_row("TLS", "enabled" if provider.ca_pem_path or provider.cert_pem_path else "disabled")
    table.add_row("Dry run", str(provider.dry_run))
    table.add_row("Default TTL", str(provider.default_ttl))

    spec = provider.domain_filter_spec
    if spec.uses_regex:
        table.add_row("Regex domain filter", spec.regex_include)
        table.add_row("Regex exclusion", spec.regex_exclude or "-")
    else:
        table.add_row("Domain filter", ", ".join(spec.include) or "-")
        table.add_row("Exclude domains", ", ".join(spec.exclude) or "-")

    table.add_row("Webhook address", server.webhook_address)
    table.add_row("Health address", server.health_address)
    table.add_row("Read timeout", f"{server.read_timeout_ms}ms")
    table.add_row("Write timeout", f"{server.write_timeout_ms}ms")

    console.print(table)
