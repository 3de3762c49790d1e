"""HTTP surfaces: external-dns webhook and health probes."""
