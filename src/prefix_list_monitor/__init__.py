"""prefix-list-monitor: keep an EC2 managed prefix list entry synced to this host's public IP."""

__version__ = "0.1.0"
