"""EC2 managed prefix list access: snapshot reads and versioned writes."""

from prefix_list_monitor.prefix_list.client import create_ec2_client
from prefix_list_monitor.prefix_list.reader import PrefixListReader
from prefix_list_monitor.prefix_list.writer import PrefixListWriter

__all__ = ["create_ec2_client", "PrefixListReader", "PrefixListWriter"]
