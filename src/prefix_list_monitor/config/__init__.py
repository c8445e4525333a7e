"""Configuration for prefix-list-monitor."""

from prefix_list_monitor.config.settings import (
    MonitorConfig,
    Settings,
    get_settings,
    load_config,
)

__all__ = ["MonitorConfig", "Settings", "get_settings", "load_config"]
