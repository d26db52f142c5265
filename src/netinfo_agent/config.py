"""Configuration management for the netinfo agent."""

import json
import logging
import os
from dataclasses import dataclass, asdict, field, fields
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "/etc/netinfo-agent/config.json"


@dataclass
class AgentConfig:
    """Agent configuration."""

    collector_url: Optional[str] = None
    poll_interval: int = 60  # seconds
    retry_attempts: int = 3
    retry_backoff: float = 2.0
    timeout: int = 30
    sysfs_root: str = "/sys/class/net"
    exclude_interfaces: List[str] = field(default_factory=list)


class ConfigManager:
    """Manages agent configuration."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path)

    def load(self) -> AgentConfig:
        """Load configuration from file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, "r") as f:
            data = json.load(f)

        known = {f.name for f in fields(AgentConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys in {self.config_path}: {', '.join(unknown)}")

        return AgentConfig(**{k: v for k, v in data.items() if k in known})

    def load_or_default(self) -> AgentConfig:
        """Load configuration, falling back to defaults if there is no file."""
        if not self.exists():
            return AgentConfig()
        return self.load()

    def save(self, config: AgentConfig) -> None:
        """Save configuration to file."""
        # Ensure directory exists
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, "w") as f:
            json.dump(asdict(config), f, indent=2)

        os.chmod(self.config_path, 0o600)

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()
