"""
Configuration parameters for ogclaim.

Defines file locations, the registry owner and logging defaults.

Precedence (lowest to highest): dataclass defaults, .env file,
OGCLAIM_* environment variables, JSON config file.
"""

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv


ENV_PREFIX = "OGCLAIM_"


@dataclass
class ClaimConfig:
    """Tool-wide configuration parameters"""

    # Files (relative to data_dir)
    snapshot_file: str = "zoraSnapshot.json"  # Ownership snapshot input
    root_file: str = "merkleRoot.json"  # Published root output
    proofs_file: str = "merkleProofs.json"  # Proof distribution output
    registry_db: str = "registry.db"  # Local registry/claim state

    # Registry
    registry_owner: Optional[str] = None  # Address allowed to publish roots

    # Logging
    log_level: Union[str, int] = "INFO"  # Name or logging level number
    log_to_file: bool = False

    # Paths
    data_dir: Path = Path("data")
    log_dir: Path = Path("logs")

    def __post_init__(self):
        self.data_dir = Path(self.data_dir).expanduser()
        self.log_dir = Path(self.log_dir).expanduser()
        if isinstance(self.log_level, str):
            self.log_level = self.log_level.upper()

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / self.snapshot_file

    @property
    def root_path(self) -> Path:
        return self.data_dir / self.root_file

    @property
    def proofs_path(self) -> Path:
        return self.data_dir / self.proofs_file

    def ensure_dirs(self):
        """Create necessary directories"""
        self.data_dir.mkdir(exist_ok=True, parents=True)
        if self.log_to_file:
            self.log_dir.mkdir(exist_ok=True, parents=True)


def _coerce(name: str, value: str):
    if name == "log_to_file":
        return value.strip().lower() in ("1", "true", "yes", "on")
    if name in ("data_dir", "log_dir"):
        return Path(value)
    return value


def load_config(config_path: Optional[str] = None, env_file: Optional[str] = None) -> ClaimConfig:
    """
    Load configuration from environment and optional file.

    Args:
        config_path: Optional path to a JSON config file
        env_file: Optional .env path (default: search from cwd)

    Returns:
        ClaimConfig instance
    """
    load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True), override=False)

    values = {}
    for f in fields(ClaimConfig):
        raw = os.environ.get(ENV_PREFIX + f.name.upper())
        if raw is not None and raw != "":
            values[f.name] = _coerce(f.name, raw)

    if config_path:
        data = json.loads(Path(config_path).read_text())
        known = {f.name for f in fields(ClaimConfig)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        for name, value in data.items():
            values[name] = _coerce(name, value) if isinstance(value, str) else value

    return ClaimConfig(**values)
