"""
Deployment configuration loaded from environment variables (and .env)
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from .exceptions import ConfigurationError

DEFAULT_BUILD_DIRS = ["build/contracts", "artifacts/contracts"]


def _get_int(name: str, default: Optional[str]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        raw = default
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


@dataclass
class DeploymentConfig:
    """Settings for a single deployment run"""
    private_key: str
    rpc_url: str = "http://localhost:8545"
    chain_id: int = 31337
    gas_limit: Optional[int] = None
    build_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_BUILD_DIRS))
    deployment_file: str = "deployment.json"
    tx_timeout: int = 120
    slack_webhook: Optional[str] = None

    @classmethod
    def from_env(cls) -> "DeploymentConfig":
        """
        Build the configuration from the process environment.

        Call load_dotenv() beforehand if a .env file should be honoured.

        Raises:
            ConfigurationError: PRIVATE_KEY is missing or a numeric value is malformed
        """
        private_key = os.getenv("PRIVATE_KEY")
        if not private_key:
            raise ConfigurationError("PRIVATE_KEY not found in environment")

        build_dirs_raw = os.getenv("BUILD_DIRS")
        if build_dirs_raw:
            build_dirs = [d.strip() for d in build_dirs_raw.split(",") if d.strip()]
        else:
            build_dirs = list(DEFAULT_BUILD_DIRS)

        return cls(
            private_key=private_key,
            rpc_url=os.getenv("RPC_URL", "http://localhost:8545"),
            chain_id=_get_int("CHAIN_ID", "31337"),
            gas_limit=_get_int("GAS_LIMIT", None),
            build_dirs=build_dirs,
            deployment_file=os.getenv("DEPLOYMENT_FILE", "deployment.json"),
            tx_timeout=_get_int("TX_TIMEOUT", "120"),
            slack_webhook=os.getenv("SLACK_WEBHOOK") or None,
        )
