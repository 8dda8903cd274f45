#!/usr/bin/env python3
"""
Runs the contract deployment script against the configured network
"""

import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv

from .artifacts import ArtifactStore
from .config import DeploymentConfig
from .deployer import Deployer
from .notifier import send_slack_alert
from .scripts import deploy_contracts

logger = logging.getLogger(__name__)


def setup_logging(log_file: Optional[str]):
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def run(config: DeploymentConfig, deployer: Optional[Deployer] = None,
        artifacts: Optional[ArtifactStore] = None):
    """Run the deployment script once; failures propagate to the caller."""
    try:
        artifacts = artifacts or ArtifactStore(config.build_dirs)
        deployer = deployer or Deployer(config)
        receipt = deploy_contracts.migrate(deployer, artifacts)
    except Exception as e:
        logger.error(f"Deployment failed: {e}")
        send_slack_alert(config.slack_webhook, f"Deployment failed: {e}", {
            "RPC URL": config.rpc_url,
            "Chain ID": str(config.chain_id),
        })
        raise

    addresses = ", ".join(f"{name}={record.address}" for name, record in deployer.deployments.items())
    logger.info(f"Deployment finished: {addresses}")
    send_slack_alert(config.slack_webhook, f"Deployment successful: {addresses}", {
        "Chain ID": str(config.chain_id),
        "Block": str(receipt.get('blockNumber')),
    })
    return receipt


def main():
    """Main function to run the deployment"""
    load_dotenv()
    setup_logging(os.getenv("LOG_FILE", "deployment.log"))

    try:
        config = DeploymentConfig.from_env()
    except Exception as e:
        logger.error(f"Invalid configuration: {e}")
        raise

    run(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
