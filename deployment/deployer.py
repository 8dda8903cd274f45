#!/usr/bin/env python3
"""
Contract deployer built on web3.py

Deploys compiled artifacts, hands back deployed instances and sends
state-changing calls, waiting for each receipt before returning.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Any, Dict, Optional

from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from .artifacts import ContractArtifact
from .config import DeploymentConfig
from .exceptions import (
    ContractNotDeployedError,
    DeploymentError,
    NetworkConnectionError,
    TransactionRevertedError,
)

logger = logging.getLogger(__name__)


@dataclass
class DeploymentRecord:
    """Where and how a contract was deployed"""
    contract_name: str
    address: str
    transaction_hash: str
    block_number: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'address': self.address,
            'transactionHash': self.transaction_hash,
            'blockNumber': self.block_number,
        }


class Deployer:
    def __init__(self, config: DeploymentConfig, w3: Optional[Web3] = None):
        self.config = config
        self.w3: Optional[Web3] = w3
        self.account: Optional[Any] = None
        self.deployments: Dict[str, DeploymentRecord] = {}
        self._connected = False
        self._prepare_deployment_file()

    def _prepare_deployment_file(self):
        """Make sure the deployment record can be written before anything is sent on chain"""
        path = os.path.abspath(self.config.deployment_file)
        directory = os.path.dirname(path)
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise DeploymentError(f"Cannot create directory for deployment file {path}: {e}") from e
        if not os.access(directory, os.W_OK):
            raise DeploymentError(f"Deployment file directory {directory} is not writable")
        if os.path.exists(path) and not os.access(path, os.W_OK):
            raise DeploymentError(f"Deployment file {path} is not writable")
        network = self._load_records(strict=True).get(str(self.config.chain_id), {})
        if not isinstance(network, dict):
            raise DeploymentError(
                f"Deployment file entry for chain {self.config.chain_id} is not a JSON object"
            )

    def _initialize_web3(self):
        """Connect to the RPC endpoint and load the signing account"""
        if self.w3 is None:
            self.w3 = Web3(Web3.HTTPProvider(self.config.rpc_url))
            self.w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        if not self.w3.is_connected():
            raise NetworkConnectionError(f"Could not connect to RPC URL: {self.config.rpc_url}")
        logger.info(f"Connected to blockchain at {self.config.rpc_url}")

        self.account = self.w3.eth.account.from_key(self.config.private_key)
        logger.info(f"Using deployer account: {self.account.address}")
        self._connected = True

    @property
    def web3(self) -> Web3:
        if not self._connected:
            self._initialize_web3()
        return self.w3

    def _tx_params(self) -> Dict[str, Any]:
        w3 = self.web3
        params = {
            'from': self.account.address,
            'nonce': w3.eth.get_transaction_count(self.account.address, 'pending'),
            'gasPrice': w3.eth.gas_price,
            'chainId': self.config.chain_id,
        }
        if self.config.gas_limit:
            params['gas'] = self.config.gas_limit
        return params

    def _send(self, tx: Dict[str, Any]):
        w3 = self.web3
        signed_tx = w3.eth.account.sign_transaction(tx, self.config.private_key)
        tx_hash = w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        logger.info(f"Transaction sent: {Web3.to_hex(tx_hash)}")
        receipt = w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.config.tx_timeout)
        return tx_hash, receipt

    def deploy(self, artifact: ContractArtifact, *args) -> DeploymentRecord:
        """
        Deploy a compiled contract and wait for it to be mined.

        Args:
            artifact: compiled contract to deploy
            *args: constructor arguments

        Returns:
            DeploymentRecord of the new instance, also saved to the deployment file
        """
        logger.info(f"Deploying {artifact.contract_name}...")
        factory = self.web3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
        tx = factory.constructor(*args).build_transaction(self._tx_params())

        tx_hash, receipt = self._send(tx)
        address = receipt.get('contractAddress')
        if receipt['status'] != 1 or not address:
            raise DeploymentError(
                f"Deployment of {artifact.contract_name} failed in transaction {Web3.to_hex(tx_hash)}"
            )

        record = DeploymentRecord(
            contract_name=artifact.contract_name,
            address=address,
            transaction_hash=Web3.to_hex(tx_hash),
            block_number=receipt.get('blockNumber'),
        )
        self.deployments[artifact.contract_name] = record
        self._save_record(record)
        logger.info(f"{artifact.contract_name} deployed at {address} (block {record.block_number})")
        return record

    def _load_records(self, strict: bool = False) -> Dict[str, Any]:
        """
        Read the deployment file.

        With strict=True an unreadable file raises DeploymentError instead of
        being treated as empty, so existing records are never overwritten.
        """
        path = self.config.deployment_file
        if not os.path.exists(path):
            return {}
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            if strict:
                raise DeploymentError(f"Deployment file {path} is unreadable: {e}") from e
            logger.warning(f"Ignoring unreadable deployment file {path}: {e}")
            return {}
        if not isinstance(data, dict):
            if strict:
                raise DeploymentError(f"Deployment file {path} does not hold a JSON object")
            return {}
        return data

    def _save_record(self, record: DeploymentRecord):
        data = self._load_records(strict=True)
        network = data.setdefault(str(self.config.chain_id), {})
        if not isinstance(network, dict):
            raise DeploymentError(
                f"Deployment file entry for chain {self.config.chain_id} is not a JSON object"
            )
        network[record.contract_name] = record.to_dict()

        path = os.path.abspath(self.config.deployment_file)
        fd, tmp_path = tempfile.mkstemp(dir=os.path.dirname(path), prefix='.deployment-', suffix='.json')
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def deployed_address(self, artifact: ContractArtifact) -> Optional[str]:
        """
        Address from this run, then the deployment file, then the artifact's networks.

        Truffle keys an artifact's networks by network id, which can differ from
        the chain id (Ganache: 5777 vs 1337), so the node's net_version is tried too.
        """
        record = self.deployments.get(artifact.contract_name)
        if record is not None:
            return record.address

        network = self._load_records().get(str(self.config.chain_id), {})
        entry = network.get(artifact.contract_name) if isinstance(network, dict) else None
        if isinstance(entry, dict) and entry.get('address'):
            return entry['address']

        address = artifact.address_for(self.config.chain_id)
        if address is None and artifact.networks:
            address = artifact.address_for(self.web3.net.version)
        return address

    def deployed(self, artifact: ContractArtifact):
        """Return a contract handle bound to the deployed instance of an artifact."""
        address = self.deployed_address(artifact)
        if address is None:
            raise ContractNotDeployedError(
                f"{artifact.contract_name} has not been deployed to chain {self.config.chain_id}"
            )
        return self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=artifact.abi)

    def transact(self, contract, function_name: str, *args):
        """
        Call a state-changing contract function and wait for the receipt.

        Raises:
            DeploymentError: the contract ABI has no such function
            TransactionRevertedError: the transaction was mined with status 0
        """
        try:
            function = contract.get_function_by_name(function_name)
        except ValueError as e:
            raise DeploymentError(f"Contract has no function {function_name}: {e}") from e

        logger.info(f"Calling {function_name}{tuple(args)} on {contract.address}")
        tx = function(*args).build_transaction(self._tx_params())
        tx_hash, receipt = self._send(tx)
        if receipt['status'] != 1:
            raise TransactionRevertedError(
                f"{function_name} reverted in transaction {Web3.to_hex(tx_hash)}", receipt
            )
        logger.info(f"{function_name} confirmed in block: {receipt.get('blockNumber')}")
        return receipt
