"""Shared pytest fixtures: artifact writers and a mocked web3 node."""

import json
from unittest.mock import MagicMock

import pytest

from deployment.config import DeploymentConfig

DEPLOYER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
FACTORY_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"

FACTORY_ABI = [
    {"type": "constructor", "inputs": [], "stateMutability": "nonpayable"},
    {
        "type": "function",
        "name": "createRealEstateToken",
        "inputs": [{"name": "_totalSupply", "type": "uint256"}],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
]
FACTORY_BYTECODE = "0x6080604052348015600f57600080fd5b50"


@pytest.fixture
def factory_address():
    return FACTORY_ADDRESS


@pytest.fixture
def deployer_address():
    return DEPLOYER_ADDRESS


@pytest.fixture
def write_artifact():
    """Returns a writer for Truffle build files (build/contracts/<Name>.json)."""
    def write(build_dir, name="RealEstateTokenFactory", bytecode=FACTORY_BYTECODE, networks=None):
        build_dir.mkdir(parents=True, exist_ok=True)
        path = build_dir / f"{name}.json"
        path.write_text(json.dumps({
            "contractName": name,
            "abi": FACTORY_ABI,
            "bytecode": bytecode,
            "networks": networks or {},
        }))
        return path
    return write


@pytest.fixture
def write_hardhat_artifact():
    """Returns a writer for Hardhat artifacts (<dir>/<Name>.sol/<Name>.json)."""
    def write(artifacts_dir, name="RealEstateTokenFactory", bytecode=FACTORY_BYTECODE):
        contract_dir = artifacts_dir / f"{name}.sol"
        contract_dir.mkdir(parents=True, exist_ok=True)
        path = contract_dir / f"{name}.json"
        path.write_text(json.dumps({
            "_format": "hh-sol-artifact-1",
            "contractName": name,
            "sourceName": f"contracts/{name}.sol",
            "abi": FACTORY_ABI,
            "bytecode": bytecode,
        }))
        return path
    return write


@pytest.fixture
def config(tmp_path):
    return DeploymentConfig(
        private_key="0x" + "11" * 32,
        chain_id=1337,
        build_dirs=[str(tmp_path / "build" / "contracts"), str(tmp_path / "artifacts" / "contracts")],
        deployment_file=str(tmp_path / "deployment.json"),
        tx_timeout=5,
    )


@pytest.fixture
def mock_w3():
    """A web3 stand-in whose deploy and call transactions both succeed."""
    w3 = MagicMock()
    w3.is_connected.return_value = True
    w3.eth.account.from_key.return_value.address = DEPLOYER_ADDRESS
    w3.eth.get_transaction_count.return_value = 7
    w3.eth.gas_price = 1_000_000_000
    w3.eth.send_raw_transaction.side_effect = [bytes.fromhex("aa" * 32), bytes.fromhex("bb" * 32)]
    w3.eth.wait_for_transaction_receipt.side_effect = [
        {"status": 1, "contractAddress": FACTORY_ADDRESS, "blockNumber": 1},
        {"status": 1, "contractAddress": None, "blockNumber": 2},
    ]
    return w3
