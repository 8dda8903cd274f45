"""
Compiled contract artifacts

Looks up compiler output by contract name, the way `artifacts.require()`
does in a Truffle migration. Supports Truffle build files
(build/contracts/<Name>.json) and Hardhat artifacts
(artifacts/contracts/<Name>.sol/<Name>.json). Nothing here touches the network.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .exceptions import ArtifactError, ArtifactNotCompiledError, ArtifactNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractArtifact:
    """ABI, bytecode and known deployments of one compiled contract"""
    contract_name: str
    abi: List[Dict[str, Any]]
    bytecode: str
    networks: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    source_path: Optional[Path] = None

    @property
    def is_compiled(self) -> bool:
        return bool(self.bytecode) and self.bytecode not in ("0x", "0X")

    def address_for(self, network_id: Union[int, str]) -> Optional[str]:
        entry = self.networks.get(str(network_id)) or {}
        return entry.get("address")

    def has_function(self, name: str) -> bool:
        return any(
            item.get("type") == "function" and item.get("name") == name
            for item in self.abi
        )


def normalize_contract_name(name: str) -> str:
    """'./RealEstateTokenFactory.sol' -> 'RealEstateTokenFactory'"""
    base = os.path.basename(name.strip())
    if base.endswith(".sol"):
        base = base[:-4]
    if base.endswith(".json"):
        base = base[:-5]
    return base


def load_artifact(path: Path, contract_name: Optional[str] = None) -> ContractArtifact:
    """Loads a contract artifact from its JSON file."""
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ArtifactError(f"Could not read artifact {path}: {e}")

    if not isinstance(data, dict) or not isinstance(data.get("abi"), list):
        raise ArtifactError(f"Artifact {path} has no ABI")

    bytecode = data.get("bytecode") or ""
    # solc standard JSON nests the object
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object") or ""
    if bytecode and not bytecode.startswith(("0x", "0X")):
        bytecode = "0x" + bytecode

    networks = data.get("networks")
    if not isinstance(networks, dict):
        networks = {}

    return ContractArtifact(
        contract_name=str(data.get("contractName") or contract_name or path.stem),
        abi=data["abi"],
        bytecode=bytecode,
        networks={str(k): v for k, v in networks.items() if isinstance(v, dict)},
        source_path=path,
    )


class ArtifactStore:
    """Resolves contract names to artifacts across a list of build directories"""

    def __init__(self, build_dirs: List[str], base_dir: Optional[Union[str, Path]] = None):
        root = Path(base_dir) if base_dir is not None else Path.cwd()
        self.build_dirs = [
            Path(d) if Path(d).is_absolute() else root / d for d in build_dirs
        ]
        self._cache: Dict[str, ContractArtifact] = {}

    def find(self, contract_name: str) -> Optional[Path]:
        """Returns the artifact file for a contract, or None."""
        for build_dir in self.build_dirs:
            if not build_dir.is_dir():
                continue
            truffle_path = build_dir / f"{contract_name}.json"
            if truffle_path.is_file():
                return truffle_path
            matches = sorted(build_dir.glob(f"**/{contract_name}.sol/{contract_name}.json"))
            if matches:
                return matches[0]
        return None

    def require(self, name: str) -> ContractArtifact:
        """
        Resolve a compiled contract by name.

        Args:
            name: contract name, optionally given as a source path ('./Foo.sol')

        Returns:
            The loaded ContractArtifact

        Raises:
            ArtifactNotFoundError: no artifact file in any build directory
            ArtifactNotCompiledError: artifact carries no bytecode
            ArtifactError: artifact file is unreadable or has no ABI
        """
        contract_name = normalize_contract_name(name)
        if contract_name in self._cache:
            return self._cache[contract_name]

        path = self.find(contract_name)
        if path is None:
            searched = ", ".join(str(d) for d in self.build_dirs)
            raise ArtifactNotFoundError(
                f"Could not find artifacts for {contract_name} in {searched}. "
                f"Compile the contracts first."
            )

        artifact = load_artifact(path, contract_name)
        if not artifact.is_compiled:
            raise ArtifactNotCompiledError(f"Artifact {path} has no bytecode; contract is not compiled")

        logger.info(f"Loaded artifact {artifact.contract_name} from {path}")
        self._cache[contract_name] = artifact
        return artifact
