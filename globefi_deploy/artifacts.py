import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List

from globefi_deploy.exceptions import ArtifactError


@dataclass(frozen=True)
class ArtifactRef:
    name: str
    abi: List[Any]
    bytecode: str


class ArtifactStore:
    """Compiled contracts on disk, looked up by contract name.

    Understands hardhat's ``artifacts/contracts/<File>.sol/<Name>.json`` and
    brownie's ``build/contracts/<Name>.json``, both of which carry ``abi`` and
    ``bytecode`` keys.
    """

    def __init__(self, root):
        self.root = Path(root)

    def __repr__(self):
        return f"<ArtifactStore {self.root}>"

    def _find(self, name):
        if not self.root.is_dir():
            raise ArtifactError(f"Artifact directory not found: {self.root}")

        # hardhat writes <Name>.dbg.json next to every artifact, rglob on the
        # exact file name already skips those
        matches = sorted(self.root.rglob(f"{name}.json"))

        if not matches:
            raise ArtifactError(
                f"No artifact for contract '{name}' under {self.root}. Compile the contracts first"
            )
        if len(matches) > 1:
            paths = ", ".join(str(m) for m in matches)
            raise ArtifactError(f"Ambiguous artifact for contract '{name}': {paths}")

        return matches[0]

    def read(self, name) -> ArtifactRef:
        path = self._find(name)

        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise ArtifactError(f"Could not read artifact {path}: {exc}") from exc

        try:
            abi = data["abi"]
            bytecode = data["bytecode"]
        except (KeyError, TypeError) as exc:
            raise ArtifactError(f"Artifact {path} is missing {exc}") from exc

        if isinstance(bytecode, dict):
            # solc standard-json style {"object": "..."}
            bytecode = bytecode.get("object", "")

        if not isinstance(abi, list):
            raise ArtifactError(f"Artifact {path} has an abi that is not a list")
        if not isinstance(bytecode, str):
            raise ArtifactError(f"Artifact {path} has bytecode that is not a hex string")

        if not bytecode.startswith("0x"):
            bytecode = "0x" + bytecode

        if bytecode == "0x":
            raise ArtifactError(
                f"Artifact for '{name}' has no bytecode (interface or abstract contract?)"
            )

        return ArtifactRef(name=name, abi=abi, bytecode=bytecode)
