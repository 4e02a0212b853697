"""JSON save/load for quantum circuits."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from quasar_sim.engine.circuit import QuantumCircuit

logger = logging.getLogger(__name__)


class CircuitSerializer:
    """JSON save/load for quantum circuits."""

    FILE_VERSION = "1.0"
    FILE_EXTENSION = ".qsim"

    @staticmethod
    def dumps(circuit: QuantumCircuit) -> str:
        return json.dumps(circuit.to_dict(), indent=2, ensure_ascii=False)

    @staticmethod
    def loads(text: str) -> QuantumCircuit:
        data = json.loads(text)
        version = data.get("version", CircuitSerializer.FILE_VERSION)
        if version != CircuitSerializer.FILE_VERSION:
            raise ValueError(f"Unsupported circuit file version {version!r}")
        return QuantumCircuit.from_dict(data)

    @staticmethod
    def save(circuit: QuantumCircuit, filepath: Path | str):
        filepath = Path(filepath)
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(CircuitSerializer.dumps(circuit))
        logger.debug("Saved %r to %s", circuit, filepath)

    @staticmethod
    def load(filepath: Path | str) -> QuantumCircuit:
        filepath = Path(filepath)
        with open(filepath, 'r', encoding='utf-8') as f:
            return CircuitSerializer.loads(f.read())
