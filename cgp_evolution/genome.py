"""
cgp_evolution/genome.py - Graph genome representation, execution and fingerprinting

A genome is a fixed-length list of nodes followed by output genes. Addresses
0..num_inputs-1 refer to the program inputs, address num_inputs + i refers to
node i. A node may only connect to addresses below its own, so the program
graph is acyclic by construction.
"""
import hashlib
import json
import math
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from .config import CGPConfig
from .errors import ConfigurationError, ExecutionError


@dataclass(frozen=True)
class Node:
    """A function gene: catalog index, evolved constant and input connections"""
    function: int
    constant: float
    connections: Tuple[int, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'function': self.function,
            'constant': self.constant,
            'connections': list(self.connections)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Node':
        return cls(int(data['function']), float(data['constant']),
                   tuple(int(c) for c in data['connections']))


class Genome:
    """An evolved program: function nodes plus output genes"""

    def __init__(self, config: CGPConfig, nodes: Sequence[Node], outputs: Sequence[int],
                 fitness: float = math.inf):
        self.config = config
        self.nodes = tuple(nodes)
        self.outputs = tuple(outputs)
        self.fitness = fitness

    @classmethod
    def random(cls, config: CGPConfig) -> 'Genome':
        """Create a random valid genome using the config's random source"""
        rng = config.rng
        nodes = []
        for i in range(config.num_nodes):
            position = config.num_inputs + i
            nodes.append(Node(
                function=rng.randrange(len(config.functions)),
                constant=config.constant_generator(rng),
                connections=tuple(rng.randrange(position) for _ in range(config.max_arity))
            ))
        outputs = [rng.randrange(config.num_addresses) for _ in range(config.num_outputs)]
        return cls(config, nodes, outputs)

    def derive(self, nodes: Sequence[Node], outputs: Sequence[int]) -> 'Genome':
        """Create an unevaluated genome sharing this genome's config"""
        return Genome(self.config, nodes, outputs)

    @cached_property
    def active_nodes(self) -> np.ndarray:
        """Boolean bitmap over all addresses marking what influences an output.

        Inputs are always active. Walking backwards from the outputs only
        ever moves to lower addresses, so the walk visits each node at most
        once.
        """
        num_inputs = self.config.num_inputs
        active = np.zeros(num_inputs + len(self.nodes), dtype=bool)
        active[:num_inputs] = True

        stack = list(self.outputs)
        while stack:
            address = stack.pop()
            if active[address]:
                continue
            active[address] = True
            stack.extend(self.nodes[address - num_inputs].connections)

        active.setflags(write=False)
        return active

    @property
    def num_active_nodes(self) -> int:
        return int(np.count_nonzero(self.active_nodes[self.config.num_inputs:]))

    @cached_property
    def fingerprint(self) -> str:
        """Cache key shared by all genomes whose active subgraph is identical.

        Inactive nodes never contribute, so genomes that differ only in
        unreachable nodes compute the same function and share the key.
        """
        num_inputs = self.config.num_inputs
        digest = hashlib.blake2b(digest_size=16)
        for i, node in enumerate(self.nodes):
            if not self.active_nodes[num_inputs + i]:
                continue
            digest.update(np.array([node.function], dtype='<i8').tobytes())
            digest.update(np.array([node.constant], dtype='<f8').tobytes())
            digest.update(np.asarray(node.connections, dtype='<i8').tobytes())
        digest.update(np.asarray(self.outputs, dtype='<i8').tobytes())
        return digest.hexdigest()

    def execute(self, inputs: Sequence[float]) -> np.ndarray:
        """Run the program on one input vector and return its outputs"""
        num_inputs = self.config.num_inputs
        if len(inputs) != num_inputs:
            raise ExecutionError(
                f"Genome.execute() expects {num_inputs} inputs, got {len(inputs)}")

        functions = self.config.functions
        active = self.active_nodes

        # Slots of inactive nodes are never read
        node_output = np.full(num_inputs + len(self.nodes), np.nan)
        node_output[:num_inputs] = inputs

        for i, node in enumerate(self.nodes):
            position = num_inputs + i
            if not active[position]:
                continue
            function_input = np.empty(1 + len(node.connections))
            function_input[0] = node.constant
            function_input[1:] = node_output[list(node.connections)]
            node_output[position] = functions[node.function](function_input)

        return node_output[list(self.outputs)]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize genome to dictionary"""
        return {
            'nodes': [node.to_dict() for node in self.nodes],
            'outputs': list(self.outputs),
            'fitness': self.fitness,
            'fingerprint': self.fingerprint,
            'active_nodes': self.num_active_nodes
        }

    @classmethod
    def from_dict(cls, config: CGPConfig, data: Dict[str, Any]) -> 'Genome':
        """Rebuild a genome for config, checking it fits the config's address space"""
        nodes = [Node.from_dict(node_data) for node_data in data['nodes']]
        outputs = [int(o) for o in data['outputs']]
        _check_structure(config, nodes, outputs)
        return cls(config, nodes, outputs, float(data.get('fitness', math.inf)))

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def __str__(self) -> str:
        """String representation listing the active program"""
        num_inputs = self.config.num_inputs
        lines = [f"Genome (fitness: {self.fitness:.4f}, "
                 f"active nodes: {self.num_active_nodes}/{len(self.nodes)}):"]
        for i, node in enumerate(self.nodes):
            if self.active_nodes[num_inputs + i]:
                args = ', '.join(_address_name(c, num_inputs) for c in node.connections)
                lines.append(f"  n{i} = f{node.function}({node.constant:.3f}; {args})")
        outputs = ', '.join(_address_name(o, num_inputs) for o in self.outputs)
        lines.append(f"  outputs: {outputs}")
        return '\n'.join(lines)


def _address_name(address: int, num_inputs: int) -> str:
    if address < num_inputs:
        return f"in{address}"
    return f"n{address - num_inputs}"


def _check_structure(config: CGPConfig, nodes: List[Node], outputs: List[int]) -> None:
    if len(nodes) != config.num_nodes:
        raise ConfigurationError(f"expected {config.num_nodes} nodes, got {len(nodes)}")
    if len(outputs) != config.num_outputs:
        raise ConfigurationError(f"expected {config.num_outputs} outputs, got {len(outputs)}")

    for i, node in enumerate(nodes):
        if not 0 <= node.function < len(config.functions):
            raise ConfigurationError(f"node {i} uses unknown function {node.function}")
        if len(node.connections) != config.max_arity:
            raise ConfigurationError(
                f"node {i} has {len(node.connections)} connections, expected {config.max_arity}")
        position = config.num_inputs + i
        for c in node.connections:
            if not 0 <= c < position:
                raise ConfigurationError(f"node {i} connection {c} does not point backwards")

    for o in outputs:
        if not 0 <= o < config.num_addresses:
            raise ConfigurationError(f"output {o} is outside the address space")
