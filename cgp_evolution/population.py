"""
cgp_evolution/population.py - (1+lambda) population and mutation operator
"""
import logging
import math
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from .config import CGPConfig
from .genome import Genome, Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """Summary of one run_generation() call"""
    generation: int
    best_offspring_fitness: float
    parent_fitness: float
    evaluations: int
    cache_hits: int
    replaced: bool


class Population:
    """Keeps the current parent and breeds lambda offspring per generation"""

    def __init__(self, config: CGPConfig, parent: Optional[Genome] = None):
        self.config = config
        self.parent = parent if parent is not None else Genome.random(config)
        self.generation = 0
        self.num_evaluations = 0
        self.cache_hits = 0
        self._last_offspring_fitness: List[float] = []
        self._mutable_slots = self._find_mutable_slots()

        logger.info("Population created: %d offspring per generation, %d nodes, %d inputs, %d outputs",
                    config.num_offspring, config.num_nodes, config.num_inputs, config.num_outputs)

    @property
    def genomes(self) -> List[Genome]:
        """The population between generations; the parent is always at index 0"""
        return [self.parent]

    @property
    def fitness(self) -> float:
        return self.parent.fitness

    def mutate(self, genome: Genome) -> Genome:
        """Return a mutated copy of genome with at least one changed gene"""
        config = self.config
        rng = config.rng
        nodes = list(genome.nodes)
        outputs = list(genome.outputs)

        num_slots = config.num_nodes + config.num_outputs
        num_mutations = max(1, math.floor(config.mutation_rate * num_slots))

        for _ in range(num_mutations):
            slot = self._mutable_slots[rng.randrange(len(self._mutable_slots))]
            if slot < config.num_nodes:
                nodes[slot] = self._mutate_node(nodes[slot], config.num_inputs + slot)
            else:
                index = slot - config.num_nodes
                outputs[index] = _choose_other(rng, config.num_addresses, outputs[index])

        return genome.derive(nodes, outputs)

    def _find_mutable_slots(self) -> List[int]:
        """Slots with a value other than the current one to switch to"""
        config = self.config
        slots = [i for i in range(config.num_nodes)
                 if self._node_kinds(config.num_inputs + i)]
        if config.num_addresses > 1:
            slots.extend(range(config.num_nodes, config.num_nodes + config.num_outputs))
        if not slots:
            # Only constants are left to change
            slots = list(range(config.num_nodes + config.num_outputs))
        return slots

    def _node_kinds(self, position: int) -> List[str]:
        """Node genes other than the constant that can take a new value"""
        kinds = []
        if len(self.config.functions) > 1:
            kinds.append('function')
        if self.config.max_arity > 0 and position > 1:
            kinds.append('connection')
        return kinds

    def _mutate_node(self, node: Node, position: int) -> Node:
        """Replace the function, the constant or one connection of node"""
        config = self.config
        rng = config.rng

        others = self._node_kinds(position)
        choices = others + ['constant']
        choice = choices[rng.randrange(len(choices))]

        if choice == 'constant':
            constant = config.constant_generator(rng)
            if constant != node.constant or not others:
                return Node(node.function, constant, node.connections)
            choice = others[rng.randrange(len(others))]

        if choice == 'function':
            function = _choose_other(rng, len(config.functions), node.function)
            return Node(function, node.constant, node.connections)

        connections = list(node.connections)
        j = rng.randrange(len(connections))
        # Only addresses below the node's own keep the graph acyclic
        connections[j] = _choose_other(rng, position, connections[j])
        return Node(node.function, node.constant, tuple(connections))

    def run_generation(self) -> GenerationResult:
        """Breed offspring, evaluate them in parallel and select the next parent"""
        config = self.config
        parent = self.parent

        offspring = [self.mutate(parent) for _ in range(config.num_offspring)]

        pending = []
        cache_hits = 0
        for i, child in enumerate(offspring):
            # Same fingerprint means same function, so the parent's fitness holds
            if child.fingerprint == parent.fingerprint:
                child.fitness = parent.fitness
                cache_hits += 1
            else:
                pending.append(i)

        if pending:
            workers = config.max_workers or len(pending)
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [(i, executor.submit(config.evaluator, offspring[i])) for i in pending]
                for i, future in futures:
                    offspring[i].fitness = float(future.result())

        self.num_evaluations += len(pending)
        self.cache_hits += cache_hits
        self._last_offspring_fitness = [child.fitness for child in offspring]

        best = min(range(len(offspring)), key=lambda i: _selection_key(offspring[i].fitness))
        best_fitness = offspring[best].fitness
        replaced = _selection_key(best_fitness) <= _selection_key(parent.fitness)
        if replaced:
            self.parent = offspring[best]

        self.generation += 1
        logger.debug("Generation %d: %d evaluated, %d cached, best offspring %.6g, parent %.6g%s",
                     self.generation, len(pending), cache_hits, best_fitness,
                     self.parent.fitness, " (replaced)" if replaced else "")

        return GenerationResult(
            generation=self.generation,
            best_offspring_fitness=best_fitness,
            parent_fitness=self.parent.fitness,
            evaluations=len(pending),
            cache_hits=cache_hits,
            replaced=replaced
        )

    def get_best(self) -> Genome:
        """Get the best genome found so far"""
        return self.parent

    def get_stats(self) -> Dict[str, Any]:
        """Get population statistics"""
        stats = {
            'generation': self.generation,
            'parent_fitness': self.parent.fitness,
            'active_nodes': self.parent.num_active_nodes,
            'evaluations': self.num_evaluations,
            'cache_hits': self.cache_hits
        }

        fitnesses = np.array(self._last_offspring_fitness, dtype=float)
        finite = fitnesses[np.isfinite(fitnesses)]
        if finite.size:
            stats['offspring_fitness'] = {
                'min': float(np.min(finite)),
                'max': float(np.max(finite)),
                'mean': float(np.mean(finite)),
                'std': float(np.std(finite))
            }
        return stats


def _choose_other(rng: random.Random, n: int, current: int) -> int:
    """Uniform pick from range(n) other than current, unless nothing else exists"""
    if n <= 1:
        return current
    value = rng.randrange(n - 1)
    return value + 1 if value >= current else value


def _selection_key(fitness: float) -> float:
    # NaN never wins a comparison, rank it with the unevaluated
    return math.inf if math.isnan(fitness) else fitness
