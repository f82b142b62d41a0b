"""
cgp_evolution/cli.py - Command-line interface
"""
import logging
import random
import time

import click
import numpy as np

from .config import CGPConfig
from .errors import CGPError
from .fitness import mean_squared_error
from .functions import ARITHMETIC_FUNCTIONS, PASS_THROUGH_FUNCTIONS, uniform_constant, zero_constant
from .population import Population

TARGETS = {
    'quadratic': lambda x: x ** 2 + x + 1,
    'cubic': lambda x: x ** 3 - x,
    'sine': np.sin,
    'koza': lambda x: x ** 4 + x ** 3 + x ** 2 + x
}


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s %(levelname)s: %(message)s')


def _evolve(config: CGPConfig, generations: int, target_fitness: float, verbose: bool) -> Population:
    """Run generations until the limit or the target fitness is reached"""
    pop = Population(config)

    start_time = time.time()

    for gen in range(generations):
        result = pop.run_generation()

        if verbose or gen % 100 == 0 or result.parent_fitness <= target_fitness:
            click.echo(f"Gen {result.generation:5d}: "
                       f"Parent={result.parent_fitness:.6g} "
                       f"Evaluations={pop.num_evaluations} "
                       f"Cached={pop.cache_hits}")

        if pop.fitness <= target_fitness:
            break

    total_time = time.time() - start_time
    click.echo(f"\nEvolution finished after {pop.generation} generations in {total_time:.1f}s")
    click.echo(str(pop.get_best()))
    return pop


@click.group()
def cli():
    """CGP Evolution - Cartesian Genetic Programming with a (1+lambda) strategy"""
    pass


@cli.command()
@click.option('--generations', '-g', default=10000, help='Maximum number of generations')
@click.option('--population', '-p', default=5, help='Population size (parent plus offspring)')
@click.option('--nodes', '-n', default=10, help='Number of function nodes')
@click.option('--mutation-rate', default=0.01, help='Mutation rate (0.0-1.0)')
@click.option('--seed', type=int, default=None, help='Random seed for a repeatable run')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def reverse(generations, population, nodes, mutation_rate, seed, verbose):
    """Evolve a program reversing its three inputs"""
    _setup_logging(verbose)

    def evaluator(genome):
        outputs = genome.execute([1, 2, 3])
        return float(sum(o != e for o, e in zip(outputs, [3, 2, 1])))

    try:
        config = CGPConfig(
            population_size=population,
            num_nodes=nodes,
            mutation_rate=mutation_rate,
            num_inputs=3,
            num_outputs=3,
            max_arity=2,
            functions=PASS_THROUGH_FUNCTIONS,
            constant_generator=zero_constant,
            evaluator=evaluator,
            rng=random.Random(seed) if seed is not None else None
        )
    except CGPError as e:
        raise click.ClickException(str(e))

    pop = _evolve(config, generations, 0.0, verbose)
    click.echo(f"Output for [1, 2, 3]: {pop.get_best().execute([1, 2, 3]).tolist()}")


@cli.command()
@click.option('--target', '-t', type=click.Choice(sorted(TARGETS)), default='quadratic',
              help='Function to fit')
@click.option('--generations', '-g', default=2000, help='Maximum number of generations')
@click.option('--population', '-p', default=5, help='Population size (parent plus offspring)')
@click.option('--nodes', '-n', default=30, help='Number of function nodes')
@click.option('--mutation-rate', default=0.05, help='Mutation rate (0.0-1.0)')
@click.option('--samples', default=20, help='Number of sample points in [-1, 1]')
@click.option('--target-fitness', default=1e-6, help='Stop once the mean squared error is this low')
@click.option('--workers', type=int, default=None, help='Evaluation threads (default: one per offspring)')
@click.option('--seed', type=int, default=None, help='Random seed for a repeatable run')
@click.option('--json', 'as_json', is_flag=True, help='Print the best genome as JSON')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def regress(target, generations, population, nodes, mutation_rate, samples, target_fitness,
            workers, seed, as_json, verbose):
    """Evolve a program fitting a univariate target function"""
    _setup_logging(verbose)

    x = np.linspace(-1, 1, samples)
    y = TARGETS[target](x)

    try:
        config = CGPConfig(
            population_size=population,
            num_nodes=nodes,
            mutation_rate=mutation_rate,
            num_inputs=1,
            num_outputs=1,
            max_arity=2,
            functions=ARITHMETIC_FUNCTIONS,
            constant_generator=uniform_constant(-1.0, 1.0),
            evaluator=mean_squared_error(x.reshape(-1, 1), y.reshape(-1, 1)),
            rng=random.Random(seed) if seed is not None else None,
            max_workers=workers
        )
    except CGPError as e:
        raise click.ClickException(str(e))

    pop = _evolve(config, generations, target_fitness, verbose)
    if as_json:
        click.echo(pop.get_best().to_json())


if __name__ == '__main__':
    cli()
