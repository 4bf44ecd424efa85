"""
Orchestration module for GA engine.

Drives the generational loop of one evolutionary run and the outer retry
policy around it.

Every generation is built by independent tasks: one per initial candidate,
or one per child of the next generation. Each task receives its own random
generator spawned from a SeedSequence before submission and only reads the
previous, fully scored population. Results are collected in submission
order, so a seeded run gives identical results regardless of worker count.
"""

import logging
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from contextlib import contextmanager
from functools import partial
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from packing.exceptions import ConvergenceFailure, EvolutionTimeout
from packing.manifest import Manifest
from packing.shapes import Shape

from .crossover import uniform_crossover
from .data_models import Candidate, GAConfig, OptimizationResult, RetryState, RunResult
from .fitness import evaluate, is_feasible, score
from .mutation import mutate
from .sampler import random_candidate
from .selection import select_elites, select_parents

logger = logging.getLogger(__name__)


def default_time_budget(total_genes: int) -> float:
    """Time budget in seconds scaled by candidate size: 5s plus 0.1s per gene"""
    return 5.0 + 0.1 * total_genes


@contextmanager
def executor_scope(workers: int) -> Iterator[Optional[Executor]]:
    """Yield a thread pool, or None for serial execution when workers == 1"""
    if workers <= 1:
        yield None
        return
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ga-worker") as executor:
        yield executor


def _map(executor: Optional[Executor], fn: Callable, items: Sequence) -> list:
    if executor is None:
        return [fn(item) for item in items]
    return list(executor.map(fn, items))


def _spawn_rngs(seed_sequence: np.random.SeedSequence, count: int) -> List[np.random.Generator]:
    return [np.random.default_rng(child) for child in seed_sequence.spawn(count)]


def _best_of(population: Sequence[Candidate]) -> Candidate:
    best = population[0]
    for candidate in population[1:]:
        if candidate.fitness > best.fitness:
            best = candidate
    return best


def _build_initial(
    shape: Shape,
    manifest: Manifest,
    config: GAConfig,
    rng: np.random.Generator
) -> Candidate:
    candidate = random_candidate(shape, manifest, rng, config.max_sampling_attempts)
    return evaluate(candidate, shape, manifest)


def initial_population(
    shape: Shape,
    manifest: Manifest,
    config: GAConfig,
    seed_sequence: np.random.SeedSequence,
    executor: Optional[Executor] = None
) -> List[Candidate]:
    """
    Sample and score generation 0.

    Returns:
        List of config.population_size scored candidates
    """
    rngs = _spawn_rngs(seed_sequence, config.population_size)
    return _map(executor, partial(_build_initial, shape, manifest, config), rngs)


def breed_child(
    population: Sequence[Candidate],
    generation_index: int,
    shape: Shape,
    manifest: Manifest,
    config: GAConfig,
    rng: np.random.Generator
) -> Candidate:
    """
    Produce one scored child from a scored population.

    Selection reads the population, crossover allocates the child, and
    mutation and scoring only touch the child, which is owned by this task
    until it is returned.
    """
    father, mother = select_parents(population, config.tournament_size, rng)
    child = uniform_crossover(mother, father, config.crossover_probability, rng)
    mutate(child, generation_index, shape, config, rng)
    child.fitness = score(child, shape, manifest)
    return child


def next_generation(
    population: Sequence[Candidate],
    generation_index: int,
    shape: Shape,
    manifest: Manifest,
    config: GAConfig,
    seed_sequence: np.random.SeedSequence,
    executor: Optional[Executor] = None
) -> List[Candidate]:
    """
    Build the next generation: elites carried over, the rest bred in parallel.

    Returns:
        Freshly allocated list of config.population_size scored candidates
    """
    elites = select_elites(population, config.elite_fraction)
    rngs = _spawn_rngs(seed_sequence, config.population_size - len(elites))
    breed = partial(breed_child, population, generation_index, shape, manifest, config)
    return list(elites) + _map(executor, breed, rngs)


def _evolve(
    shape: Shape,
    manifest: Manifest,
    config: GAConfig,
    seed_sequence: np.random.SeedSequence,
    executor: Optional[Executor],
    stop_when_feasible: bool
) -> RunResult:
    start_time = time.perf_counter()
    init_sequence, loop_sequence = seed_sequence.spawn(2)
    generation_sequences = loop_sequence.spawn(config.generation_count)

    population = initial_population(shape, manifest, config, init_sequence, executor)
    best = _best_of(population)

    fitnesses = [candidate.fitness for candidate in population]
    history_best = [max(fitnesses)]
    history_mean = [sum(fitnesses) / len(fitnesses)]

    generations = 0
    for generation_index in range(config.generation_count):
        # scores are never positive, so a zero-penalty best cannot be beaten
        if stop_when_feasible and best.fitness >= 0.0:
            logger.debug("Feasible candidate found, stopping at generation %d", generation_index)
            break

        population = next_generation(
            population,
            generation_index,
            shape,
            manifest,
            config,
            generation_sequences[generation_index],
            executor,
        )
        generations += 1

        generation_best = _best_of(population)
        if generation_best.fitness > best.fitness:
            best = generation_best

        fitnesses = [candidate.fitness for candidate in population]
        history_best.append(generation_best.fitness)
        history_mean.append(sum(fitnesses) / len(fitnesses))

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Generation %d/%d: best=%.6f mean=%.6f global_best=%.6f",
                generation_index + 1,
                config.generation_count,
                history_best[-1],
                history_mean[-1],
                best.fitness,
            )

    return RunResult(
        best=best.copy(),
        is_feasible=is_feasible(best, shape),
        generations=generations,
        elapsed_time=time.perf_counter() - start_time,
        history={"best": history_best, "mean": history_mean},
    )


def run_evolution(
    shape: Shape,
    manifest: Manifest,
    config: GAConfig,
    seed_sequence: Optional[np.random.SeedSequence] = None,
    executor: Optional[Executor] = None,
    stop_when_feasible: bool = True
) -> RunResult:
    """
    Run one evolutionary search and return the globally best candidate.

    Algorithm:
        1. Sample and score population_size candidates
        2. Repeat generation_count times: carry elites, breed the remainder,
           keep the global best (replaced only by a strictly better one)
        3. Return the global best with its feasibility flag

    Since a feasible candidate has the maximum possible score, the loop
    stops early once one is found unless stop_when_feasible is False. The
    returned best is the same either way.

    Args:
        shape: Domain shape
        manifest: Requested items
        config: GA configuration
        seed_sequence: Source of per-task random streams (from config.random_seed if omitted)
        executor: Executor to run tasks on (a pool sized by config.workers if omitted)
        stop_when_feasible: Stop once the best candidate is feasible

    Returns:
        RunResult for this run

    Raises:
        SamplingExhaustionError: If a gene cannot be placed inside the shape
    """
    if seed_sequence is None:
        seed_sequence = np.random.SeedSequence(config.random_seed)
    if executor is not None:
        return _evolve(shape, manifest, config, seed_sequence, executor, stop_when_feasible)
    with executor_scope(config.effective_workers) as own_executor:
        return _evolve(shape, manifest, config, seed_sequence, own_executor, stop_when_feasible)


def run_attempt(
    state: RetryState,
    shape: Shape,
    manifest: Manifest,
    config: GAConfig,
    seed_sequence: np.random.SeedSequence,
    executor: Optional[Executor] = None
) -> Tuple[RetryState, RunResult]:
    """
    Run one attempt of the retry loop.

    Args:
        state: Retry state before this attempt
        shape: Domain shape
        manifest: Requested items
        config: GA configuration
        seed_sequence: Random stream for this attempt
        executor: Optional executor shared across attempts

    Returns:
        Tuple of (state after this attempt, run result)
    """
    attempt = state.attempts_used + 1
    logger.info(
        "Attempt %d/%d: evolving %d candidates of %d genes for %d generations",
        attempt,
        config.max_retry_attempts,
        config.population_size,
        manifest.total_quantity,
        config.generation_count,
    )
    result = run_evolution(shape, manifest, config, seed_sequence, executor)
    new_state = state.advance(result)
    logger.info(
        "Attempt %d finished in %.2fs after %d generations: fitness=%.6f feasible=%s",
        attempt,
        result.elapsed_time,
        result.generations,
        result.best.fitness,
        result.is_feasible,
    )
    return new_state, result


def run_optimization(
    shape: Shape,
    manifest: Manifest,
    config: Optional[GAConfig] = None,
    raise_on_failure: bool = True
) -> OptimizationResult:
    """
    Search for a feasible placement, retrying failed runs.

    Runs up to config.max_retry_attempts evolutionary runs and returns the
    first feasible result. Geometry and sampling errors propagate at once.

    An infeasible problem has no early stop, so every attempt runs all of its
    generations. With the default configuration (3 attempts of 800
    generations of 100 candidates) that takes on the order of a minute for a
    few dozen items. Set config.time_budget (time_budget: auto in YAML) to
    stop retrying once the first attempt has used it up, or lower
    generation_count to shorten each attempt.

    Args:
        shape: Domain shape
        manifest: Requested items
        config: GA configuration (defaults if omitted)
        raise_on_failure: Raise ConvergenceFailure when no attempt is feasible;
            otherwise return the best infeasible candidate

    Returns:
        OptimizationResult with the best candidate and diagnostics

    Raises:
        ConfigurationError: If the configuration is invalid
        SamplingExhaustionError: If rejection sampling gives up
        EvolutionTimeout: If config.time_budget ran out before the last attempt
        ConvergenceFailure: If every attempt produced an infeasible candidate
    """
    config = config or GAConfig()
    config.validate()

    attempt_sequences = np.random.SeedSequence(config.random_seed).spawn(config.max_retry_attempts)
    state = RetryState()
    failure: Optional[ConvergenceFailure] = None

    with executor_scope(config.effective_workers) as executor:
        for attempt_sequence in attempt_sequences:
            state, result = run_attempt(state, shape, manifest, config, attempt_sequence, executor)

            if result.is_feasible:
                logger.info(
                    "Feasible placement found on attempt %d (%.2fs total)",
                    state.attempts_used,
                    state.elapsed_time,
                )
                return OptimizationResult(
                    candidate=result.best,
                    is_feasible=True,
                    attempts_used=state.attempts_used,
                    elapsed_time=state.elapsed_time,
                )

            if state.attempts_used >= config.max_retry_attempts:
                break

            if config.time_budget is not None and state.elapsed_time > config.time_budget:
                logger.warning(
                    "Time budget of %.2fs exhausted after %d attempts (%.2fs), not retrying",
                    config.time_budget,
                    state.attempts_used,
                    state.elapsed_time,
                )
                failure = EvolutionTimeout(
                    state.best_fitness,
                    state.elapsed_time,
                    state.attempts_used,
                    config.time_budget,
                    state.best_candidate,
                )
                break

            logger.warning(
                "Attempt %d/%d produced an infeasible placement (fitness=%.6f), retrying",
                state.attempts_used,
                config.max_retry_attempts,
                result.best.fitness,
            )

    if failure is None:
        failure = ConvergenceFailure(
            state.best_fitness,
            state.elapsed_time,
            state.attempts_used,
            state.best_candidate,
        )
    logger.error("%s", failure)

    if raise_on_failure:
        raise failure
    return OptimizationResult(
        candidate=state.best_candidate,
        is_feasible=False,
        attempts_used=state.attempts_used,
        elapsed_time=state.elapsed_time,
    )
