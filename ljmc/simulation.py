#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Metropolis Monte Carlo Simulation Engine
================================================================================

Project:        Lennard-Jones Monte Carlo
Module:         simulation.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

Canonical (NVT) Metropolis sampling of a Lennard-Jones fluid with single
particle trial moves. The run is split into an equilibration phase, during
which the trial displacement is tuned toward ~33% acceptance, and a sampling
phase over which energy, virial and pressure are averaged.
"""

import logging
import numpy as np
from typing import Callable, List, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum

from .physics import (
    LennardJonesParameters,
    apply_periodic_boundaries,
    particle_energy,
    total_energy,
    wrap_coordinate,
)
from .thermodynamics import (
    StatisticsAccumulator,
    DisplacementController,
    TARGET_TRIES_PER_ACCEPTANCE,
    TRIES_TOLERANCE,
    DISPLACEMENT_SCALE_FACTOR,
)
from .trajectory import TrajectoryFrame, TrajectoryWriter

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Phases of a Monte Carlo run."""
    EQUILIBRATING = "equilibrating"
    SAMPLING = "sampling"


# Sentinel output interval: only the final configuration is written
FINAL_FRAME_ONLY = -1


@dataclass
class SimulationConfig:
    """Configuration for the Monte Carlo run."""
    # Run length
    sample_steps: int = 100_000
    eq_steps: int = 1_000_000

    # System
    n_particles: int = 512
    density: float = 0.7
    temperature: float = 0.9
    vacuum_slab: float = 0.0       # Extra z length relative to the filled box
    initialization: str = "random" # "random" or "lattice"

    # Potential
    lj_params: LennardJonesParameters = field(default_factory=LennardJonesParameters)

    # Trial moves
    displacement: float = 0.1
    scale_displacement: bool = True
    target_tries: float = TARGET_TRIES_PER_ACCEPTANCE
    tries_tolerance: float = TRIES_TOLERANCE
    displacement_scale: float = DISPLACEMENT_SCALE_FACTOR
    scale_interval: int = 5000

    # Bookkeeping
    resync_interval: int = 10000   # Full energy recomputation
    report_interval: int = 5000    # Progress reports
    history_interval: int = 100    # Energy trace sampling

    # Trajectory output
    output_interval: int = 100     # FINAL_FRAME_ONLY writes the last frame only
    record_equilibration: bool = False

    seed: Optional[int] = None

    def __post_init__(self):
        if self.n_particles < 1:
            raise ValueError(f"n_particles must be at least 1, got {self.n_particles}")
        if self.sample_steps < 0 or self.eq_steps < 0:
            raise ValueError("step counts must be non-negative")
        if self.density <= 0:
            raise ValueError(f"density must be positive, got {self.density}")
        if self.temperature <= 0:
            raise ValueError(f"temperature must be positive, got {self.temperature}")
        if self.displacement <= 0:
            raise ValueError(f"displacement must be positive, got {self.displacement}")
        if self.vacuum_slab < 0:
            raise ValueError(f"vacuum_slab must be non-negative, got {self.vacuum_slab}")
        if self.output_interval == 0 or self.output_interval < FINAL_FRAME_ONLY:
            raise ValueError(
                f"output_interval must be positive or {FINAL_FRAME_ONLY}, got {self.output_interval}"
            )
        if self.initialization not in ("random", "lattice"):
            raise ValueError(f"unknown initialization {self.initialization!r}")
        for name in ("scale_interval", "resync_interval", "report_interval", "history_interval"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")

    @property
    def total_steps(self) -> int:
        return self.eq_steps + self.sample_steps


@dataclass
class ParticleSystem:
    """
    Particle positions in a rectangular periodic box.

    Particles are identified by their row index in the Nx3 positions array;
    the columns are the x, y and z coordinate sequences.
    """
    positions: np.ndarray
    box: np.ndarray
    temperature: float
    cutoff: float

    def __post_init__(self):
        self.positions = np.ascontiguousarray(self.positions, dtype=np.float64)
        self.box = np.asarray(self.box, dtype=np.float64).copy()

    @property
    def n_particles(self) -> int:
        return self.positions.shape[0]

    @property
    def rx(self) -> np.ndarray:
        return self.positions[:, 0]

    @property
    def ry(self) -> np.ndarray:
        return self.positions[:, 1]

    @property
    def rz(self) -> np.ndarray:
        return self.positions[:, 2]

    @property
    def volume(self) -> float:
        return float(np.prod(self.box))

    @property
    def density(self) -> float:
        return self.n_particles / self.volume

    @property
    def cutoff_squared(self) -> float:
        return self.cutoff * self.cutoff

    @classmethod
    def random(
        cls,
        n_particles: int,
        density: float,
        temperature: float,
        cutoff: float,
        rng: np.random.Generator
    ) -> "ParticleSystem":
        """Place particles uniformly at random in a cubic box."""
        length = (n_particles / density) ** (1.0 / 3.0)
        box = np.full(3, length)
        positions = rng.random((n_particles, 3)) * box
        return cls(positions, box, temperature, cutoff)

    @classmethod
    def lattice(
        cls,
        n_particles: int,
        density: float,
        temperature: float,
        cutoff: float
    ) -> "ParticleSystem":
        """
        Place particles on a simple cubic lattice filling a cubic box.

        Sites are filled in order; if N is not a perfect cube the last
        layer is partially occupied.
        """
        length = (n_particles / density) ** (1.0 / 3.0)
        n_side = int(np.ceil(round(n_particles ** (1.0 / 3.0), 10)))
        spacing = length / n_side

        idx = np.arange(n_particles)
        cells = np.column_stack((idx // (n_side * n_side), (idx // n_side) % n_side, idx % n_side))
        positions = (cells + 0.5) * spacing
        return cls(positions, np.full(3, length), temperature, cutoff)

    def apply_vacuum_slab(self, vacuum: float) -> None:
        """
        Stretch the box along z and center the particles vertically.

        A factor of 1 doubles the box height, leaving the system half filled
        with two free liquid-vacuum interfaces.
        """
        if vacuum <= 0:
            return
        shift = self.box[2] * vacuum / 2.0
        self.box[2] *= vacuum + 1.0
        self.positions[:, 2] += shift


@dataclass
class SimulationState:
    """Mutable state of a Monte Carlo run."""
    energy: float
    virial: float
    displacement: float
    phase: Phase = Phase.EQUILIBRATING
    step: int = 0
    stats: StatisticsAccumulator = field(default_factory=StatisticsAccumulator)


@dataclass
class ProgressReport:
    """Snapshot handed to the reporting hook at checkpoints."""
    step: int
    phase: Phase
    energy: float
    average_energy: float
    average_virial: float
    acceptance_rate: float
    displacement: float
    phase_changed: bool = False


@dataclass
class SimulationResults:
    """Final parameters and sampling-phase averages of a run."""
    eq_steps: int
    sample_steps: int
    epsilon: float
    sigma: float
    cutoff: float
    n_particles: int
    density: float
    temperature: float
    volume: float
    box: Tuple[float, float, float]
    displacement: float
    energy_correction: float
    energy_shift: float
    pressure_correction: float
    tries: int
    accepted: int
    acceptance_rate: float
    energy: float
    energy_per_particle: float
    virial: float
    pressure: float

    def format_report(self) -> str:
        """Human readable summary written to standard output."""
        Lx, Ly, Lz = self.box
        return "\n".join([
            f"Minimization: {self.eq_steps}",
            f"Steps: {self.sample_steps}",
            "",
            "# Lennard Jones Params",
            f"epsilon: {self.epsilon}",
            f"sigma: {self.sigma}",
            f"cutoff: {self.cutoff}",
            "",
            "# System",
            f"Particles: {self.n_particles}",
            f"Density: {self.density}",
            f"Temperature: {self.temperature}",
            f"Volume: {self.volume}",
            f"Box dimension: {Lx:.3f}/{Ly:.3f}/{Lz:.3f}",
            f"Max Displacement: {self.displacement}",
            "",
            "# Correction",
            f"Energy correction: {self.energy_correction}",
            f"Shift: {self.energy_shift}",
            f"P-Correction: {self.pressure_correction}",
            "",
            "# Averages",
            f"Tries: {self.tries}",
            f"Accepted: {self.accepted}",
            f"Acceptance: {self.acceptance_rate * 100.0:.2f}%",
            f"Energy: {self.energy}",
            f"Energy per particle: {self.energy_per_particle}",
            f"Virial: {self.virial}",
            f"Pressure: {self.pressure}",
        ])


def metropolis_accept(delta_e: float, temperature: float, rng: np.random.Generator) -> bool:
    """
    Metropolis acceptance rule.

    Downhill moves are always accepted; uphill moves with probability
    exp(-ΔE / T). No random number is drawn for downhill moves.
    """
    if delta_e < 0.0:
        return True
    return rng.random() < np.exp(-delta_e / temperature)


class MonteCarloSimulation:
    """
    Metropolis Monte Carlo engine for a Lennard-Jones fluid.

    The total energy and virial are updated incrementally from single
    particle energy differences and recomputed from scratch every
    resync_interval steps to bound floating point drift.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        rng: Optional[np.random.Generator] = None,
        reporter: Optional[Callable[[ProgressReport], None]] = None,
        trajectory: Optional[TrajectoryWriter] = None
    ):
        self.config = config or SimulationConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.reporter = reporter
        self.trajectory = trajectory

        self.system: Optional[ParticleSystem] = None
        self.state: Optional[SimulationState] = None
        self.controller: Optional[DisplacementController] = None

        self.energy_correction = 0.0
        self.pressure_correction = 0.0
        self.energy_history: List[Tuple[int, float]] = []
        self._last_frame_step: Optional[int] = None

    @property
    def params(self) -> LennardJonesParameters:
        return self.config.lj_params

    def initialize(self, system: Optional[ParticleSystem] = None) -> SimulationState:
        """
        Prepare the particle system, corrections and initial energy.

        Args:
            system: Pre-built configuration; built from the config if None.
                Its coordinates are wrapped into the box.

        Returns:
            Initial simulation state

        Raises:
            ValueError: If the system cutoff differs from the potential cutoff
        """
        cfg = self.config
        if system is None:
            if cfg.initialization == "lattice":
                system = ParticleSystem.lattice(
                    cfg.n_particles, cfg.density, cfg.temperature, self.params.cutoff
                )
            else:
                system = ParticleSystem.random(
                    cfg.n_particles, cfg.density, cfg.temperature, self.params.cutoff, self.rng
                )
            system.apply_vacuum_slab(cfg.vacuum_slab)
        elif system.cutoff != self.params.cutoff:
            raise ValueError(
                f"system cutoff {system.cutoff} does not match the potential cutoff {self.params.cutoff}"
            )
        apply_periodic_boundaries(system.positions, system.box)
        self.system = system

        # Corrections follow the (possibly slab-rescaled) density
        self.energy_correction, self.pressure_correction = self.params.tail_corrections(
            system.density
        )
        self.controller = DisplacementController(
            max_displacement=float(np.min(system.box)) / 2.0,
            target_tries=cfg.target_tries,
            tolerance=cfg.tries_tolerance,
            base_scale=cfg.displacement_scale,
        )

        energy, virial = self.compute_total_energy()
        self.state = SimulationState(
            energy=energy,
            virial=virial,
            displacement=cfg.displacement,
            phase=Phase.SAMPLING if cfg.eq_steps == 0 else Phase.EQUILIBRATING,
        )
        self.energy_history = []
        self._last_frame_step = None

        if np.any(system.box <= 2.0 * system.cutoff):
            logger.warning("Box %s is not larger than twice the cutoff %.3f",
                           system.box, system.cutoff)
        logger.debug("Initialized %d particles, E = %.4f, W = %.4f",
                     system.n_particles, energy, virial)

        if self.trajectory is not None and cfg.record_equilibration:
            self.write_frame()

        return self.state

    def compute_total_energy(self) -> Tuple[float, float]:
        """Total energy (with tail correction) and virial from scratch."""
        return total_energy(
            self.system.positions, self.system.box, self.params, self.energy_correction
        )

    def resync(self) -> None:
        """Overwrite the incrementally tracked totals with exact values."""
        self.state.energy, self.state.virial = self.compute_total_energy()

    def _particle_energy(self, index: int) -> Tuple[float, float]:
        p = self.params
        return particle_energy(
            self.system.positions, index, self.system.box,
            self.system.cutoff_squared, p.epsilon, p.sigma, p.energy_shift
        )

    def trial_move(self) -> bool:
        """
        Propose and accept or reject a single particle displacement.

        Returns:
            True if the move was accepted
        """
        positions = self.system.positions
        box = self.system.box
        state = self.state

        index = int(self.rng.integers(self.system.n_particles))
        old_position = positions[index].copy()
        old_energy, old_virial = self._particle_energy(index)

        offset = (self.rng.random(3) - 0.5) * state.displacement
        for axis in range(3):
            positions[index, axis] = wrap_coordinate(old_position[axis] + offset[axis], box[axis])

        new_energy, new_virial = self._particle_energy(index)
        delta_e = new_energy - old_energy

        if metropolis_accept(delta_e, self.system.temperature, self.rng):
            state.energy += delta_e
            state.virial += new_virial - old_virial
            state.stats.record_acceptance()
            return True

        positions[index] = old_position
        return False

    def step(self) -> SimulationState:
        """
        Perform one trial step with all of its bookkeeping.

        Returns:
            Updated simulation state
        """
        if self.state is None:
            raise RuntimeError("Simulation not initialized")

        cfg = self.config
        state = self.state
        step = state.step + 1  # number of completed trial steps

        self.trial_move()

        if step % cfg.resync_interval == 0:
            self.resync()

        # Every trial counts, rejected or not
        state.stats.record(state.energy, state.virial)

        if step % cfg.history_interval == 0:
            self.energy_history.append((step, state.energy))

        if step % cfg.report_interval == 0:
            self._report(step)

        if (state.phase is Phase.EQUILIBRATING and cfg.scale_displacement
                and step % cfg.scale_interval == 0):
            state.displacement = self.controller.adjust(state.displacement, state.stats)

        if (self.trajectory is not None and cfg.output_interval > 0
                and step % cfg.output_interval == 0
                and (state.phase is Phase.SAMPLING or cfg.record_equilibration)):
            self.write_frame(step)

        if state.phase is Phase.EQUILIBRATING and step == cfg.eq_steps:
            state.stats.reset()
            state.phase = Phase.SAMPLING
            self._report(step, phase_changed=True)

        state.step = step
        return state

    def run(self, n_steps: Optional[int] = None) -> SimulationResults:
        """
        Run the remaining steps (or n_steps of them) and return the results.

        The final configuration is always written to the trajectory once the
        configured total step count is reached.
        """
        if self.state is None:
            self.initialize()

        remaining = self.config.total_steps - self.state.step
        if n_steps is not None:
            remaining = min(remaining, n_steps)

        for _ in range(remaining):
            self.step()

        if (self.trajectory is not None and self.state.step == self.config.total_steps
                and self._last_frame_step != self.state.step):
            self.write_frame(self.state.step)

        return self.results()

    def _report(self, step: int, phase_changed: bool = False) -> None:
        if self.reporter is None:
            return
        stats = self.state.stats
        self.reporter(ProgressReport(
            step=step,
            phase=self.state.phase,
            energy=self.state.energy,
            average_energy=stats.average_energy,
            average_virial=stats.average_virial,
            acceptance_rate=stats.acceptance_rate,
            displacement=self.state.displacement,
            phase_changed=phase_changed,
        ))

    def make_frame(self) -> TrajectoryFrame:
        """Snapshot of the current configuration for the trajectory."""
        p = self.params
        return TrajectoryFrame(
            positions=self.system.positions.copy(),
            box=tuple(float(L) for L in self.system.box),
            temperature=self.system.temperature,
            epsilon=p.epsilon,
            sigma=p.sigma,
            cutoff=p.cutoff,
        )

    def write_frame(self, step: int = 0) -> None:
        self.trajectory.write(self.make_frame())
        self._last_frame_step = step

    def results(self) -> SimulationResults:
        """Averages over the current statistics window (the sampling phase at the end of a run)."""
        if self.state is None:
            raise RuntimeError("Simulation not initialized")

        system = self.system
        stats = self.state.stats
        p = self.params
        average_energy = stats.average_energy

        return SimulationResults(
            eq_steps=self.config.eq_steps,
            sample_steps=self.config.sample_steps,
            epsilon=p.epsilon,
            sigma=p.sigma,
            cutoff=p.cutoff,
            n_particles=system.n_particles,
            density=system.density,
            temperature=system.temperature,
            volume=system.volume,
            box=tuple(float(L) for L in system.box),
            displacement=self.state.displacement,
            energy_correction=self.energy_correction,
            energy_shift=p.energy_shift,
            pressure_correction=self.pressure_correction,
            tries=stats.step_count,
            accepted=stats.accepted_count,
            acceptance_rate=stats.acceptance_rate,
            energy=average_energy,
            energy_per_particle=average_energy / system.n_particles,
            virial=stats.virial_pressure(system.volume),
            pressure=stats.pressure(
                system.volume, system.density, system.temperature, self.pressure_correction
            ),
        )


def create_simulation(
    config: Optional[SimulationConfig] = None,
    rng: Optional[np.random.Generator] = None,
    reporter: Optional[Callable[[ProgressReport], None]] = None,
    trajectory: Optional[TrajectoryWriter] = None
) -> MonteCarloSimulation:
    """
    Create and initialize a simulation from a configuration.

    Returns:
        Initialized MonteCarloSimulation
    """
    sim = MonteCarloSimulation(config, rng=rng, reporter=reporter, trajectory=trajectory)
    sim.initialize()
    return sim
