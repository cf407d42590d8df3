#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Running Averages and Displacement Control
================================================================================

Project:        Lennard-Jones Monte Carlo
Module:         thermodynamics.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

This module handles the thermodynamic bookkeeping of a Monte Carlo run:
- Running sums of energy and virial over a statistics window
- Acceptance statistics and the derived pressure
- Adaptive tuning of the trial displacement toward a target acceptance rate
- Density profile along z (for vacuum slab systems)
"""

import logging
import numpy as np
from typing import Tuple
from dataclasses import dataclass

logger = logging.getLogger(__name__)


# Reference controller settings: 3 tries per accepted move (~33% acceptance)
TARGET_TRIES_PER_ACCEPTANCE = 3.0
TRIES_TOLERANCE = 0.2
DISPLACEMENT_SCALE_FACTOR = 0.1


@dataclass
class StatisticsAccumulator:
    """
    Running sums over the current statistics window.

    The window is cleared by two independent triggers: the start of the
    sampling phase and every displacement scaling decision.
    """
    step_count: int = 0
    accepted_count: int = 0
    energy_sum: float = 0.0
    virial_sum: float = 0.0

    def record(self, energy: float, virial: float) -> None:
        """Add the current totals of one trial step to the window."""
        self.step_count += 1
        self.energy_sum += energy
        self.virial_sum += virial

    def record_acceptance(self) -> None:
        self.accepted_count += 1

    def reset(self) -> None:
        self.step_count = 0
        self.accepted_count = 0
        self.energy_sum = 0.0
        self.virial_sum = 0.0

    @property
    def average_energy(self) -> float:
        if self.step_count == 0:
            return 0.0
        return self.energy_sum / self.step_count

    @property
    def average_virial(self) -> float:
        if self.step_count == 0:
            return 0.0
        return self.virial_sum / self.step_count

    @property
    def acceptance_rate(self) -> float:
        """Fraction of accepted trial moves (0.0 for an empty window)."""
        if self.step_count == 0:
            return 0.0
        return self.accepted_count / self.step_count

    @property
    def tries_per_acceptance(self) -> float:
        """Trial moves per accepted move; infinite when nothing was accepted."""
        if self.accepted_count == 0:
            return np.inf
        return self.step_count / self.accepted_count

    def pressure(
        self,
        volume: float,
        density: float,
        temperature: float,
        pressure_correction: float = 0.0
    ) -> float:
        """
        Pressure from the virial theorem.

        P = <W> / (3V) + ρT + P_tail
        """
        return (self.virial_pressure(volume)
                + density * temperature + pressure_correction)

    def virial_pressure(self, volume: float) -> float:
        """Excess (virial) part of the pressure, <W> / (3V)."""
        return self.average_virial / (3.0 * volume)


@dataclass
class DisplacementController:
    """
    Adapts the maximum trial displacement toward a target acceptance rate.

    The displacement grows when moves are accepted too often and shrinks when
    they are rejected too often. It never exceeds max_displacement (half the
    box length) and never reaches zero.
    """
    max_displacement: float
    target_tries: float = TARGET_TRIES_PER_ACCEPTANCE
    tolerance: float = TRIES_TOLERANCE
    base_scale: float = DISPLACEMENT_SCALE_FACTOR

    def scale_factor(self, tries_per_acceptance: float) -> float:
        """
        Relative change applied to the displacement.

        A window without accepted moves has infinite tries per acceptance;
        it is given the base scale so the displacement still shrinks.
        """
        if np.isinf(tries_per_acceptance):
            return self.base_scale
        return abs(self.target_tries / tries_per_acceptance * self.base_scale)

    def adjust(self, displacement: float, stats: StatisticsAccumulator) -> float:
        """
        Make one scaling decision and clear the statistics window.

        Args:
            displacement: Current maximum trial displacement
            stats: Statistics window since the last decision

        Returns:
            The new displacement
        """
        tries = stats.tries_per_acceptance
        factor = self.scale_factor(tries)

        if tries < self.target_tries - self.tolerance and displacement < self.max_displacement:
            displacement = min(displacement + displacement * factor, self.max_displacement)
        elif tries > self.target_tries + self.tolerance and displacement > 0.0:
            displacement -= displacement * factor

        logger.debug("Scaling checkpoint: tries/accept %.3f, displacement -> %.4f",
                     tries, displacement)

        stats.reset()
        return displacement


def density_profile(
    positions: np.ndarray,
    box: np.ndarray,
    n_bins: int = 50
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Number density along z, averaged over the xy plane.

    Args:
        positions: Nx3 array of positions
        box: (Lx, Ly, Lz) box dimensions
        n_bins: Number of slabs along z

    Returns:
        z: Slab centers
        rho: Number density in each slab
    """
    Lx, Ly, Lz = box
    counts, edges = np.histogram(positions[:, 2], bins=n_bins, range=(0.0, Lz))
    dz = Lz / n_bins
    z = 0.5 * (edges[:-1] + edges[1:])
    return z, counts / (Lx * Ly * dz)
