#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Lennard-Jones Potential and Periodic Geometry
================================================================================

Project:        Lennard-Jones Monte Carlo
Module:         physics.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

This module implements the pairwise Lennard-Jones energy and virial used by
the Monte Carlo engine, together with the minimum image convention for a
rectangular periodic box.

The potential is:
    V(r) = 4ε [(σ/r)¹² - (σ/r)⁶] - V_shift

and the pair virial (r · F) is:
    w(r) = 24ε [2(σ/r)¹² - (σ/r)⁶]

Interactions are truncated at the cutoff radius r_c. The optional shift makes
the potential vanish exactly at r_c, and the optional tail corrections add the
contribution of the neglected interactions beyond r_c assuming a uniform
density there.
"""

import numpy as np
from numba import jit
from typing import Tuple
from dataclasses import dataclass


@dataclass
class LennardJonesParameters:
    """
    Parameters of the truncated Lennard-Jones potential.

    Default values are in reduced units (σ = ε = 1).
    """
    epsilon: float = 1.0             # Potential well depth
    sigma: float = 1.0               # Zero-crossing distance
    cutoff: float = 3.0              # Truncation radius
    use_shift: bool = True           # Subtract V(r_c) from every pair energy
    use_tail_correction: bool = True # Add long-range corrections

    def __post_init__(self):
        if self.cutoff <= 0:
            raise ValueError(f"cutoff must be positive, got {self.cutoff}")
        if self.sigma <= 0:
            raise ValueError(f"sigma must be positive, got {self.sigma}")
        if self.epsilon < 0:
            raise ValueError(f"epsilon must be non-negative, got {self.epsilon}")

    @property
    def cutoff_squared(self) -> float:
        return self.cutoff * self.cutoff

    @property
    def energy_shift(self) -> float:
        """Value of the unshifted potential at the cutoff (0 if disabled)."""
        if not self.use_shift:
            return 0.0
        return lennard_jones_potential(self.cutoff, self.epsilon, self.sigma)

    def tail_corrections(self, density: float) -> Tuple[float, float]:
        """
        Long-range corrections for a uniform fluid beyond the cutoff.

        Args:
            density: Number density of the system

        Returns:
            (energy_correction, pressure_correction): energy correction per
            particle and the additive pressure correction. Both are zero when
            tail corrections are disabled.
        """
        if not self.use_tail_correction:
            return 0.0, 0.0

        sr3 = (self.sigma / self.cutoff) ** 3
        sr9 = sr3 ** 3
        sigma3 = self.sigma ** 3

        energy_correction = (8.0 / 3.0 * np.pi * density * self.epsilon * sigma3
                             * (sr9 / 3.0 - sr3))
        pressure_correction = (16.0 / 3.0 * np.pi * density ** 2 * self.epsilon * sigma3
                               * (2.0 / 3.0 * sr9 - sr3))
        return energy_correction, pressure_correction


@jit(nopython=True, cache=True)
def lennard_jones_potential(r: float, epsilon: float, sigma: float) -> float:
    """
    Unshifted, untruncated Lennard-Jones energy V(r) = 4ε [(σ/r)¹² - (σ/r)⁶].
    """
    sr6 = (sigma / r) ** 6
    return 4.0 * epsilon * (sr6 * sr6 - sr6)


@jit(nopython=True, cache=True)
def lennard_jones_derivative(r: float, epsilon: float, sigma: float) -> float:
    """
    Radial derivative dV/dr = 24ε/σ [(σ/r)⁷ - 2(σ/r)¹³].

    Negative of the force magnitude: positive values mean attraction.
    """
    sr = sigma / r
    sr7 = sr ** 7
    sr13 = sr7 * sr ** 6
    return 24.0 * epsilon / sigma * (sr7 - 2.0 * sr13)


@jit(nopython=True, cache=True)
def minimum_image(d: float, length: float) -> float:
    """
    Fold a raw coordinate difference into [-L/2, L/2).

    A single box-length correction is applied, which is enough as long as
    both coordinates lie inside [0, L).
    """
    half = 0.5 * length
    if d >= half:
        d -= length
    elif d < -half:
        d += length
    return d


@jit(nopython=True, cache=True)
def minimum_image_separation(a: float, b: float, length: float) -> float:
    """Signed minimum-image separation a - b along one axis."""
    return minimum_image(a - b, length)


@jit(nopython=True, cache=True)
def minimum_image_distance_squared(
    pos1: np.ndarray,
    pos2: np.ndarray,
    box: np.ndarray
) -> float:
    """
    Squared minimum-image distance between two 3D positions.

    Args:
        pos1: Position of first particle (x, y, z)
        pos2: Position of second particle (x, y, z)
        box: (Lx, Ly, Lz) box dimensions
    """
    r_sq = 0.0
    for axis in range(3):
        d = minimum_image(pos1[axis] - pos2[axis], box[axis])
        r_sq += d * d
    return r_sq


@jit(nopython=True, cache=True)
def pair_energy_and_virial(
    r_sq: float,
    cutoff_sq: float,
    epsilon: float,
    sigma: float,
    shift: float
) -> Tuple[float, float]:
    """
    Truncated pair energy and virial for a squared separation.

    Args:
        r_sq: Squared pair distance
        cutoff_sq: Squared cutoff radius
        epsilon: LJ epsilon parameter
        sigma: LJ sigma parameter
        shift: Energy shift subtracted inside the cutoff (0 to disable)

    Returns:
        (energy, virial), both zero beyond the cutoff
    """
    if r_sq > cutoff_sq:
        return 0.0, 0.0

    sr2 = sigma * sigma / r_sq
    sr6 = sr2 * sr2 * sr2
    sr12 = sr6 * sr6

    energy = 4.0 * epsilon * (sr12 - sr6) - shift
    virial = 24.0 * epsilon * (2.0 * sr12 - sr6)
    return energy, virial


@jit(nopython=True, cache=True)
def particle_energy(
    positions: np.ndarray,
    index: int,
    box: np.ndarray,
    cutoff_sq: float,
    epsilon: float,
    sigma: float,
    shift: float
) -> Tuple[float, float]:
    """
    Energy and virial of one particle against every other particle.

    Args:
        positions: Nx3 array of positions
        index: Particle whose interactions are summed
        box: (Lx, Ly, Lz) box dimensions
        cutoff_sq: Squared cutoff radius
        epsilon: LJ epsilon parameter
        sigma: LJ sigma parameter
        shift: Energy shift

    Returns:
        (energy, virial) of the particle
    """
    n_particles = positions.shape[0]
    energy = 0.0
    virial = 0.0

    for j in range(n_particles):
        if j == index:
            continue
        r_sq = minimum_image_distance_squared(positions[index], positions[j], box)
        e, w = pair_energy_and_virial(r_sq, cutoff_sq, epsilon, sigma, shift)
        energy += e
        virial += w

    return energy, virial


@jit(nopython=True, cache=True)
def pair_sum(
    positions: np.ndarray,
    box: np.ndarray,
    cutoff_sq: float,
    epsilon: float,
    sigma: float,
    shift: float
) -> Tuple[float, float]:
    """
    Energy and virial summed over all unique pairs (each pair counted once).
    """
    n_particles = positions.shape[0]
    energy = 0.0
    virial = 0.0

    for i in range(n_particles):
        for j in range(i + 1, n_particles):
            r_sq = minimum_image_distance_squared(positions[i], positions[j], box)
            e, w = pair_energy_and_virial(r_sq, cutoff_sq, epsilon, sigma, shift)
            energy += e
            virial += w

    return energy, virial


def total_energy(
    positions: np.ndarray,
    box: np.ndarray,
    params: LennardJonesParameters,
    energy_correction: float = 0.0
) -> Tuple[float, float]:
    """
    From-scratch total energy and virial of a configuration.

    This is the O(N²) reference used at startup and for drift correction.

    Args:
        positions: Nx3 array of positions
        box: (Lx, Ly, Lz) box dimensions
        params: Potential parameters
        energy_correction: Tail correction per particle, added N times

    Returns:
        (energy, virial)
    """
    energy, virial = pair_sum(
        positions, box,
        params.cutoff_squared, params.epsilon, params.sigma, params.energy_shift
    )
    return energy + positions.shape[0] * energy_correction, virial


def wrap_coordinate(x: float, length: float) -> float:
    """Wrap a single coordinate into [0, L)."""
    x = x % length
    # x % L can round up to exactly L for tiny negative x
    if x >= length:
        x -= length
    return x


def apply_periodic_boundaries(positions: np.ndarray, box: np.ndarray) -> np.ndarray:
    """
    Apply periodic boundary conditions to positions in place.

    Args:
        positions: Nx3 array of positions
        box: (Lx, Ly, Lz) simulation box dimensions

    Returns:
        Wrapped positions
    """
    box = np.asarray(box, dtype=np.float64)
    np.mod(positions, box, out=positions)
    positions -= np.where(positions >= box, box, 0.0)
    return positions
