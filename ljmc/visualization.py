#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Run Summary Plots
================================================================================

Project:        Lennard-Jones Monte Carlo
Module:         visualization.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

Matplotlib plots for inspecting a finished Monte Carlo run:
- Energy trace over the trial steps, with the start of sampling marked
- Density profile along z (shows the liquid slab and its interfaces)
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import Optional, Sequence, Tuple

from .thermodynamics import density_profile


def render_energy_trace(
    history: Sequence[Tuple[int, float]],
    eq_steps: int = 0,
    n_particles: int = 1,
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Render energy per particle vs trial step.

    Args:
        history: (step, total energy) pairs
        eq_steps: Length of the equilibration phase, marked with a line
        n_particles: Number of particles for per-particle normalization
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(10, 4))
    else:
        fig = ax.figure

    ax.clear()
    if len(history) > 0:
        steps, energies = np.array(history, dtype=np.float64).T
        ax.plot(steps, energies / n_particles, 'b-', linewidth=1.0)
    if eq_steps > 0:
        ax.axvline(x=eq_steps, color='red', linestyle='--', alpha=0.5, label='Sampling starts')
        ax.legend(loc='best')

    ax.set_xlabel('Trial step')
    ax.set_ylabel('Energy per particle')
    ax.set_title('Energy vs Step')
    ax.grid(True, alpha=0.3)

    return fig


def render_density_profile(
    positions: np.ndarray,
    box: np.ndarray,
    n_bins: int = 50,
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Render the number density along z.

    Args:
        positions: Nx3 array of positions
        box: (Lx, Ly, Lz) box dimensions
        n_bins: Number of slabs along z
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(8, 4))
    else:
        fig = ax.figure

    z, rho = density_profile(positions, box, n_bins)

    ax.clear()
    ax.step(z, rho, where='mid', color='purple')
    ax.set_xlim(0.0, box[2])
    ax.set_xlabel('z')
    ax.set_ylabel('Density')
    ax.set_title('Density Profile')
    ax.grid(True, alpha=0.3)

    return fig


def plot_run_summary(sim, filename: Optional[str] = None) -> plt.Figure:
    """
    Two panel summary of a simulation: energy trace and z density profile.

    Args:
        sim: Finished MonteCarloSimulation
        filename: Save the figure here if given

    Returns:
        Matplotlib figure
    """
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    render_energy_trace(
        sim.energy_history, sim.config.eq_steps, sim.system.n_particles, ax=axes[0]
    )
    render_density_profile(sim.system.positions, sim.system.box, ax=axes[1])

    plt.tight_layout()
    if filename is not None:
        fig.savefig(filename, dpi=150)
    return fig
