#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Surface Tension from the Pressure Tensor
================================================================================

Project:        Lennard-Jones Monte Carlo
Module:         surface_tension.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

Mechanical route to the surface tension of a liquid slab with two interfaces
normal to z (Kirkwood-Buff):

    γ = (L_z / 2) [P_zz - (P_xx + P_yy) / 2]

The diagonal pressure tensor components are obtained per frame from the
pairwise virial:

    P_xy = ρT/ε - 1/(2V) Σ (dx² + dy²) / r · dV/dr
    P_zz = ρT/ε - 1/V    Σ  dz²        / r · dV/dr

and averaged over every frame processed so far.
"""

import logging
import numpy as np
from numba import jit
from typing import Iterable, List, Optional, Tuple
from dataclasses import dataclass

from .physics import lennard_jones_derivative, minimum_image
from .trajectory import TrajectoryFrame

logger = logging.getLogger(__name__)


@jit(nopython=True, cache=True)
def pressure_tensor_traces(
    positions: np.ndarray,
    box: np.ndarray,
    epsilon: float,
    sigma: float,
    cutoff_sq: float
) -> Tuple[float, float]:
    """
    Lateral and normal virial traces summed over all unique pairs.

    Args:
        positions: Nx3 array of positions
        box: (Lx, Ly, Lz) box dimensions
        epsilon: LJ epsilon parameter
        sigma: LJ sigma parameter
        cutoff_sq: Squared cutoff (np.inf for no truncation)

    Returns:
        (trace_xy, trace_z)
    """
    n_particles = positions.shape[0]
    trace_xy = 0.0
    trace_z = 0.0

    for i in range(n_particles):
        for j in range(i + 1, n_particles):
            dx = minimum_image(positions[i, 0] - positions[j, 0], box[0])
            dy = minimum_image(positions[i, 1] - positions[j, 1], box[1])
            dz = minimum_image(positions[i, 2] - positions[j, 2], box[2])

            r_sq = dx * dx + dy * dy + dz * dz
            if r_sq > cutoff_sq:
                continue

            r = np.sqrt(r_sq)
            dvdr = lennard_jones_derivative(r, epsilon, sigma)
            trace_xy += (dx * dx + dy * dy) / r * dvdr
            trace_z += dz * dz / r * dvdr

    return trace_xy, trace_z


def surface_tension(box_z: float, p_zz: float, p_xy: float) -> float:
    """γ = (L_z / 2)(P_zz - P_xy) for a slab with two interfaces."""
    return box_z / 2.0 * (p_zz - p_xy)


@dataclass
class SurfaceTensionEstimate:
    """Running averages after a given number of frames."""
    frame: int
    p_zz: float
    p_xy: float
    surface_tension: float

    @property
    def difference(self) -> float:
        return self.p_zz - self.p_xy

    def format_line(self) -> str:
        return (f"Frame {self.frame}\t\tzz: {self.p_zz:.5f}\txy: {self.p_xy:.5f}"
                f"\tdifference: {self.difference:.5f}\t\ttension: {self.surface_tension:.5f}")


class SurfaceTensionAnalyzer:
    """
    Accumulates pressure tensor components over a stream of frames.

    The averages are cumulative over every frame seen and are never reset.
    By default the pair virial is not truncated at the simulation cutoff;
    pass use_cutoff=True to apply the cutoff stored in each frame.
    """

    def __init__(self, use_cutoff: bool = False, report_interval: int = 10):
        if report_interval < 1:
            raise ValueError(f"report_interval must be at least 1, got {report_interval}")
        self.use_cutoff = use_cutoff
        self.report_interval = report_interval

        self.frame_count = 0
        self.p_xy_sum = 0.0
        self.p_zz_sum = 0.0
        self.box_z = 0.0

    def frame_pressures(self, frame: TrajectoryFrame) -> Tuple[float, float]:
        """
        Lateral and normal pressure of a single frame.

        Returns:
            (p_xy, p_zz)
        """
        box = np.asarray(frame.box, dtype=np.float64)
        cutoff_sq = frame.cutoff ** 2 if self.use_cutoff else np.inf
        trace_xy, trace_z = pressure_tensor_traces(
            np.ascontiguousarray(frame.positions, dtype=np.float64), box,
            frame.epsilon, frame.sigma, cutoff_sq
        )

        volume = frame.volume
        ideal = frame.temperature / frame.epsilon * frame.density
        p_xy = ideal - trace_xy / (2.0 * volume)
        p_zz = ideal - trace_z / volume
        return p_xy, p_zz

    def add_frame(self, frame: TrajectoryFrame) -> Optional[SurfaceTensionEstimate]:
        """
        Process one frame.

        Returns:
            The running estimate every report_interval frames, else None
        """
        p_xy, p_zz = self.frame_pressures(frame)
        self.frame_count += 1
        self.p_xy_sum += p_xy
        self.p_zz_sum += p_zz
        self.box_z = frame.box[2]

        if self.frame_count % self.report_interval == 0:
            return self.estimate
        return None

    @property
    def estimate(self) -> SurfaceTensionEstimate:
        """Running estimate over all frames processed so far."""
        if self.frame_count == 0:
            raise RuntimeError("No frames analyzed yet")
        p_xy = self.p_xy_sum / self.frame_count
        p_zz = self.p_zz_sum / self.frame_count
        return SurfaceTensionEstimate(
            frame=self.frame_count,
            p_zz=p_zz,
            p_xy=p_xy,
            surface_tension=surface_tension(self.box_z, p_zz, p_xy),
        )

    def analyze(self, frames: Iterable[TrajectoryFrame]) -> List[SurfaceTensionEstimate]:
        """Process a frame stream and collect the periodic estimates."""
        estimates = []
        for frame in frames:
            estimate = self.add_frame(frame)
            if estimate is not None:
                logger.debug("Running average after %d frames: γ = %.5f",
                             estimate.frame, estimate.surface_tension)
                estimates.append(estimate)
        return estimates
