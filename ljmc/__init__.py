#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Lennard-Jones Monte Carlo
================================================================================

Project:        Lennard-Jones Monte Carlo
Description:    Metropolis Monte Carlo sampling of a Lennard-Jones fluid with
                surface tension analysis of liquid slabs

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

This package implements an NVT Monte Carlo sampler featuring:
- Truncated and shifted Lennard-Jones potential with tail corrections
- Periodic boundary conditions with the minimum image convention
- Adaptive trial displacement tuned toward ~33% acceptance
- Optional vacuum slab for liquid-vapor interface studies
- Pressure tensor analysis of recorded trajectories

Modules:
    - physics: Lennard-Jones energy, virial and periodic geometry
    - simulation: Metropolis engine and run configuration
    - thermodynamics: Running averages, pressure and displacement control
    - trajectory: XYZ trajectory reading and writing
    - surface_tension: Pressure tensor anisotropy and surface tension
    - visualization: Energy trace and density profile plots
    - cli: Command line entry points
"""

__version__ = "1.0.0"
__author__ = "Ryan Kamp"
