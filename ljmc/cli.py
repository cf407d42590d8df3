#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Lennard-Jones Monte Carlo - Command Line Interface
================================================================================

Project:        Lennard-Jones Monte Carlo
Module:         cli.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

Command line entry points:
    ljmc                   Run a Monte Carlo simulation
    ljmc-surface-tension   Analyze a recorded trajectory

Progress goes to stderr; the final report goes to stdout.
"""

import argparse
import itertools
import logging
import sys
from typing import List, Optional

from .physics import LennardJonesParameters
from .simulation import (
    MonteCarloSimulation, SimulationConfig, ProgressReport, Phase, FINAL_FRAME_ONLY
)
from .surface_tension import SurfaceTensionAnalyzer
from .trajectory import TrajectoryReader, TrajectoryWriter, TrajectoryFormatError

logger = logging.getLogger("ljmc")

BANNER_WIDTH = 64


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Send package diagnostics to stderr."""
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False


def log_banner(title: str) -> None:
    logger.info("")
    logger.info("#" * BANNER_WIDTH)
    logger.info(f"  {title}  ".center(BANNER_WIDTH, "#"))
    logger.info("#" * BANNER_WIDTH)
    logger.info("")


def log_progress(report: ProgressReport) -> None:
    """Reporting hook: one progress line per checkpoint."""
    if report.phase_changed:
        log_banner("Sampling")
    elif report.phase is Phase.EQUILIBRATING:
        logger.info(
            f"Eq {report.step:<10} Energy: {report.average_energy:<30.3f} "
            f"Virial: {report.average_virial:<30.3f} "
            f"Accept.: {report.acceptance_rate * 100.0:<4.1f}%   dr: {report.displacement:.3f}"
        )
    else:
        logger.info(f"Step  {report.step:<10} Energy: {report.energy:<30.3f}")


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    defaults = SimulationConfig()
    parser = argparse.ArgumentParser(
        prog="ljmc",
        description="Lennard-Jones Metropolis Monte Carlo simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ljmc -p 256 -d 0.8 -t 1.0              Bulk liquid
  ljmc --vacuum 1 -o slab --osteps 500   Liquid slab for surface tension
        """
    )

    parser.add_argument('-n', '--nsteps', type=non_negative_int, default=defaults.sample_steps,
                        help='Sampling steps: number of steps for averaging (default: 100000)')
    parser.add_argument('-m', '--nminimsteps', type=non_negative_int, default=defaults.eq_steps,
                        help='Equilibration steps before averaging starts (default: 1000000)')
    parser.add_argument('-p', '--nparticles', type=int, default=defaults.n_particles,
                        help='Total number of particles (default: 512)')
    parser.add_argument('-d', '--density', type=float, default=defaults.density,
                        help='Particle density (default: 0.7)')
    parser.add_argument('-t', '--temperature', type=float, default=defaults.temperature,
                        help='Temperature (default: 0.9)')
    parser.add_argument('--cutoff', type=float, default=defaults.lj_params.cutoff,
                        help='Lennard-Jones cutoff radius in units of sigma (default: %(default)s)')
    parser.add_argument('--displacement', type=float, default=defaults.displacement,
                        help='Initial displacement per trial move (default: 0.1)')
    parser.add_argument('--nodisplacementscale', dest='scale', action='store_false',
                        help='Disable displacement scaling')
    parser.add_argument('--notailcorr', dest='tailcorr', action='store_false',
                        help='Disable tail correction')
    parser.add_argument('--noshift', dest='shift', action='store_false',
                        help='Disable potential shifting')
    parser.add_argument('-o', '--output', default='montecarlo',
                        help='Output file prefix, .xyz is appended (default: montecarlo)')
    parser.add_argument('--osteps', type=int, default=defaults.output_interval,
                        help=f'Steps between trajectory frames, {FINAL_FRAME_ONLY} writes only the last frame')
    parser.add_argument('--writeminimization', action='store_true',
                        help='Also write equilibration frames to the trajectory')
    parser.add_argument('--vacuum', type=float, default=0.0,
                        help='Vacuum space above the system relative to its height '
                             '(0 = no slab, 1 = half filled, 2 = third filled, ...)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed (default: fresh entropy)')
    parser.add_argument('--init', choices=('random', 'lattice'), default='random',
                        help='Initial placement of the particles (default: random)')
    parser.add_argument('--plot', metavar='FILE', default=None,
                        help='Save an energy trace and density profile figure')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug output')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only warnings and errors')
    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    """Translate parsed options into a SimulationConfig (raises ValueError)."""
    return SimulationConfig(
        sample_steps=args.nsteps,
        eq_steps=args.nminimsteps,
        n_particles=args.nparticles,
        density=args.density,
        temperature=args.temperature,
        vacuum_slab=args.vacuum,
        initialization=args.init,
        lj_params=LennardJonesParameters(
            cutoff=args.cutoff,
            use_shift=args.shift,
            use_tail_correction=args.tailcorr,
        ),
        displacement=args.displacement,
        scale_displacement=args.scale,
        output_interval=args.osteps,
        record_equilibration=args.writeminimization,
        seed=args.seed,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the simulation CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    log_banner("LJ Monte Carlo Simulation")

    path = f"{args.output}.xyz"
    try:
        writer = TrajectoryWriter(path)
    except OSError as e:
        logger.error(f"Cannot open trajectory file {path}: {e}")
        return 1

    with writer:
        sim = MonteCarloSimulation(config, reporter=log_progress, trajectory=writer)
        sim.initialize()

        system = sim.system
        p = config.lj_params
        Lx, Ly, Lz = system.box
        logger.info(f"Particles: {system.n_particles}, Density: {system.density}, "
                    f"Temperature: {system.temperature}")
        logger.info(f"System volume: {system.volume:8.3f}, Dimensions {Lx:.3f}/{Ly:.3f}/{Lz:.3f}")
        logger.info(f"Minimization steps: {config.eq_steps}, Sampling steps: {config.sample_steps}")
        logger.info(f"LJ params eps: {p.epsilon}, sigma: {p.sigma}, cutoff: {p.cutoff}")
        logger.info(f"Tailcorr: {sim.energy_correction:8.3f}, Shift: {p.energy_shift:8.3f}, "
                    f"Pressurecorr: {sim.pressure_correction:8.3f}")

        if config.eq_steps > 0:
            log_banner("Equilibration")
        else:
            log_banner("Sampling")

        results = sim.run()

    logger.info("Done sampling!")
    log_banner("Results")
    print(results.format_report())

    if args.plot:
        import matplotlib.pyplot as plt
        from .visualization import plot_run_summary

        fig = plot_run_summary(sim, args.plot)
        plt.close(fig)
        logger.info(f"Plot saved to {args.plot}")

    return 0


def build_surface_tension_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ljmc-surface-tension",
        description="Surface tension from the pressure tensor of a recorded trajectory",
    )
    parser.add_argument('-f', '--file', default='montecarlo.xyz',
                        help='Trajectory file (default: montecarlo.xyz)')
    parser.add_argument('-s', '--skip', type=non_negative_int, default=0,
                        help='Number of leading frames to skip (default: 0)')
    parser.add_argument('--use-cutoff', action='store_true',
                        help='Truncate the pair virial at the cutoff stored in the trajectory')
    parser.add_argument('--interval', type=int, default=10,
                        help='Frames between running average reports (default: 10)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug output')
    return parser


def surface_tension_main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the surface tension analyzer CLI."""
    parser = build_surface_tension_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.interval < 1:
        parser.error("--interval must be at least 1")

    try:
        reader = TrajectoryReader(args.file, skip=args.skip)
    except OSError as e:
        logger.error(f"Cannot open trajectory file {args.file}: {e}")
        return 1
    except TrajectoryFormatError as e:
        logger.error(f"Invalid trajectory {args.file}: {e}")
        return 1

    analyzer = SurfaceTensionAnalyzer(use_cutoff=args.use_cutoff, report_interval=args.interval)

    with reader:
        try:
            if not reader.advance():
                logger.error(f"No frames left in {args.file} after skipping {args.skip}")
                return 1

            first = reader.frame
            Lx, Ly, Lz = first.box
            print(f"Particles: {first.n_particles}, Box: {Lx:.3f}/{Ly:.3f}/{Lz:.3f}, "
                  f"Temperature: {first.temperature}, epsilon: {first.epsilon}, "
                  f"sigma: {first.sigma}, cutoff: {first.cutoff}")
            print("~~~ THIS IS A RUNNING AVERAGE! ~~~")

            for frame in itertools.chain([first], reader):
                estimate = analyzer.add_frame(frame)
                if estimate is not None:
                    print(estimate.format_line())
        except TrajectoryFormatError as e:
            logger.error(f"Invalid trajectory {args.file}: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
