#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Command Line Interface Tests
================================================================================

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
License:        MIT License
================================================================================
"""

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest
from ljmc.cli import main, surface_tension_main, build_parser, config_from_args
from ljmc.physics import LennardJonesParameters
from ljmc.simulation import SimulationConfig, create_simulation
from ljmc.trajectory import TrajectoryReader
from ljmc.visualization import render_energy_trace, render_density_profile, plot_run_summary


def run_args(prefix, *extra):
    return ["-p", "27", "-d", "0.5", "-t", "1.0", "-m", "100", "-n", "100",
            "--cutoff", "1.5", "--seed", "1", "--init", "lattice",
            "-o", str(prefix), "-q", *extra]


def count_frames(path):
    with TrajectoryReader(path) as reader:
        return len(list(reader))


class TestSimulationCli:
    """Tests for the ljmc entry point."""

    def test_defaults_match_config(self):
        args = build_parser().parse_args([])
        config = config_from_args(args)
        defaults = SimulationConfig()
        assert config.n_particles == defaults.n_particles
        assert config.density == defaults.density
        assert config.eq_steps == defaults.eq_steps
        assert args.cutoff == LennardJonesParameters().cutoff
        assert config.lj_params.cutoff == defaults.lj_params.cutoff
        assert config.lj_params.use_shift and config.lj_params.use_tail_correction

    def test_flags(self):
        args = build_parser().parse_args(
            ["--noshift", "--notailcorr", "--nodisplacementscale", "--writeminimization",
             "--vacuum", "1.5", "--osteps", "-1"]
        )
        config = config_from_args(args)
        assert not config.lj_params.use_shift
        assert not config.lj_params.use_tail_correction
        assert not config.scale_displacement
        assert config.record_equilibration
        assert config.vacuum_slab == 1.5
        assert config.output_interval == -1

    def test_small_run(self, tmp_path, capsys):
        prefix = tmp_path / "run"
        assert main(run_args(prefix, "--osteps", "50")) == 0

        out = capsys.readouterr().out
        assert "Particles: 27" in out
        assert "Pressure:" in out
        assert "Tries: 100" in out
        assert count_frames(f"{prefix}.xyz") == 2

    def test_final_frame_only(self, tmp_path):
        prefix = tmp_path / "final"
        assert main(run_args(prefix, "--osteps", "-1")) == 0
        assert count_frames(f"{prefix}.xyz") == 1

    def test_invalid_density(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(run_args(tmp_path / "bad", "-d", "-1"))
        assert exc.value.code == 2

    def test_negative_steps_rejected(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(run_args(tmp_path / "bad", "-n", "-5"))
        assert exc.value.code == 2

    def test_unwritable_output(self, tmp_path):
        assert main(run_args(tmp_path / "missing" / "run")) == 1

    def test_plot(self, tmp_path):
        png = tmp_path / "summary.png"
        assert main(run_args(tmp_path / "run", "--plot", str(png))) == 0
        assert png.exists()


class TestSurfaceTensionCli:
    """Tests for the ljmc-surface-tension entry point."""

    @pytest.fixture
    def trajectory(self, tmp_path):
        prefix = tmp_path / "slab"
        assert main(run_args(prefix, "--osteps", "4", "--vacuum", "1")) == 0
        return f"{prefix}.xyz"

    def test_running_average_lines(self, trajectory, capsys):
        capsys.readouterr()
        assert surface_tension_main(["-f", trajectory]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[1] == "~~~ THIS IS A RUNNING AVERAGE! ~~~"
        frames = [line for line in lines if line.startswith("Frame")]
        assert [line.split()[1] for line in frames] == ["10", "20"]
        assert all("tension:" in line for line in frames)

    def test_skip_and_interval(self, trajectory, capsys):
        capsys.readouterr()
        assert surface_tension_main(["-f", trajectory, "-s", "5", "--interval", "4"]) == 0
        frames = [line for line in capsys.readouterr().out.splitlines() if line.startswith("Frame")]
        # 25 frames recorded, 20 analyzed
        assert len(frames) == 5

    def test_skip_past_end(self, trajectory):
        assert surface_tension_main(["-f", trajectory, "-s", "100"]) == 1

    def test_missing_file(self, tmp_path):
        assert surface_tension_main(["-f", str(tmp_path / "nothing.xyz")]) == 1

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "bad.xyz"
        path.write_text("2\nbox_x=1 box_y=1\nAr 0 0 0\nAr 0.5 0.5 0.5\n")
        assert surface_tension_main(["-f", str(path)]) == 1

    def test_malformed_file_while_skipping(self, tmp_path):
        path = tmp_path / "bad.xyz"
        path.write_text("two\nbox_x=1 box_y=1 box_z=1\nAr 0 0 0\nAr 0.5 0.5 0.5\n")
        assert surface_tension_main(["-f", str(path), "-s", "1"]) == 1

    def test_invalid_interval(self, trajectory):
        with pytest.raises(SystemExit) as exc:
            surface_tension_main(["-f", trajectory, "--interval", "0"])
        assert exc.value.code == 2


class TestVisualization:
    """Tests for the summary plots."""

    def test_energy_trace(self):
        fig = render_energy_trace([(10, -50.0), (20, -55.0)], eq_steps=15, n_particles=10)
        assert fig is not None
        assert len(fig.axes[0].lines) == 2
        plt.close(fig)

    def test_empty_history(self):
        fig = render_energy_trace([])
        assert fig is not None
        plt.close(fig)

    def test_density_profile(self):
        box = np.array([3.0, 3.0, 6.0])
        positions = np.random.default_rng(0).random((30, 3)) * box
        fig = render_density_profile(positions, box, n_bins=12)
        assert fig.axes[0].get_xlim() == (0.0, 6.0)
        plt.close(fig)

    def test_run_summary(self, tmp_path):
        config = SimulationConfig(
            n_particles=27, density=0.5, eq_steps=50, sample_steps=50,
            history_interval=10, initialization="lattice", seed=3,
        )
        sim = create_simulation(config)
        sim.run()

        fig = plot_run_summary(sim, str(tmp_path / "summary.png"))
        assert len(fig.axes) == 2
        assert (tmp_path / "summary.png").exists()
        plt.close(fig)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
