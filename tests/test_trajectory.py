#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Trajectory Module Tests
================================================================================

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
License:        MIT License
================================================================================
"""

import numpy as np
import pytest
from ljmc.trajectory import (
    TrajectoryFrame,
    TrajectoryReader,
    TrajectoryWriter,
    TrajectoryFormatError,
    format_coordinate,
    parse_metadata
)


def make_frames(k=3, n=5, seed=0):
    rng = np.random.default_rng(seed)
    box = (4.0, 4.5, 9.0)
    return [
        TrajectoryFrame(
            positions=rng.random((n, 3)) * np.array(box),
            box=box,
            temperature=0.9,
            epsilon=1.0,
            sigma=1.0,
            cutoff=2.5,
        )
        for _ in range(k)
    ]


def write_frames(path, frames):
    with TrajectoryWriter(path) as writer:
        for frame in frames:
            writer.write(frame)
    return path


class TestTrajectoryFrame:
    """Tests for the frame container and its text form."""

    def test_derived_quantities(self):
        frame = make_frames(1, n=9)[0]
        assert frame.n_particles == 9
        assert frame.volume == pytest.approx(4.0 * 4.5 * 9.0)
        assert frame.density == pytest.approx(9 / frame.volume)

    def test_xyz_layout(self):
        frame = TrajectoryFrame(
            positions=np.array([[1.0, 2.0, 3.0]]),
            box=(np.float64(5.0), 5.0, 10.0),
            temperature=0.9,
        )
        lines = frame.to_xyz().splitlines()
        assert lines[0] == "1"
        assert lines[1] == ("box_x=5.0 box_y=5.0 box_z=10.0 temperature=0.9 "
                            "epsilon=1.0 sigma=1.0 cutoff=3.0")
        assert lines[2].split() == ["Ar", "1.0000000000", "2.0000000000", "3.0000000000"]

    def test_coordinate_rounding_stays_in_box(self):
        """A coordinate that rounds up to L is written as its image at 0."""
        frame = TrajectoryFrame(
            positions=np.array([[10.0 - 1e-12, 2.5, 10.0 - 1e-3]]),
            box=(10.0, 10.0, 10.0),
            temperature=1.0,
        )
        coords = frame.to_xyz().splitlines()[2].split()[1:]
        assert coords == ["0.0000000000", "2.5000000000", "9.9990000000"]

    def test_format_coordinate(self):
        assert format_coordinate(3.25, 5.0) == "3.2500000000"
        assert format_coordinate(5.0 - 1e-13, 5.0) == "0.0000000000"


class TestParseMetadata:
    """Tests for the comment line parser."""

    def test_round_trip_keys(self):
        meta = parse_metadata("box_x=1 box_y=2 box_z=3 temperature=0.5 epsilon=1 sigma=1 cutoff=2.5")
        assert meta["box_z"] == 3.0
        assert meta["cutoff"] == 2.5

    def test_missing_key(self):
        with pytest.raises(TrajectoryFormatError):
            parse_metadata("box_x=1 box_y=2 temperature=0.5")

    def test_bad_value(self):
        with pytest.raises(TrajectoryFormatError):
            parse_metadata("box_x=abc box_y=2 box_z=3 temperature=0.5 epsilon=1 sigma=1 cutoff=2.5")


class TestRoundTrip:
    """Writing K frames and reading them back."""

    def test_write_then_read(self, tmp_path):
        frames = make_frames(4)
        path = write_frames(tmp_path / "traj.xyz", frames)

        with TrajectoryReader(path) as reader:
            read = list(reader)

        assert len(read) == 4
        for written, loaded in zip(frames, read):
            assert loaded.n_particles == written.n_particles
            assert loaded.box == written.box
            assert loaded.temperature == written.temperature
            assert loaded.cutoff == written.cutoff
            assert np.allclose(loaded.positions, written.positions, atol=1e-9)

    def test_writer_counts_frames(self, tmp_path):
        with TrajectoryWriter(tmp_path / "traj.xyz") as writer:
            for frame in make_frames(3):
                writer.write(frame)
            assert writer.frames_written == 3

    def test_writer_truncates(self, tmp_path):
        path = write_frames(tmp_path / "traj.xyz", make_frames(3))
        write_frames(path, make_frames(1))
        with TrajectoryReader(path) as reader:
            assert len(list(reader)) == 1


class TestTrajectoryReader:
    """Tests for sequential reading."""

    def test_advance_until_end(self, tmp_path):
        path = write_frames(tmp_path / "traj.xyz", make_frames(2))
        reader = TrajectoryReader(path)
        assert reader.advance()
        assert reader.advance()
        assert not reader.advance()
        # The last frame stays available
        assert reader.frame is not None
        assert reader.frames_read == 2
        reader.close()

    def test_skip_leading_frames(self, tmp_path):
        frames = make_frames(5)
        path = write_frames(tmp_path / "traj.xyz", frames)

        with TrajectoryReader(path, skip=3) as reader:
            read = list(reader)

        assert len(read) == 2
        assert np.allclose(read[0].positions, frames[3].positions, atol=1e-9)

    def test_skip_past_end(self, tmp_path):
        path = write_frames(tmp_path / "traj.xyz", make_frames(2))
        with TrajectoryReader(path) as reader:
            assert reader.skip(5) == 2
            assert reader.next_frame() is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            TrajectoryReader(tmp_path / "missing.xyz")

    def test_truncated_frame(self, tmp_path):
        path = tmp_path / "bad.xyz"
        text = make_frames(1)[0].to_xyz()
        path.write_text("\n".join(text.splitlines()[:-2]) + "\n")
        with TrajectoryReader(path) as reader:
            with pytest.raises(TrajectoryFormatError):
                reader.advance()

    def test_malformed_skip_closes_file(self, tmp_path, monkeypatch):
        path = tmp_path / "bad.xyz"
        path.write_text("two\nbox_x=1 box_y=1 box_z=1\nAr 0 0 0\nAr 0.5 0.5 0.5\n")

        opened = []

        def tracking_open(*args, **kwargs):
            handle = open(*args, **kwargs)
            opened.append(handle)
            return handle

        monkeypatch.setattr("ljmc.trajectory.open", tracking_open, raising=False)
        with pytest.raises(TrajectoryFormatError):
            TrajectoryReader(path, skip=1)

        assert len(opened) == 1
        assert opened[0].closed

    def test_bad_count_line(self, tmp_path):
        path = tmp_path / "bad.xyz"
        path.write_text("five\n")
        with TrajectoryReader(path) as reader:
            with pytest.raises(TrajectoryFormatError):
                reader.advance()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
