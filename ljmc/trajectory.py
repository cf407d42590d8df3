#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
XYZ Trajectory Reading and Writing
================================================================================

Project:        Lennard-Jones Monte Carlo
Module:         trajectory.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

Frames are stored in a plain XYZ layout with the box and potential metadata
on the comment line:

    512
    box_x=8.939 box_y=8.939 box_z=8.939 temperature=0.9 epsilon=1.0 sigma=1.0 cutoff=3.0
    Ar 0.1234567890 4.5678901234 7.8901234567
    ...
"""

import logging
import numpy as np
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple, Union
from dataclasses import dataclass

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

METADATA_KEYS = ("box_x", "box_y", "box_z", "temperature", "epsilon", "sigma", "cutoff")


class TrajectoryFormatError(ValueError):
    """Raised when a trajectory record cannot be parsed."""


@dataclass
class TrajectoryFrame:
    """One recorded configuration with its box and potential metadata."""
    positions: np.ndarray
    box: Tuple[float, float, float]
    temperature: float
    epsilon: float = 1.0
    sigma: float = 1.0
    cutoff: float = 3.0
    element: str = "Ar"

    @property
    def n_particles(self) -> int:
        return self.positions.shape[0]

    @property
    def volume(self) -> float:
        Lx, Ly, Lz = self.box
        return Lx * Ly * Lz

    @property
    def density(self) -> float:
        return self.n_particles / self.volume

    def to_xyz(self) -> str:
        """Render the frame as XYZ text, newline terminated."""
        values = (*self.box, self.temperature, self.epsilon, self.sigma, self.cutoff)
        # float() so numpy scalars render as plain numbers
        metadata = " ".join(f"{key}={float(value)!r}"
                            for key, value in zip(METADATA_KEYS, values))
        lines = [str(self.n_particles), metadata]
        for position in self.positions:
            coords = " ".join(format_coordinate(x, L) for x, L in zip(position, self.box))
            lines.append(f"{self.element} {coords}")
        return "\n".join(lines) + "\n"


def format_coordinate(x: float, length: float) -> str:
    """
    Fixed point text of a coordinate, kept inside [0, L).

    Rounding to 10 decimals can turn a value just below L into L itself,
    which is written as the equivalent image at 0 instead.
    """
    text = f"{x:.10f}"
    if float(text) >= length:
        text = f"{float(text) - length:.10f}"
    return text


def parse_metadata(line: str) -> Dict[str, float]:
    """
    Parse the key=value comment line of a frame.

    Raises:
        TrajectoryFormatError: If a required key is missing or not a number
    """
    values = {}
    for token in line.split():
        key, sep, value = token.partition("=")
        if not sep:
            continue
        try:
            values[key] = float(value)
        except ValueError:
            raise TrajectoryFormatError(f"Invalid value for {key!r}: {value!r}") from None

    missing = [key for key in METADATA_KEYS if key not in values]
    if missing:
        raise TrajectoryFormatError(f"Frame metadata is missing {', '.join(missing)}")
    return values


class TrajectoryWriter:
    """
    Append-only XYZ trajectory writer.

    The file is truncated when the writer is created and every call to
    write() appends one frame.
    """

    def __init__(self, path: PathLike):
        self.path = Path(path)
        self._file = open(self.path, "w")
        self.frames_written = 0

    def write(self, frame: TrajectoryFrame) -> None:
        self._file.write(frame.to_xyz())
        self._file.flush()
        self.frames_written += 1

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()
            logger.debug("Wrote %d frames to %s", self.frames_written, self.path)

    def __enter__(self) -> "TrajectoryWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class TrajectoryReader:
    """
    Sequential XYZ trajectory reader.

    Usage:
        reader = TrajectoryReader("montecarlo.xyz", skip=10)
        while reader.advance():
            analyze(reader.frame)
    """

    def __init__(self, path: PathLike, skip: int = 0):
        self.path = Path(path)
        self._file = open(self.path, "r")
        self.frame: Optional[TrajectoryFrame] = None
        self.frames_read = 0
        if skip > 0:
            try:
                self.skip(skip)
            except TrajectoryFormatError:
                self._file.close()
                raise

    def _read_count(self) -> Optional[int]:
        line = self._file.readline()
        while line and not line.strip():
            line = self._file.readline()
        if not line:
            return None
        try:
            return int(line.strip())
        except ValueError:
            raise TrajectoryFormatError(f"Expected particle count, got {line.strip()!r}") from None

    def _read_line(self) -> str:
        line = self._file.readline()
        if not line:
            raise TrajectoryFormatError("Unexpected end of file inside a frame")
        return line

    def _read_frame(self) -> Optional[TrajectoryFrame]:
        n_particles = self._read_count()
        if n_particles is None:
            return None

        meta = parse_metadata(self._read_line())

        positions = np.empty((n_particles, 3))
        element = "Ar"
        for i in range(n_particles):
            parts = self._read_line().split()
            if len(parts) < 4:
                raise TrajectoryFormatError(f"Malformed particle line: {' '.join(parts)!r}")
            element = parts[0]
            try:
                positions[i] = [float(v) for v in parts[1:4]]
            except ValueError:
                raise TrajectoryFormatError(f"Malformed coordinates: {' '.join(parts)!r}") from None

        self.frames_read += 1
        return TrajectoryFrame(
            positions=positions,
            box=(meta["box_x"], meta["box_y"], meta["box_z"]),
            temperature=meta["temperature"],
            epsilon=meta["epsilon"],
            sigma=meta["sigma"],
            cutoff=meta["cutoff"],
            element=element,
        )

    def skip(self, n_frames: int) -> int:
        """
        Skip frames without parsing their coordinates.

        Returns:
            Number of frames actually skipped (fewer at end of file)
        """
        skipped = 0
        for _ in range(n_frames):
            n_particles = self._read_count()
            if n_particles is None:
                break
            for _ in range(n_particles + 1):
                self._read_line()
            skipped += 1
        if skipped < n_frames:
            logger.warning("Trajectory %s has only %d frames to skip", self.path, skipped)
        return skipped

    def advance(self) -> bool:
        """Load the next frame into self.frame; False at end of stream."""
        frame = self._read_frame()
        if frame is None:
            return False
        self.frame = frame
        return True

    def next_frame(self) -> Optional[TrajectoryFrame]:
        """Return the next frame, or None at end of stream."""
        return self.frame if self.advance() else None

    def __iter__(self) -> Iterator[TrajectoryFrame]:
        while self.advance():
            yield self.frame

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "TrajectoryReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
