"""
Sample Loader
=============

Builds the numeric sample that every strategy resamples.

A sample either comes from a seeded random generator, the way the workshop
draws one before timing the strategies, or is read from a file:

    - Plain text / CSV: numbers separated by whitespace or commas.
      Blank lines and lines starting with ``#`` are ignored.
    - JSON: either a bare list of numbers or ``{"values": [...]}``.

The values are stored as a read-only float array, so a sample cannot be
changed after it is drawn.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from ..bootstrap.strategies import validate_sample
from ..errors import InvalidArgument

logger = logging.getLogger(__name__)

DISTRIBUTIONS = ("normal", "uniform", "exponential")

_SEPARATORS = re.compile(r"[\s,;]+")


@dataclass(frozen=True, eq=False)
class Sample:
    """An immutable numeric sample and where it came from."""
    values: NDArray[np.float64]
    source: str = "inline"
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        values = validate_sample(self.values).copy()
        values.flags.writeable = False
        object.__setattr__(self, "values", values)

    def __len__(self) -> int:
        return int(self.values.size)

    @property
    def mean(self) -> float:
        return float(self.values.mean())

    def summary(self) -> dict:
        """Summary statistics of the sample."""
        return {
            "source": self.source,
            "seed": self.seed,
            "size": len(self),
            "mean": self.mean,
            "std": float(self.values.std(ddof=1)) if len(self) > 1 else 0.0,
            "min": float(self.values.min()),
            "max": float(self.values.max()),
        }

    @classmethod
    def from_values(cls, values: Sequence[float], source: str = "inline") -> Sample:
        return cls(values=values, source=source)

    @classmethod
    def generate(
        cls,
        size: int,
        distribution: str = "normal",
        loc: float = 0.0,
        scale: float = 1.0,
        seed: Optional[int] = None,
    ) -> Sample:
        """
        Draw a sample from a parametric distribution.

        Args:
            size: Number of values (>= 1).
            distribution: One of ``normal`` (mean ``loc``, sd ``scale``),
                ``uniform`` (on ``[loc, loc + scale)``) or ``exponential``
                (``loc`` plus an exponential with mean ``scale``).
            loc: Location parameter.
            scale: Scale parameter (> 0).
            seed: Seed for reproducible draws.
        """
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size < 1:
            raise InvalidArgument("size", f"must be a positive integer, got {size!r}")
        if scale <= 0:
            raise InvalidArgument("scale", f"must be > 0, got {scale}")

        rng = np.random.default_rng(seed)
        if distribution == "normal":
            values = rng.normal(loc, scale, size=size)
        elif distribution == "uniform":
            values = rng.uniform(loc, loc + scale, size=size)
        elif distribution == "exponential":
            values = loc + rng.exponential(scale, size=size)
        else:
            raise InvalidArgument(
                "distribution",
                f"unknown distribution {distribution!r} (expected one of: {', '.join(DISTRIBUTIONS)})",
            )

        logger.info(f"Generated {size} values from {distribution}(loc={loc}, scale={scale}), seed={seed}")
        return cls(values=values, source=distribution, seed=seed)

    @classmethod
    def from_text(cls, path: str | Path) -> Sample:
        """
        Load a sample from a whitespace- or comma-separated text file.

        Example::

            # body lengths (mm)
            12.1, 13.4, 11.9
            14.0 12.7
        """
        path = Path(path)
        tokens: list[str] = []
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            tokens.extend(t for t in _SEPARATORS.split(line) if t)

        try:
            values = [float(t) for t in tokens]
        except ValueError as e:
            raise InvalidArgument("sample", f"{path}: non-numeric value ({e})") from e

        logger.info(f"Loaded {len(values)} values from {path}")
        return cls(values=np.asarray(values, dtype=np.float64), source=str(path))

    @classmethod
    def from_json(cls, path: str | Path) -> Sample:
        """
        Load a sample from a JSON file.

        Expected format, either:
            [1.0, 2.0, 3.0]
        or:
            {"values": [1.0, 2.0, 3.0]}
        """
        path = Path(path)
        with open(path) as f:
            data = json.load(f)

        if isinstance(data, dict):
            if "values" not in data:
                raise InvalidArgument("sample", f"{path}: missing 'values' key")
            data = data["values"]

        sample = cls(values=data, source=str(path))
        logger.info(f"Loaded {len(sample)} values from {path}")
        return sample

    @classmethod
    def from_file(cls, path: str | Path) -> Sample:
        """Dispatch on the file suffix: ``.json`` or anything else as text."""
        path = Path(path)
        if path.suffix.lower() == ".json":
            return cls.from_json(path)
        return cls.from_text(path)
