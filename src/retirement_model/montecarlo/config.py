# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Configuration for Monte Carlo simulations."""

import math
from dataclasses import dataclass

DEFAULT_BIN_WIDTH = 500_000.0


@dataclass
class MonteCarloConfig:
    """Engine-level settings for Monte Carlo runs.

    Trial count, return volatility and seed are household inputs and live on
    InputRecord; this holds how the engine runs and aggregates.

    Attributes:
        bin_width: Width of terminal-balance histogram bins. Default 500,000.
        workers: Number of worker processes. 1 runs trials in-process.
    """
    bin_width: float = DEFAULT_BIN_WIDTH
    workers: int = 1

    def __post_init__(self):
        if not math.isfinite(self.bin_width) or self.bin_width <= 0:
            raise ValueError("bin_width must be a positive finite number")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")
