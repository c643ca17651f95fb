"""
tfactor/config.py

Library configuration.

A single active Config holds numeric defaults used when allocating
parameter tensors and comparing parameter sets.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterator, Mapping, Optional

import numpy as np

logger = logging.getLogger(__name__)

ENV_DTYPE = "TFACTOR_DTYPE"
ENV_DIFFERENCE_THRESHOLD = "TFACTOR_DIFFERENCE_THRESHOLD"


@dataclass(frozen=True)
class Config:
    """
    Numeric defaults.

    Attributes:
        dtype: dtype of newly allocated weights and blank maps
        difference_threshold: default threshold for TensorSet.different
        check_shapes: validate shapes in dot/different (add_scaled always checks)
    """
    dtype: np.dtype = np.dtype(np.float64)
    difference_threshold: float = 1e-6
    check_shapes: bool = True

    def __post_init__(self):
        object.__setattr__(self, "dtype", np.dtype(self.dtype))
        if not np.issubdtype(self.dtype, np.floating):
            raise ValueError(f"Config dtype must be floating point, got {self.dtype}")
        if self.difference_threshold < 0:
            raise ValueError("difference_threshold must be non-negative")


_active = Config()


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """
    Build a Config from environment variables, falling back to defaults.

    Args:
        environ: Mapping to read from (default: os.environ)

    Returns:
        The new Config (not activated; pass it to set_config)
    """
    env = os.environ if environ is None else environ
    kwargs = {}
    if env.get(ENV_DTYPE):
        kwargs["dtype"] = np.dtype(env[ENV_DTYPE])
    if env.get(ENV_DIFFERENCE_THRESHOLD):
        kwargs["difference_threshold"] = float(env[ENV_DIFFERENCE_THRESHOLD])
    cfg = Config(**kwargs)
    logger.debug("Loaded config %s", cfg)
    return cfg


def get_config() -> Config:
    """Return the active config."""
    return _active


def set_config(cfg: Config) -> Config:
    """Activate cfg and return the previously active config."""
    global _active
    previous = _active
    _active = cfg
    return previous


@contextmanager
def override(**changes) -> Iterator[Config]:
    """Temporarily activate a copy of the current config with changes applied."""
    previous = set_config(replace(_active, **changes))
    try:
        yield _active
    finally:
        set_config(previous)
