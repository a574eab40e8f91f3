"""
Utility functions for gfxgrass.

.. currentmodule:: gfxgrass.utils

.. autosummary::
    :toctree: utils/

    logger
    make_rng
    as_integer

"""

import os
import logging

import numpy as np
from pygfx import Buffer


logger = logging.getLogger("gfxgrass")


def _set_log_level():
    # Set default level
    logger.setLevel(logging.WARN)
    # Set user-specified level
    level = os.getenv("GFXGRASS_LOG_LEVEL", "")
    if level:
        try:
            if level.isnumeric():
                logger.setLevel(int(level))
            else:
                logger.setLevel(level.upper())
        except Exception:
            logger.warning(f"Invalid gfxgrass log level: {level}")


_set_log_level()


def make_rng(rng=None, seed=None):
    """Get a numpy random Generator.

    Parameters
    ----------
    rng : numpy.random.Generator | None
        If given, it is returned as-is.
    seed : int | None
        Seed for a new generator, used when ``rng`` is None. If the seed is
        None as well, the generator is seeded from OS entropy.

    """
    if rng is not None:
        if not isinstance(rng, np.random.Generator):
            raise TypeError(
                f"rng must be a numpy.random.Generator, not {rng.__class__.__name__}"
            )
        return rng
    return np.random.default_rng(seed)


def as_integer(value, name):
    """Get the int value of an integral number, or raise a TypeError.

    Booleans and non-finite floats are not integers.
    """
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, not {value!r}")
    try:
        result = int(value)
    except (TypeError, ValueError, OverflowError):
        raise TypeError(f"{name} must be an integer, not {value!r}") from None
    if result != value:
        raise TypeError(f"{name} must be an integer, not {value!r}")
    return result


def as_array(data, ncols=None, dtype=np.float32):
    """Get the numpy array from an array-like or a pygfx Buffer.

    The result is always 2D when ``ncols`` is given. Returns None for None.
    """
    if data is None:
        return None
    if isinstance(data, Buffer):
        data = data.data
    array = np.asarray(data, dtype=dtype)
    if ncols is not None:
        if array.size == 0:
            return np.zeros((0, ncols), dtype)
        if array.ndim == 1 and array.size % ncols == 0:
            array = array.reshape(-1, ncols)
        if array.ndim != 2 or array.shape[1] != ncols:
            raise ValueError(
                f"Expected an array with {ncols} columns, got shape {array.shape}"
            )
    return array
