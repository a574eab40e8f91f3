"""Procedural, wind-animated grass for the Pygfx render engine."""

# flake8: noqa

from ._version import __version__, version_info
from . import utils
from . import generation

from .generation import InstanceAttributes
from .geometries import *
from .materials import *
from .objects import *
from .animation import *

# Register the shader with the pygfx wgpu renderer
from . import renderers

from .utils import logger


# The range of pygfx versions that the shader is written against
__pygfx_version_range__ = "0.10.0", "0.11.0"


def _check_pygfx_version():
    import pygfx

    min_ver, max_ver = (
        tuple(map(int, v.split("."))) for v in __pygfx_version_range__
    )
    version = tuple(i for i in pygfx.version_info[:3] if isinstance(i, int))
    detected = f"Detected {pygfx.__version__}, need >={min_ver}, <{max_ver}."
    if version < min_ver:
        logger.error(
            f"Incompatible version of pygfx:\n    {detected}\n    To update, use e.g. `pip install -U pygfx`."
        )
    elif version >= max_ver:
        logger.warning(f"Possible incompatible version of pygfx:\n    {detected}")


_check_pygfx_version()
