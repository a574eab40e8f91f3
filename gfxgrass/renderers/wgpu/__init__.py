"""
.. currentmodule:: gfxgrass.renderers.wgpu

.. autosummary::
    :toctree: renderers/wgpu

    GrassShader
    load_wgsl

"""

# flake8: noqa

from .wgsl import load_wgsl
from .grassshader import GrassShader
