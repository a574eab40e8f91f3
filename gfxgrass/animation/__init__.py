"""
.. currentmodule:: gfxgrass.animation

.. autosummary::
    :toctree: animation/

    GrassDriver

"""

# flake8: noqa

from ._driver import GrassDriver
