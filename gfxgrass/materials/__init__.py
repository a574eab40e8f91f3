"""
.. currentmodule:: gfxgrass.materials

.. autosummary::
    :toctree: materials/

    GrassMaterial

"""

# flake8: noqa

from ._grass import GrassMaterial
