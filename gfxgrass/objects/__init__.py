"""
.. currentmodule:: gfxgrass.objects

.. autosummary::
    :toctree: objects/

    Grass

"""

# flake8: noqa

from ._grass import Grass
