"""
.. currentmodule:: gfxgrass.geometries

.. autosummary::
    :toctree: geometries/

    blade_geometry
    generate_blade

"""

# flake8: noqa

from ._blade import blade_geometry, generate_blade
