"""
The procedural generation of grass blade instances.

.. currentmodule:: gfxgrass.generation

These functions are pure (numpy in, numpy out) and take an explicit random
generator, so they can be used without a GPU and produce reproducible
results for a given seed.

.. autosummary::
    :toctree: generation/

    sample_surface
    calculate_height_range
    normalize_heights
    uniform_density
    select_grass_vertices
    orientations_from_normals
    random_orientations
    trample_curve
    reduction_factors
    apply_height_reduction
    InstanceAttributes
    build_instance_attributes

"""

# flake8: noqa

from ._surface import sample_surface
from ._heights import calculate_height_range, normalize_heights
from ._sites import uniform_density, select_grass_vertices
from ._orientation import orientations_from_normals, random_orientations
from ._stretch import trample_curve, reduction_factors, apply_height_reduction
from ._instances import InstanceAttributes, build_instance_attributes
