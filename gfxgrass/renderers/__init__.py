"""
The renderers for gfxgrass objects.

Importing this subpackage registers the grass shader with the pygfx wgpu
renderer. This happens automatically on ``import gfxgrass``.
"""

# flake8: noqa

from . import wgpu
