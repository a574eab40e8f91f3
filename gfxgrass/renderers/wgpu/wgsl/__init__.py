"""
This directory contains wgsl files for the grass shader. They can be loaded
with ``load_wgsl()``, or included in other wgsl code as ``'gfxgrass.name.wgsl'``.
"""

import functools
import importlib.resources

import jinja2
from pygfx.renderers.wgpu import register_wgsl_loader


PACKAGE_NAME = "gfxgrass.renderers.wgpu.wgsl"

register_wgsl_loader("gfxgrass", jinja2.PackageLoader(PACKAGE_NAME, "."))


@functools.lru_cache(maxsize=None)
def load_wgsl(shader_name):
    """Load wgsl code from the gfxgrass shader snippets."""
    ref = importlib.resources.files(PACKAGE_NAME) / shader_name
    with importlib.resources.as_file(ref) as path:
        with open(path, "rb") as f:
            return f.read().decode()
