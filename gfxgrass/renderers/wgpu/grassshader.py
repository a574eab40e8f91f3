import wgpu  # only for flags/enums

from pygfx.renderers.wgpu import (
    register_wgpu_render_function,
    BaseShader,
    Binding,
    RenderMask,
    GfxSampler,
    GfxTextureView,
)

from ...objects import Grass
from ...materials import GrassMaterial
from .wgsl import load_wgsl


@register_wgpu_render_function(Grass, GrassMaterial)
class GrassShader(BaseShader):
    """Shader for instanced, wind-animated grass blades.

    Each instance is one blade. The vertex stage fetches the template blade
    vertex plus the per-blade offset, orientation, stretch and root angle
    from storage buffers.
    """

    type = "render"

    def __init__(self, wobject):
        super().__init__(wobject)
        material = wobject.material

        self["use_map"] = material.map is not None
        self["use_alpha_map"] = material.alpha_map is not None
        self["colorspace"] = "srgb"
        if material.map is not None:
            self["colorspace"] = material.map.texture.colorspace

    def _define_texture_map(self, map, name):
        view = GfxTextureView(map.texture, view_dim="2d")

        filter_mode = f"{map.mag_filter}, {map.min_filter}, {map.mipmap_filter}"
        address_mode = f"{map.wrap_s}, {map.wrap_t}"
        sampler = GfxSampler(filter_mode, address_mode)

        return [
            Binding(f"s_{name}", "sampler/filtering", sampler, "FRAGMENT"),
            Binding(f"t_{name}", "texture/auto", view, "FRAGMENT"),
        ]

    def get_bindings(self, wobject, shared):
        geometry = wobject.geometry
        material = wobject.material

        rbuffer = "buffer/read_only_storage"
        bindings = [
            Binding("u_stdinfo", "buffer/uniform", shared.uniform_buffer),
            Binding("u_wobject", "buffer/uniform", wobject.uniform_buffer),
            Binding("u_material", "buffer/uniform", material.uniform_buffer),
            # The template blade
            Binding("s_indices", rbuffer, geometry.indices, "VERTEX"),
            Binding("s_positions", rbuffer, geometry.positions, "VERTEX"),
            Binding("s_texcoords", rbuffer, geometry.texcoords, "VERTEX"),
            # The per-blade attributes
            Binding("s_offsets", rbuffer, wobject.offset_buffer, "VERTEX"),
            Binding("s_orientations", rbuffer, wobject.orientation_buffer, "VERTEX"),
            Binding("s_stretches", rbuffer, wobject.stretch_buffer, "VERTEX"),
            Binding("s_half_angles", rbuffer, wobject.half_angle_buffer, "VERTEX"),
        ]

        if self["use_map"]:
            bindings.extend(self._define_texture_map(material.map, "map"))
        if self["use_alpha_map"]:
            bindings.extend(self._define_texture_map(material.alpha_map, "alpha_map"))

        bindings = {i: b for i, b in enumerate(bindings)}
        self.define_bindings(0, bindings)

        return {
            0: bindings,
        }

    def get_pipeline_info(self, wobject, shared):
        # Blades are flat, and visible from both sides
        return {
            "primitive_topology": wgpu.PrimitiveTopology.triangle_list,
            "cull_mode": wgpu.CullMode.none,
        }

    def get_render_info(self, wobject, shared):
        geometry = wobject.geometry
        material = wobject.material

        n_vertices = 3 * geometry.indices.nitems
        n_instances = wobject.instance_count

        render_mask = wobject.render_mask
        if not render_mask:
            # Blades are cut out, not blended, unless the material is see-through
            if material.opacity < 1:
                render_mask = RenderMask.transparent
            else:
                render_mask = RenderMask.opaque

        return {
            "indices": (n_vertices, n_instances),
            "render_mask": render_mask,
        }

    def get_code(self):
        return load_wgsl("grass.wgsl")
