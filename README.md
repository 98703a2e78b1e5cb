# hedgebake

Building blocks for baking global illumination into game stages. The package
provides vector and sampling math, lights and a light bounding-volume
hierarchy, meshes, per-instance lightmap resolutions, light-field probe trees,
meta-instancer files and a small logging hub.

## Installation

```
pip install .
```

To run the tests, install the test extra with `pip install .[test]` and then
run `pytest`.

## Modules

- `hedgebake.aabb`: `AABB` is an axis-aligned box with `min` and `max`
  corners. A new box with no corners given is empty. It provides `extend`,
  which accepts a point or another box, along with `contains`, `intersects`,
  `center`, `sizes`, `is_empty` and `set_empty`.
- `hedgebake.vecmath`: barycentric coordinates and interpolation, hemisphere,
  sphere and Vogel-disk sampling, GGX and Schlick shading terms, AABB corners
  and halves, `closest_point_triangle`, `half_to_float`, `rgb_to_hsv` and
  `hsv_to_rgb` (hue is stored halved, in [0, 180)), `ldr_ready`,
  `next_power_of_two` (32-bit wrap-around), HE1 and HE2 light attenuation,
  `create_perspective_matrix` and `srgb_to_linear`.
- `hedgebake.light`: `Light` and `LightType`.
  - `Light.compute_intensity` returns the light's intensity.
  - `Light.raw_bytes` returns the light's big-endian record. A directional
    light's record is cut off before the attribute field.
  - `make_light_name` picks an unused name such as `Omni003`.
  - `split_color_intensity` splits a colour into a base colour and an
    intensity.
- `hedgebake.light_bvh`: `LightBVH` is built from a list of lights. The last
  directional light becomes the sun. `traverse(position)` yields the point
  lights whose outer radius reaches the position, followed by the sun.
  `collect(position, limit)` returns the sun first, then at most `limit`
  lights in total.
- `hedgebake.mesh`: `Vertex`, `Triangle`, `MeshType` and `Mesh`.
  - `Mesh` provides `build_aabb` and `generate_tangents`.
  - `get_smooth_position` gives a position that follows the curved surface
    implied by the vertex normals.
- `hedgebake.instance`: `Instance` stores its resolution in a plain mapping
  under the key `"<name>.resolution"`. The default is the original
  resolution, or 256 when there is none. Helpers:
  - `compute_resolution` and `compute_new_resolutions`
  - `scale_resolutions` and `restore_original_resolutions`
  - `load_render_list`, `apply_render_list` and `save_render_list`, which
    work on text files of `resolution name` lines.
- `hedgebake.logger`: `Logger` sends each message to its listeners in the
  order they were added. `log_formatted` applies printf-style `%` formatting.
  - A shared instance is available as `hedgebake.logger.logger`.
  - `LogListener` keeps each distinct `(LogType, text)` pair once, newest
    last. It can be used as a context manager that attaches and detaches it.
- `hedgebake.light_field`: `LightField`, `LightFieldCell`,
  `LightFieldCellType` and `LightFieldProbe`.
  - `write()` returns the big-endian data block: header, cells, probes and
    indices.
  - `read(data)` loads the bounds and cells back, and drops any existing
    probes and indices.
  - `optimize_probes()` merges identical probes.
- `hedgebake.meta_instancer`: `MetaInstancer` and `MetaInstance`.
  - `read(stream)` appends the instances stored in a binary stream. Files
    with a different record size are ignored.
  - `write(stream)` and `save(path)` write MTI data.
  - `quantize_unorm` and `quantize_snorm` are the quantisers that writing
    uses.

## Example

```python
from hedgebake.light import Light, LightType
from hedgebake.light_bvh import LightBVH

lamp = Light(name="Omni000", type=LightType.POINT,
             position=(0.0, 1.0, 0.0), color=(1.0, 1.0, 1.0),
             range=(0.0, 0.0, 0.0, 3.0))
bvh = LightBVH()
bvh.build([lamp])
print([light.name for light in bvh.traverse((0.0, 0.0, 0.0))])  # ['Omni000']
```

## What this package does not do

- It does no ray tracing and no baking. It provides the data structures and
  math a baker uses, but it does not produce lightmaps or probe colours.
- It has no editor, viewport or other user interface, and no command-line
  tool.
- It does not read or write stage archives.
- It does not write the container header that stage files wrap around data
  blocks. `Light.raw_bytes` and `LightField.write` return only the data
  itself.
- It has no light-list writer.