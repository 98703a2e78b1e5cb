import math
import struct

import numpy as np
import pytest

from hedgebake.aabb import AABB
from hedgebake import vecmath as vm

A = np.array([0.0, 0.0, 0.0])
B = np.array([2.0, 0.0, 0.0])
C = np.array([0.0, 3.0, 0.0])


@pytest.mark.parametrize("u,v", [(0.2, 0.3), (0.0, 0.0), (0.5, 0.5), (0.9, 0.05)])
def test_barycentric_round_trip(u, v):
    point = vm.barycentric_lerp(A, B, C, (u, v))
    assert np.allclose(vm.get_barycentric_coords(point, A, B, C), [u, v])


def test_barycentric_of_vertex_b():
    assert np.allclose(vm.get_barycentric_coords(B, A, B, C), [1.0, 0.0])


def test_lerp_endpoints():
    assert vm.lerp(2.0, 6.0, 0.0) == 2.0
    assert vm.lerp(2.0, 6.0, 1.0) == 6.0
    assert np.allclose(vm.lerp(A, B, 0.5), (A + B) / 2)


def test_saturate():
    assert vm.saturate(-1.0) == 0.0
    assert vm.saturate(2.0) == 1.0
    assert vm.saturate(0.25) == 0.25
    assert np.array_equal(vm.saturate([-1.0, 0.5, 3.0]), [0.0, 0.5, 1.0])


def test_concentric_disk_center():
    assert np.allclose(vm.square_to_concentric_disk_mapping(0.5, 0.5), [0.0, 0.0])


@pytest.mark.parametrize("x,y", [(0.0, 0.0), (1.0, 1.0), (0.1, 0.9), (0.7, 0.2), (0.5, 0.0)])
def test_concentric_disk_inside_unit_disk(x, y):
    assert np.linalg.norm(vm.square_to_concentric_disk_mapping(x, y)) <= 1.0 + 1e-9


@pytest.mark.parametrize("u1,u2", [(0.1, 0.2), (0.5, 0.5), (0.9, 0.3)])
def test_hemisphere_samples_are_unit_and_upward(u1, u2):
    for d in (
        vm.sample_cosine_weighted_hemisphere(u1, u2),
        vm.sample_direction_hemisphere(u1, u2),
        vm.sample_stratified_cosine_weighted_hemisphere(1, 2, 4, u1, u2),
    ):
        assert np.isclose(np.linalg.norm(d), 1.0)
        assert d[2] >= 0.0


def test_sphere_direction_unit():
    for u1, u2 in [(0.0, 0.3), (0.6, 0.8), (1.0, 0.1)]:
        assert np.isclose(np.linalg.norm(vm.sample_direction_sphere(u1, u2)), 1.0)


def test_sample_sphere_poles_and_unit():
    count = 16
    assert np.isclose(vm.sample_sphere(0, count)[1], 1.0)
    assert np.isclose(vm.sample_sphere(count - 1, count)[1], -1.0)
    for i in range(count):
        assert np.isclose(np.linalg.norm(vm.sample_sphere(i, count)), 1.0)


def test_sample_sphere_needs_two_samples():
    with pytest.raises(ValueError):
        vm.sample_sphere(0, 1)


def test_vogel_disk_inside_unit_disk():
    for i in range(32):
        assert np.linalg.norm(vm.sample_vogel_disk(i, 32, 0.3)) < 1.0


def test_fresnel_of_white_is_white():
    assert np.allclose(vm.fresnel_schlick([1.0, 1.0, 1.0], 0.4), [1.0, 1.0, 1.0])


def test_fresnel_grows_at_grazing_angles():
    f0 = np.array([0.04, 0.04, 0.04])
    assert np.allclose(vm.fresnel_schlick(f0, 0.0), [1.0, 1.0, 1.0])
    assert np.allclose(vm.fresnel_schlick(f0, 1.0), f0, atol=1e-3)


def test_ggx_terms_positive():
    assert vm.ndf_ggx(0.8, 0.5) > 0.0
    assert vm.vis_schlick(0.5, 0.7, 0.6) > 0.0


def test_microfacet_is_unit_in_orthonormal_basis():
    h = vm.microfacet_ggx(0.4, 0.3, 0.7, [1, 0, 0], [0, 1, 0], [0, 0, 1])
    assert np.isclose(np.linalg.norm(h), 1.0)
    assert h[2] >= 0.0


def _box():
    return AABB([-1.0, -2.0, -3.0], [1.0, 2.0, 3.0])


def test_aabb_corners_extremes():
    box = _box()
    assert np.array_equal(vm.get_aabb_corner(box, 0), box.min)
    assert np.array_equal(vm.get_aabb_corner(box, 7), box.max)


@pytest.mark.parametrize("index", range(8))
def test_relative_corner_matches_aabb_corner(index):
    box = _box()
    assert vm.relative_corner(box.center(), vm.get_aabb_corner(box, index)) == index


@pytest.mark.parametrize("axis", range(3))
def test_aabb_halves_rebuild_box(axis):
    box = _box()
    low = vm.get_aabb_half(box, axis, 0)
    high = vm.get_aabb_half(box, axis, 1)
    assert low.max[axis] == high.min[axis]
    assert low.copy().extend(high) == box
    assert np.array_equal(box.min, _box().min)


def test_radius_is_half_diagonal():
    box = _box()
    assert math.isclose(vm.get_radius(box) * 2.0, float(np.linalg.norm(box.sizes())))


def test_closest_point_vertex_regions():
    assert np.allclose(vm.closest_point_triangle([-1, -1, 0], A, B, C), A)
    assert np.allclose(vm.closest_point_triangle([5, -1, 0], A, B, C), B)
    assert np.allclose(vm.closest_point_triangle([-1, 9, 0], A, B, C), C)


def test_closest_point_interior_projects_onto_plane():
    inside = vm.barycentric_lerp(A, B, C, (0.2, 0.3))
    above = inside + np.array([0.0, 0.0, 4.0])
    assert np.allclose(vm.closest_point_triangle(above, A, B, C), inside)


@pytest.mark.parametrize("bits", [0x3C00, 0xC000, 0x0001, 0x03FF, 0x7BFF, 0x3555, 0x8000, 0x0000])
def test_half_to_float_matches_ieee(bits):
    expected = struct.unpack("<e", struct.pack("<H", bits))[0]
    assert vm.half_to_float(bits) == expected


def test_nearly_equal():
    assert vm.nearly_equal(1.0, 1.00005)
    assert not vm.nearly_equal(1.0, 1.001)
    assert vm.nearly_equal([1, 2, 3], [1, 2, 3.00001])


@pytest.mark.parametrize("rgb", [(0.2, 0.5, 0.8), (0.9, 0.1, 0.3), (0.4, 0.7, 0.1), (0.5, 0.5, 0.5)])
def test_hsv_round_trip(rgb):
    assert np.allclose(vm.hsv_to_rgb(vm.rgb_to_hsv(rgb)), rgb)


def test_hsv_value_is_max_component():
    assert vm.rgb_to_hsv((0.2, 0.5, 0.8))[2] == 0.8


def test_transform_with_translation():
    m = np.eye(4)
    m[:3, 3] = [1.0, 2.0, 3.0]
    v = np.array([4.0, 5.0, 6.0])
    assert np.allclose(vm.transform(v, m), v + m[:3, 3])
    assert np.allclose(vm.transform_normal(v, m), v)


@pytest.mark.parametrize("k", range(1, 16))
def test_next_power_of_two(k):
    assert vm.next_power_of_two(2 ** k) == 2 ** k
    assert vm.next_power_of_two(2 ** k + 1) == 2 ** (k + 1)


def test_next_power_of_two_of_one():
    assert vm.next_power_of_two(1) == 1


def test_attenuation_he1_limits():
    light_range = (0.0, 0.0, 2.0, 6.0)
    assert vm.compute_attenuation_he1(1.0, light_range) == 1.0
    assert vm.compute_attenuation_he1(7.0, light_range) == 0.0
    assert 0.0 < vm.compute_attenuation_he1(4.0, light_range) < 1.0


def test_direction_and_attenuation_he1():
    direction, attenuation, distance = vm.compute_direction_and_attenuation_he1(
        [0, 0, 5], [0, 0, 0], (0, 0, 2, 6))
    assert np.allclose(direction, [0, 0, 1])
    assert distance == 5.0
    assert attenuation == vm.compute_attenuation_he1(5.0, (0, 0, 2, 6))


def test_attenuation_he2_falls_off():
    light_range = (0.0, 1.5, 3.0, 3.0)
    near = vm.compute_attenuation_he2(1.0, light_range)
    far = vm.compute_attenuation_he2(2.0, light_range)
    assert near > far > 0.0
    assert vm.compute_attenuation_he2(3.5, light_range) == 0.0
    direction, attenuation = vm.compute_direction_and_attenuation_he2([2, 0, 0], [0, 0, 0], light_range)
    assert np.allclose(direction, [1, 0, 0])
    assert attenuation == far


def test_perspective_maps_near_and_far_planes():
    m = vm.create_perspective_matrix(math.radians(60), 16 / 9, 0.5, 100.0)
    near = m @ np.array([0.0, 0.0, -0.5, 1.0])
    far = m @ np.array([0.0, 0.0, -100.0, 1.0])
    assert math.isclose(near[2] / near[3], -1.0)
    assert math.isclose(far[2] / far[3], 1.0)


def test_srgb_to_linear_endpoints_and_alpha():
    assert np.allclose(vm.srgb_to_linear([1.0, 0.0, 1.0, 0.3]), [1.0, 0.0, 1.0, 0.3])
    mid = vm.srgb_to_linear([0.5, 0.5, 0.5])
    assert np.all(mid < 0.5)
    assert mid[0] == vm.SRGB_TO_LINEAR_LUT[int(0.5 * 255.0)]


def test_tangent_to_world_identity_basis():
    v = np.array([0.3, -0.2, 0.9])
    assert np.allclose(vm.tangent_to_world(v, [1, 0, 0], [0, 1, 0], [0, 0, 1]), v)


@pytest.mark.parametrize("normal", [(0, 0, 1), (0, 1, 0), (1, 0, 0), (0.6, 0.0, 0.8)])
def test_compute_tangent_orthonormal(normal):
    tangent, binormal = vm.compute_tangent(normal)
    n = np.asarray(normal, dtype=float)
    assert np.isclose(np.linalg.norm(tangent), 1.0)
    assert np.isclose(np.linalg.norm(binormal), 1.0)
    assert abs(tangent @ n) < 1e-9
    assert abs(binormal @ n) < 1e-9
    assert abs(tangent @ binormal) < 1e-9


def test_ldr_ready_clamps_brightness_keeps_hue():
    color = np.array([4.0, 2.0, 1.0])
    result = vm.ldr_ready(color)
    assert np.isclose(result.max(), 1.0)
    assert np.allclose(vm.rgb_to_hsv(result)[:2], vm.rgb_to_hsv(color)[:2])


def test_ldr_ready_leaves_ldr_colour():
    assert np.allclose(vm.ldr_ready([0.2, 0.4, 0.6]), [0.2, 0.4, 0.6])