"""Vector, sampling, shading and colour helpers used while baking."""

from __future__ import annotations

import math
import struct
from typing import Iterable, Union

import numpy as np

from hedgebake.aabb import AABB

LOG2E = 1.44269504088896340736
PI = 3.14159265358979323846264338327950288
GOLDEN_ANGLE = PI * (3.0 - math.sqrt(5.0))

SRGB_TO_LINEAR_LUT: tuple[float, ...] = tuple((i / 255.0) ** 2.2 for i in range(256))

ArrayLike = Union[Iterable[float], np.ndarray]


def _vec(value: ArrayLike) -> np.ndarray:
    return np.asarray(value, dtype=np.float64)


def get_barycentric_coords(point: ArrayLike, a: ArrayLike, b: ArrayLike, c: ArrayLike) -> np.ndarray:
    """Return (u, v): the weights of b and c for a point in the triangle's plane."""
    a = _vec(a)
    v0 = _vec(c) - a
    v1 = _vec(b) - a
    v2 = _vec(point) - a

    dot00 = float(v0 @ v0)
    dot01 = float(v0 @ v1)
    dot02 = float(v0 @ v2)
    dot11 = float(v1 @ v1)
    dot12 = float(v1 @ v2)

    inv_denom = 1.0 / (dot00 * dot11 - dot01 * dot01)
    return np.array([
        (dot00 * dot12 - dot01 * dot02) * inv_denom,
        (dot11 * dot02 - dot01 * dot12) * inv_denom,
    ])


def barycentric_lerp(a: ArrayLike, b: ArrayLike, c: ArrayLike, bary_uv: ArrayLike) -> np.ndarray:
    a = _vec(a)
    u, v = (float(x) for x in bary_uv)
    return a + (_vec(b) - a) * u + (_vec(c) - a) * v


def lerp(a, b, factor: float):
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a + (b - a) * factor
    a = _vec(a)
    return a + (_vec(b) - a) * factor


def saturate(value):
    """Clamp a scalar or every component of an array to [0, 1]."""
    if isinstance(value, (int, float, np.floating, np.integer)):
        return max(min(float(value), 1.0), 0.0)
    return np.clip(_vec(value), 0.0, 1.0)


def square_to_concentric_disk_mapping(x: float, y: float) -> np.ndarray:
    a = 2.0 * x - 1.0
    b = 2.0 * y - 1.0

    if a > -b:
        if a > b:
            r = a
            phi = (PI / 4.0) * (b / a)
        else:
            r = b
            phi = (PI / 4.0) * (2.0 - (a / b))
    else:
        if a < b:
            r = -a
            phi = (PI / 4.0) * (4.0 + (b / a))
        else:
            r = -b
            phi = (PI / 4.0) * (6.0 - (a / b)) if b != 0 else 0.0

    return np.array([r * math.cos(phi), r * math.sin(phi)])


def _disk_to_hemisphere(uv: np.ndarray) -> np.ndarray:
    u, v = float(uv[0]), float(uv[1])
    r = u * u + v * v
    return np.array([u, v, math.sqrt(max(0.0, 1.0 - r))])


def sample_cosine_weighted_hemisphere(u1: float, u2: float) -> np.ndarray:
    return _disk_to_hemisphere(square_to_concentric_disk_mapping(u1, u2))


def sample_stratified_cosine_weighted_hemisphere(
    sample_x: int, sample_y: int, sqrt_num_samples: int, u1: float, u2: float
) -> np.ndarray:
    jittered_x = (sample_x + u1) / sqrt_num_samples
    jittered_y = (sample_y + u2) / sqrt_num_samples
    return _disk_to_hemisphere(square_to_concentric_disk_mapping(jittered_x, jittered_y))


def sample_direction_hemisphere(u1: float, u2: float) -> np.ndarray:
    z = u1
    r = math.sqrt(max(0.0, 1.0 - z * z))
    phi = 2.0 * PI * u2
    return np.array([r * math.cos(phi), r * math.sin(phi), z])


def sample_direction_sphere(u1: float, u2: float) -> np.ndarray:
    z = u1 * 2.0 - 1.0
    r = math.sqrt(max(0.0, 1.0 - z * z))
    phi = 2.0 * PI * u2
    return np.array([r * math.cos(phi), r * math.sin(phi), z])


def sample_sphere(index: int, sample_count: int) -> np.ndarray:
    """Return point `index` of a Fibonacci sphere of `sample_count` points."""
    if sample_count < 2:
        raise ValueError("sample_count must be at least 2")
    y = 1.0 - index / (sample_count - 1) * 2.0
    radius = math.sqrt(max(0.0, 1.0 - y * y))
    theta = GOLDEN_ANGLE * index
    return np.array([math.cos(theta) * radius, y, math.sin(theta) * radius])


def sample_vogel_disk(index: int, sample_count: int, phi: float) -> np.ndarray:
    radius = math.sqrt(index + 0.5) / math.sqrt(sample_count)
    theta = index * GOLDEN_ANGLE + phi
    return np.array([radius * math.cos(theta), radius * math.sin(theta)])


def fresnel_schlick(f0: ArrayLike, cos_theta: float) -> np.ndarray:
    f0 = _vec(f0)
    p = (-5.55473 * cos_theta - 6.98316) * cos_theta
    return f0 + (1.0 - f0) * (2.0 ** p)


def ndf_ggx(cos_lh: float, roughness: float) -> float:
    alpha = roughness * roughness
    alpha_sq = alpha * alpha
    denom = (cos_lh * alpha_sq - cos_lh) * cos_lh + 1.0
    return alpha_sq / (PI * denom * denom)


def vis_schlick(roughness: float, cos_lo: float, cos_li: float) -> float:
    r = roughness + 1.0
    k = (r * r) / 8.0
    schlick_v = cos_lo * (1.0 - k) + k
    schlick_l = cos_li * (1.0 - k) + k
    return 0.25 / (schlick_v * schlick_l)


def microfacet_ggx(
    roughness: float, u1: float, u2: float, tangent: ArrayLike, binormal: ArrayLike, normal: ArrayLike
) -> np.ndarray:
    a = roughness * roughness
    a2 = a * a
    cos_theta_h = math.sqrt(max(0.0, (1.0 - u1) / ((a2 - 1.0) * u1 + 1.0)))
    sin_theta_h = math.sqrt(max(0.0, 1.0 - cos_theta_h * cos_theta_h))
    phi_h = u2 * PI * 2.0
    return (
        _vec(tangent) * (sin_theta_h * math.cos(phi_h))
        + _vec(binormal) * (sin_theta_h * math.sin(phi_h))
        + _vec(normal) * cos_theta_h
    )


def get_aabb_corner(aabb: AABB, index: int) -> np.ndarray:
    """Corner `index`: bit 4 selects max x, bit 2 max y, bit 1 max z."""
    return np.array([
        aabb.max[0] if index & 4 else aabb.min[0],
        aabb.max[1] if index & 2 else aabb.min[1],
        aabb.max[2] if index & 1 else aabb.min[2],
    ])


def get_aabb_half(aabb: AABB, axis: int, side: int) -> AABB:
    """Split the box in two along `axis`; side 0 is the lower half."""
    result = aabb.copy()
    center = (result.min[axis] + result.max[axis]) * 0.5
    if side:
        result.min[axis] = center
    else:
        result.max[axis] = center
    return result


def get_radius(aabb: AABB) -> float:
    return float(np.linalg.norm(aabb.max - aabb.min)) / 2.0


def relative_corner(left: ArrayLike, right: ArrayLike) -> int:
    """Index of the octant of `right` around `left`, matching get_aabb_corner."""
    left = _vec(left)
    right = _vec(right)
    index = 0
    if right[0] > left[0]:
        index |= 4
    if right[1] > left[1]:
        index |= 2
    if right[2] > left[2]:
        index |= 1
    return index


def closest_point_triangle(p: ArrayLike, a: ArrayLike, b: ArrayLike, c: ArrayLike) -> np.ndarray:
    p, a, b, c = _vec(p), _vec(a), _vec(b), _vec(c)
    ab = b - a
    ac = c - a
    ap = p - a

    d1 = float(ab @ ap)
    d2 = float(ac @ ap)
    if d1 <= 0.0 and d2 <= 0.0:
        return a.copy()

    bp = p - b
    d3 = float(ab @ bp)
    d4 = float(ac @ bp)
    if d3 >= 0.0 and d4 <= d3:
        return b.copy()

    cp = p - c
    d5 = float(ab @ cp)
    d6 = float(ac @ cp)
    if d6 >= 0.0 and d5 <= d6:
        return c.copy()

    vc = d1 * d4 - d3 * d2
    if vc <= 0.0 and d1 >= 0.0 and d3 <= 0.0:
        return a + (d1 / (d1 - d3)) * ab

    vb = d5 * d2 - d1 * d6
    if vb <= 0.0 and d2 >= 0.0 and d6 <= 0.0:
        return a + (d2 / (d2 - d6)) * ac

    va = d3 * d6 - d5 * d4
    if va <= 0.0 and (d4 - d3) >= 0.0 and (d5 - d6) >= 0.0:
        v = (d4 - d3) / ((d4 - d3) + (d5 - d6))
        return b + v * (c - b)

    denom = 1.0 / (va + vb + vc)
    return a + (vb * denom) * ab + (vc * denom) * ac


def _float_bits(value: float) -> int:
    return struct.unpack("<I", struct.pack("<f", value))[0]


def half_to_float(x: int) -> float:
    """Decode a 16-bit half-precision bit pattern."""
    x &= 0xFFFF
    e = (x & 0x7C00) >> 10
    m = (x & 0x03FF) << 13
    bits = (x & 0x8000) << 16
    if e != 0:
        bits |= ((e + 112) << 23) | m
    elif m != 0:
        v = _float_bits(float(m)) >> 23
        bits |= ((v - 37) << 23) | ((m << (150 - v)) & 0x007FE000)
    return struct.unpack("<f", struct.pack("<I", bits & 0xFFFFFFFF))[0]


def nearly_equal(a, b) -> bool:
    return float(np.max(np.abs(_vec(a) - _vec(b)))) < 0.0001


def rgb_to_hsv(rgb: ArrayLike) -> np.ndarray:
    """Convert to HSV with hue halved, i.e. in [0, 180)."""
    r, g, b = (float(x) for x in rgb)
    high = max(r, g, b)
    low = min(r, g, b)

    if high == 0.0 or high - low == 0.0:
        h = s = 0.0
    else:
        s = (high - low) / high
        if high == r:
            h = 60.0 * ((g - b) / (high - low))
        elif high == g:
            h = 60.0 * ((b - r) / (high - low)) + 120.0
        else:
            h = 60.0 * ((r - g) / (high - low)) + 240.0

    if h < 0.0:
        h += 360.0
    return np.array([h / 2.0, s, high])


def hsv_to_rgb(hsv: ArrayLike) -> np.ndarray:
    """Inverse of rgb_to_hsv."""
    h_half, s, v = (float(x) for x in hsv)
    h = h_half * 2.0
    hi = int(h / 60.0) % 6
    f = h / 60.0 - int(h / 60.0)
    p = v * (1.0 - s)
    q = v * (1.0 - s * f)
    t = v * (1.0 - s * (1.0 - f))
    return np.array([
        (v, t, p),
        (q, v, p),
        (p, v, t),
        (p, q, v),
        (t, p, v),
        (v, p, q),
    ][hi], dtype=np.float64)


def transform(v: ArrayLike, m: ArrayLike) -> np.ndarray:
    return (_vec(m) @ np.append(_vec(v), 1.0))[:3]


def transform_normal(v: ArrayLike, m: ArrayLike) -> np.ndarray:
    return (_vec(m) @ np.append(_vec(v), 0.0))[:3]


def next_power_of_two(value: int) -> int:
    """Smallest power of two not below `value`, with 32-bit wrap-around."""
    v = (value - 1) & 0xFFFFFFFF
    for shift in (1, 2, 4, 8, 16):
        v |= v >> shift
    return (v + 1) & 0xFFFFFFFF


def compute_attenuation_he1(distance: float, light_range: ArrayLike) -> float:
    inner = float(light_range[2])
    outer = float(light_range[3])
    span = outer - inner
    if span == 0.0:
        return 1.0 if distance < inner else 0.0
    return 1.0 - saturate((distance - inner) / span)


def compute_direction_and_attenuation_he1(
    position: ArrayLike, light_position: ArrayLike, light_range: ArrayLike
) -> tuple[np.ndarray, float, float]:
    """Return (direction from light, attenuation, distance)."""
    direction = _vec(position) - _vec(light_position)
    distance = float(np.linalg.norm(direction))
    return direction / distance, compute_attenuation_he1(distance, light_range), distance


def compute_attenuation_he2(distance: float, light_range: ArrayLike) -> float:
    radius = float(light_range[3])
    light_mask = (distance * distance) / (radius * radius)
    light_mask = saturate(1.0 - light_mask * light_mask)
    light_mask *= light_mask
    attenuation = 1.0 / max(1.0, distance * distance)
    return attenuation * light_mask / (4.0 * PI)


def compute_direction_and_attenuation_he2(
    position: ArrayLike, light_position: ArrayLike, light_range: ArrayLike
) -> tuple[np.ndarray, float]:
    """Return (direction from light, attenuation)."""
    direction = _vec(position) - _vec(light_position)
    distance = float(np.linalg.norm(direction))
    return direction / distance, compute_attenuation_he2(distance, light_range)


def create_perspective_matrix(field_of_view: float, aspect_ratio: float, z_near: float, z_far: float) -> np.ndarray:
    y_scale = 1.0 / math.tan(field_of_view / 2.0)
    x_scale = y_scale / aspect_ratio
    return np.array([
        [x_scale, 0.0, 0.0, 0.0],
        [0.0, y_scale, 0.0, 0.0],
        [0.0, 0.0, -(z_far + z_near) / (z_far - z_near), -2.0 * z_near * z_far / (z_far - z_near)],
        [0.0, 0.0, -1.0, 0.0],
    ])


def srgb_to_linear(value: ArrayLike) -> np.ndarray:
    """Return a copy with the first three components converted to linear."""
    result = _vec(value).copy()
    for i in range(3):
        index = min(max(int(result[i] * 255.0), 0), 255)
        result[i] = SRGB_TO_LINEAR_LUT[index]
    return result


def tangent_to_world(value: ArrayLike, tangent: ArrayLike, binormal: ArrayLike, normal: ArrayLike) -> np.ndarray:
    value = _vec(value)
    return value[0] * _vec(tangent) + value[1] * _vec(binormal) + value[2] * _vec(normal)


def compute_tangent(normal: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    """Return (tangent, binormal) perpendicular to `normal`."""
    normal = _vec(normal)
    t1 = np.cross(normal, [0.0, 0.0, 1.0])
    t2 = np.cross(normal, [0.0, 1.0, 0.0])
    tangent = t1 if np.linalg.norm(t1) > np.linalg.norm(t2) else t2
    tangent = tangent / np.linalg.norm(tangent)
    binormal = np.cross(tangent, normal)
    return tangent, binormal / np.linalg.norm(binormal)


def ldr_ready(color: ArrayLike) -> np.ndarray:
    """Clamp a colour's brightness to 1 while keeping its hue and saturation."""
    hsv = rgb_to_hsv(color)
    hsv[2] = saturate(float(hsv[2]))
    return hsv_to_rgb(hsv)