import numpy as np
import pytest

from hedgebake.aabb import AABB
from hedgebake.instance import (
    Instance,
    apply_render_list,
    compute_new_resolutions,
    compute_resolution,
    load_render_list,
    restore_original_resolutions,
    save_render_list,
    scale_resolutions,
)
from hedgebake.mesh import Mesh


def _instance(name, size, original=0):
    return Instance(name=name, aabb=AABB([0, 0, 0], [size, size, size]), original_resolution=original)


def test_default_resolution_without_original():
    assert Instance(name="a").get_resolution({}) == 256


def test_default_resolution_uses_original():
    assert Instance(name="a", original_resolution=64).get_resolution({}) == 64


def test_set_and_get_resolution():
    bag = {}
    inst = Instance(name="rock")
    inst.set_resolution(bag, 512)
    assert bag == {"rock.resolution": 512}
    assert inst.get_resolution(bag) == 512


def test_set_zero_is_ignored():
    bag = {}
    Instance(name="rock").set_resolution(bag, 0)
    assert bag == {}


def test_set_wraps_to_sixteen_bits():
    bag = {}
    Instance(name="rock").set_resolution(bag, 65536)
    assert bag == {}


def test_build_aabb_covers_meshes():
    m1 = Mesh(aabb=AABB([0, 0, 0], [1, 1, 1]))
    m2 = Mesh(aabb=AABB([-2, 0, 0], [0, 3, 0]))
    inst = Instance(name="x", meshes=[m1, m2])
    inst.build_aabb()
    assert np.allclose(inst.aabb.min, [-2, 0, 0])
    assert np.allclose(inst.aabb.max, [1, 3, 1])


@pytest.mark.parametrize("size", [0.5, 1.0, 10.0, 250.0])
def test_compute_resolution_is_power_of_two_in_range(size):
    res = compute_resolution(_instance("a", size), 2.0, 2.0, 16, 2048)
    assert 16 <= res <= 2048
    assert res & (res - 1) == 0


def test_compute_resolution_grows_with_size():
    small = compute_resolution(_instance("a", 1.0), 2.0, 2.0, 1, 4096)
    large = compute_resolution(_instance("b", 64.0), 2.0, 2.0, 1, 4096)
    assert large > small


def test_compute_resolution_clamps_to_minimum_and_maximum():
    assert compute_resolution(_instance("a", 0.001), 2.0, 0.0, 16, 2048) == 16
    assert compute_resolution(_instance("a", 1e6), 2.0, 4.0, 16, 2048) == 2048


def test_compute_new_resolutions_sets_all():
    bag = {}
    instances = [_instance("a", 1.0), _instance("b", 100.0)]
    compute_new_resolutions(instances, bag, 2.0, 2.0, 16, 2048)
    assert set(bag) == {"a.resolution", "b.resolution"}
    assert bag["a.resolution"] <= bag["b.resolution"]


def test_scale_resolutions_halves_and_doubles():
    bag = {}
    inst = Instance(name="a", original_resolution=128)
    scale_resolutions([inst], bag, 0.5, 16, 2048)
    assert inst.get_resolution(bag) == 64
    scale_resolutions([inst], bag, 2, 16, 2048)
    scale_resolutions([inst], bag, 2, 16, 2048)
    assert inst.get_resolution(bag) == 256


def test_scale_resolutions_respects_limits():
    bag = {}
    inst = Instance(name="a", original_resolution=16)
    scale_resolutions([inst], bag, 0.5, 16, 2048)
    assert inst.get_resolution(bag) == 16


def test_restore_original_resolutions():
    bag = {"a.resolution": 1024, "b.resolution": 1024}
    a = Instance(name="a", original_resolution=32)
    b = Instance(name="b", original_resolution=0)
    restore_original_resolutions([a, b], bag)
    assert bag == {"a.resolution": 32, "b.resolution": 1024}


def test_render_list_round_trip(tmp_path):
    bag = {"a.resolution": 64, "b.resolution": 512}
    instances = [Instance(name="a"), Instance(name="b")]
    path = tmp_path / "list.txt"
    assert save_render_list(instances, bag, path) == 2
    assert path.read_text() == "64 a\n512 b\n"
    assert load_render_list(path) == {"a": 64, "b": 512}


def test_load_render_list_skips_zero(tmp_path):
    path = tmp_path / "list.txt"
    path.write_text("0 a\n32 b\n")
    assert load_render_list(path) == {"b": 32}


def test_apply_render_list_rounds_up():
    bag = {}
    instances = [Instance(name="a"), Instance(name="c")]
    count = apply_render_list(instances, bag, {"a": 100, "b": 64})
    assert count == 1
    assert bag == {"a.resolution": 128}