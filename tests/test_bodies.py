import numpy as np
import pytest

from spiderling.bodies import (
    Body,
    Plane,
    Sphere,
    plane_vertices,
    sphere_geometry,
)
from spiderling.material import Material
from spiderling.ray import Ray


def material_json():
    return {
        "ka": [0.1, 0.2, 0.3],
        "kd": [0.4, 0.5, 0.6],
        "ks": [0.7, 0.8, 0.9],
        "n": 16,
        "reflect": 0.5,
        "mapKd": "kd.png",
        "mapKs": "ks.png",
        "mapNM": "nm.png",
        "mapDM": "dm.png",
        "mapEM": "em.png",
    }


def test_body_is_abstract():
    with pytest.raises(TypeError):
        Body("thing")


def test_sphere_hit_lies_on_surface():
    sphere = Sphere(center=(0, 0, -5), radius=1, precision=4)
    ray = Ray((0, 0, 0), (0, 0, -1))
    c = sphere.intersects(ray)
    assert c.is_collided
    assert c.t == pytest.approx(4.0)
    assert np.linalg.norm(c.hit - sphere.center) == pytest.approx(sphere.radius)
    assert np.allclose(c.hit, ray.at(c.t))
    assert np.allclose(c.v, -ray.direction)
    assert np.linalg.norm(c.normal) == pytest.approx(1.0)


def test_sphere_miss_keeps_default_t():
    sphere = Sphere(center=(0, 0, -5), radius=1, precision=4)
    c = sphere.intersects(Ray((0, 0, 0), (0, 1, 0)))
    assert not c.is_collided
    assert c.t == -1.0


def test_sphere_from_inside_uses_far_root():
    sphere = Sphere(center=(1, 2, 3), radius=2, precision=4)
    ray = Ray((1, 2, 3), (1, 0, 0))
    c = sphere.intersects(ray)
    assert c.is_collided
    assert c.t == pytest.approx(sphere.radius)
    assert np.allclose(c.normal, ray.direction)


def test_sphere_hit_too_close_is_ignored():
    sphere = Sphere(center=(0, 0, -5), radius=1, precision=4)
    c = sphere.intersects(Ray((0, 0, -3.95), (0, 0, -1)))
    assert not c.is_collided
    assert 0 < c.t < 0.1


def test_sphere_from_json():
    data = {
        "material": material_json(),
        "center": [1, 2, 3],
        "radius": 2,
        "precision": 5,
        "scale": [2, 2, 2],
    }
    sphere = Sphere.from_json(data)
    assert sphere.shape == "Sphere"
    assert np.allclose(sphere.material.kd, data["material"]["kd"])
    assert len(sphere.vertices) == 6 * 5 * 5
    assert np.allclose(sphere.model_matrix[:3, 3], data["center"])
    assert np.allclose(np.diag(sphere.model_matrix)[:3], data["scale"])


def test_sphere_from_json_missing_key():
    with pytest.raises(KeyError):
        Sphere.from_json({"material": material_json(), "center": [0, 0, 0]})


@pytest.mark.parametrize("precision", [1, 3, 8])
def test_sphere_geometry_counts_and_unit_radius(precision):
    vertices = sphere_geometry(precision)
    assert len(vertices) == 6 * precision * precision
    for v in vertices:
        assert np.linalg.norm(v.position) == pytest.approx(1.0)
        assert np.allclose(v.normal, v.position)
        assert np.all((v.texture >= 0) & (v.texture <= 1))


def test_sphere_geometry_rejects_zero_precision():
    with pytest.raises(ValueError):
        sphere_geometry(0)


def test_plane_vertices_layout_and_tangents():
    normal = (0, 1, 0)
    vertices = plane_vertices(4.0, 2.0, normal)
    assert len(vertices) == 6
    assert np.allclose(vertices[0].texture, (0, 0))
    assert np.allclose(vertices[5].texture, (1, 1))
    edge = vertices[1].position - vertices[0].position
    for v in vertices:
        assert v.position[1] == 0
        assert abs(v.position[0]) == pytest.approx(2.0)
        assert np.allclose(v.normal, normal)
        assert np.allclose(v.tangent, edge)


def test_plane_hit():
    plane = Plane(center=(0, -2, 0), normal=(0, 1, 0), width=10, height=10)
    ray = Ray((0, 0, 0), (0, -1, 0))
    c = plane.intersects(ray)
    assert c.is_collided
    assert np.dot(c.hit - plane.center, plane.normal) == pytest.approx(0.0)
    assert np.allclose(c.hit, ray.at(c.t))
    assert np.allclose(c.normal, plane.normal)
    assert np.allclose(c.v, -ray.direction)


def test_plane_parallel_ray_misses():
    plane = Plane(center=(0, -2, 0), normal=(0, 0, 1), width=10, height=10)
    c = plane.intersects(Ray((0, 0, 0), (1, 0, 0)))
    assert not c.is_collided
    assert c.t == -1.0
    assert np.allclose(c.normal, (0, 1, 0))


def test_plane_behind_ray_misses():
    plane = Plane(center=(0, -2, 0), normal=(0, 1, 0), width=10, height=10)
    c = plane.intersects(Ray((0, 0, 0), (0, 1, 0)))
    assert not c.is_collided
    assert c.t < 0


def test_plane_from_json():
    data = {
        "material": material_json(),
        "center": [1, -1, 2],
        "normal": [0, 1, 0],
        "width": 6,
        "height": 4,
        "rotateAxis": [0, 0, 1],
        "rotateDegree": 30,
        "lineWidth": 2,
        "scale": [1, 1, 1],
    }
    plane = Plane.from_json(data)
    assert plane.shape == "Plane"
    assert isinstance(plane.material, Material)
    assert plane.line_width == data["lineWidth"]
    assert np.allclose(plane.model_matrix[:3, 3], data["center"])
    assert len(plane.vertices) == 6