import numpy as np
import pytest

from spiderling.particle_system import ParticleSystem


def _config(gravity=0.0, drag=0.0, constant=0.0, attraction=0.0, repulsion=0.0, size=10):
    return {
        "Psize": 2.0,
        "Size": size,
        "Generator": {
            "Type": "Uniform",
            "xMin": 1.0,
            "xMax": 2.0,
            "yMin": 1.0,
            "yMax": 2.0,
            "zMin": 1.0,
            "zMax": 2.0,
        },
        "Attraction": {"Name": "attraction", "Coefficient": attraction, "goal": [0, 0, 0]},
        "Gravity": {"Name": "gravity", "Coefficient": gravity},
        "Drag": {"Name": "drag", "Coefficient": drag},
        "ConstantForce": {
            "Name": "wind",
            "Coefficient": constant,
            "force": 1.0,
            "direction": [1.0, 0.0, 0.0],
        },
        "Repulsion": {"Name": "repulsion", "Coefficient": repulsion, "goal": [0, 0, 0]},
    }


def _system(**kwargs):
    system = ParticleSystem.from_json(_config(**kwargs))
    system.initialize()
    return system


def test_initialize_places_particles_in_generator_bounds():
    system = _system(size=25)
    positions = system.positions()
    assert positions.shape == (25, 3)
    assert ((positions >= 1.0) & (positions < 2.0)).all()
    assert system.point_size == 2.0


def test_positions_empty_before_initialize():
    system = ParticleSystem.from_json(_config())
    assert system.positions().shape == (0, 3)
    system.update(0.1)
    assert system.particles == []


def test_no_forces_means_no_motion():
    system = _system()
    before = system.positions().copy()
    system.update(0.5)
    assert system.positions() == pytest.approx(before)


def test_gravity_pulls_particles_down():
    system = _system(gravity=1.0)
    before = system.positions().copy()
    system.update(0.1)
    after = system.positions()
    assert (after[:, 1] < before[:, 1]).all()
    assert after[:, [0, 2]] == pytest.approx(before[:, [0, 2]])
    for particle in system.particles:
        assert particle.acceleration == pytest.approx([0.0, -9.8, 0.0])


def test_constant_force_pushes_along_direction():
    system = _system(constant=1.0)
    before = system.positions().copy()
    system.update(0.1)
    after = system.positions()
    assert (after[:, 0] > before[:, 0]).all()
    assert after[:, 1:] == pytest.approx(before[:, 1:])


def test_attraction_moves_particles_towards_goal():
    system = _system(attraction=1.0)
    before = np.linalg.norm(system.positions(), axis=1)
    system.update(0.01)
    after = np.linalg.norm(system.positions(), axis=1)
    assert (after < before).all()


def test_drag_slows_particles():
    system = _system(drag=1.0)
    for particle in system.particles:
        particle.velocity = np.array([1.0, 2.0, -1.0])
    system.update(0.1)
    for particle in system.particles:
        assert np.linalg.norm(particle.velocity) < np.linalg.norm([1.0, 2.0, -1.0])


def test_update_counts_down_life():
    system = _system(size=3)
    system.update(0.1)
    assert [p.life_frame for p in system.particles] == [999, 999, 999]


def test_expired_particle_stops():
    system = _system(gravity=1.0, size=1)
    particle = system.particles[0]
    particle.life_frame = -1
    particle.velocity = np.array([1.0, 1.0, 1.0])
    position = particle.position.copy()
    system.update(0.1)
    assert particle.velocity == pytest.approx([0.0, 0.0, 0.0])
    assert particle.position == pytest.approx(position)
    assert particle.life_frame == -2


def test_missing_force_raises():
    data = _config()
    del data["Drag"]
    with pytest.raises(KeyError):
        ParticleSystem.from_json(data)


def test_unknown_generator_raises():
    data = _config()
    data["Generator"] = {"Type": "Sobol"}
    with pytest.raises(ValueError):
        ParticleSystem.from_json(data)