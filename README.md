# spiderling

Building blocks for a small 3D renderer, built on numpy.

- **Scene models**: rays and collisions (`spiderling.ray`), spheres and planes
  with ray intersection and triangle geometry (`spiderling.bodies`), Phong
  lights with hard shadows (`spiderling.light`), and a camera that makes
  primary rays, view and projection matrices and reacts to held keys
  (`spiderling.camera`).
- **Geometry**: vector and 4x4 matrix helpers (`spiderling.transforms`),
  materials read from scene JSON or `.mtl` files (`spiderling.material`),
  meshes with per-triangle tangents (`spiderling.mesh`), and a Wavefront
  `.obj` reader (`spiderling.obj_parser`).
- **Particles**: gravity, drag, constant force, attraction and repulsion
  (`spiderling.forces`), seeded uniform and normal position generators
  (`spiderling.generators`), and a particle system stepped with explicit
  Euler integration (`spiderling.particle_system`).
- **Image codecs**: a baseline JPEG encoder (`spiderling.jpeg`), DXT1 to DXT5
  block decoders (`spiderling.dxt`) and a PVRTC 2bpp/4bpp decompressor
  (`spiderling.pvrtc`).

## Installation

```
pip install .
```

To run the tests, install the test extra as well:

```
pip install ".[test]"
pytest
```

## Examples

Load a mesh from an OBJ file. Faces must be triangles written as `p/t/n`; a
file that cannot be opened gives an empty `Mesh`:

```python
from spiderling.obj_parser import parse_obj_file

mesh = parse_obj_file("models/cube.obj")
print(len(mesh.vertices), mesh.material.name)
```

Cast a ray at a sphere:

```python
from spiderling.bodies import Sphere
from spiderling.ray import Ray

sphere = Sphere(center=(0, 0, 0), radius=1.0, precision=16)
hit = sphere.intersects(Ray((0, 0, 5), (0, 0, -1)))
print(hit.is_collided, hit.t)  # True 4.0
```

Shade the hit with a point light:

```python
from spiderling.light import Light, LightType

light = Light(kind=LightType.POINT, ambient=(0.1, 0.1, 0.1),
              diffuse=(1, 1, 1), specular=(1, 1, 1), position=(0, 5, 5))
colour = light.process_light(hit, sphere, [sphere])
```

Generate a primary ray and move the camera with held keys:

```python
from spiderling.camera import Camera, Key

camera = Camera(eye=(0, 0, 0), u=(1, 0, 0), v=(0, 1, 0), lookat=(0, 0, -1),
                up=(0, 1, 0), distance=1.0, theta=60.0, width=640, height=480)
ray = camera.ray_generate(320, 240)
camera.process_input({Key.W})
```

Run a particle system from a scene entry:

```python
from spiderling.particle_system import ParticleSystem

config = {
    "Psize": 2.0,
    "Size": 100,
    "Generator": {"Type": "Uniform", "xMin": -1, "xMax": 1,
                  "yMin": 0, "yMax": 2, "zMin": -1, "zMax": 1},
    "Attraction": {"Name": "attract", "Coefficient": 1.0, "goal": [0, 0, 0]},
    "Gravity": {"Name": "gravity", "Coefficient": 0.1},
    "Drag": {"Name": "drag", "Coefficient": 0.5},
    "ConstantForce": {"Name": "wind", "Coefficient": 1.0,
                      "force": 0.2, "direction": [1, 0, 0]},
    "Repulsion": {"Name": "repel", "Coefficient": 0.2, "goal": [0, 1, 0]},
}
system = ParticleSystem.from_json(config)
system.initialize()
system.update(0.016)
points = system.positions()  # array of shape (100, 3)
```

Write an RGB image as a JPEG, or get the bytes with `encode_jpeg`:

```python
from spiderling.jpeg import write_jpeg

width, height = 16, 16
pixels = bytes([255, 0, 0]) * (width * height)
write_jpeg("red.jpg", pixels, width, height, 3, 90)
```

Decode one DXT1 block into 16 RGBA pixels (64 bytes):

```python
from spiderling.dxt import decode_dxt1_block

rgba = decode_dxt1_block(bytes(8))
```

Decompress PVRTC 4bpp data into RGBA bytes:

```python
from spiderling.pvrtc import decompress_pvrtc

rgba = decompress_pvrtc(bytes(4 * 8), False, 8, 8)
```

## What the package does not do

- It draws nothing: there is no window, no GPU upload, no shader compilation
  and no render loop. Bodies, meshes and particle systems hold their geometry
  and matrices for a renderer to use.
- It has no command-line program and does not read whole scene files; each
  class builds itself from its own scene entry through `from_json`.
- It does not read DDS or PVR image files. `spiderling.dxt` decodes single
  blocks and `spiderling.pvrtc` decodes raw block data; file headers are left
  to the caller. Material texture maps are kept as file names only.