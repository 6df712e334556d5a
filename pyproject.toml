[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spiderling"
version = "0.1.0"
description = "Scene models, ray tracing, particle simulation and texture codecs for a small 3D renderer"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["ray tracing", "particles", "obj", "mesh", "jpeg", "dxt", "pvrtc", "3d"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["spiderling"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
