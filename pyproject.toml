[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "hedgebake"
version = "0.1.0"
description = "Geometry, lighting and stage-resource helpers for baking global illumination"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["global illumination", "lightmap", "light field", "bvh", "baking", "3d"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["hedgebake*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
