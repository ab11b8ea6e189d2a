[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nanocanvas"
version = "0.1.0"
description = "A small software 2D canvas with paths, Bezier offsetting, TrueType glyph bitmaps and BMP output"
requires-python = ">=3.10"
dependencies = []
keywords = ["2d", "canvas", "vector", "bezier", "rasterizer", "bmp", "truetype"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
nanocanvas-example = "nanocanvas.example:main"

[tool.hatch.build.targets.wheel]
packages = ["nanocanvas"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
