[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "nnkit"
version = "0.1.0"
description = "Strided numeric arrays and neural-network activation functions in pure Python"
requires-python = ">=3.10"
dependencies = []
keywords = ["neural network", "activation", "matrix", "array", "relu", "softmax"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.setuptools.packages.find]
include = ["nnkit*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
