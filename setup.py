import re

from setuptools import find_packages, setup


with open("gfxgrass/_version.py", "rb") as fh:
    version_text = fh.read().decode()
    VERSION = re.search(r"__version__ = \"(.*?)\"", version_text).group(1)

with open("gfxgrass/__init__.py", "rb") as fh:
    init_text = fh.read().decode()
    match = re.search(r"__pygfx_version_range__ = \"(.*?)\", \"(.*?)\"", init_text)
    pygfx_min_ver, pygfx_max_ver = match.group(1), match.group(2)


runtime_deps = [
    "numpy",
    "wgpu",
    "pylinalg",
    f"pygfx>={pygfx_min_ver},<{pygfx_max_ver}",
    "Jinja2",
]

extras_require = {
    "dev": [
        "black",
        "flake8",
        "flake8-black",
        "pep8-naming",
        "pytest",
        "setuptools",
        "wheel",
        "twine",
    ],
    "examples": [
        "pytest",
        "glfw",
    ],
}


setup(
    name="gfxgrass",
    version=VERSION,
    packages=find_packages(
        exclude=["tests", "tests.*", "examples", "examples.*", "exp", "exp.*"]
    ),
    package_data={
        "gfxgrass.renderers.wgpu.wgsl": ["*.wgsl"],
    },
    python_requires=">=3.9.0",
    install_requires=runtime_deps,
    extras_require=extras_require,
    license="BSD 2-Clause",
    description="Procedural, wind-animated grass for the Pygfx render engine",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    data_files=[("", ["LICENSE"])],
    zip_safe=True,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Scientific/Engineering :: Visualization",
    ],
)
