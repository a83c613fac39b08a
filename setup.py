from setuptools import find_packages, setup

with open("README.md", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="pydiffnoise",
    version="0.0.1",
    author="Boris Gailleton",
    author_email="boris.gailleton@univ-rennes.fr",
    description="Differentiable, seeded gradient noise and curl noise on GPU with Taichi",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/bgailleton/pydiffnoise",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Physics",
        "Topic :: Multimedia :: Graphics",
    ],
    python_requires=">=3.9",
    install_requires=[
        "taichi>=1.6.0",
        "numpy>=1.20.0",
        "matplotlib>=3.5.0",
        "click>=7.0",
        "pillow>=8.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov",
            "black",
            "flake8",
        ],
    },
    keywords="perlin noise curl noise procedural differentiable autodiff GPU taichi",
    project_urls={
        "Bug Reports": "https://github.com/bgailleton/pydiffnoise/issues",
        "Source": "https://github.com/bgailleton/pydiffnoise",
    },
    entry_points={
        "console_scripts": [
            "pdn-noise2npy=pydiffnoise.cli.noise_commands:noise2npy",
            "pdn-noise2png=pydiffnoise.cli.noise_commands:noise2png",
        ],
    },
)
