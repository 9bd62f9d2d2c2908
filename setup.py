from setuptools import find_packages, setup

with open("README.rst") as f:
    long_description = f.read()

setup(
    name="idftools",
    version="0.1.0",
    description="Correct boundary grids and resample sparse grids for iMOD models",
    long_description=long_description,
    license="MIT",
    packages=find_packages(),
    package_dir={"idftools": "idftools"},
    test_suite="idftools/tests",
    python_requires=">=3.10",
    install_requires=[
        "loguru",
        "numba",
        "numpy",
        "pandas",
        "pydantic>=2",
        "xarray>=0.11",
    ],
    extras_require={
        "dev": [
            "pytest<9",
            "pytest-cases",
            "pytest-cov",
        ],
    },
    classifiers=[
        # https://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Hydrology",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
    keywords="imod idf groundwater modeling boundary resample",
)
