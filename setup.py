"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/cmake-cargo/cmake-cargo"
KEYWORDS = "cmake cargo rust build-system generator imported-targets linker"
HERE = os.path.dirname(os.path.abspath(__file__))


if __name__ == "__main__":
    setup(
        name="cmake-cargo",
        version="0.1.0",
        description="Import cargo build outputs into CMake projects",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.8",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=["semver>=3.0"],
        extras_require={"test": ["pytest>=7.0"]},
        entry_points={"console_scripts": ["cmake-cargo = cmakecargo.cli:main"]},
        include_package_data=True)
