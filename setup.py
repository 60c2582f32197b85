"""打包配置。"""

from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup


ROOT = Path(__file__).resolve().parent
VERSION = "0.1.0"

INSTALL_REQUIRES = [
    "pydantic>=2.0",
    "fastapi>=0.100",
    "uvicorn>=0.22",
    "rumps>=0.4; sys_platform == 'darwin'",
]

EXTRAS_REQUIRE = {
    "test": [
        "pytest>=7.0",
        "httpx>=0.24",
    ],
}


setup(
    name="stepclock",
    version=VERSION,
    description="Fuses motion, pedometer and inactivity-clock streams into one activity snapshot.",
    python_requires=">=3.9",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
)
