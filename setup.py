# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="resolution-map-builder",
    version="0.1.0",
    description="Build-time generator of module maps (specifier -> module path) for component source trees",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["resolution_map_builder*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'resolution-map-builder=resolution_map_builder.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
