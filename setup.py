from setuptools import setup, find_packages


setup(
    name="steamvdf",
    version="0.1",
    packages=find_packages(include=["steamvdf", "steamvdf.*"]),
    description="Byte-exact reader and writer for Steam's binary shortcuts.vdf format.",
    author="vercingetorx",
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": [
            "steamvdf=steamvdf.cli:main",
        ]
    },
)
