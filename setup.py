# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="depgather",
    version="0.1.0",
    description="Gather the shared-library closure of a Linux binary and package it as a .deb",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["depgather*"]),
    python_requires=">=3.8",
    install_requires=[
        "pyelftools",     # ELF classification and DT_NEEDED inspection
        "python-debian",  # control file, changelog and version handling
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'depgather=depgather.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX :: Linux",
    ],
)
