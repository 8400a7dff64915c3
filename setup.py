"""
assetserve setup script.
"""

import os

from setuptools import setup


## Function we need


def get_version_and_doc(filename):
    NS = dict(__version__="", __doc__="")
    docStatus = 0  # Not started, in progress, done
    for line in open(filename, "rb").read().decode().splitlines():
        if line.startswith("__version__"):
            exec(line.strip(), NS, NS)
        elif line.startswith('"""'):
            if docStatus == 0:
                docStatus = 1
                line = line.lstrip('"')
            elif docStatus == 1:
                docStatus = 2
        if docStatus == 1:
            NS["__doc__"] += line.rstrip() + "\n"
    if not NS["__version__"]:
        raise RuntimeError("Could not find __version__")
    return NS["__version__"], NS["__doc__"]


## Collect info for setup()

THIS_DIR = os.path.dirname(os.path.abspath(__file__))

# Define name and description
name = "assetserve"
description = "A minimal ASGI server for in-memory static assets"

# Get version and docstring (i.e. long description)
version, doc = get_version_and_doc(
    os.path.join(THIS_DIR, "assetserve", "__init__.py")
)


## Setup

setup(
    name=name,
    version=version,
    keywords="ASGI static assets brotli etag",
    description=description,
    long_description=doc,
    platforms="any",
    python_requires=">=3.10",
    install_requires=["brotli", "uvicorn"],
    extras_require={
        "tests": ["pytest", "pytest-cov", "requests"],
        "dev": ["invoke", "black", "flake8"],
        "servers": ["hypercorn", "daphne"],
    },
    packages=["assetserve"],
    package_data={"assetserve": ["public/*"]},
    entry_points={"console_scripts": ["assetserve = assetserve.__main__:main"]},
    zip_safe=False,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Internet :: WWW/HTTP",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3",
    ],
)
