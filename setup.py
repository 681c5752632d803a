import re
from setuptools import setup

# fundp2sh imports its dependencies so the version is read from the source
with open("fundp2sh/__init__.py") as init:
    __version__ = re.search(r'__version__ = "(.+)"', init.read()).group(1)

with open("README.rst") as readme:
    long_description = readme.read()

setup(
    name="fund-p2sh",
    version=__version__,
    description="Create signed transactions that fund P2SH addresses",
    long_description=long_description,
    license="MIT",
    keywords="bitcoin p2sh multisig transaction signing",
    install_requires=[
        "base58check>=1.0.2,<2.0",
        "ecdsa>=0.19,<1.0",
        "pycryptodome>=3.10,<4.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    packages=["fundp2sh"],
    py_modules=["fund_p2sh_cli"],
    entry_points={
        "console_scripts": ["fund-p2sh=fund_p2sh_cli:main"],
    },
    zip_safe=False,
)
