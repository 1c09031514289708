#!/usr/bin/env python
import os
import re

from setuptools import setup, find_packages

here = os.path.dirname(os.path.abspath(__file__))

with open(os.path.join(here, 'genloop', '__init__.py'), encoding='utf-8') as fh:
    version = re.search(r"^__version__ = '([^']+)'", fh.read(), re.M).group(1)

with open(os.path.join(here, 'README.txt'), encoding='utf-8') as fh:
    long_description = fh.read()

setup(
    name='genloop',
    version=version,
    description='''
        Generators, pipelines, itertools recipes and a trampoline scheduler
        for coroutines built on enhanced generators.
    ''',
    long_description=long_description,
    author='The genloop developers',
    license='MIT',
    packages=find_packages(exclude=['tests', 'tests.*']),
    zip_safe=True,
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: POSIX :: Linux',
        'Operating System :: POSIX :: BSD',
        'Operating System :: MacOS :: MacOS X',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development :: Libraries',
        'Topic :: System :: Networking',
    ],
    entry_points={
        'console_scripts': [
            'genloop-echo=genloop.echo:main',
        ],
    },
    install_requires=[
        'structlog>=21.1',
    ],
    extras_require={
        'test': ['pytest>=7'],
    },
)
