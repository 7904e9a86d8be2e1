#!/usr/bin/env python
from setuptools import setup

setup(name='moho',
      version='0.1',
      description='Parser for the Moho gamedev class-description language',
      packages=['moho'],
      python_requires='>=3.8',
      install_requires=['lark>=1.1', 'dataslots<1.2'],
      extras_require={'test': ['pytest']},
)
