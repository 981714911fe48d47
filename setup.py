"""
Setup script for markovlab package.
"""

from setuptools import setup, find_packages
import os

# Read the README file for long description
readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
if os.path.exists(readme_path):
    with open(readme_path, 'r', encoding='utf-8') as f:
        long_description = f.read()
else:
    long_description = "markovlab: discrete-time finite-state Markov chain toolkit"

# Read requirements
requirements = [
    'numpy>=1.25.0',
    'scipy>=1.10.0',
    'pandas>=1.5.0',
]

# Development requirements
dev_requirements = [
    'pytest>=6.0.0',
]

setup(
    name='markovlab',
    version='0.1.0',
    description='Sampling, stationary analysis and estimation for discrete-time Markov chains',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='markovlab Development Team',
    author_email='markovlab@example.com',
    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    python_requires='>=3.10',
    install_requires=requirements,
    extras_require={
        'dev': dev_requirements,
        'test': dev_requirements,
        'all': requirements + dev_requirements,
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Scientific/Engineering :: Mathematics',
        'Topic :: Scientific/Engineering :: Physics',
    ],
    keywords='markov chain, stationary distribution, transition matrix, stochastic processes',
    entry_points={
        'console_scripts': [
            'markovlab=markovlab.main:main',
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
