"""
Setup script for transmission_py, Python bindings for libtransmission.
"""

from setuptools import setup, find_packages
import os

# Read the README file
def read_readme():
    with open(os.path.join(os.path.dirname(__file__), 'README.md'), 'r', encoding='utf-8') as f:
        return f.read()

# Read requirements
def read_requirements():
    requirements = []
    try:
        with open(os.path.join(os.path.dirname(__file__), 'requirements.txt'), 'r') as f:
            requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]
    except FileNotFoundError:
        pass
    return requirements

setup(
    name='transmission-py',
    version='1.0.0',
    author='transmission_py contributors',
    author_email='',
    description='Python bindings for the libtransmission BitTorrent library',
    long_description=read_readme(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['transmission_py.tests', 'transmission_py.examples']),
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: POSIX',
        'Operating System :: MacOS',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Communications :: File Sharing',
        'Topic :: Internet',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    python_requires='>=3.8',
    install_requires=read_requirements(),
    extras_require={
        'dev': [
            'pytest>=6.0',
            'pytest-cov',
            'black',
            'flake8',
            'mypy',
        ],
    },
    include_package_data=True,
    package_data={
        'transmission_py': ['*.so', '*.dll', '*.dylib'],
    },
    zip_safe=False,
    keywords='bittorrent torrent transmission libtransmission p2p ctypes',
)
