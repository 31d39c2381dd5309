#!/usr/bin/env python
from setuptools import setup
import os


def get_version():
    curdir = os.path.dirname(__file__)
    filename = os.path.join(curdir, 'src', 'iconraster', 'version.py')
    with open(filename, 'rb') as fp:
        return fp.read().decode('utf8').split('=')[1].strip(" \n'")


def readme():
    with open(os.path.join(os.path.dirname(__file__), 'README.rst')) as f:
        return f.read()


setup(
    name='iconraster',
    version=get_version(),
    description='Rasterize SVG icons to PNG and JPEG files',
    long_description=readme(),
    classifiers=[
        'Development Status :: 3 - Alpha',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Multimedia :: Graphics',
        'Topic :: Multimedia :: Graphics :: Graphics Conversion',
    ],
    keywords='svg icon png jpeg rasterize',
    license='MIT License',
    package_dir={'': 'src'},
    packages=[
        'iconraster',
        'iconraster.core',
        'iconraster.rasterizer',
    ],
    python_requires='>=3.10',
    install_requires=[
        'pillow>=9.1',
        'numpy',
        'svgpathtools',
    ],
    extras_require={
        'test': [
            'pytest',
            'svgwrite',
        ],
    },
    include_package_data=True,
    entry_points={
        'console_scripts': ['iconraster=iconraster.__main__:main']
    },
)
