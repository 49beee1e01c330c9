#!/usr/bin/env python
# -*- coding: utf-8 -*-

import setuptools


with open('README.md') as readme_file:
    readme = readme_file.read()

with open('HISTORY.md') as history_file:
    history = history_file.read()


requirements = [
    'oslo.concurrency>=3.25.0',
    'oslo.config>=5.2.0',
    'oslo.context>=2.19.2',
    'oslo.log>=3.36.0',
]

test_requirements = [
    'pytest',
]

setuptools.setup(
    name='drbd-flexvolume',
    version='0.1.0',
    description=("Kubernetes FlexVolume driver for DRBD resources managed by "
                 "drbdmanage"),
    long_description=readme + '\n---\n' + history,
    long_description_content_type='text/markdown',
    packages=setuptools.find_packages(
        exclude=['tmp', 'tests*', 'examples', 'docs']),
    package_dir={'drbd_flexvolume': 'drbd_flexvolume'},
    include_package_data=True,
    install_requires=requirements,
    extras_require={'test': test_requirements},
    license="Apache Software License 2.0",
    data_files=[
        ('./', ['HISTORY.md', 'README.md']),
    ],
    zip_safe=True,
    keywords='drbd_flexvolume',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Information Technology',
        'License :: OSI Approved :: Apache Software License',
        'Natural Language :: English',
        "Programming Language :: Python :: 3",
    ],
    test_suite='tests',
    tests_require=test_requirements,
    entry_points={
        'console_scripts': [
            'drbd-flexvolume=drbd_flexvolume.flexvolume:main',
        ],
    }
)
