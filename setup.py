#!/usr/bin/env python

import setuptools

setuptools.setup(
    name="studypdf",
    version="1.0.0",
    description="PDF reader core with scale-independent highlights, notes and page bookmarks.",
    packages=setuptools.find_packages(include=["studypdf", "studypdf.*"]),
    package_data={"studypdf.configs": ["*.yaml"]},
    include_package_data=True,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    install_requires=['PyYAML>=5.3',
                      'qtpy>=2.0',
                      'PyQt5>=5.15',
                      'PyMuPDF>=1.23',
                      'termcolor>=2.0',
                      'colorama>=0.4; platform_system=="Windows"',
                      ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    python_requires='>=3.10',

    entry_points={
        'console_scripts': [
            'studypdf = studypdf.cli:main',
        ],
    },


)
