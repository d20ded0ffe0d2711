from setuptools import setup

setup(
    name='atmfjstc-assigns-codegen',
    version='0.2.0',

    author_email='atmfjstc@protonmail.com',

    package_dir={'': 'src'},
    packages=[
        'atmfjstc.lib.assigns_codegen',
        'atmfjstc.lib.assigns_codegen.codegen',
        'atmfjstc.lib.assigns_codegen.cli',
    ],

    install_requires=[
        'termcolor>=1.1, <4',
        'colorama>=0.4.6, <2',
        'jsonschema>=3.2, <5',
    ],

    extras_require={
        'test': ['pytest'],
    },

    entry_points={
        'console_scripts': [
            'assigns-codegen=atmfjstc.lib.assigns_codegen.cli:main',
        ],
    },

    zip_safe=True,

    description="Generates named wrapper functions around the fields of a state container",

    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Software Development :: Code Generators",
        "Environment :: Console",
    ],
    python_requires='>=3.7',
)
