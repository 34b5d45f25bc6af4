from setuptools import setup

setup(
    name='atmfjstc-drs-archive',
    version='0.1.0',

    author_email='atmfjstc@protonmail.com',

    package_dir={'': 'src'},
    packages=['atmfjstc.lib.drs_archive'],

    install_requires=[
        'atmfjstc-binary-utils>=1.2.0, <2',
        'atmfjstc-ez-repr>=1.1, <2',
    ],

    extras_require={
        'test': ['pytest'],
    },

    zip_safe=True,

    description="Decoder for DRS resource archives used by Age of Empires and Star Wars: Galactic Battlegrounds",

    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: System :: Archiving",
        "Topic :: Games/Entertainment :: Real Time Strategy",
        "Typing :: Typed",
    ],
    python_requires='>=3.7',
)
