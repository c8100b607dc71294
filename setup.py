# setup.py
from setuptools import setup, find_packages

setup(
    name="tkeys",
    version="0.1.0",
    description="Translation key collector, pruner and dictionary generator for Python sources",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "tkeys": ["templates/*.template"],
    },
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'tkeys=tkeys.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
