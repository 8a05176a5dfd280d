from setuptools import setup, find_packages

# Base requirements - always needed
install_requires = [
    "dbus-python>=1.2.0",
    "PyYAML>=6.0",
]

setup(
    name="bluemap",
    version="0.3.0",
    description="BlueZ managed-object resolver and property/method proxy over D-Bus",
    packages=find_packages(include=["bluemap", "bluemap.*"]),
    install_requires=install_requires,
    extras_require={
        "test": ["pytest>=8.0.0"],
    },
    entry_points={
        'console_scripts': [
            'bluemap=bluemap.cli:main',
        ],
    },
    python_requires='>=3.8',
)
