from setuptools import setup, find_packages


setup(
    name='launch_curve',
    version='0.1',
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires='>=3.9',
    install_requires=[
        'pydantic>=2',
        'flask>=2.2',
        'flask-openapi3>=3',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'launch_curve = launch_curve.webapi.webapi:main',
        ],
    },
)
