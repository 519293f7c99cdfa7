from setuptools import setup, find_packages

setup(
    name='provider-kubeadm',
    version='0.1.0',
    packages=find_packages(),
    include_package_data=True,
    package_data={
        'provider_kubeadm': ['stages/templates/*.j2'],
    },
    install_requires=[
        'typer[all]',
        'pydantic>=2',
        'PyYAML',
        'Jinja2',
        'python-dotenv',
        'packaging'
    ],
    extras_require={
        'test': [
            'pytest',
            'jsonschema'
        ]
    },
    entry_points={
        'console_scripts': [
            'provider-kubeadm=provider_kubeadm.cli:app'
        ]
    },
    description='Kubeadm cluster provider plugin generating boot stages for immutable OS nodes',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: POSIX :: Linux',
    ],
    python_requires='>=3.8',
)
