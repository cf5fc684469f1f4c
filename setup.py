"""
Setup configuration for stream-health component.
"""

from setuptools import setup, find_packages

setup(
    name='stream-health',
    version='1.0.0',
    description='Stream quality monitoring and error classification for multi-stream viewing',
    author='Streamyyy Team',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.11',
    install_requires=[
        'boto3>=1.28.0',
        'botocore>=1.31.0',
        'numpy>=1.24.0',
        'requests>=2.31.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.4.0',
            'pytest-cov>=4.1.0',
            'flake8>=6.0.0',
            'black>=23.0.0',
            'mypy>=1.4.0',
        ]
    }
)
