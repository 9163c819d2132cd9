"""
Fumagen - Fumadocs site generator for HITSZ-OpenAuto

Installation:
    pip install -e .

This installs the 'fumagen' command globally in your environment.
"""

from setuptools import setup, find_packages
import os

# Read README for long description
long_description = ''
if os.path.exists('README.md'):
    with open('README.md', 'r', encoding='utf-8') as f:
        long_description = f.read()

setup(
    name='fumagen',
    version='1.0.0',
    description='Generate a Fumadocs content tree from course repositories',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='The Fumagen Authors',
    author_email='',
    license='MIT',

    # Find all packages (fumagen/ and fumagen.mdx)
    packages=find_packages(exclude=['tests', 'tests.*', 'docs']),

    include_package_data=True,

    # tomllib is in the standard library from 3.11
    python_requires='>=3.11',

    # Dependencies
    install_requires=[
        'click>=8.0',
        'python-frontmatter>=1.0',
        'PyYAML>=6.0',
        'requests>=2.28',
        'markdown-it-py>=3.0',
        'mdit-py-plugins>=0.4',
        'mdformat>=0.7.17',
        'mdformat-gfm>=0.3.6',
        'mdformat-footnote>=0.1.1',
    ],

    # Optional dependencies
    extras_require={
        'dev': [
            'pytest>=7.4',
            'pytest-cov>=4.1',
            'pytest-mock>=3.11',
        ],
    },

    # CLI entry point - this creates the 'fumagen' command
    entry_points={
        'console_scripts': [
            'fumagen=fumagen.cli:cli',
        ],
    },

    # Classifiers for PyPI
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Education',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Documentation',
        'Topic :: Text Processing :: Markup :: Markdown',
    ],

    # Keywords for discoverability
    keywords='fumadocs mdx markdown documentation static-site',
)
