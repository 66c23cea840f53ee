from os import path
from setuptools import setup, find_packages


# Get the version from moodle_dfexplain/version.py without importing the package
exec(compile(open('moodle_dfexplain/version.py').read(), 'moodle_dfexplain/version.py', 'exec'))


def readme():
    this_directory = path.abspath(path.dirname(__file__))
    with open(path.join(this_directory, 'README.md'), encoding='utf-8') as f:
        return f.read()


setup(
    name='moodle-dfexplain',
    version=__version__,
    description='Renders the explanation block of the Moodle "deferred feedback with explanation" behaviour',
    long_description=readme(),
    long_description_content_type='text/markdown',
    license='GPL-3.0',
    packages=find_packages(include=['moodle_dfexplain', 'moodle_dfexplain.*']),
    package_data={'moodle_dfexplain': ['lang/*/*.json']},
    include_package_data=True,
    entry_points={
        'console_scripts': [
            'moodle-dfexplain = moodle_dfexplain.main:main',
        ],
    },
    python_requires='>=3.7',
    install_requires=[
        'beautifulsoup4>=4.9.1',
        'colorama>=0.4.6',
        'colorlog>=6.7.0',
        'html2text>=2020.1.16',
        'markdown-it-py>=2.0.0',
        'sentry_sdk>=0.13.5',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Environment :: Web Environment',
        'Intended Audience :: Education',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: Education',
        'Topic :: Text Processing :: Markup :: HTML',
    ],
    zip_safe=False,
)
