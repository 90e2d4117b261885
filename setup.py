from setuptools import setup

setup(
    name='pyosc',
    version='0.1.0',
    author='Ian Dees',
    author_email='ian.dees@gmail.com',
    packages=['pyosc'],
    license='LICENSE.txt',
    description='Reads, writes and indexes OSM change (osmChange) files.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    keywords = ['osm', 'openstreetmap', 'osc', 'osmchange', 'xml', 'parsing'],
    python_requires='>=3.6',
    install_requires=[
        'lxml',
    ],
    extras_require={
        'test': ['pytest'],
    }
)
