import setuptools

with open('README.md', 'r') as f:
    long_description = f.read()

setuptools.setup(
    name = 'otfglyphs',
    version = '0.1',
    description = 'Read glyph substitution and positioning data from OpenType fonts',
    long_description=long_description,
    long_description_content_type="text/markdown",
    python_requires='>=3.8',
    packages=setuptools.find_packages(exclude=['tests']),
    package_data = {'otfglyphs': ['py.typed']},
    zip_safe=False,
    keywords = ['font', 'truetype', 'opentype', 'gsub', 'gpos', 'ligature'],
    install_requires=[],
    extras_require={
        'test': ['pytest'],
    },
    classifiers = [
    'Programming Language :: Python',
    'Programming Language :: Python :: 3',
    'Programming Language :: Python :: 3.8',
    'Programming Language :: Python :: 3.9',
    'Development Status :: 4 - Beta',
    'License :: OSI Approved :: MIT License',
    'Operating System :: OS Independent',
    'Intended Audience :: Developers',
    ],
)
