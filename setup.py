from setuptools import setup

setup(name='vanmaps',
      version='0.1.0',
      description='Choropleth maps at the English county or ambulance service level.',
      license='MIT',
      packages=['vanmaps'],
      include_package_data = True,
      package_data={
          'vanmaps': ['data/*.geojson'],
      },
      python_requires='>=3.9',
      install_requires=[
          'numpy>=1.22',
          'pandas',
          'matplotlib>=3.6',
          'shapely',
          'geopandas',
      ],
      extras_require={
          'test': [
              'pytest',
              'pillow',
          ],
      },
      zip_safe=False)
