from setuptools import setup

setup(name='fungar',
      version='1.0.0',
      description='Detection of antifungal resistance mutations in sequencing reads',
      author='Henrique Antoniolli',
      author_email='staats@ufrgs.br',
      license='MIT',
      packages=['fungar'],
      python_requires='>=3.8',
      install_requires=[
          'numpy', 'matplotlib', 'pandas', 'biopython'
      ],
      extras_require={
          'test': ['pytest'],
      },
      entry_points={
            'console_scripts': ['fungar=fungar.main:main'],
      },
      zip_safe=False)
