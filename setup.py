from setuptools import setup, find_packages

# Find all packages in the current directory
packages = find_packages(exclude=['tests', 'tests.*'])

setup(
    name='mssql-dsn',
    version='0.1.0',
    description='Parse and validate SQL Server connection strings (semicolon, URL and ODBC syntax)',
    long_description=open('README.md', encoding='utf-8').read(),
    long_description_content_type='text/markdown',
    author='Microsoft Corporation',
    author_email='pysqldriver@microsoft.com',
    packages=packages,
    # Requires >= Python 3.10
    python_requires='>=3.10',
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Database',
    ],
    zip_safe=True,
)
