#!/usr/bin/env python
from setuptools import setup, find_packages

setup(name  = 'dynamomutex',
    version = '1.0.0',
    description = 'A distributed mutex built on top of DynamoDB',
    long_description='A distributed mutual exclusion lock whose state lives in a DynamoDB table',
    classifiers = [
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: POSIX :: Linux',
        'Operating System :: Unix',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: System :: Networking',
        'Topic :: Utilities'
    ],
    keywords = 'python dynamodb lock mutex',
    license = 'BSD',
    packages = find_packages(),
    platforms = ['Linux', 'Mac OS X', 'Win'],
    python_requires = '>=3.8',
    include_package_data = True,
    zip_safe = True,
    install_requires = [ 'boto3 >= 1.26.0', 'botocore >= 1.29.0' ],
    extras_require = {
        'quality'   : [ 'coverage >= 7.0', 'pytest >= 7.0', 'mock >= 4.0.0', 'pycodestyle >= 2.10' ],
        'documents' : [ 'Sphinx >= 5.0' ],
    },
)
