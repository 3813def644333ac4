# Copyright 2009-2015 Yelp and Contributors
# Copyright 2016-2017 Yelp
# Copyright 2026 Yelp and Contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
from setuptools import setup

import yarnlogs

setuptools_kwargs = {
    'extras_require': {
        'test': [
            'pytest',
        ],
    },
    'install_requires': [
        'PyYAML>=3.10',
        'requests>=2.0',
    ],
    'provides': ['yarnlogs'],
    'python_requires': '>=3.6',
    'zip_safe': False,
}

with open('README.rst') as f:
    long_description = f.read()

setup(
    author='David Marin',
    author_email='dm@davidmarin.org',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: Apache Software License',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: System :: Distributed Computing',
        'Topic :: System :: Logging',
    ],
    description='Fetch logs for YARN applications and containers',
    entry_points=dict(
        console_scripts=[
            'yarnlogs=yarnlogs.cmd:main',
        ]
    ),
    license='Apache',
    long_description=long_description,
    name='yarnlogs',
    packages=[
        'yarnlogs',
        'yarnlogs.fs',
        'yarnlogs.tools',
    ],
    url='http://github.com/Yelp/yarnlogs',
    version=yarnlogs.__version__,
    **setuptools_kwargs
)
