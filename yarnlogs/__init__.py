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
"""Fetch logs for YARN applications and their containers, from running
NodeManagers or from the aggregated-log archive."""

__author__ = 'David Marin <dm@davidmarin.org>'

__credits__ = [
    'Jim Blomo <jblomo@yelp.com>',
    'Steve Johnson <sjohnson@yelp.com>',
    'Sudarshan Gaikaiwari <sudarshan@acm.org>',
]

__version__ = '0.1.0'
