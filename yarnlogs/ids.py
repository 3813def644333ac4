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
"""Parsing and converting YARN IDs.

IDs look like:

* ``application_1450486922681_0005``
* ``appattempt_1450486922681_0005_000001``
* ``container_1450486922681_0005_01_000003`` (or, with an RM epoch,
  ``container_e17_1450486922681_0005_01_000003``)
"""
import re

from yarnlogs.errors import ValidationError

_APPLICATION_ID_RE = re.compile(
    r'^application_(?P<timestamp>\d+)_(?P<app_num>\d+)$')

_CONTAINER_ID_RE = re.compile(
    r'^container_'
    r'(?:e(?P<epoch>\d+)_)?'      # e17_ (optional)
    r'(?P<timestamp>\d+)_'        # 1450486922681_
    r'(?P<app_num>\d+)_'          # 0005_
    r'(?P<attempt_num>\d+)_'      # 01_
    r'(?P<container_num>\d+)$')   # 000003


def parse_application_id(application_id):
    """Return a dict with *timestamp* and *app_num*, or raise
    :py:class:`~yarnlogs.errors.ValidationError`."""
    m = _APPLICATION_ID_RE.match(application_id or '')
    if not m:
        raise ValidationError(
            'Invalid ApplicationId specified: %s' % application_id)
    return m.groupdict()


def parse_container_id(container_id):
    """Return a dict with *epoch* (may be ``None``), *timestamp*,
    *app_num*, *attempt_num* and *container_num*, or raise
    :py:class:`~yarnlogs.errors.ValidationError`."""
    m = _CONTAINER_ID_RE.match(container_id or '')
    if not m:
        raise ValidationError(
            'Invalid ContainerId specified: %s' % container_id)
    return m.groupdict()


def container_id_to_application_id(container_id):
    """Convert e.g. ``'container_e17_1450486922681_0005_01_000003'``
    to ``'application_1450486922681_0005'``."""
    parts = parse_container_id(container_id)
    return 'application_%s_%s' % (parts['timestamp'], parts['app_num'])


def container_id_to_attempt_id(container_id):
    """Convert e.g. ``'container_1450486922681_0005_01_000003'``
    to ``'appattempt_1450486922681_0005_000001'``.

    The ResourceManager's REST API wants the attempt ID to find a
    container.
    """
    parts = parse_container_id(container_id)
    return 'appattempt_%s_%s_%06d' % (
        parts['timestamp'], parts['app_num'], int(parts['attempt_num']))


def container_belongs_to_application(container_id, application_id):
    return container_id_to_application_id(container_id) == application_id
