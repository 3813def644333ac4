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
"""Find an application's AM (application master) containers, and pick the
ones the user asked for with ``-am``.

Each attempt of an application has one AM container. We number them from
1 (the first attempt) to N (the latest); ``-1`` means the latest.
"""
from logging import getLogger

from yarnlogs.errors import AmResolutionError
from yarnlogs.errors import NotFoundError
from yarnlogs.errors import TransportError
from yarnlogs.errors import ValidationError
from yarnlogs.ids import parse_container_id
from yarnlogs.request import ContainerReport
from yarnlogs.util import strip_scheme

log = getLogger(__name__)

#: selector meaning "every AM container"
ALL_AM_CONTAINERS = 'ALL'

#: selector meaning "the latest AM container"
LATEST_AM_CONTAINER = -1

_INVALID_SELECTOR_MSG = (
    "Invalid input for option -am. Valid inputs are 'ALL', -1"
    " and any other integer which is larger than 0.")


def parse_am_selectors(tokens):
    """Parse the values of ``-am`` (which may be comma-separated) into
    a list containing either :py:data:`ALL_AM_CONTAINERS` or integers
    (``-1`` or 1-based indexes).

    Once we see ``ALL`` (case-insensitive), we stop parsing and return
    ``['ALL']``. Raises :py:class:`~yarnlogs.errors.ValidationError` on
    anything else.
    """
    selectors = []

    for token in tokens:
        for part in token.split(','):
            part = part.strip()

            if part.upper() == ALL_AM_CONTAINERS:
                return [ALL_AM_CONTAINERS]

            try:
                index = int(part)
            except ValueError:
                raise ValidationError(_INVALID_SELECTOR_MSG)

            if index != LATEST_AM_CONTAINER and index <= 0:
                raise ValidationError(_INVALID_SELECTOR_MSG)

            selectors.append(index)

    if not selectors:
        raise ValidationError(_INVALID_SELECTOR_MSG)

    return selectors


def pick_am_container(am_containers, selector):
    """Return the AM container chosen by *selector* (``-1`` or a 1-based
    index) from the list returned by :py:meth:`AmContainerResolver.resolve`.

    Raises :py:class:`~yarnlogs.errors.NotFoundError` if *selector* is out
    of range.
    """
    if selector == LATEST_AM_CONTAINER and am_containers:
        return am_containers[-1]

    if 0 < selector <= len(am_containers):
        return am_containers[selector - 1]

    raise NotFoundError(
        'ERROR: Specified AM containerId (%s) exceeds the number of AM'
        ' containers (%s).' % (selector, len(am_containers)))


def _attempt_num(attempt, container_id):
    """Attempt number, for sorting. Prefer the attempt ID, fall back to the
    attempt number in the AM container ID."""
    attempt_id = attempt.get('appAttemptId') or ''
    if attempt_id:
        return int(attempt_id.split('_')[-1])

    if attempt.get('id') is not None:
        try:
            return int(attempt['id'])
        except (TypeError, ValueError):
            pass

    try:
        return int(parse_container_id(container_id)['attempt_num'])
    except ValidationError:
        return 0


def _by_attempt(am_containers):
    """Sort ``(attempt_num, report)`` pairs by attempt, earliest first.
    Ties keep the order the service gave us."""
    return [report for _, report in
            sorted(am_containers, key=lambda pair: pair[0])]


class AmContainerResolver(object):
    """Find AM containers using the ResourceManager *rm*, falling back to
    the history server *history* for finished applications."""

    def __init__(self, rm, history=None):
        self.rm = rm
        self.history = history

    def resolve(self, application_id, app_finished):
        """Return a list of :py:class:`~yarnlogs.request.ContainerReport`,
        one per attempt, earliest attempt first.

        We always try the ResourceManager first (it remembers finished
        applications for a while). If that fails and the application has
        finished, we ask the history server, which only knows the container
        IDs, not their nodes.

        Raises :py:class:`~yarnlogs.errors.AmResolutionError`, describing
        every failure, if we get nothing.
        """
        causes = []

        try:
            am_containers = self._from_resource_manager(application_id)
            if am_containers:
                return am_containers
            causes.append('ResourceManager returned no attempts for %s' %
                          application_id)
        except TransportError as e:
            causes.append(str(e))

        if app_finished and self.history is not None:
            log.info('Falling back to history server for AM containers'
                     ' of %s' % application_id)
            try:
                am_containers = self._from_history_server(application_id)
                if am_containers:
                    return am_containers
                causes.append('history server returned no attempts for %s' %
                              application_id)
            except TransportError as e:
                causes.append(str(e))

        raise AmResolutionError(application_id, causes)

    def _from_resource_manager(self, application_id):
        am_containers = []

        for attempt in self.rm.get_application_attempts(application_id):
            container_id = attempt.get('containerId')
            if not container_id:
                continue

            report = ContainerReport(
                container_id=container_id,
                node_id=attempt.get('nodeId') or None,
                node_http_address=(
                    strip_scheme(attempt.get('nodeHttpAddress')) or None),
            )
            am_containers.append(
                (_attempt_num(attempt, container_id), report))

        return _by_attempt(am_containers)

    def _from_history_server(self, application_id):
        am_containers = []

        for attempt in self.history.get_application_attempts(application_id):
            container_id = attempt.get('amContainerId')
            if not container_id:
                continue

            report = ContainerReport(container_id, None, None)
            am_containers.append(
                (_attempt_num(attempt, container_id), report))

        return _by_attempt(am_containers)
