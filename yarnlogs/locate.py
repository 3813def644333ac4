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
"""Figure out what phase an application is in, and where each of its
containers' logs can be found.

A running application's logs are served by the NodeManager running each
container, so we need that NodeManager's HTTP address. A finished
application's logs are in the archive, keyed by node ID.
"""
from logging import getLogger

from yarnlogs.errors import TransportError
from yarnlogs.ids import container_id_to_application_id
from yarnlogs.ids import container_id_to_attempt_id
from yarnlogs.ids import parse_application_id
from yarnlogs.request import ContainerLocation
from yarnlogs.request import ContainerReport
from yarnlogs.util import strip_scheme

log = getLogger(__name__)

### phases ###

RUNNING = 'RUNNING'
FINISHED = 'FINISHED'
#: submitted, but no containers yet
NOT_STARTED = 'NOT_STARTED'

_NOT_STARTED_STATES = ('NEW', 'NEW_SAVING', 'SUBMITTED')

_FINISHED_STATES = ('FINISHED', 'FAILED', 'KILLED')


def classify_state(state):
    """Map a YARN application state to :py:data:`RUNNING`,
    :py:data:`FINISHED` or :py:data:`NOT_STARTED`.

    If *state* is ``None`` (we couldn't find out), assume the application
    has finished, so we at least look in the archive.
    """
    if state is None:
        return FINISHED

    state = state.upper()

    if state in _NOT_STARTED_STATES:
        return NOT_STARTED
    elif state in _FINISHED_STATES:
        return FINISHED
    else:
        return RUNNING


def get_application_report(rm, application_id, history=None):
    """Return a dict with the *state* and *user* of the given application,
    asking the ResourceManager *rm*, then the history server *history*
    (if set).

    Raises :py:class:`~yarnlogs.errors.TransportError` if neither knows.
    """
    causes = []

    try:
        info = rm.get_application_info(application_id)
        return dict(state=info.get('state'), user=info.get('user'))
    except TransportError as e:
        causes.append(str(e))

    if history is not None:
        try:
            info = history.get_application_info(application_id)
            return dict(state=info.get('appState') or info.get('state'),
                        user=info.get('user'))
        except TransportError as e:
            causes.append(str(e))

    raise TransportError('\n'.join(causes))


def _to_container_report(info):
    """Convert a container dict from the REST API to a
    :py:class:`~yarnlogs.request.ContainerReport`."""
    return ContainerReport(
        container_id=info.get('containerId') or info.get('id'),
        node_id=info.get('assignedNodeId') or info.get('nodeId'),
        node_http_address=strip_scheme(info.get('nodeHttpAddress')) or None,
    )


def _attempt_id(application_id, attempt):
    """Get the attempt ID from an attempt dict. Older ResourceManagers
    only give us the attempt number (``id``)."""
    if attempt.get('appAttemptId'):
        return attempt['appAttemptId']

    parts = parse_application_id(application_id)
    return 'appattempt_%s_%s_%06d' % (
        parts['timestamp'], parts['app_num'], int(attempt['id']))


def filter_containers(reports, container_id=None, node_id=None):
    """Return a new list of the *reports* whose container ID and node ID
    match *container_id* and *node_id* (case-insensitively), if set."""
    def matches(report):
        if container_id and (
                (report.container_id or '').lower() !=
                container_id.lower()):
            return False
        if node_id and (report.node_id or '').lower() != node_id.lower():
            return False
        return True

    return [report for report in reports if matches(report)]


class ContainerLocator(object):
    """Find containers' nodes and NodeManager addresses, using the
    ResourceManager *rm* (a :py:class:`~yarnlogs.yarn_api.YarnResourceManager`)
    and optionally the history server *history*."""

    def __init__(self, rm, history=None):
        self.rm = rm
        self.history = history

    def locate(self, container_id, node_id=None, node_http_address=None,
               app_finished=False):
        """Return a :py:class:`~yarnlogs.request.ContainerLocation`.

        If the application has finished and we know the node ID, we don't
        need to talk to anyone. Otherwise, we ask for a container report,
        which raises :py:class:`~yarnlogs.errors.TransportError` on
        failure.
        """
        if app_finished and node_id:
            return ContainerLocation(
                container_id, node_id, node_http_address, True)

        report = self.container_report(container_id)

        return ContainerLocation(
            container_id,
            report.node_id or node_id,
            report.node_http_address or strip_scheme(node_http_address),
            app_finished,
        )

    def container_report(self, container_id):
        """Look up a single container, first on the ResourceManager, then
        on the history server. Raise
        :py:class:`~yarnlogs.errors.TransportError`, with all causes, if
        neither knows about it."""
        application_id = container_id_to_application_id(container_id)
        attempt_id = container_id_to_attempt_id(container_id)

        causes = []
        sources = [('ResourceManager', self.rm)]
        if self.history is not None:
            sources.append(('history server', self.history))

        for name, api in sources:
            try:
                info = api.get_container(
                    application_id, attempt_id, container_id)
                log.debug('got container report for %s from %s' % (
                    container_id, name))
                return _to_container_report(info)
            except TransportError as e:
                log.debug("couldn't get container report for %s from %s" % (
                    container_id, name))
                causes.append(str(e))

        raise TransportError('\n'.join(causes))

    def list_containers(self, application_id):
        """List :py:class:`~yarnlogs.request.ContainerReport` for every
        container of every attempt of the given (running) application,
        in attempt order."""
        reports = []

        for attempt in self.rm.get_application_attempts(application_id):
            attempt_id = _attempt_id(application_id, attempt)
            for info in self.rm.get_attempt_containers(
                    application_id, attempt_id):
                reports.append(_to_container_report(info))

        return reports
