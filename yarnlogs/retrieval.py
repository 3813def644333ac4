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
"""Retrieve logs for an application, a container, or an application's AM
containers, from wherever they happen to be.

:py:class:`RetrievalOrchestrator` works out whether the application is
still running, finds each container's NodeManager (or node, for archived
logs), matches the requested log names against what's actually there,
and fetches each file.

When fetching logs from several containers, failures are reported as they
happen, and the retrieval as a whole succeeds if *any* container's logs
were retrieved (see :py:func:`~yarnlogs.request.any_succeeded`).
"""
import getpass
from logging import getLogger

from yarnlogs.am import ALL_AM_CONTAINERS
from yarnlogs.am import AmContainerResolver
from yarnlogs.am import pick_am_container
from yarnlogs.archive import ArchiveLogReader
from yarnlogs.errors import AmResolutionError
from yarnlogs.errors import NotFoundError
from yarnlogs.errors import TransportError
from yarnlogs.errors import ValidationError
from yarnlogs.fs.composite import CompositeFilesystem
from yarnlogs.fs.hadoop import HadoopFilesystem
from yarnlogs.fs.local import LocalFilesystem
from yarnlogs.live import LiveLogFetcher
from yarnlogs.locate import FINISHED
from yarnlogs.locate import NOT_STARTED
from yarnlogs.locate import ContainerLocator
from yarnlogs.locate import classify_state
from yarnlogs.locate import filter_containers
from yarnlogs.locate import get_application_report
from yarnlogs.match import match_or_passthrough
from yarnlogs.output import PER_LOG_FILE_INFO_PATTERN
from yarnlogs.output import OutputSink
from yarnlogs.output import container_header
from yarnlogs.output import format_time
from yarnlogs.output import write_line
from yarnlogs.parse import to_local_path
from yarnlogs.request import ALL_LOGS
from yarnlogs.request import FAILURE_CODE
from yarnlogs.request import SUCCESS_CODE
from yarnlogs.request import RetrievalOutcome
from yarnlogs.request import aggregate_result_code
from yarnlogs.request import any_succeeded
from yarnlogs.yarn_api import YarnHistoryServer
from yarnlogs.yarn_api import YarnResourceManager

log = getLogger(__name__)

### modes ###

#: fetch log contents (the default)
LOGS = 'logs'
#: list each container's log files and their sizes
CONTAINER_LOG_INFO = 'container_log_info'
#: list nodes that aggregated logs (finished applications only)
NODE_LIST = 'node_list'
#: list the application's containers
APPLICATION_LOG_INFO = 'application_log_info'

MODES = (LOGS, CONTAINER_LOG_INFO, NODE_LIST, APPLICATION_LOG_INFO)


class _Interrupted(KeyboardInterrupt):
    """Raised when the user interrupts us partway through a container.
    *outcome* describes the files we managed to fetch."""

    def __init__(self, outcome):
        super(_Interrupted, self).__init__()
        self.outcome = outcome


class RetrievalOrchestrator(object):
    """Coordinates fetching logs.

    :param rm: a :py:class:`~yarnlogs.yarn_api.YarnResourceManager`
    :param archive: a :py:class:`~yarnlogs.archive.ArchiveLogReader`
    :param live: a :py:class:`~yarnlogs.live.LiveLogFetcher`
    :param history: a :py:class:`~yarnlogs.yarn_api.YarnHistoryServer`, or
                    ``None`` if the history service isn't enabled
    :param sink: an :py:class:`~yarnlogs.output.OutputSink`; should be
                 the same one *archive* writes to
    """

    def __init__(self, rm, archive, live, history=None, sink=None):
        self.rm = rm
        self.archive = archive
        self.live = live
        self.history = history
        self.sink = sink or archive.sink

        self.locator = ContainerLocator(rm, history)
        self.am_resolver = AmContainerResolver(rm, history)

    @classmethod
    def from_opts(cls, opts, sink=None):
        """Build an orchestrator from a dictionary of options (see
        :py:func:`yarnlogs.conf.load_opts`)."""
        sink = sink or OutputSink()
        api_kwargs = dict(timeout=opts['timeout'], scheme=opts['http_scheme'])

        rm = YarnResourceManager.from_address(
            opts['resource_manager'], **api_kwargs)

        history = None
        if opts['history_enabled']:
            history = YarnHistoryServer.from_address(
                opts['history_server'], **api_kwargs)

        fs = CompositeFilesystem(
            LocalFilesystem(), HadoopFilesystem(opts['hadoop_bin']))

        archive = ArchiveLogReader(
            fs, to_local_path(opts['remote_log_dir']),
            suffix=opts['remote_log_dir_suffix'], sink=sink)

        return cls(rm, archive, LiveLogFetcher(**api_kwargs),
                   history=history, sink=sink)

    @property
    def history_enabled(self):
        return self.history is not None

    ### entry point ###

    def execute_retrieval(self, request, mode=LOGS, am_selectors=None):
        """Run a retrieval, and return a result code (``0`` for success,
        ``-1`` for failure).

        :param request: a :py:class:`~yarnlogs.request.RetrievalRequest`
        :param mode: one of :py:data:`MODES`
        :param am_selectors: selectors from
                             :py:func:`~yarnlogs.am.parse_am_selectors`;
                             if set (and *mode* is :py:data:`LOGS`), fetch
                             AM container logs
        """
        try:
            self._check_mode(request, mode, am_selectors)
        except ValidationError as e:
            self.sink.err(str(e))
            return FAILURE_CODE

        request = self.prepare(request)
        if request is None:
            return FAILURE_CODE

        if mode == CONTAINER_LOG_INFO:
            return self.show_container_log_info(request)
        elif mode == NODE_LIST:
            return self.show_nodes(request)
        elif mode == APPLICATION_LOG_INFO:
            return self.show_application_log_info(request)
        elif am_selectors:
            return self.fetch_am_container_logs(request, am_selectors)
        elif request.container_id:
            return self.fetch_container_logs(request)
        else:
            return self.fetch_application_logs(request)

    def _check_mode(self, request, mode, am_selectors):
        if mode not in MODES:
            raise ValidationError('Unknown mode: %r' % (mode,))

        if (mode == LOGS and not am_selectors and
                request.node_id and not request.container_id):
            raise ValidationError('Should at least provide ContainerId!')

    def prepare(self, request):
        """Work out whether the application has finished, and who owns
        it. Return an updated request, or ``None`` if we can't fetch logs
        (the reason is reported to the sink)."""
        try:
            report = get_application_report(
                self.rm, request.application_id, self.history)
        except TransportError as e:
            log.debug("couldn't get application report: %s" % e)
            self.sink.err('Unable to get ApplicationState.'
                          ' Attempting to fetch logs directly from the'
                          ' filesystem.')
            report = dict(state=None, user=None)

        phase = classify_state(report['state'])
        if phase == NOT_STARTED:
            self.sink.err('Logs are not available right now.')
            return None

        app_owner = request.app_owner or self.guess_app_owner(
            request.application_id, report['user'])
        if not app_owner:
            self.sink.err('Can not find the appOwner.'
                          ' Please specify the correct appOwner')
            self.sink.err('Could not locate application logs for %s' %
                          request.application_id)
            return None

        return request.replace(
            app_finished=(phase == FINISHED), app_owner=app_owner)

    def guess_app_owner(self, application_id, user=None):
        """Use the owner from the application report if we have it.
        Otherwise, check the archive for the current user, then anyone."""
        if user:
            return user

        return self.archive.owner_for_app(application_id, getpass.getuser())

    ### single containers ###

    def fetch_container_logs(self, request):
        """Fetch logs for ``request.container_id``."""
        # with a node ID, finished containers are easy to find
        if request.node_id and request.app_finished:
            return self._finished_container(request)

        try:
            location = self.locator.locate(
                request.container_id,
                node_id=request.node_id,
                node_http_address=request.node_http_address,
                app_finished=request.app_finished)
        except TransportError as e:
            log.debug("couldn't locate %s: %s" % (request.container_id, e))

            if request.app_finished:
                return self._finished_container(request, without_node_id=True)

            self.sink.err(
                'Unable to get logs for this container:%s for the'
                ' application:%s with the appOwner: %s' % (
                    request.container_id, request.application_id,
                    request.app_owner))
            self.sink.err(
                'The application: %s is still running, and we can not get'
                ' Container report for the container: %s. Please try later'
                ' or after the application finishes.' % (
                    request.application_id, request.container_id))
            return FAILURE_CODE

        request = request.replace(
            node_id=location.node_id,
            node_http_address=location.node_http_address)

        if location.is_live:
            try:
                return self._running_container(
                    request.with_default_log_names()).result_code
            except _Interrupted as e:
                return e.outcome.result_code
        elif location.app_finished:
            return self._finished_container(request)
        else:
            self._report_no_address(request.container_id)
            return FAILURE_CODE

    def _report_no_address(self, container_id):
        self.sink.err('Can not get the logs for the container: %s' %
                      container_id)
        self.sink.err('The node http address is required to get'
                      ' container logs for the Running application.')

    def _running_container(self, request):
        """Fetch logs for a running container from its NodeManager, and
        whatever's already been aggregated. Returns a
        :py:class:`~yarnlogs.request.RetrievalOutcome`.

        If the user interrupts us while we're fetching files, raises
        :py:class:`_Interrupted` describing the files we did get.
        """
        container_id = request.container_id
        address = request.node_http_address

        if not address:
            self._report_no_address(container_id)
            return RetrievalOutcome.transport_error(
                container_id, reason='no node http address')

        def list_candidates():
            return [info.file_name for info in
                    self.live.list_log_files(container_id, address)]

        matched = match_or_passthrough(request.log_names, list_candidates)
        if not matched:
            self._report_no_match(request)
            return RetrievalOutcome.not_found(container_id)

        request = request.replace(log_names=matched)

        outcomes = []
        interrupted = False

        with self.sink.container_stream(
                request.output_dir, request.node_id, container_id) as out:
            for line in container_header(container_id, request.node_id):
                write_line(out, line)

            try:
                for file_name in matched:
                    outcomes.append(
                        self._fetch_live_file(out, request, file_name))
            except KeyboardInterrupt:
                interrupted = True

        if interrupted:
            log.warning('Interrupted; skipping %d remaining log file(s) for'
                        ' %s' % (len(matched) - len(outcomes), container_id))
            raise _Interrupted(self._summarize(container_id, outcomes))

        # some logs may already have been aggregated
        outcomes.append(RetrievalOutcome.from_result_code(
            container_id, self._read_archive_quietly(request)))

        return self._summarize(container_id, outcomes)

    def _summarize(self, container_id, outcomes):
        if any_succeeded(outcomes):
            return RetrievalOutcome.success(container_id, bytes_written=sum(
                o.detail for o in outcomes if o.succeeded))
        else:
            return RetrievalOutcome.transport_error(
                container_id, reason='no logs retrieved')

    def _fetch_live_file(self, out, request, file_name):
        container_id = request.container_id

        try:
            content = self.live.fetch_log(
                container_id, request.node_http_address, file_name,
                byte_limit=request.byte_limit)
        except TransportError as e:
            self.sink.err('Can not find the log file:%s for the container:%s'
                          ' in NodeManager:%s' % (
                              file_name, container_id, request.node_id))
            return RetrievalOutcome.transport_error(
                container_id, file_name, str(e))

        write_line(out, 'LogType:%s' % file_name)
        write_line(out, 'Log Upload Time:%s' % format_time())
        write_line(out, 'Log Contents:')
        write_line(out, content)
        write_line(out, 'End of LogType:%s. This log file belongs to a'
                   ' running container (%s) and so may not be complete.' % (
                       file_name, container_id))
        out.flush()

        return RetrievalOutcome.success(
            container_id, file_name, len(content.encode('utf_8')))

    def _read_archive_quietly(self, request):
        try:
            return self.archive.read_logs(request, report_missing=False)
        except IOError as e:
            log.debug("couldn't check archive for %s: %s" % (
                request.container_id, e))
            return FAILURE_CODE

    def _finished_container(self, request, without_node_id=False):
        """Read a finished container's logs from the archive. Returns a
        result code."""
        matched_request = self._match_archived(request)
        if matched_request is None:
            self._report_no_match(request)
            return FAILURE_CODE

        try:
            if without_node_id:
                return self.archive.read_logs_without_node_id(matched_request)
            else:
                return self.archive.read_logs(matched_request)
        except IOError as e:
            self.sink.err('Unable to read aggregated logs for the'
                          ' container: %s: %s' % (request.container_id, e))
            return FAILURE_CODE

    def _match_archived(self, request):
        """Expand ``request.log_names`` against what's in the archive.

        Returns the updated request, or ``None`` if the requested names
        explicitly matched nothing. If all logs were requested, we don't
        bother listing the archive.
        """
        if not request.log_names:
            return request

        if request.wants_all_logs:
            return request.replace(log_names=(ALL_LOGS,))

        matched = match_or_passthrough(
            request.log_names, lambda: self.archive.list_files(request))
        if not matched:
            return None

        return request.replace(log_names=matched)

    def _report_no_match(self, request):
        if request.container_id:
            self.sink.err(
                'Can not find any log file matching the pattern: %s for the'
                ' container: %s within the application: %s' % (
                    list(request.log_names), request.container_id,
                    request.application_id))
        else:
            self.sink.err(
                'Can not find any log file matching the pattern: %s for the'
                ' application: %s' % (
                    list(request.log_names), request.application_id))

    ### whole applications ###

    def fetch_application_logs(self, request):
        """Fetch logs for every container of the application."""
        if request.app_finished:
            result_code = self._finished_application(request)
        else:
            result_code = self._running_application(request)

        if result_code != SUCCESS_CODE:
            self.sink.err(
                'Can not find the logs for the application: %s with the'
                ' appOwner: %s' % (request.application_id, request.app_owner))

        return result_code

    def _finished_application(self, request):
        matched_request = self._match_archived(request)
        if matched_request is None:
            self._report_no_match(request)
            return FAILURE_CODE

        try:
            return self.archive.read_all_containers(matched_request)
        except IOError as e:
            self.sink.err('Unable to read aggregated logs for the'
                          ' application: %s: %s' % (
                              request.application_id, e))
            return FAILURE_CODE

    def _running_application(self, request):
        try:
            reports = self.locator.list_containers(request.application_id)
        except TransportError as e:
            self.sink.err('Unable to get containers for the application:'
                          ' %s: %s' % (request.application_id, e))
            return FAILURE_CODE

        requests = [
            request.replace(
                container_id=report.container_id,
                node_id=report.node_id,
                node_http_address=report.node_http_address,
            ).with_default_log_names()
            for report in reports
        ]

        return aggregate_result_code(
            self._run_each(self._running_container, requests))

    def _run_each(self, func, requests):
        """Call *func* on each request in turn, and return the outcomes.
        If interrupted, stop and return what we have so far."""
        outcomes = []

        try:
            for request in requests:
                outcomes.append(func(request))
        except KeyboardInterrupt as e:
            # keep whatever we got from the interrupted container
            if isinstance(e, _Interrupted):
                outcomes.append(e.outcome)
            log.warning('Interrupted; skipping logs for %d remaining'
                        ' container(s)' % (len(requests) - len(outcomes)))

        return outcomes

    ### AM containers ###

    def fetch_am_container_logs(self, request, am_selectors):
        """Fetch logs for the AM containers chosen by *am_selectors*
        (see :py:func:`~yarnlogs.am.parse_am_selectors`)."""
        request = request.with_default_log_names()

        if request.app_finished and not self.history_enabled:
            self.sink.err('Can not get AMContainers logs for the'
                          ' application:%s with the appOwner:%s' % (
                              request.application_id, request.app_owner))
            self.sink.err(
                'This application:%s has finished. Please enable the'
                ' application-history service or explicitly use'
                " 'yarn logs -applicationId <appId> -containerId"
                " <containerId> --nodeAddress <nodeHttpAddress>' to get the"
                ' container logs.' % request.application_id)
            return FAILURE_CODE

        try:
            am_containers = self.am_resolver.resolve(
                request.application_id, request.app_finished)
        except AmResolutionError as e:
            self.sink.err(str(e))
            return FAILURE_CODE

        am_requests = [
            request.replace(
                container_id=report.container_id,
                node_id=report.node_id,
                node_http_address=report.node_http_address)
            for report in am_containers
        ]

        if ALL_AM_CONTAINERS in am_selectors:
            outcomes = self._run_each(self._am_container, am_requests)
            self.sink.out()
            self.sink.out('Specified ALL for -am option.'
                          ' Printed logs for all am containers.')
            return aggregate_result_code(outcomes)

        try:
            chosen = [pick_am_container(am_requests, selector)
                      for selector in am_selectors]
        except NotFoundError as e:
            self.sink.err(str(e))
            return FAILURE_CODE

        return aggregate_result_code(
            self._run_each(self._am_container, chosen))

    def _am_container(self, request):
        """Fetch logs for a single AM container. Returns a
        :py:class:`~yarnlogs.request.RetrievalOutcome`."""
        if not request.app_finished:
            return self._running_container(request)

        node_id = request.node_id
        if not node_id:
            try:
                node_id = self.locator.locate(
                    request.container_id, app_finished=True).node_id
            except TransportError as e:
                self.sink.err(str(e))

        if node_id:
            result_code = self._finished_container(
                request.replace(node_id=node_id))
        else:
            result_code = self._finished_container(
                request, without_node_id=True)

        return RetrievalOutcome.from_result_code(
            request.container_id, result_code)

    ### metadata ###

    def show_container_log_info(self, request):
        """Print each matching container's log files and their sizes."""
        if request.app_finished:
            try:
                return self.archive.print_container_metadata(request)
            except IOError as e:
                self.sink.err('Unable to read aggregated logs for the'
                              ' application: %s: %s' % (
                                  request.application_id, e))
                return FAILURE_CODE

        reports = self._running_containers(request)
        if reports is None:
            return FAILURE_CODE

        if not reports:
            msg = []
            if request.container_id:
                msg.append('Trying to get container with ContainerId: %s' %
                           request.container_id)
            if request.node_id:
                msg.append('Trying to get container from NodeManager: %s' %
                           request.node_id)
            msg.append('Can not find any matched containers for the'
                       ' application: %s' % request.application_id)
            self.sink.err('\n'.join(msg))
            return FAILURE_CODE

        return aggregate_result_code(
            self._run_each(self._print_live_log_info, reports))

    def _print_live_log_info(self, report):
        if not report.node_http_address:
            self._report_no_address(report.container_id)
            return RetrievalOutcome.transport_error(
                report.container_id, reason='no node http address')

        try:
            infos = self.live.list_log_files(
                report.container_id, report.node_http_address)
        except TransportError as e:
            self.sink.err('Unable to fetch log files list for the'
                          ' container: %s: %s' % (report.container_id, e))
            return RetrievalOutcome.transport_error(
                report.container_id, reason=str(e))

        header = container_header(report.container_id, report.node_id)
        self.sink.out(header[0])
        self.sink.out(header[1])
        self.sink.out(PER_LOG_FILE_INFO_PATTERN % ('LogType', 'LogLength'))
        self.sink.out(header[1])
        for info in infos:
            self.sink.out(PER_LOG_FILE_INFO_PATTERN % (
                info.file_name, info.file_size))

        return RetrievalOutcome.success(report.container_id)

    def show_nodes(self, request):
        """Print the nodes that aggregated logs for a finished
        application."""
        if not request.app_finished:
            self.sink.err('The -list_nodes command can be only used with'
                          ' finished applications')
            return FAILURE_CODE

        try:
            return self.archive.print_nodes(request)
        except IOError as e:
            self.sink.err('Unable to read aggregated logs for the'
                          ' application: %s: %s' % (
                              request.application_id, e))
            return FAILURE_CODE

    def show_application_log_info(self, request):
        """Print the application's state and its containers."""
        if request.app_finished:
            self.sink.out('Application State: Completed.')
            try:
                return self.archive.print_containers(request)
            except IOError as e:
                self.sink.err('Unable to read aggregated logs for the'
                              ' application: %s: %s' % (
                                  request.application_id, e))
                return FAILURE_CODE

        reports = self._running_containers(request)
        if reports is None:
            return FAILURE_CODE

        if not reports:
            self.sink.err('Can not find any containers for the'
                          ' application:%s.' % request.application_id)
            return FAILURE_CODE

        self.sink.out('Application State: Running.')
        for report in reports:
            self.sink.out(
                container_header(report.container_id, report.node_id)[0])

        return SUCCESS_CODE

    def _running_containers(self, request):
        """Containers of a running application, filtered by the request's
        container and node IDs. ``None`` if we couldn't list them."""
        try:
            reports = self.locator.list_containers(request.application_id)
        except TransportError as e:
            self.sink.err('Unable to get containers for the application:'
                          ' %s: %s' % (request.application_id, e))
            return None

        return filter_containers(
            reports, request.container_id, request.node_id)
