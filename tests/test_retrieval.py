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
from io import StringIO
from unittest.mock import Mock
from unittest.mock import patch

from yarnlogs.archive import ArchiveLogReader
from yarnlogs.fs.composite import CompositeFilesystem
from yarnlogs.live import LiveLogFetcher
from yarnlogs.output import OutputSink
from yarnlogs.request import ALL_LOGS
from yarnlogs.request import FAILURE_CODE
from yarnlogs.request import SUCCESS_CODE
from yarnlogs.request import PerLogFileInfo
from yarnlogs.request import RetrievalRequest
from yarnlogs.retrieval import APPLICATION_LOG_INFO
from yarnlogs.retrieval import CONTAINER_LOG_INFO
from yarnlogs.retrieval import LOGS
from yarnlogs.retrieval import NODE_LIST
from yarnlogs.retrieval import RetrievalOrchestrator
from yarnlogs.yarn_api import YarnAPIError
from yarnlogs.yarn_api import YarnHistoryServer
from yarnlogs.yarn_api import YarnResourceManager

from tests.sandbox import AM_CONTAINER_1
from tests.sandbox import AM_CONTAINER_2
from tests.sandbox import APP_ID
from tests.sandbox import CONTAINER_1
from tests.sandbox import CONTAINER_2
from tests.sandbox import NODE_1
from tests.sandbox import NODE_1_HTTP
from tests.sandbox import NODE_2
from tests.sandbox import NODE_2_HTTP
from tests.sandbox import ArchiveTestCase
from tests.sandbox import BasicTestCase
from tests.sandbox import mock_rm

CONTAINER_3 = 'container_1450486922681_0005_01_000004'

ATTEMPT_1 = 'appattempt_1450486922681_0005_000001'


class RetrievalTestCase(BasicTestCase):

    def setUp(self):
        super(RetrievalTestCase, self).setUp()

        self.stdout = StringIO()
        self.stderr = StringIO()
        self.sink = OutputSink(stdout=self.stdout, stderr=self.stderr)

        self.rm = mock_rm()
        self.history = Mock()
        self.live = Mock()

        self.archive = Mock()
        self.archive.sink = self.sink
        self.archive.list_files.return_value = {'stderr', 'stdout', 'syslog'}
        self.archive.read_logs.return_value = SUCCESS_CODE
        self.archive.read_logs_without_node_id.return_value = SUCCESS_CODE
        self.archive.read_all_containers.return_value = SUCCESS_CODE

    def orchestrator(self, history_enabled=False):
        return RetrievalOrchestrator(
            self.rm, self.archive, self.live,
            history=(self.history if history_enabled else None),
            sink=self.sink)

    def set_app_state(self, state, user='dave'):
        self.rm.get_application_info.return_value = dict(
            state=state, user=user)

    def set_running_containers(self, *container_ids):
        nodes = [(NODE_1, NODE_1_HTTP), (NODE_2, NODE_2_HTTP)]

        self.rm.get_application_attempts.return_value = [
            dict(id=1, appAttemptId=ATTEMPT_1, containerId=AM_CONTAINER_1,
                 nodeId=NODE_1, nodeHttpAddress='http://' + NODE_1_HTTP)]
        self.rm.get_attempt_containers.return_value = [
            dict(containerId=container_id,
                 assignedNodeId=nodes[i % 2][0],
                 nodeHttpAddress='http://' + nodes[i % 2][1])
            for i, container_id in enumerate(container_ids)]

    def archive_request(self, method):
        """The request passed to the only call of an archive method."""
        getattr(self.archive, method).assert_called_once()
        return getattr(self.archive, method).call_args[0][0]


class CheckModeTestCase(RetrievalTestCase):

    def test_node_without_container(self):
        request = RetrievalRequest.build(application_id=APP_ID, node_id=NODE_1)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         FAILURE_CODE)
        self.assertEqual(self.stderr.getvalue(),
                         'Should at least provide ContainerId!\n')
        self.assertFalse(self.rm.get_application_info.called)

    def test_unknown_mode(self):
        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator().execute_retrieval(request, mode='tail'),
            FAILURE_CODE)


class PrepareTestCase(RetrievalTestCase):

    def test_not_started(self):
        self.set_app_state('SUBMITTED')
        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         FAILURE_CODE)
        self.assertEqual(self.stderr.getvalue(),
                         'Logs are not available right now.\n')
        self.assertFalse(self.archive.read_all_containers.called)

    def test_finished(self):
        request = self.orchestrator().prepare(
            RetrievalRequest.build(application_id=APP_ID))

        self.assertTrue(request.app_finished)
        self.assertEqual(request.app_owner, 'dave')

    def test_running(self):
        self.set_app_state('RUNNING')

        request = self.orchestrator().prepare(
            RetrievalRequest.build(application_id=APP_ID))

        self.assertFalse(request.app_finished)

    def test_explicit_owner(self):
        request = self.orchestrator().prepare(
            RetrievalRequest.build(application_id=APP_ID, app_owner='jane'))

        self.assertEqual(request.app_owner, 'jane')

    def test_unknown_state_assumes_finished(self):
        self.rm.get_application_info.side_effect = YarnAPIError('rm is down')
        self.archive.owner_for_app.return_value = 'dave'
        self.start(patch('getpass.getuser', return_value='me'))

        request = self.orchestrator().prepare(
            RetrievalRequest.build(application_id=APP_ID))

        self.assertTrue(request.app_finished)
        self.assertEqual(request.app_owner, 'dave')
        self.archive.owner_for_app.assert_called_once_with(APP_ID, 'me')
        self.assertIn('Unable to get ApplicationState.',
                      self.stderr.getvalue())

    def test_history_server_knows_state(self):
        self.rm.get_application_info.side_effect = YarnAPIError('rm is down')
        self.history.get_application_info.return_value = dict(
            appState='KILLED', user='jane')

        request = self.orchestrator(history_enabled=True).prepare(
            RetrievalRequest.build(application_id=APP_ID))

        self.assertTrue(request.app_finished)
        self.assertEqual(request.app_owner, 'jane')
        self.assertEqual(self.stderr.getvalue(), '')

    def test_cant_find_owner(self):
        self.rm.get_application_info.side_effect = YarnAPIError('rm is down')
        self.archive.owner_for_app.return_value = None

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         FAILURE_CODE)
        self.assertIn('Can not find the appOwner.', self.stderr.getvalue())


class FinishedContainerTestCase(RetrievalTestCase):

    def test_read_from_archive(self):
        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1, node_id=NODE_1,
            log_names=['syslog'])

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         SUCCESS_CODE)

        archive_request = self.archive_request('read_logs')
        self.assertEqual(archive_request.log_names, ('syslog',))
        self.assertEqual(archive_request.container_id, CONTAINER_1)
        self.assertEqual(archive_request.app_owner, 'dave')
        self.assertFalse(self.live.fetch_log.called)

    def test_patterns_expanded_against_archive(self):
        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1, node_id=NODE_1,
            log_names=['^std'])

        self.orchestrator().execute_retrieval(request)

        self.assertEqual(
            sorted(self.archive_request('read_logs').log_names),
            ['stderr', 'stdout'])

    def test_no_archive_listing_for_all_logs(self):
        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1, node_id=NODE_1,
            log_names=['ALL'])

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         SUCCESS_CODE)

        self.assertFalse(self.archive.list_files.called)
        self.assertEqual(self.archive_request('read_logs').log_names,
                         (ALL_LOGS,))

    def test_no_matching_log_files(self):
        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1, node_id=NODE_1,
            log_names=['gc.log'])

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         FAILURE_CODE)
        self.assertFalse(self.archive.read_logs.called)
        self.assertIn("Can not find any log file matching the pattern:"
                      " ['gc.log']", self.stderr.getvalue())

    def test_without_node_id(self):
        self.rm.get_container.return_value = dict(
            containerId=CONTAINER_1, assignedNodeId=NODE_2)

        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         SUCCESS_CODE)
        self.assertEqual(self.archive_request('read_logs').node_id, NODE_2)

    def test_container_report_unavailable(self):
        self.rm.get_container.side_effect = YarnAPIError('forgotten')

        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         SUCCESS_CODE)
        self.assertEqual(
            self.archive_request('read_logs_without_node_id').container_id,
            CONTAINER_1)

    def test_archive_read_error(self):
        self.archive.read_logs.side_effect = IOError('hdfs is down')

        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1, node_id=NODE_1,
            log_names=['ALL'])

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         FAILURE_CODE)
        self.assertIn('hdfs is down', self.stderr.getvalue())


class RunningContainerTestCase(RetrievalTestCase):

    def setUp(self):
        super(RunningContainerTestCase, self).setUp()

        self.set_app_state('RUNNING')
        self.archive.read_logs.return_value = FAILURE_CODE

        self.rm.get_container.return_value = dict(
            containerId=CONTAINER_1, assignedNodeId=NODE_1,
            nodeHttpAddress='http://' + NODE_1_HTTP)

        self.live.list_log_files.return_value = [
            PerLogFileInfo('stderr', '0'),
            PerLogFileInfo('syslog', '16'),
        ]
        self.live.fetch_log.return_value = 'syslog contents'

    def test_default_log_names(self):
        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         SUCCESS_CODE)

        self.live.fetch_log.assert_called_once_with(
            CONTAINER_1, NODE_1_HTTP, 'syslog', byte_limit=None)

        output = self.stdout.getvalue()
        self.assertIn('Container: %s on %s\n' % (CONTAINER_1, NODE_1),
                      output)
        self.assertIn('LogType:syslog\n', output)
        self.assertIn('Log Contents:\nsyslog contents\n', output)
        self.assertIn('End of LogType:syslog. This log file belongs to a'
                      ' running container (%s) and so may not be'
                      ' complete.' % CONTAINER_1, output)

    def test_byte_limit(self):
        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1,
            log_names=['syslog'], byte_limit=-100)

        self.orchestrator().execute_retrieval(request)

        self.live.fetch_log.assert_called_once_with(
            CONTAINER_1, NODE_1_HTTP, 'syslog', byte_limit=-100)

    def test_no_node_http_address(self):
        self.rm.get_container.return_value = dict(
            containerId=CONTAINER_1, assignedNodeId=NODE_1)

        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         FAILURE_CODE)
        self.assertIn('The node http address is required',
                      self.stderr.getvalue())
        self.assertFalse(self.archive.read_logs.called)
        self.assertFalse(self.live.fetch_log.called)

    def test_container_report_unavailable(self):
        self.rm.get_container.side_effect = YarnAPIError('forgotten')

        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         FAILURE_CODE)
        self.assertIn('is still running', self.stderr.getvalue())
        self.assertFalse(self.archive.read_logs.called)

    def test_listing_failure_uses_names_as_given(self):
        self.live.list_log_files.side_effect = YarnAPIError('refused')

        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1,
            log_names=['stdout'])

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         SUCCESS_CODE)
        self.live.fetch_log.assert_called_once_with(
            CONTAINER_1, NODE_1_HTTP, 'stdout', byte_limit=None)

    def test_fetch_failure(self):
        self.live.fetch_log.side_effect = YarnAPIError('refused')

        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         FAILURE_CODE)
        self.assertIn('Can not find the log file:syslog for the container:%s'
                      ' in NodeManager:%s' % (CONTAINER_1, NODE_1),
                      self.stderr.getvalue())

    def test_already_aggregated(self):
        self.live.fetch_log.side_effect = YarnAPIError('refused')
        self.archive.read_logs.return_value = SUCCESS_CODE

        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         SUCCESS_CODE)

        _, kwargs = self.archive.read_logs.call_args
        self.assertEqual(kwargs, dict(report_missing=False))

    def test_no_matching_log_files(self):
        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1,
            log_names=['gc.log'])

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         FAILURE_CODE)
        self.assertFalse(self.live.fetch_log.called)

    def test_interrupt_keeps_fetched_files(self):
        self.live.fetch_log.side_effect = ['stderr data', KeyboardInterrupt()]

        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1,
            log_names=['stderr', 'syslog'])

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         SUCCESS_CODE)
        self.assertEqual(self.live.fetch_log.call_count, 2)
        self.assertIn('Log Contents:\nstderr data\n', self.stdout.getvalue())
        # we don't go on to check the archive
        self.assertFalse(self.archive.read_logs.called)

    def test_interrupt_before_anything_fetched(self):
        self.live.fetch_log.side_effect = [
            YarnAPIError('refused'), KeyboardInterrupt()]

        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1,
            log_names=['stderr', 'syslog'])

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         FAILURE_CODE)
        self.assertFalse(self.archive.read_logs.called)


class FinishedApplicationTestCase(RetrievalTestCase):

    def test_read_all_containers(self):
        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         SUCCESS_CODE)
        self.assertEqual(self.archive_request('read_all_containers').log_names,
                         ())

    def test_nothing_in_archive(self):
        self.archive.read_all_containers.return_value = FAILURE_CODE

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         FAILURE_CODE)
        self.assertIn('Can not find the logs for the application: %s with'
                      ' the appOwner: dave' % APP_ID, self.stderr.getvalue())


class RunningApplicationTestCase(RetrievalTestCase):

    def setUp(self):
        super(RunningApplicationTestCase, self).setUp()

        self.set_app_state('RUNNING')
        self.set_running_containers(CONTAINER_1, CONTAINER_2, CONTAINER_3)
        self.archive.read_logs.return_value = FAILURE_CODE

        self.live.list_log_files.return_value = [
            PerLogFileInfo('syslog', '16')]

    def test_one_success_is_enough(self):
        self.live.fetch_log.side_effect = [
            'syslog contents',
            YarnAPIError('refused'),
            YarnAPIError('refused'),
        ]

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         SUCCESS_CODE)
        self.assertEqual(self.live.fetch_log.call_count, 3)
        self.assertEqual(
            self.stderr.getvalue().count('Can not find the log file'), 2)

    def test_all_failures(self):
        self.live.fetch_log.side_effect = YarnAPIError('refused')

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         FAILURE_CODE)
        self.assertEqual(self.live.fetch_log.call_count, 3)

    def test_interrupt_keeps_partial_results(self):
        self.live.fetch_log.side_effect = [
            'syslog contents',
            KeyboardInterrupt,
        ]

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         SUCCESS_CODE)
        self.assertEqual(self.live.fetch_log.call_count, 2)

    def test_interrupt_within_container_keeps_its_files(self):
        self.live.list_log_files.return_value = [
            PerLogFileInfo('stderr', '0'),
            PerLogFileInfo('syslog', '16'),
        ]
        self.live.fetch_log.side_effect = [
            YarnAPIError('refused'),
            YarnAPIError('refused'),
            'stderr data',
            KeyboardInterrupt(),
        ]

        request = RetrievalRequest.build(
            application_id=APP_ID, log_names=['stderr', 'syslog'])

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         SUCCESS_CODE)
        # third container is skipped
        self.assertEqual(self.live.fetch_log.call_count, 4)
        self.assertIn('stderr data', self.stdout.getvalue())

    def test_cant_list_containers(self):
        self.rm.get_application_attempts.side_effect = YarnAPIError('down')

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(self.orchestrator().execute_retrieval(request),
                         FAILURE_CODE)
        self.assertFalse(self.live.fetch_log.called)


class AMContainerTestCase(RetrievalTestCase):

    RM_ATTEMPTS = [
        dict(id=1, appAttemptId=ATTEMPT_1, containerId=AM_CONTAINER_1,
             nodeId=NODE_1, nodeHttpAddress='http://' + NODE_1_HTTP),
        dict(id=2, appAttemptId='appattempt_1450486922681_0005_000002',
             containerId=AM_CONTAINER_2, nodeId=NODE_2,
             nodeHttpAddress='http://' + NODE_2_HTTP),
    ]

    def setUp(self):
        super(AMContainerTestCase, self).setUp()

        self.rm.get_application_attempts.return_value = self.RM_ATTEMPTS
        self.live.list_log_files.return_value = [
            PerLogFileInfo('syslog', '16')]
        self.live.fetch_log.return_value = 'syslog contents'

    def test_selector_out_of_range(self):
        self.set_app_state('RUNNING')
        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator().execute_retrieval(request, am_selectors=[3]),
            FAILURE_CODE)
        self.assertIn('Specified AM containerId (3) exceeds the number of AM'
                      ' containers (2).', self.stderr.getvalue())
        self.assertFalse(self.live.fetch_log.called)

    def test_bad_selector_checked_before_any_fetch(self):
        self.set_app_state('RUNNING')
        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator().execute_retrieval(
                request, am_selectors=[1, 3]),
            FAILURE_CODE)
        self.assertFalse(self.live.fetch_log.called)

    def test_running_latest(self):
        self.set_app_state('RUNNING')
        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator().execute_retrieval(request, am_selectors=[-1]),
            SUCCESS_CODE)
        self.live.fetch_log.assert_called_once_with(
            AM_CONTAINER_2, NODE_2_HTTP, 'syslog', byte_limit=None)

    def test_running_all(self):
        self.set_app_state('RUNNING')
        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator().execute_retrieval(
                request, am_selectors=['ALL']),
            SUCCESS_CODE)

        self.assertEqual(
            [c[0][0] for c in self.live.fetch_log.call_args_list],
            [AM_CONTAINER_1, AM_CONTAINER_2])
        self.assertIn('Specified ALL for -am option. Printed logs for all am'
                      ' containers.', self.stdout.getvalue())

    def test_finished_without_history_server(self):
        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator().execute_retrieval(request, am_selectors=[1]),
            FAILURE_CODE)
        self.assertIn('Please enable the application-history service',
                      self.stderr.getvalue())
        self.assertFalse(self.rm.get_application_attempts.called)

    def test_finished_with_history_server_fallback(self):
        self.rm.get_application_attempts.side_effect = YarnAPIError('gone')
        self.rm.get_container.side_effect = YarnAPIError('gone')
        self.history.get_application_attempts.return_value = [
            dict(appAttemptId=ATTEMPT_1, amContainerId=AM_CONTAINER_1),
            dict(appAttemptId='appattempt_1450486922681_0005_000002',
                 amContainerId=AM_CONTAINER_2),
        ]
        self.history.get_container.return_value = dict(
            containerId=AM_CONTAINER_2, assignedNodeId=NODE_2)

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator(history_enabled=True).execute_retrieval(
                request, am_selectors=[-1]),
            SUCCESS_CODE)

        archive_request = self.archive_request('read_logs')
        self.assertEqual(archive_request.container_id, AM_CONTAINER_2)
        self.assertEqual(archive_request.node_id, NODE_2)
        self.assertEqual(archive_request.log_names, ('syslog',))

    def test_finished_unknown_node(self):
        self.rm.get_application_attempts.side_effect = YarnAPIError('gone')
        self.rm.get_container.side_effect = YarnAPIError('gone')
        self.history.get_application_attempts.return_value = [
            dict(appAttemptId=ATTEMPT_1, amContainerId=AM_CONTAINER_1)]
        self.history.get_container.side_effect = YarnAPIError('gone too')

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator(history_enabled=True).execute_retrieval(
                request, am_selectors=[1]),
            SUCCESS_CODE)
        self.assertEqual(
            self.archive_request('read_logs_without_node_id').container_id,
            AM_CONTAINER_1)

    def test_resolution_failure(self):
        self.set_app_state('RUNNING')
        self.rm.get_application_attempts.side_effect = YarnAPIError(
            'rm is down')

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator().execute_retrieval(request, am_selectors=[1]),
            FAILURE_CODE)
        self.assertIn('Unable to get AM container informations for the'
                      ' application:%s' % APP_ID, self.stderr.getvalue())
        self.assertIn('rm is down', self.stderr.getvalue())


class MetadataTestCase(RetrievalTestCase):

    def test_container_log_info_finished(self):
        self.archive.print_container_metadata.return_value = SUCCESS_CODE

        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_1)

        self.assertEqual(
            self.orchestrator().execute_retrieval(
                request, mode=CONTAINER_LOG_INFO),
            SUCCESS_CODE)
        self.assertEqual(
            self.archive_request('print_container_metadata').container_id,
            CONTAINER_1)

    def test_container_log_info_running(self):
        self.set_app_state('RUNNING')
        self.set_running_containers(CONTAINER_1, CONTAINER_2)
        self.live.list_log_files.return_value = [
            PerLogFileInfo('syslog', '16')]

        request = RetrievalRequest.build(
            application_id=APP_ID, node_id=NODE_2)

        self.assertEqual(
            self.orchestrator().execute_retrieval(
                request, mode=CONTAINER_LOG_INFO),
            SUCCESS_CODE)

        self.live.list_log_files.assert_called_once_with(
            CONTAINER_2, NODE_2_HTTP)
        lines = self.stdout.getvalue().splitlines()
        self.assertEqual(lines[0],
                         'Container: %s on %s' % (CONTAINER_2, NODE_2))
        self.assertEqual(lines[-1], '%30s\t%30s' % ('syslog', '16'))

    def test_container_log_info_running_no_node_http_address(self):
        self.set_app_state('RUNNING')
        self.set_running_containers(CONTAINER_1, CONTAINER_2)
        self.rm.get_attempt_containers.return_value[0]['nodeHttpAddress'] = ''
        self.live.list_log_files.return_value = [
            PerLogFileInfo('syslog', '16')]

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator().execute_retrieval(
                request, mode=CONTAINER_LOG_INFO),
            SUCCESS_CODE)

        self.live.list_log_files.assert_called_once_with(
            CONTAINER_2, NODE_2_HTTP)
        self.assertIn('Can not get the logs for the container: %s' %
                      CONTAINER_1, self.stderr.getvalue())
        self.assertIn('The node http address is required',
                      self.stderr.getvalue())

    def test_container_log_info_running_no_match(self):
        self.set_app_state('RUNNING')
        self.set_running_containers(CONTAINER_1)

        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_2)

        self.assertEqual(
            self.orchestrator().execute_retrieval(
                request, mode=CONTAINER_LOG_INFO),
            FAILURE_CODE)
        self.assertIn('Can not find any matched containers',
                      self.stderr.getvalue())

    def test_list_nodes(self):
        self.archive.print_nodes.return_value = SUCCESS_CODE

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator().execute_retrieval(request, mode=NODE_LIST),
            SUCCESS_CODE)

    def test_list_nodes_running(self):
        self.set_app_state('RUNNING')

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator().execute_retrieval(request, mode=NODE_LIST),
            FAILURE_CODE)
        self.assertIn('can be only used with finished applications',
                      self.stderr.getvalue())
        self.assertFalse(self.archive.print_nodes.called)

    def test_application_log_info_finished(self):
        self.archive.print_containers.return_value = SUCCESS_CODE

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator().execute_retrieval(
                request, mode=APPLICATION_LOG_INFO),
            SUCCESS_CODE)
        self.assertEqual(self.stdout.getvalue(),
                         'Application State: Completed.\n')

    def test_application_log_info_running(self):
        self.set_app_state('RUNNING')
        self.set_running_containers(CONTAINER_1, CONTAINER_2)

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(
            self.orchestrator().execute_retrieval(
                request, mode=APPLICATION_LOG_INFO),
            SUCCESS_CODE)
        self.assertEqual(
            self.stdout.getvalue(),
            'Application State: Running.\n'
            'Container: %s on %s\n'
            'Container: %s on %s\n' % (
                CONTAINER_1, NODE_1, CONTAINER_2, NODE_2))


class FromOptsTestCase(BasicTestCase):

    OPTS = dict(
        hadoop_bin=['hadoop'],
        history_enabled=True,
        history_server='ahs:8190',
        http_scheme='https',
        remote_log_dir='file:///tmp/app-logs',
        remote_log_dir_suffix='logs-tfile',
        resource_manager='rm:8089',
        timeout=5.0,
    )

    def test_from_opts(self):
        orchestrator = RetrievalOrchestrator.from_opts(self.OPTS)

        self.assertIsInstance(orchestrator.rm, YarnResourceManager)
        self.assertEqual(orchestrator.rm.address, 'rm:8089')
        self.assertEqual(orchestrator.rm.scheme, 'https')
        self.assertEqual(orchestrator.rm.timeout, 5.0)

        self.assertIsInstance(orchestrator.history, YarnHistoryServer)
        self.assertEqual(orchestrator.history.address, 'ahs:8190')
        self.assertTrue(orchestrator.history_enabled)

        self.assertIsInstance(orchestrator.archive, ArchiveLogReader)
        self.assertIsInstance(orchestrator.archive.fs, CompositeFilesystem)
        self.assertEqual(orchestrator.archive.remote_log_dir,
                         '/tmp/app-logs')
        self.assertEqual(orchestrator.archive.suffix, 'logs-tfile')

        self.assertIsInstance(orchestrator.live, LiveLogFetcher)
        self.assertEqual(orchestrator.live.scheme, 'https')

    def test_history_disabled(self):
        opts = dict(self.OPTS, history_enabled=False)

        orchestrator = RetrievalOrchestrator.from_opts(opts)

        self.assertIsNone(orchestrator.history)
        self.assertFalse(orchestrator.history_enabled)

    def test_sink_shared_with_archive(self):
        sink = OutputSink(stdout=StringIO(), stderr=StringIO())

        orchestrator = RetrievalOrchestrator.from_opts(self.OPTS, sink=sink)

        self.assertIs(orchestrator.sink, sink)
        self.assertIs(orchestrator.archive.sink, sink)


class ArchiveEndToEndTestCase(ArchiveTestCase):
    """Finished applications, read from a real archive on the local
    filesystem."""

    def setUp(self):
        super(ArchiveEndToEndTestCase, self).setUp()

        self.rm = mock_rm()
        self.orchestrator = RetrievalOrchestrator(
            self.rm, self.archive, Mock(), sink=self.sink)

        self.add_archived_log(CONTAINER_1, 'syslog', 'c1 syslog\n')
        self.add_archived_log(CONTAINER_1, 'stderr', 'c1 stderr\n')
        self.add_archived_log(
            CONTAINER_2, 'syslog', 'c2 syslog\n', node_id=NODE_2)

    def test_whole_application(self):
        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(self.orchestrator.execute_retrieval(request),
                         SUCCESS_CODE)

        output = self.stdout.getvalue()
        self.assertIn('c1 syslog', output)
        self.assertIn('c1 stderr', output)
        self.assertIn('c2 syslog', output)

    def test_pattern(self):
        request = RetrievalRequest.build(
            application_id=APP_ID, log_names=['err$'])

        self.assertEqual(self.orchestrator.execute_retrieval(request),
                         SUCCESS_CODE)

        output = self.stdout.getvalue()
        self.assertIn('c1 stderr', output)
        self.assertNotIn('syslog', output)

    def test_container_on_node(self):
        request = RetrievalRequest.build(
            application_id=APP_ID, container_id=CONTAINER_2, node_id=NODE_2,
            log_names=['syslog'])

        self.assertEqual(self.orchestrator.execute_retrieval(request, LOGS),
                         SUCCESS_CODE)

        output = self.stdout.getvalue()
        self.assertIn('c2 syslog', output)
        self.assertNotIn('c1', output)

    def test_owner_from_archive(self):
        self.rm.get_application_info.side_effect = YarnAPIError('forgotten')
        self.start(patch('getpass.getuser', return_value='nobody'))

        request = RetrievalRequest.build(application_id=APP_ID)

        self.assertEqual(self.orchestrator.execute_retrieval(request),
                         SUCCESS_CODE)
        self.assertIn('c2 syslog', self.stdout.getvalue())
