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
"""Retrieve logs for YARN applications.

Usage::

    yarnlogs logs -applicationId <application ID> [OPTIONS]
    python -m yarnlogs.tools.logs -applicationId <application ID> [OPTIONS]

Logs for running containers are fetched from their NodeManagers; logs for
finished applications are read from the aggregated-log archive.
"""
import sys
from argparse import ArgumentParser
from logging import getLogger

from yarnlogs.am import parse_am_selectors
from yarnlogs.conf import load_opts
from yarnlogs.errors import ValidationError
from yarnlogs.output import OutputSink
from yarnlogs.request import FAILURE_CODE
from yarnlogs.request import RetrievalRequest
from yarnlogs.retrieval import APPLICATION_LOG_INFO
from yarnlogs.retrieval import CONTAINER_LOG_INFO
from yarnlogs.retrieval import LOGS
from yarnlogs.retrieval import NODE_LIST
from yarnlogs.retrieval import RetrievalOrchestrator
from yarnlogs.util import log_to_null
from yarnlogs.util import log_to_stream

log = getLogger(__name__)


def main(cl_args=None, stdout=None, stderr=None):
    """Run the ``logs`` tool, and return its result code (``0`` or
    ``-1``)."""
    arg_parser = _make_arg_parser()
    options = arg_parser.parse_args(cl_args)

    _set_up_logging(quiet=options.quiet, verbose=options.verbose)

    sink = OutputSink(stdout=stdout, stderr=stderr)

    try:
        request, mode, am_selectors = _request_from_options(options)
    except ValidationError as e:
        sink.err(str(e))
        return FAILURE_CODE

    opts = load_opts(
        conf_path=(False if options.no_conf else options.conf_path),
        resource_manager=options.resource_manager,
        history_server=options.history_server,
        history_enabled=options.history_enabled,
        remote_log_dir=options.remote_log_dir,
        timeout=options.timeout,
    )

    orchestrator = RetrievalOrchestrator.from_opts(opts, sink=sink)

    return orchestrator.execute_retrieval(
        request, mode=mode, am_selectors=am_selectors)


def _request_from_options(options):
    """Validate *options* and turn them into
    ``(request, mode, am_selectors)``. Raises
    :py:class:`~yarnlogs.errors.ValidationError`."""
    if options.show_application_log_info and options.show_container_log_info:
        raise ValidationError(
            'Invalid options. Can only accept one of'
            ' show_application_log_info/show_container_log_info.')

    if options.show_container_log_info:
        mode = CONTAINER_LOG_INFO
    elif options.list_nodes:
        mode = NODE_LIST
    elif options.show_application_log_info:
        mode = APPLICATION_LOG_INFO
    else:
        mode = LOGS

    am_selectors = None
    if options.am is not None:
        am_selectors = parse_am_selectors(options.am)

    log_names = []
    for value in options.log_files or ():
        log_names.extend(name for name in value.split(',') if name)

    request = RetrievalRequest.build(
        application_id=options.application_id,
        container_id=options.container_id,
        node_id=options.node_address,
        app_owner=options.app_owner,
        log_names=log_names,
        byte_limit=options.size,
        output_dir=options.out,
    )

    return request, mode, am_selectors


def _set_up_logging(quiet=False, verbose=False):
    if quiet:
        log_to_null(name='yarnlogs')
        log_to_null(name='__main__')
    else:
        log_to_stream(name='yarnlogs', debug=verbose)
        log_to_stream(name='__main__', debug=verbose)


def _make_arg_parser():
    usage = '%(prog)s -applicationId <application ID> [OPTIONS]'
    description = 'Retrieve logs for YARN applications.'
    arg_parser = ArgumentParser(usage=usage, description=description)

    arg_parser.add_argument(
        '-applicationId', '--application-id', dest='application_id',
        metavar='APPLICATION_ID',
        help='ApplicationId (required unless -containerId is given)')
    arg_parser.add_argument(
        '-containerId', '--container-id', dest='container_id',
        metavar='CONTAINER_ID',
        help=('ContainerId. By default, it will only print syslog if the'
              ' application is running. Work with -logFiles to get other'
              ' logs. If specified, the applicationId can be omitted'))
    arg_parser.add_argument(
        '-nodeAddress', '--node-address', dest='node_address',
        metavar='NODE_ADDRESS',
        help='NodeAddress in the format nodename:port')
    arg_parser.add_argument(
        '-appOwner', '--app-owner', dest='app_owner', metavar='APP_OWNER',
        help='AppOwner (assumed to be current user if not specified)')
    arg_parser.add_argument(
        '-am', dest='am', action='append', metavar='AM_CONTAINERS',
        help=('Prints the AM Container logs for this application. Specify'
              ' comma-separated value to get logs for related AM'
              ' Containers. For example, -am 1,2 gets the logs for the'
              ' first and second AM Container. Use -am ALL for all AM'
              ' Containers, and -am -1 for the latest. By default, only'
              ' prints syslog. Work with -logFiles to get other logs'))
    arg_parser.add_argument(
        '-logFiles', '--log-files', dest='log_files', action='append',
        metavar='LOG_FILE_NAME',
        help=('Specify comma-separated value to get specified container'
              ' log files. Use "ALL" to fetch all the log files for the'
              ' container. Also supports regular expressions.'))
    arg_parser.add_argument(
        '-show_container_log_info', '--show-container-log-info',
        dest='show_container_log_info', action='store_true',
        help=('Show the container log metadata, including log-file names'
              ' and the size of the log files. Combine with -containerId'
              ' or -nodeAddress to narrow it down.'))
    arg_parser.add_argument(
        '-show_application_log_info', '--show-application-log-info',
        dest='show_application_log_info', action='store_true',
        help=('Show the containerIds which belong to the specific'
              ' Application. Combine with -nodeAddress to narrow it'
              ' down.'))
    arg_parser.add_argument(
        '-list_nodes', '--list-nodes', dest='list_nodes',
        action='store_true',
        help=('Show the list of nodes that successfully aggregated logs.'
              ' Only for finished applications.'))
    arg_parser.add_argument(
        '-out', '--out', dest='out', metavar='LOCAL_DIRECTORY',
        help=('Local directory for storing individual container logs,'
              ' grouped by the node the container ran on.'))
    arg_parser.add_argument(
        '-size', '--size', dest='size', type=int, metavar='SIZE',
        help=("Prints the log file's first 'n' bytes or the last 'n'"
              ' bytes. Use negative values to read from the end.'))

    # connection and config options
    arg_parser.add_argument(
        '-c', '--conf-path', dest='conf_path',
        help='Path to alternate yarnlogs.conf file to read from')
    arg_parser.add_argument(
        '--no-conf', dest='no_conf', action='store_true',
        help="Don't load yarnlogs.conf even if it's available")
    arg_parser.add_argument(
        '--resource-manager', dest='resource_manager',
        help='host:port of the ResourceManager web service')
    arg_parser.add_argument(
        '--history-server', dest='history_server',
        help='host:port of the Application History Server web service')
    arg_parser.add_argument(
        '--history-enabled', dest='history_enabled', action='store_const',
        const=True, default=None,
        help='Ask the Application History Server about finished'
             ' applications')
    arg_parser.add_argument(
        '--remote-log-dir', dest='remote_log_dir',
        help='Root of the aggregated-log archive (e.g. hdfs:///tmp/logs)')
    arg_parser.add_argument(
        '--timeout', dest='timeout', type=float,
        help='Timeout, in seconds, for REST calls')
    arg_parser.add_argument(
        '-q', '--quiet', dest='quiet', action='store_true',
        help="Don't print anything to stderr except diagnostics")
    arg_parser.add_argument(
        '-v', '--verbose', dest='verbose', action='store_true',
        help='print more messages to stderr')

    return arg_parser


if __name__ == '__main__':
    sys.exit(main())
