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
"""Read logs that YARN has already aggregated into durable storage
(usually HDFS).

We expect the archive to be laid out like::

    <remote_log_dir>/<owner>/<suffix>/<application_id>/<node>/
        <container_id>/<log_type>

where ``<node>`` is the node ID with ``:`` replaced by ``_`` (e.g.
``node1.example.com_45454``).

All ``read_*()`` and ``print_*()`` methods return a result code
(``0`` for success, ``-1`` for failure), and write to an
:py:class:`~yarnlogs.output.OutputSink`. :py:class:`IOError` from the
underlying filesystem is passed through.
"""
import posixpath
from collections import namedtuple
from logging import getLogger

from yarnlogs.output import PER_LOG_FILE_INFO_PATTERN
from yarnlogs.output import OutputSink
from yarnlogs.output import container_header
from yarnlogs.output import write_line
from yarnlogs.request import FAILURE_CODE
from yarnlogs.request import SUCCESS_CODE
from yarnlogs.request import is_all_logs

log = getLogger(__name__)


#: a single log file in the archive
ArchivedLog = namedtuple(
    'ArchivedLog', ['node', 'container_id', 'log_type', 'path'])


def node_id_to_dir_name(node_id):
    """``node1:45454`` -> ``node1_45454``"""
    return node_id.replace(':', '_')


def limit_bytes(data, byte_limit):
    """Return the first *byte_limit* bytes of *data*, or, if *byte_limit*
    is negative, the last ``-byte_limit``. ``None`` means all of it."""
    if byte_limit is None:
        return data
    elif byte_limit >= 0:
        return data[:byte_limit]
    else:
        return data[byte_limit:]


class ArchiveLogReader(object):
    """Read aggregated logs from *fs* (a
    :py:class:`~yarnlogs.fs.base.Filesystem`) under *remote_log_dir*."""

    def __init__(self, fs, remote_log_dir, suffix='logs', sink=None):
        self.fs = fs
        self.remote_log_dir = remote_log_dir
        self.suffix = suffix
        self.sink = sink or OutputSink()

    def app_dir(self, owner, application_id):
        return self.fs.join(
            self.remote_log_dir, owner, self.suffix, application_id)

    ### listing ###

    def list_logs(self, request):
        """List :py:class:`ArchivedLog` for the application in *request*,
        filtered by its *container_id* and *node_id* (if set), sorted by
        node, container and log type."""
        app_dir = self.app_dir(request.app_owner, request.application_id)

        if not self.fs.exists(app_dir):
            log.debug('no aggregated logs in %s' % app_dir)
            return []

        node_dir = (node_id_to_dir_name(request.node_id)
                    if request.node_id else None)

        marker = '/%s/' % request.application_id

        logs = []
        for path in self.fs.ls(app_dir):
            idx = path.find(marker)
            if idx == -1:
                continue

            parts = path[idx + len(marker):].split('/')
            if len(parts) != 3:
                continue

            node, container_id, log_type = parts

            if node_dir and node != node_dir:
                continue
            if request.container_id and container_id != request.container_id:
                continue

            logs.append(ArchivedLog(node, container_id, log_type, path))

        return sorted(logs)

    def list_files(self, request):
        """Return the set of log file names available for the container
        (and node, if set) in *request*."""
        return set(l.log_type for l in self.list_logs(request))

    def list_nodes(self, request):
        return sorted(set(l.node for l in self.list_logs(request)))

    def list_containers(self, request):
        """Return a sorted list of ``(container_id, node)``."""
        return sorted(set((l.container_id, l.node)
                          for l in self.list_logs(request)))

    ### reading ###

    def read_logs(self, request, report_missing=True):
        """Print the logs requested for a single container on a known node.
        """
        return self._read(request, report_missing=report_missing)

    def read_logs_without_node_id(self, request, report_missing=True):
        """Like :py:meth:`read_logs`, but we don't know which node the
        container ran on, so look on all of them."""
        return self._read(request.replace(node_id=None),
                          report_missing=report_missing)

    def read_all_containers(self, request):
        """Print the requested logs for every container of the
        application."""
        return self._read(request.replace(container_id=None),
                          report_missing=False)

    def _read(self, request, report_missing):
        logs = [l for l in self.list_logs(request)
                if self._wanted(request, l.log_type)]

        if not logs:
            if report_missing:
                self.sink.err(
                    'Can not find any log file matching the pattern: %s'
                    ' for the container: %s within the application: %s' % (
                        list(request.log_names), request.container_id,
                        request.application_id))
            return FAILURE_CODE

        by_container = {}
        for l in logs:
            by_container.setdefault((l.node, l.container_id), []).append(l)

        for (node, container_id), container_logs in sorted(
                by_container.items()):
            with self.sink.container_stream(
                    request.output_dir, node, container_id) as out:
                for line in container_header(container_id, node):
                    write_line(out, line)
                for l in container_logs:
                    self._write_log(out, l, request.byte_limit)

        return SUCCESS_CODE

    def _wanted(self, request, log_type):
        if not request.log_names or is_all_logs(request.log_names):
            return True
        return log_type in request.log_names

    def _write_log(self, out, archived_log, byte_limit):
        length, data = self._read_log(archived_log.path, byte_limit)

        write_line(out, 'LogType:%s' % archived_log.log_type)
        write_line(out, 'LogLength:%d' % length)
        write_line(out, 'Log Contents:')
        write_line(out, data.decode('utf_8', 'replace'))
        write_line(out, 'End of LogType:%s' % archived_log.log_type)
        write_line(out)

    def _read_log(self, path, byte_limit):
        """Return ``(length, data)``: the full length of the log at *path*,
        and its contents trimmed to *byte_limit* (see
        :py:func:`limit_bytes`).

        For a positive *byte_limit*, we stop reading once we have enough.
        """
        if byte_limit is None or byte_limit < 0:
            data = b''.join(self.fs.cat(path))
            return len(data), limit_bytes(data, byte_limit)

        chunks = []
        size = 0

        stream = self.fs.cat(path)
        try:
            for chunk in stream:
                chunks.append(chunk)
                size += len(chunk)
                if size >= byte_limit:
                    break
        finally:
            stream.close()

        return self.fs.du(path), b''.join(chunks)[:byte_limit]

    ### metadata ###

    def print_container_metadata(self, request):
        """Print the name and length of each log file, for each container
        matching *request*."""
        logs = self.list_logs(request)

        if not logs:
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

        last_container = None
        for l in logs:
            if (l.container_id, l.node) != last_container:
                last_container = (l.container_id, l.node)
                header = container_header(l.container_id, l.node)
                self.sink.out(header[0])
                self.sink.out(header[1])
                self.sink.out(PER_LOG_FILE_INFO_PATTERN % (
                    'LogType', 'LogLength'))
                self.sink.out(header[1])

            self.sink.out(PER_LOG_FILE_INFO_PATTERN % (
                l.log_type, self.fs.du(l.path)))

        return SUCCESS_CODE

    def print_nodes(self, request):
        """Print the nodes that aggregated logs for the application."""
        nodes = self.list_nodes(request.replace(container_id=None))

        if not nodes:
            self.sink.err('Can not find any aggregated logs for the'
                          ' application: %s' % request.application_id)
            return FAILURE_CODE

        for node in nodes:
            self.sink.out(node)

        return SUCCESS_CODE

    def print_containers(self, request):
        """Print one ``Container: ... on ...`` line per container."""
        containers = self.list_containers(request)

        if not containers:
            self.sink.err('Can not find any containers for the'
                          ' application: %s.' % request.application_id)
            return FAILURE_CODE

        for container_id, node in containers:
            self.sink.out(container_header(container_id, node)[0])

        return SUCCESS_CODE

    ### owner ###

    def owner_for_app(self, application_id, owner):
        """Return *owner* if the archive has logs for *application_id*
        under *owner*; otherwise look for another owner who has them.
        Return ``None`` if we can't find any."""
        pattern = self.fs.join(
            self.remote_log_dir, '*', self.suffix, application_id, '*')
        try:
            if owner and self.fs.exists(self.app_dir(owner, application_id)):
                return owner

            for path in self.fs.ls(pattern):
                idx = path.find('/%s/%s/' % (self.suffix, application_id))
                if idx != -1:
                    return posixpath.basename(path[:idx])
        except IOError as e:
            log.warning("couldn't look for owner of %s: %s" % (
                application_id, e))

        return None
