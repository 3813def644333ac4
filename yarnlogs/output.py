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
"""Where retrieved logs and diagnostics go.

An :py:class:`OutputSink` is passed down through retrieval rather than
having everything print to ``sys.stdout``/``sys.stderr``; logs for a
container go either to its stream or, with ``-out``, to a file named after
the container in a directory named after its node.
"""
import os
import os.path
import sys
import time
from contextlib import contextmanager
from logging import getLogger

log = getLogger(__name__)

CONTAINER_ON_NODE_PATTERN = 'Container: %s on %s'

PER_LOG_FILE_INFO_PATTERN = '%30s\t%30s'


def container_header(container_id, node_id):
    """``Container: ... on ...``, underlined with ``=``"""
    header = CONTAINER_ON_NODE_PATTERN % (container_id, node_id)
    return [header, '=' * len(header)]


def format_time(timestamp=None):
    """Format *timestamp* (default: now) the way YARN does in log
    headers."""
    if timestamp is None:
        timestamp = time.time()
    return time.strftime('%a %b %d %H:%M:%S %z %Y', time.localtime(timestamp))


class OutputSink(object):
    """Writes fetched logs to *stdout* and diagnostics to *stderr*
    (default to ``sys.stdout`` and ``sys.stderr``)."""

    def __init__(self, stdout=None, stderr=None):
        self.stdout = sys.stdout if stdout is None else stdout
        self.stderr = sys.stderr if stderr is None else stderr

    def out(self, line=''):
        self._write(self.stdout, line)

    def err(self, line=''):
        self._write(self.stderr, line)

    def _write(self, stream, line):
        stream.write(line + '\n')
        stream.flush()

    @contextmanager
    def container_stream(self, output_dir, node_id, container_id):
        """Yield a file object to write one container's logs to.

        If *output_dir* is set, this is
        ``<output_dir>/<node_id>/<container_id>``, with ``:`` in
        *node_id* replaced with ``_``; otherwise it's :py:attr:`stdout`.
        """
        if not output_dir:
            yield self.stdout
            return

        node_dir = os.path.join(
            output_dir, (node_id or 'unknown_node').replace(':', '_'))
        if not os.path.isdir(node_dir):
            os.makedirs(node_dir)

        path = os.path.join(node_dir, container_id)
        log.debug('writing logs for %s to %s' % (container_id, path))

        with open(path, 'a') as f:
            yield f


def write_line(stream, line=''):
    """Write *line* and a newline to *stream*."""
    stream.write(line + '\n')
