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
"""Fetch logs of running containers from their NodeManagers."""
from logging import getLogger

from yarnlogs.request import PerLogFileInfo
from yarnlogs.yarn_api import YarnNodeManager

log = getLogger(__name__)


class LiveLogFetcher(object):
    """Talks to whichever NodeManager a container is running on.

    *timeout* and *scheme* are passed through to
    :py:class:`~yarnlogs.yarn_api.YarnNodeManager`.
    """

    def __init__(self, timeout=None, scheme='http'):
        self.timeout = timeout
        self.scheme = scheme

    def node_manager(self, node_http_address):
        return YarnNodeManager.from_address(
            node_http_address, timeout=self.timeout, scheme=self.scheme)

    def list_log_files(self, container_id, node_http_address):
        """Return a list of :py:class:`~yarnlogs.request.PerLogFileInfo`
        for the given container.

        Raises :py:class:`~yarnlogs.yarn_api.YarnAPIError` if the
        NodeManager can't be reached or doesn't know the container.
        """
        nm = self.node_manager(node_http_address)

        return [PerLogFileInfo(info.get('fileName'), info.get('fileSize'))
                for info in nm.list_container_logs(container_id)]

    def fetch_log(self, container_id, node_http_address, file_name,
                  byte_limit=None):
        """Return the contents of a single log file as a string.

        *byte_limit* is the number of bytes to read from the start
        of the file, or, if negative, from the end; ``None`` for the whole
        file.
        """
        log.debug('fetching %s for %s from %s' % (
            file_name, container_id, node_http_address))

        nm = self.node_manager(node_http_address)

        return nm.get_container_log(container_id, file_name, size=byte_limit)
