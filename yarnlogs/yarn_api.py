# -*- coding: utf-8 -*-
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
"""Provides basic access to the YARN REST APIs.

Three services are involved in finding logs:

* the ResourceManager, which knows about running (and recently finished)
  applications, their attempts and containers:
    https://hadoop.apache.org/docs/current/hadoop-yarn/
            hadoop-yarn-site/ResourceManagerRest.html
* the Application History Server (part of the Timeline Server), which
  remembers finished applications after the ResourceManager forgets them:
    https://hadoop.apache.org/docs/current/hadoop-yarn/
            hadoop-yarn-site/TimelineServer.html
* each NodeManager, which serves the logs of the containers it is running:
    https://hadoop.apache.org/docs/current/hadoop-yarn/
            hadoop-yarn-site/NodeManagerRest.html
"""
from logging import getLogger

import requests

from yarnlogs.errors import TransportError
from yarnlogs.util import strip_scheme

log = getLogger(__name__)


class YarnAPIError(TransportError):
    """A YARN REST call failed, either because we couldn't connect or
    because we got something other than a 200 back."""


def split_address(address, default_port):
    """Split ``host[:port]`` (optionally prefixed with a scheme) into
    ``(host, port)``."""
    if not address:
        raise YarnAPIError('No address given')

    address = strip_scheme(address).rstrip('/')

    if ':' in address:
        host, port = address.rsplit(':', 1)
        return host, int(port)
    else:
        return address, default_port


class BaseAPI(object):
    """Simplistic class supporting GET API calls."""

    DEFAULT_PORT = None

    def __init__(self, host, port=None, timeout=None, scheme='http'):
        self.host = host
        self.port = port or self.DEFAULT_PORT
        self.timeout = timeout
        self.scheme = scheme

    @classmethod
    def from_address(cls, address, timeout=None, scheme='http'):
        """Make an API object from a ``host:port`` string."""
        host, port = split_address(address, cls.DEFAULT_PORT)
        return cls(host, port, timeout=timeout, scheme=scheme)

    @property
    def address(self):
        return '%s:%d' % (self.host, self.port)

    def _endpoint(self, api):
        return '%s://%s:%d%s' % (self.scheme, self.host, self.port, api)

    def _request(self, api, params=None, accept='application/json'):
        endpoint = self._endpoint(api)
        log.debug('GET %s %r' % (endpoint, params or {}))

        try:
            response = requests.get(endpoint, params=params or {},
                                    headers={'Accept': accept},
                                    timeout=self.timeout)
        except requests.RequestException as e:
            raise YarnAPIError('GET %s failed: %s' % (endpoint, e))

        if response.status_code != requests.codes.ok:
            raise YarnAPIError('GET request received {}: {}'.format(
                               response.status_code,
                               response.text))
        return response

    def _get(self, api, params=None):
        response = self._request(api, params)
        try:
            return response.json()
        except ValueError as e:
            raise YarnAPIError(
                'Unable to parse json from %s: %s' % (api, e))

    def _get_text(self, api, params=None):
        return self._request(api, params, accept='text/plain').text


def _as_list(value):
    """The REST APIs return a single dict instead of a one-element list
    (or ``null`` instead of an empty list) in some versions. Normalize."""
    if value is None:
        return []
    elif isinstance(value, dict):
        return [value]
    else:
        return list(value)


def _unwrap(json, outer, inner):
    """Get ``json[outer][inner]`` as a list, tolerating a missing *outer*
    wrapper (e.g. ``{'appAttempt': [...]}``), which the history server
    uses."""
    if outer in json:
        json = json[outer] or {}
    return _as_list(json.get(inner))


class YarnResourceManager(BaseAPI):
    """Wraps API calls to the YARN ResourceManager API. Provides a subset of
    API calls as only limited functionality is needed.
    """

    DEFAULT_PORT = 8088

    ### Application calls

    def get_application_info(self, appid):
        """Returns information on the specified application, including
        ``state`` and ``user``.

        Has no query parameters.
        """
        endpoint = '/ws/v1/cluster/apps/{appid}'.format(appid=appid)
        return self._get(endpoint)['app']

    def get_application_attempts(self, appid):
        """Returns a list of application attempts from the specified
        application, each with ``containerId`` (of the AM), ``nodeId``
        and ``nodeHttpAddress``.

        Has no query parameters.
        """
        endpoint = '/ws/v1/cluster/apps/{appid}/appattempts' \
                   .format(appid=appid)
        return _unwrap(self._get(endpoint), 'appAttempts', 'appAttempt')

    def get_attempt_containers(self, appid, attemptid):
        """Returns a list of the containers belonging to the given
        application attempt, each with ``containerId``, ``assignedNodeId``
        and ``nodeHttpAddress``."""
        endpoint = ('/ws/v1/cluster/apps/{appid}/appattempts/{attemptid}'
                    '/containers').format(appid=appid, attemptid=attemptid)
        return _unwrap(self._get(endpoint), 'containers', 'container')

    def get_container(self, appid, attemptid, containerid):
        """Returns information on a single container."""
        endpoint = ('/ws/v1/cluster/apps/{appid}/appattempts/{attemptid}'
                    '/containers/{containerid}').format(
                        appid=appid, attemptid=attemptid,
                        containerid=containerid)
        return self._get(endpoint)['container']


class YarnHistoryServer(BaseAPI):
    """Wraps API calls to the Application History Server, which knows about
    applications the ResourceManager has forgotten."""

    DEFAULT_PORT = 8188

    def get_application_info(self, appid):
        """Returns information on the specified application. The state is in
        ``appState`` and the owner in ``user``."""
        endpoint = '/ws/v1/applicationhistory/apps/{appid}'.format(
            appid=appid)
        return self._get(endpoint)

    def get_application_attempts(self, appid):
        """Returns a list of application attempts, oldest first, each with
        ``amContainerId`` and ``host``."""
        endpoint = '/ws/v1/applicationhistory/apps/{appid}/appattempts' \
                   .format(appid=appid)
        return _unwrap(self._get(endpoint), 'appAttempts', 'appAttempt')

    def get_container(self, appid, attemptid, containerid):
        """Returns information on a single (finished) container."""
        endpoint = ('/ws/v1/applicationhistory/apps/{appid}/appattempts'
                    '/{attemptid}/containers/{containerid}').format(
                        appid=appid, attemptid=attemptid,
                        containerid=containerid)
        return self._get(endpoint)


class YarnNodeManager(BaseAPI):
    """Wraps API calls to a single NodeManager, which serves the logs of
    its running containers."""

    DEFAULT_PORT = 8042

    def list_container_logs(self, containerid):
        """Returns a list of dicts with ``fileName`` and ``fileSize`` for
        each log file of the given container."""
        endpoint = '/ws/v1/node/containers/{containerid}/logs'.format(
            containerid=containerid)
        json = self._get(endpoint)

        # newer NodeManagers wrap this in a list, one entry per log
        # aggregation type
        infos = []
        for entry in _as_list(json):
            infos.extend(_as_list(entry.get('containerLogInfo')))
        return infos

    def get_container_log(self, containerid, filename, size=None):
        """Returns the contents of one log file, as text.

        *size* is the number of bytes to return from the start of the file,
        or, if negative, from the end. ``None`` means the whole file.
        """
        endpoint = '/ws/v1/node/containers/{containerid}/logs/{filename}' \
                   .format(containerid=containerid, filename=filename)
        params = {}
        if size is not None:
            params['size'] = str(size)
        return self._get_text(endpoint, params)
