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
"""The values passed through a log retrieval: the request itself, where a
container's logs live, and what happened when we tried to fetch them.

Everything here is immutable. To get a request for a particular container,
derive one with :py:meth:`RetrievalRequest.replace`, rather than changing
the request you were handed.
"""
import os.path
import re
from collections import namedtuple

from yarnlogs.errors import ValidationError
from yarnlogs.ids import container_belongs_to_application
from yarnlogs.ids import container_id_to_application_id
from yarnlogs.ids import parse_application_id

#: requesting this log name means "all of them"
ALL_LOGS = '.*'

#: also accepted (case-sensitively) from the command line to mean all logs
_ALL_LOGS_ALIASES = ('ALL', ALL_LOGS)

#: what we fetch from a running container or an AM container if the user
#: doesn't ask for anything in particular
DEFAULT_LOG_NAMES = ('syslog',)

#: result codes returned by the retrieval operations
SUCCESS_CODE = 0
FAILURE_CODE = -1


def is_all_logs(log_names):
    """Does *log_names* contain one of the "all logs" sentinels?"""
    return any(name in _ALL_LOGS_ALIASES for name in (log_names or ()))


def normalize_log_names(log_names):
    """Turn the user's list of log names/patterns into a tuple. If it
    contains ``ALL`` or ``.*``, it becomes ``('.*',)``."""
    if not log_names:
        return ()
    elif is_all_logs(log_names):
        return (ALL_LOGS,)
    else:
        return tuple(log_names)


_REQUEST_FIELDS = [
    'application_id',
    'container_id',
    'node_id',
    'node_http_address',
    'app_owner',
    'app_finished',
    'log_names',
    'byte_limit',
    'output_dir',
]


class RetrievalRequest(namedtuple('RetrievalRequest', _REQUEST_FIELDS)):
    """What logs to fetch, and from where.

    Use :py:meth:`build` to make one from user input; that's the only place
    we check that *container_id* belongs to *application_id*.

    *byte_limit* is the number of bytes of each log file to show (negative
    to read from the end); ``None`` means the whole file.
    """
    __slots__ = ()

    @classmethod
    def build(cls, application_id=None, container_id=None, node_id=None,
              node_http_address=None, app_owner=None, app_finished=False,
              log_names=None, byte_limit=None, output_dir=None):
        if not (application_id or container_id):
            raise ValidationError(
                'Both applicationId and containerId are missing,'
                ' one of them must be specified.')

        if application_id:
            parse_application_id(application_id)

        if container_id:
            if not application_id:
                application_id = container_id_to_application_id(container_id)
            elif not container_belongs_to_application(
                    container_id, application_id):
                raise ValidationError(
                    'The Application:%s does not have the container:%s' % (
                        application_id, container_id))

        for name in log_names or ():
            if name not in _ALL_LOGS_ALIASES:
                try:
                    re.compile(name)
                except re.error as e:
                    raise ValidationError(
                        'Invalid log file pattern %r: %s' % (name, e))

        if output_dir and os.path.isfile(output_dir):
            raise ValidationError(
                'Invalid value for -out option. Please provide a directory.')

        return cls(
            application_id=application_id,
            container_id=container_id or None,
            node_id=node_id or None,
            node_http_address=node_http_address or None,
            app_owner=app_owner or None,
            app_finished=bool(app_finished),
            log_names=normalize_log_names(log_names),
            byte_limit=byte_limit,
            output_dir=output_dir or None,
        )

    def replace(self, **kwargs):
        """Return a copy of this request with the given fields changed."""
        if 'log_names' in kwargs:
            kwargs['log_names'] = tuple(kwargs['log_names'] or ())
        return self._replace(**kwargs)

    def with_default_log_names(self, default=DEFAULT_LOG_NAMES):
        """If no log names were requested, request *default* instead."""
        if self.log_names:
            return self
        return self.replace(log_names=default)

    @property
    def wants_all_logs(self):
        return is_all_logs(self.log_names)


class ContainerLocation(namedtuple(
        'ContainerLocation',
        ['container_id', 'node_id', 'node_http_address', 'app_finished'])):
    """Where to find a container's logs. Made by
    :py:class:`~yarnlogs.locate.ContainerLocator`."""
    __slots__ = ()

    @property
    def is_live(self):
        """Can we ask a NodeManager for these logs?"""
        return bool(not self.app_finished and self.node_http_address)


#: a container, as reported by the ResourceManager or history server
ContainerReport = namedtuple(
    'ContainerReport', ['container_id', 'node_id', 'node_http_address'])


#: a log file's name and size, as listed by a NodeManager or the archive
PerLogFileInfo = namedtuple('PerLogFileInfo', ['file_name', 'file_size'])


### outcomes ###

SUCCESS = 'success'
NOT_FOUND = 'not_found'
TRANSPORT_ERROR = 'transport_error'
ARCHIVE_MISS = 'archive_miss'


class RetrievalOutcome(namedtuple(
        'RetrievalOutcome',
        ['status', 'container_id', 'file_name', 'detail'])):
    """What happened when we tried to fetch one container's log file
    (or, if *file_name* is ``None``, a whole container).

    *detail* is the number of bytes written for :py:data:`SUCCESS`, and
    a description of what went wrong otherwise.
    """
    __slots__ = ()

    @classmethod
    def success(cls, container_id, file_name=None, bytes_written=0):
        return cls(SUCCESS, container_id, file_name, bytes_written)

    @classmethod
    def not_found(cls, container_id, file_name=None, reason=None):
        return cls(NOT_FOUND, container_id, file_name, reason)

    @classmethod
    def transport_error(cls, container_id, file_name=None, reason=None):
        return cls(TRANSPORT_ERROR, container_id, file_name, reason)

    @classmethod
    def archive_miss(cls, container_id, file_name=None, reason=None):
        return cls(ARCHIVE_MISS, container_id, file_name, reason)

    @classmethod
    def from_result_code(cls, container_id, result_code, reason=None):
        """Wrap a result code from the archive reader."""
        if result_code == SUCCESS_CODE:
            return cls.success(container_id)
        else:
            return cls.archive_miss(container_id, reason=reason)

    @property
    def succeeded(self):
        return self.status == SUCCESS

    @property
    def result_code(self):
        return SUCCESS_CODE if self.succeeded else FAILURE_CODE


def any_succeeded(outcomes):
    """The aggregation policy for fetching logs from several containers
    (or several files): the whole thing succeeds if *any* part did.

    A big application shouldn't be reported as failed because a handful
    of its NodeManagers are unreachable. Failures are reported on stderr
    as they happen, and never escalated.
    """
    return any(outcome.succeeded for outcome in outcomes)


def aggregate_result_code(outcomes):
    """Apply :py:func:`any_succeeded` and return a result code."""
    return SUCCESS_CODE if any_succeeded(outcomes) else FAILURE_CODE
