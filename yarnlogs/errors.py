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
"""Exceptions raised while retrieving container logs.

Validation problems are caught before we talk to the cluster; everything
else is reported per container, so that one unreachable NodeManager doesn't
sink a whole application's worth of logs.
"""


class YarnLogsError(Exception):
    """Base class for errors raised by :py:mod:`yarnlogs`"""


class ValidationError(YarnLogsError, ValueError):
    """Malformed IDs, conflicting options, bad selectors or patterns.
    Raised before any network activity."""


class NotFoundError(YarnLogsError):
    """No matching log files or containers (or an unknown application or
    container)."""


class TransportError(YarnLogsError, IOError):
    """A metadata service or NodeManager couldn't be reached, or returned
    an error."""


class AmResolutionError(TransportError):
    """Neither the ResourceManager nor the history server could tell us
    about an application's AM containers.

    *causes* is a list of the underlying error messages, in the order
    the services were tried.
    """
    def __init__(self, application_id, causes):
        self.application_id = application_id
        self.causes = list(causes)

        msg = ('Unable to get AM container informations for the'
               ' application:%s' % application_id)
        if self.causes:
            msg += '\n' + '\n'.join(self.causes)

        super(AmResolutionError, self).__init__(msg)
