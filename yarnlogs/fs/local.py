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
import glob
import logging
import os

from yarnlogs.fs.base import Filesystem
from yarnlogs.parse import is_uri
from yarnlogs.util import read_file

log = logging.getLogger(__name__)


class LocalFilesystem(Filesystem):
    """Filesystem for local files, e.g. an archive directory copied off the
    cluster, or a ``file://`` remote log dir on a single-node cluster.
    """
    def can_handle_path(self, path):
        return not is_uri(path)

    def du(self, path_glob):
        return sum(os.path.getsize(path) for path in self.ls(path_glob))

    def ls(self, path_glob):
        for path in sorted(glob.glob(path_glob)):
            if os.path.isdir(path):
                for dirname, _, filenames in os.walk(path, followlinks=True):
                    for filename in sorted(filenames):
                        yield os.path.join(dirname, filename)
            else:
                yield path

    def _cat_file(self, filename):
        return read_file(filename)

    def exists(self, path_glob):
        return bool(glob.glob(path_glob))
