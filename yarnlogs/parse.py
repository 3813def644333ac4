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
"""Utilities for parsing URIs."""
from urllib.parse import urlparse


def is_uri(uri):
    """Return True if *uri* is a URI and contains ``://``
    (we only care about URIs that can describe files)
    """
    return '://' in uri and bool(urlparse(uri).scheme)


def to_local_path(uri):
    """Turn ``file:///foo/bar`` into ``/foo/bar``; leave other paths
    alone."""
    if is_uri(uri) and urlparse(uri).scheme == 'file':
        return urlparse(uri).path
    return uri
