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
"""Match requested log names against the log files a container actually
has.

Log names are regular expressions, and match anywhere in the file name,
so ``std`` picks up both ``stdout`` and ``stderr``.
"""
import re
from logging import getLogger

from yarnlogs.errors import ValidationError
from yarnlogs.request import is_all_logs

log = getLogger(__name__)


def match_log_files(patterns, candidates):
    """Return the file names in *candidates* that match any of *patterns*,
    in the order they appear in *candidates*.

    If *patterns* contains the "all logs" sentinel (``.*`` or ``ALL``),
    return all of *candidates* without compiling anything.
    """
    candidates = list(candidates)

    if is_all_logs(patterns):
        return candidates

    compiled = _compile_patterns(patterns)

    return [name for name in candidates
            if any(p.search(name) for p in compiled)]


def match_or_passthrough(patterns, list_candidates):
    """Match *patterns* against the file names returned by
    *list_candidates* (a function with no arguments).

    If *list_candidates* raises :py:class:`IOError` we don't know what files
    there are, so we return *patterns* unchanged and let the caller try to
    fetch them by name.
    """
    patterns = list(patterns or ())

    try:
        candidates = list_candidates()
    except IOError as e:
        log.warning("couldn't list log files, using %r as-is: %s" % (
            patterns, e))
        return patterns

    return match_log_files(patterns, candidates)


def _compile_patterns(patterns):
    compiled = []

    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ValidationError(
                'Invalid log file pattern %r: %s' % (pattern, e))

    return compiled
