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
""""yarnlogs.conf" is the name of both this module, and the global config
file for :py:mod:`yarnlogs`.

It's a YAML file like::

    yarn:
      resource_manager: rm.example.com:8088
      history_server: ahs.example.com:8188
      history_enabled: true
      remote_log_dir: hdfs:///app-logs

Options given on the command line override options from the config file.
"""
import logging
import os
import shlex

import yaml

from yarnlogs.util import expand_path

log = logging.getLogger(__name__)

#: defaults for every option we know about
DEFAULT_OPTS = dict(
    hadoop_bin=['hadoop'],
    history_enabled=False,
    history_server='localhost:8188',
    http_scheme='http',
    remote_log_dir='/tmp/logs',
    remote_log_dir_suffix='logs',
    resource_manager='localhost:8088',
    timeout=30.0,
)

ALLOWED_KEYS = set(DEFAULT_OPTS)


### READING yarnlogs.conf ###

def find_yarnlogs_conf():
    """Look for :file:`yarnlogs.conf`, and return its path. Places we look:

    - The location specified by :envvar:`YARNLOGS_CONF`
    - :file:`~/.yarnlogs.conf`
    - :file:`/etc/yarnlogs.conf`

    Return ``None`` if we can't find it.
    """
    def candidates():
        if 'YARNLOGS_CONF' in os.environ:
            yield expand_path(os.environ['YARNLOGS_CONF'])

        yield expand_path(os.path.join('~', '.yarnlogs.conf'))

        yield '/etc/yarnlogs.conf'

    for path in candidates():
        log.debug('looking for configs in %s' % path)
        if os.path.exists(path):
            log.info('using configs in %s' % path)
            return path
    else:
        log.debug('no configs found; falling back on defaults')
        return None


def real_conf_path(conf_path=None):
    """*conf_path* can be ``False`` (don't load a config file), ``None``
    (look for one), or a path."""
    if conf_path is False:
        return None
    elif conf_path is None:
        return find_yarnlogs_conf()
    else:
        return expand_path(conf_path)


def conf_object_at_path(conf_path):
    if conf_path is None:
        return None

    with open(conf_path) as f:
        return yaml.safe_load(f)


def load_opts_from_conf(conf_path=None):
    """Load the ``yarn`` section of the given :file:`yarnlogs.conf`
    (finding one if *conf_path* is ``None``). Unknown options are warned
    about and dropped. Returns ``{}`` if there's no config file."""
    conf_path = real_conf_path(conf_path)
    conf = conf_object_at_path(conf_path)

    if conf is None:
        return {}

    try:
        values = conf['yarn'] or {}
    except (KeyError, TypeError, ValueError):
        values = {}

    return validated_opts(
        values, 'got unexpected keys in %s: %%s' % conf_path)


def validated_opts(opts, error_fmt):
    unrecognized_opts = set(opts) - ALLOWED_KEYS
    if unrecognized_opts:
        log.warning(error_fmt % ', '.join(sorted(unrecognized_opts)))
        return dict((k, v) for k, v in opts.items()
                    if k in ALLOWED_KEYS)
    else:
        return opts


def load_opts(conf_path=None, **overrides):
    """Combine defaults, the config file, and *overrides* (``None`` values
    are ignored) into a single dictionary of options."""
    return combine_opts(
        _COMBINERS, DEFAULT_OPTS, load_opts_from_conf(conf_path), overrides)


### COMBINING OPTIONS ###

# combiners generally consider earlier values to be defaults, and later
# options to override or add on to them.

def combine_values(*values):
    """Return the last value in *values* that is not ``None``.

    The default combiner; good for simple values (booleans, strings, numbers).
    """
    for v in reversed(values):
        if v is not None:
            return v
    else:
        return None


def combine_cmds(*cmds):
    """Take zero or more commands to run on the command line, and return
    the last one that is not ``None``. Each command should either be a list
    containing the command plus switches, or a string, which will be parsed
    with :py:func:`shlex.split`.

    Returns either ``None`` or a list containing the command plus arguments.
    """
    cmd = combine_values(*cmds)

    if cmd is None:
        return None
    elif isinstance(cmd, str):
        return shlex.split(cmd)
    else:
        return list(cmd)


def combine_paths(*paths):
    """Returns the last value in *paths* that is not ``None``.
    Resolve ``~`` (home dir) and environment variables."""
    return expand_path(combine_values(*paths))


def combine_opts(combiners, *opts_list):
    """The master combiner, used to combine dictionaries of options with
    appropriate sub-combiners.

    :param combiners: a map from option name to a combine_*() function to
                      combine options by that name. By default, we combine
                      options using :py:func:`combine_values`.
    :param opts_list: one or more dictionaries to combine
    """
    final_opts = {}

    keys = set()
    for opts in opts_list:
        if opts:
            keys.update(opts)

    for key in keys:
        values = []
        for opts in opts_list:
            if opts and key in opts:
                values.append(opts[key])

        combine_func = combiners.get(key) or combine_values
        final_opts[key] = combine_func(*values)

    return final_opts


_COMBINERS = dict(
    hadoop_bin=combine_cmds,
    remote_log_dir=combine_paths,
)
