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
import sys
from sys import argv
from sys import stderr

# map from command name to function to call
commands = {}

# map from command name to description for help
descriptions = {}

usage = """usage: yarnlogs {subcommand|--help}"

subcommands:"""


def error(msg=None):
    if msg:
        print(msg, file=stderr)

    longest_name = max(len(name) for name in descriptions)

    def subcommand_line(name):
        spaces = ' ' * (longest_name - len(name))
        return '  %s: %s%s' % (
            name, spaces, descriptions[name])
    print(usage, file=stderr)
    print('\n'.join(
        subcommand_line(name) for name in sorted(descriptions)), file=stderr)


def command(name, description=None):
    """Decorate a function used to call a command.

    If you don't set *description*, it won't be included in help."""
    def decorator(f):
        commands[name] = f
        if description:
            descriptions[name] = description
        return f
    return decorator


def main(args=None):
    args = args or argv
    if not args[1:] or args[1] in ('-h', '--help'):
        error()
        return 0 if args[1:] else -1
    elif args[1] not in commands:
        error('"%s" is not a command' % args[1])
        return -1
    else:
        return commands[args[1]](args[2:])


@command('logs', 'Retrieve logs for YARN applications')
def logs(args):
    from yarnlogs.tools.logs import main
    return main(args)


if __name__ == '__main__':
    sys.exit(main())
