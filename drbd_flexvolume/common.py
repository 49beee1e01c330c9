# Copyright (c) 2018, Red Hat, Inc.
# All Rights Reserved.
#
#    Licensed under the Apache License, Version 2.0 (the "License"); you may
#    not use this file except in compliance with the License. You may obtain
#    a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
#    WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
#    License for the specific language governing permissions and limitations
#    under the License.

import collections
from datetime import datetime
import functools
import json
import time
import traceback

from oslo_concurrency import processutils as putils
from oslo_context import context as context_utils
from oslo_log import log as logging

from drbd_flexvolume import config
from drbd_flexvolume import constants
from drbd_flexvolume import defaults
from drbd_flexvolume import exception


CONF = config.CONF
LOG = logging.getLogger(__name__)


Resource = collections.namedtuple('Resource', ('name', 'node_name'))

MountRequest = collections.namedtuple('MountRequest',
                                      ('resource', 'fs_type', 'read_write'))


class Options(object):
    __slots__ = ('fs_type', 'read_write', 'resource')

    FIELDS = (('fs_type', constants.OPT_FS_TYPE),
              ('read_write', constants.OPT_READ_WRITE),
              ('resource', constants.OPT_RESOURCE))

    def __init__(self, fs_type='', read_write='', resource=''):
        self.fs_type = fs_type
        self.read_write = read_write
        self.resource = resource

    @classmethod
    def parse(cls, raw):
        """Parse the JSON options passed by the orchestrator.

        Unknown keys are ignored and missing or null ones are left empty, but
        the document must be an object and known keys must be strings.
        """
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            raise exception.OptionsParseError(raw=raw)

        if not isinstance(data, dict):
            raise exception.OptionsParseError(raw=raw)

        values = {}
        for attr, key in cls.FIELDS:
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, str):
                raise exception.OptionsParseError(raw=raw)
            values[attr] = value
        return cls(**values)

    def resource_for(self, node_name):
        return Resource(self.resource, node_name)

    def mount_request(self, node_name):
        return MountRequest(self.resource_for(node_name), self.fs_type,
                            self.read_write)

    def __repr__(self):
        return ('<Options fs_type=%r read_write=%r resource=%r>' %
                (self.fs_type, self.read_write, self.resource))


def execute(*cmd, **kwargs):
    """Run a command, retrying on some exit codes.

    Accepts ``retries``, ``delay``, ``backoff`` and ``errors`` (exit codes
    that deserve a retry) on top of what processutils.execute accepts.
    """
    retries = kwargs.pop('retries', 1)
    delay = kwargs.pop('delay', 1)
    backoff = kwargs.pop('backoff', 2)
    errors = kwargs.pop('errors', [constants.MOUNT_FAILURE_CODE])
    root_helper = kwargs.pop('root_helper', CONF.ROOT_HELPER)
    if root_helper:
        kwargs.update(run_as_root=True, root_helper=root_helper)

    while retries:
        try:
            return putils.execute(*cmd, **kwargs)
        except putils.ProcessExecutionError as exc:
            retries -= 1
            if exc.exit_code not in errors or not retries:
                raise
            LOG.debug('%s exited with %s, retrying in %ss' %
                      (cmd[0], exc.exit_code, delay))
            time.sleep(delay)
            delay *= backoff
        except OSError as exc:
            raise exception.CommandError(command=cmd[0], reason=exc)


def command_output(exc):
    """Return the most useful text of a failed command."""
    output = (exc.stderr or '').strip() or (exc.stdout or '').strip()
    return output or 'exit code %s' % exc.exit_code


def require(count):
    """Fail actions called with fewer than count arguments (action included).

    The check runs before the action does anything, so a short call never
    has side effects.
    """
    def func_wrapper(f):
        @functools.wraps(f)
        def checker(self, args):
            if len(args) < count:
                raise exception.TooFewArguments(action=args[0],
                                                args='[%s]' % ' '.join(args))
            return f(self, args)
        return checker
    return func_wrapper


def logaction(f):
    @functools.wraps(f)
    def dolog(self, args):
        # Every action gets its own request id in the logs
        context_utils.RequestContext(overwrite=True,
                                     project_name=defaults.NAME)

        start = datetime.now()
        LOG.info('=> Action %s' % f.__name__)
        LOG.debug('With args: %s' % (args,))
        try:
            result = f(self, args)
        except exception.FlexVolumeException as exc:
            end = datetime.now()
            LOG.error('!! Action %s failed in %.0fs with exit code %s: %s' %
                      (f.__name__, (end - start).total_seconds(),
                       exc.exit_code, exc))
            raise
        except Exception:
            end = datetime.now()
            LOG.error('!! Action %s failed in %.0fs with unexpected '
                      'exception\n%s' %
                      (f.__name__, (end - start).total_seconds(),
                       traceback.format_exc()))
            raise

        end = datetime.now()
        LOG.info('<= Action %s served in %.0fs' %
                 (f.__name__, (end - start).total_seconds()))
        LOG.debug('Returns: %s' % result)
        return result
    return dolog
