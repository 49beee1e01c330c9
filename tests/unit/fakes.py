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

import os

from oslo_concurrency import processutils as putils

from drbd_flexvolume import mount
from drbd_flexvolume import polling


NO_WAIT = polling.RetryPolicy(4, 0)


def process_error(exit_code=1, stdout='', stderr=''):
    return putils.ProcessExecutionError(stdout=stdout, stderr=stderr,
                                        exit_code=exit_code, cmd='fake')


class FakeClient(object):
    """Cluster manager client answering from scripted sequences.

    ``device_paths`` and ``assigned`` are consumed one item per query, the
    last one being repeated.  Items that are exceptions get raised.
    """

    def __init__(self, device_paths=(None,), assigned=(False,),
                 assign_error=None, unassign_error=None):
        self.device_paths = list(device_paths)
        self.assigned = list(assigned)
        self.assign_error = assign_error
        self.unassign_error = unassign_error
        self.calls = []

    @staticmethod
    def _next(values):
        value = values.pop(0) if len(values) > 1 else values[0]
        if isinstance(value, Exception):
            raise value
        return value

    def assign(self, resource):
        self.calls.append(('assign', resource))
        if self.assign_error:
            raise self.assign_error

    def unassign(self, resource):
        self.calls.append(('unassign', resource))
        if self.unassign_error:
            raise self.unassign_error

    def query_device_path(self, resource):
        self.calls.append(('query_device_path', resource))
        return self._next(self.device_paths)

    def query_assigned(self, resource):
        self.calls.append(('query_assigned', resource))
        return self._next(self.assigned)


class FakeMountState(object):
    """In memory mount table."""

    def __init__(self, mounts=None):
        # mount point -> source
        self.table = dict(mounts or {})

    def find(self, path):
        path = os.path.normpath(path)
        if path not in self.table:
            return None
        return mount.MountInfo('36 25 0:32 / %s rw,relatime shared:1 - ext4 '
                               '%s rw' % (path, self.table[path]))


class FakeExecutor(object):
    """Records commands and answers them from a table of results.

    Results are keyed by the command name and first argument, falling back
    to the command name alone.  A result may be a (stdout, stderr) tuple, an
    exception to raise, or a list of those consumed in order.  ``mount`` and
    ``umount`` update the given FakeMountState on success.
    """

    def __init__(self, results=None, mount_state=None):
        self.results = dict(results or {})
        self.mount_state = mount_state
        self.calls = []

    def _result(self, cmd):
        for key in (tuple(cmd[:2]), cmd[0]):
            if key in self.results:
                result = self.results[key]
                if isinstance(result, list):
                    result = result.pop(0) if len(result) > 1 else result[0]
                return result
        return ('', '')

    def __call__(self, *cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        result = self._result(cmd)
        if isinstance(result, Exception):
            raise result

        if self.mount_state is not None:
            if cmd[0] == 'mount':
                self.mount_state.table[os.path.normpath(cmd[-1])] = cmd[-2]
            elif cmd[0] == 'umount':
                self.mount_state.table.pop(os.path.normpath(cmd[-1]), None)
        return result

    def commands(self, name=None):
        return [cmd for cmd, kwargs in self.calls
                if name is None or cmd[0] == name]
