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

"""Client for the drbdmanage cluster manager.

Assignments are requested and queried through the ``drbdmanage`` command,
while the local block device is looked up with ``drbdsetup``, because a
device only exists on this node once DRBD has brought the resource up here.
"""
import os
import re

from oslo_concurrency import processutils as putils
from oslo_log import log as logging

from drbd_flexvolume import common
from drbd_flexvolume import config
from drbd_flexvolume import constants
from drbd_flexvolume import exception


CONF = config.CONF
LOG = logging.getLogger(__name__)


class Assignment(object):
    __slots__ = ('node_name', 'resource_name', 'node_id', 'cstate', 'tstate')

    def __init__(self, node_name, resource_name, node_id, cstate, tstate):
        self.node_name = node_name
        self.resource_name = resource_name
        self.node_id = node_id
        self.cstate = cstate
        self.tstate = tstate

    @classmethod
    def parse(cls, line):
        """Parse a machine readable list-assignments line.

        Lines look like ``node,resource,node_id,cstate,tstate`` where states
        are ``|`` separated flags, e.g. ``connect|deploy``.
        """
        fields = [field.strip() for field in line.split(',')]
        if len(fields) != 5:
            raise ValueError('Expected 5 fields, got %s' % len(fields))
        node_name, resource_name, node_id, cstate, tstate = fields
        return cls(node_name, resource_name, node_id,
                   frozenset(filter(None, cstate.split('|'))),
                   frozenset(filter(None, tstate.split('|'))))

    @property
    def deployed(self):
        return (constants.FLAG_DEPLOY in self.cstate and
                constants.FLAG_DEPLOY in self.tstate)

    def __repr__(self):
        return ('<Assignment %s on %s cstate=%s tstate=%s>' %
                (self.resource_name, self.node_name,
                 '|'.join(sorted(self.cstate)),
                 '|'.join(sorted(self.tstate))))


class DrbdManageClient(object):
    NO_SUCH_RESOURCE = 'No such resource'
    MINOR_REGEX = re.compile(r'\bminor:(\d+)\b')

    def __init__(self, drbdmanage=None, drbdsetup=None, execute=None,
                 path_exists=None):
        self.drbdmanage = drbdmanage or CONF.DRBDMANAGE
        self.drbdsetup = drbdsetup or CONF.DRBDSETUP
        self.execute = execute or common.execute
        self.path_exists = path_exists or os.path.exists

    @staticmethod
    def _failure_reason(exc):
        if isinstance(exc, putils.ProcessExecutionError):
            return common.command_output(exc)
        return str(exc.reason)

    def _query(self, resource, *cmd, **kwargs):
        """Run a query command returning its stdout.

        If ``missing`` is given and the failed command output contains it,
        None is returned instead of raising ClusterManagerError.
        """
        missing = kwargs.pop('missing', None)
        try:
            stdout, stderr = self.execute(*cmd)
            return stdout
        except (putils.ProcessExecutionError, exception.CommandError) as exc:
            reason = self._failure_reason(exc)

        if missing and missing in reason:
            return None
        raise exception.ClusterManagerError(command=' '.join(cmd[:2]),
                                            resource=resource.name,
                                            reason=reason)

    def assign(self, resource):
        LOG.info('Assigning resource %s to node %s' %
                 (resource.name, resource.node_name))
        try:
            self.execute(self.drbdmanage, 'assign-resource', resource.name,
                         resource.node_name)
        except (putils.ProcessExecutionError, exception.CommandError) as exc:
            raise exception.AssignmentError(
                resource=resource.name, reason=self._failure_reason(exc))

    def unassign(self, resource):
        if not self.get_assignment(resource):
            LOG.info('Resource %s is not assigned to node %s, nothing to do' %
                     (resource.name, resource.node_name))
            return

        LOG.info('Unassigning resource %s from node %s' %
                 (resource.name, resource.node_name))
        try:
            self.execute(self.drbdmanage, 'unassign-resource', '--quiet',
                         resource.name, resource.node_name)
        except (putils.ProcessExecutionError, exception.CommandError) as exc:
            reason = self._failure_reason(exc)
            # It may have been unassigned by someone else in the meantime
            if self.get_assignment(resource):
                raise exception.UnassignmentError(resource=resource.name,
                                                  reason=reason)
            LOG.info('Resource %s is no longer assigned to node %s despite '
                     'error: %s' % (resource.name, resource.node_name, reason))

    def get_assignment(self, resource):
        stdout = self._query(resource, self.drbdmanage, 'list-assignments',
                             '--machine-readable',
                             '--resources', resource.name,
                             '--nodes', resource.node_name)
        for line in stdout.splitlines():
            if not line.strip():
                continue
            try:
                assignment = Assignment.parse(line)
            except ValueError as exc:
                LOG.warning('Skipping unexpected assignment line %r: %s' %
                            (line, exc))
                continue
            if (assignment.node_name == resource.node_name and
                    assignment.resource_name == resource.name):
                LOG.debug('Found %r' % assignment)
                return assignment
        return None

    def query_assigned(self, resource):
        assignment = self.get_assignment(resource)
        return bool(assignment and assignment.deployed)

    def query_device_path(self, resource):
        stdout = self._query(resource, self.drbdsetup, 'status',
                             resource.name, '--verbose',
                             missing=self.NO_SUCH_RESOURCE)
        if stdout is None:
            LOG.debug('Resource %s is not up yet on this node' %
                      resource.name)
            return None

        match = self.MINOR_REGEX.search(stdout)
        if not match:
            LOG.debug('No minor for resource %s in %r' %
                      (resource.name, stdout))
            return None

        path = constants.DRBD_DEVICE_PREFIX + match.group(1)
        if not self.path_exists(path):
            LOG.debug('Device %s for resource %s does not exist yet' %
                      (path, resource.name))
            return None
        return path
