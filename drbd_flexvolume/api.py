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

"""FlexVolume actions.

The orchestrator runs us once per action with ``[action, args...]`` and
expects one JSON response on stdout plus an exit code.  ``FlexVolumeAPI.call``
turns an argument vector into a ``(Response, exit_code)`` pair, and all the
external state is reached through the injected cluster manager client and
mount controller.
"""
from oslo_log import log as logging

from drbd_flexvolume import common
from drbd_flexvolume import config
from drbd_flexvolume import constants
from drbd_flexvolume import drbd
from drbd_flexvolume import exception
from drbd_flexvolume import messages
from drbd_flexvolume import mount
from drbd_flexvolume import polling
from drbd_flexvolume import responses


CONF = config.CONF
LOG = logging.getLogger(__name__)


def _with_prefix(action, exc, exit_code=None):
    """Return a copy of exc whose message says which action failed."""
    message = messages.ACTION_FAILED % {'action': action, 'reason': exc.msg}
    return type(exc)(message,
                     exit_code=exit_code if exit_code else exc.exit_code,
                     **exc.kwargs)


class FlexVolumeAPI(object):
    ACTIONS = {
        constants.ACTION_INIT: 'init',
        constants.ACTION_ATTACH: 'attach',
        constants.ACTION_WAIT_FOR_ATTACH: 'wait_for_attach',
        constants.ACTION_DETACH: 'detach',
        constants.ACTION_MOUNT_DEVICE: 'mount_device',
        constants.ACTION_UNMOUNT_DEVICE: 'unmount_device',
        constants.ACTION_UNMOUNT: 'unmount',
        constants.ACTION_GET_VOLUME_NAME: 'get_volume_name',
        constants.ACTION_IS_ATTACHED: 'is_attached',
    }

    def __init__(self, client=None, mounter=None, attach_policy=None,
                 assignment_policy=None, node_name=None):
        self.client = client or drbd.DrbdManageClient()
        self.mounter = mounter or mount.MountController()
        self.attach_policy = attach_policy or polling.RetryPolicy.for_attach()
        self.assignment_policy = (assignment_policy or
                                  polling.RetryPolicy.for_assignment())
        self.node_name = node_name or CONF.NODE_NAME

    def call(self, argv):
        argv = list(argv)
        if not argv:
            msg = messages.NO_ACTION % ', '.join(constants.DOCUMENTED_ACTIONS)
            LOG.error(msg)
            return responses.Response.failure(msg), constants.EXIT_USAGE

        method = self.ACTIONS.get(argv[0])
        if not method:
            exc = exception.UnsupportedAction(action=argv[0])
            LOG.warning(exc.msg)
            return (responses.Response.not_supported(exc.msg),
                    exc.exit_code)

        try:
            response = getattr(self, method)(argv)
        except exception.FlexVolumeException as exc:
            return responses.Response.failure(exc.msg), exc.exit_code
        return response, constants.EXIT_SUCCESS

    @common.logaction
    def init(self, args):
        return responses.Response.success()

    @common.logaction
    @common.require(3)
    def attach(self, args):
        opts = common.Options.parse(args[1])
        resource = opts.resource_for(args[2])

        try:
            self.client.assign(resource)
        except exception.AssignmentError as exc:
            raise _with_prefix(constants.ACTION_ATTACH, exc)

        try:
            path = polling.wait_for_device_path(self.client, resource,
                                                self.attach_policy)
        except (exception.WaitTimeout, exception.ClusterManagerError) as exc:
            LOG.error('Device path lookup failed: %s' % exc)
            raise _with_prefix(constants.ACTION_ATTACH,
                               exception.WaitTimeout(resource=resource.name))

        return responses.Response.success(responses.Device(path))

    @common.logaction
    def wait_for_attach(self, args):
        # attach already waited for the device
        return responses.Response.success()

    @common.logaction
    @common.require(3)
    def detach(self, args):
        resource = common.Resource(args[1], args[2])
        self.client.unassign(resource)
        return responses.Response.success()

    def _get_device(self, opts, device_ref):
        if opts.resource:
            resource = opts.resource_for(self.node_name)
            return polling.wait_for_device_path(self.client, resource,
                                                self.attach_policy)
        if device_ref:
            return device_ref
        raise exception.UsageError(reason=messages.NO_DEVICE)

    @common.logaction
    @common.require(4)
    def mount_device(self, args):
        target_path, device_ref = args[1], args[2]
        opts = common.Options.parse(args[3])
        request = opts.mount_request(self.node_name)
        if request.read_write:
            LOG.debug('Ignoring requested access mode %s' %
                      request.read_write)

        try:
            device = self._get_device(opts, device_ref)
            self.mounter.mount(device, target_path, request.fs_type)
        except exception.FlexVolumeException as exc:
            raise _with_prefix('mountDevice', exc, constants.EXIT_USAGE)
        return responses.Response.success()

    @common.logaction
    @common.require(2)
    def unmount(self, args):
        try:
            self.mounter.unmount(args[1])
        except exception.FlexVolumeException as exc:
            raise _with_prefix(constants.ACTION_UNMOUNT, exc,
                               constants.EXIT_RETRY)
        return responses.Response.success()

    @common.logaction
    @common.require(2)
    def unmount_device(self, args):
        return self.unmount(args)

    @common.logaction
    @common.require(2)
    def get_volume_name(self, args):
        opts = common.Options.parse(args[1])
        return responses.Response.success(responses.VolumeName(opts.resource))

    @common.logaction
    @common.require(3)
    def is_attached(self, args):
        opts = common.Options.parse(args[1])
        resource = opts.resource_for(args[2])

        if not polling.wait_for_assignment(self.client, resource,
                                           self.assignment_policy):
            raise exception.NotAttached(resource=resource.name)
        return responses.Response.success(responses.Attached())
