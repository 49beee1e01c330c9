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

import json
import unittest
from unittest import mock

from drbd_flexvolume import api
from drbd_flexvolume import common
from drbd_flexvolume import exception
from tests.unit import fakes


OPTIONS = '{"resource":"r0"}'


class TestFlexVolumeAPI(unittest.TestCase):
    def setUp(self):
        self.client = fakes.FakeClient()
        self.mounter = mock.Mock()
        self.api = api.FlexVolumeAPI(client=self.client,
                                     mounter=self.mounter,
                                     attach_policy=fakes.NO_WAIT,
                                     assignment_policy=fakes.NO_WAIT,
                                     node_name='nodeA')

    def call(self, *argv):
        response, exit_code = self.api.call(list(argv))
        return json.loads(response.json), exit_code

    def test_no_action(self):
        result, exit_code = self.call()
        self.assertEqual(2, exit_code)
        self.assertEqual('Failure', result['status'])
        self.assertTrue(result['message'].startswith('No driver action!'))

    def test_unsupported_action(self):
        result, exit_code = self.call('foo')
        self.assertEqual({'status': 'NotSupported',
                          'message': 'Unsupported driver action: "foo"'},
                         result)
        self.assertEqual(2, exit_code)

    def test_unsupported_action_keeps_unicode(self):
        result, exit_code = self.call('fo\u00e9')
        self.assertEqual('Unsupported driver action: "fo\u00e9"',
                         result['message'])

    def test_init(self):
        self.assertEqual(({'status': 'Success'}, 0), self.call('init'))

    def test_waitforattach_is_noop(self):
        self.assertEqual(({'status': 'Success'}, 0),
                         self.call('waitforattach', '/dev/drbd0', OPTIONS))
        self.assertEqual([], self.client.calls)

    def test_too_few_arguments(self):
        for argv in (('attach', OPTIONS), ('detach', 'r0'),
                     ('mountdevice', '/mnt/r0', '/dev/drbd0'),
                     ('unmountdevice',), ('unmount',), ('getvolumename',),
                     ('isattached', OPTIONS)):
            result, exit_code = self.call(*argv)
            self.assertEqual(2, exit_code, argv)
            self.assertEqual('Failure', result['status'])
            self.assertEqual('%s: too few arguments passed: [%s]' %
                             (argv[0], ' '.join(argv)),
                             result['message'])

        self.assertEqual([], self.client.calls)
        self.assertEqual([], self.mounter.mock_calls)

    def test_bad_options(self):
        for argv in (('attach', '{bad', 'nodeA'),
                     ('mountdevice', '/mnt/r0', '/dev/drbd0', '{bad'),
                     ('getvolumename', '{bad'),
                     ('isattached', '{bad', 'nodeA')):
            result, exit_code = self.call(*argv)
            self.assertEqual(2, exit_code, argv)
            self.assertEqual({'status': 'Failure',
                              'message': "couldn't parse options from {bad"},
                             result)

        self.assertEqual([], self.client.calls)
        self.assertEqual([], self.mounter.mock_calls)

    def test_attach(self):
        self.client.device_paths = ['/dev/drbd0']

        result, exit_code = self.call('attach', OPTIONS, 'nodeA')

        self.assertEqual({'status': 'Success', 'device': '/dev/drbd0'},
                         result)
        self.assertEqual(0, exit_code)
        resource = common.Resource('r0', 'nodeA')
        self.assertEqual([('assign', resource),
                          ('query_device_path', resource)],
                         self.client.calls)

    def test_attach_waits_for_device(self):
        self.client.device_paths = [None, None, '/dev/drbd100']

        result, exit_code = self.call('attach', OPTIONS, 'nodeA')

        self.assertEqual({'status': 'Success', 'device': '/dev/drbd100'},
                         result)
        self.assertEqual(0, exit_code)

    def test_attach_assign_fails(self):
        self.client.assign_error = exception.AssignmentError(
            resource='r0', reason='node unreachable')

        result, exit_code = self.call('attach', OPTIONS, 'nodeA')

        self.assertEqual(
            {'status': 'Failure',
             'message': 'attach: failed to assign resource "r0": node '
                        'unreachable'},
            result)
        self.assertEqual(1, exit_code)
        self.assertEqual(['assign'], [c[0] for c in self.client.calls])

    def test_attach_device_timeout(self):
        result, exit_code = self.call('attach', OPTIONS, 'nodeA')

        self.assertEqual(
            {'status': 'Failure',
             'message': 'attach: unable to find device path for resource '
                        '"r0"'},
            result)
        self.assertEqual(1, exit_code)
        self.assertEqual(4, len([c for c in self.client.calls
                                 if c[0] == 'query_device_path']))

    def test_attach_device_query_error(self):
        self.client.device_paths = [exception.ClusterManagerError(
            command='drbdsetup status', resource='r0', reason='boom')]

        result, exit_code = self.call('attach', OPTIONS, 'nodeA')

        self.assertEqual('Failure', result['status'])
        self.assertEqual(1, exit_code)
        self.assertEqual(1, len([c for c in self.client.calls
                                 if c[0] == 'query_device_path']))

    def test_detach(self):
        result, exit_code = self.call('detach', 'r0', 'nodeA')

        self.assertEqual(({'status': 'Success'}, 0), (result, exit_code))
        self.assertEqual([('unassign', common.Resource('r0', 'nodeA'))],
                         self.client.calls)

    def test_detach_fails(self):
        self.client.unassign_error = exception.UnassignmentError(
            resource='r0', reason='busy')

        result, exit_code = self.call('detach', 'r0', 'nodeA')

        self.assertEqual({'status': 'Failure',
                          'message': 'failed to unassign resource "r0": busy'},
                         result)
        self.assertEqual(2, exit_code)

    def test_mountdevice_resolves_device(self):
        self.client.device_paths = ['/dev/drbd0']

        result, exit_code = self.call(
            'mountdevice', '/mnt/r0', '/dev/whatever',
            '{"resource":"r0","kubernetes.io/fsType":"xfs"}')

        self.assertEqual(({'status': 'Success'}, 0), (result, exit_code))
        self.mounter.mount.assert_called_once_with('/dev/drbd0', '/mnt/r0',
                                                   'xfs')
        self.assertEqual([('query_device_path',
                           common.Resource('r0', 'nodeA'))],
                         self.client.calls)

    def test_mountdevice_uses_declared_device(self):
        result, exit_code = self.call('mountdevice', '/mnt/r0', '/dev/drbd5',
                                      '{}')

        self.assertEqual(({'status': 'Success'}, 0), (result, exit_code))
        self.mounter.mount.assert_called_once_with('/dev/drbd5', '/mnt/r0', '')
        self.assertEqual([], self.client.calls)

    def test_mountdevice_without_device(self):
        result, exit_code = self.call('mountdevice', '/mnt/r0', '', '{}')

        self.assertEqual('Failure', result['status'])
        self.assertTrue(result['message'].startswith('mountDevice: '))
        self.assertEqual(2, exit_code)
        self.mounter.mount.assert_not_called()

    def test_mountdevice_mount_fails(self):
        self.client.device_paths = ['/dev/drbd0']
        self.mounter.mount.side_effect = exception.MountError(
            device='/dev/drbd0', target='/mnt/r0', reason='wrong fs type')

        result, exit_code = self.call('mountdevice', '/mnt/r0', '', OPTIONS)

        self.assertEqual(
            {'status': 'Failure',
             'message': 'mountDevice: cannot mount /dev/drbd0 on /mnt/r0: '
                        'wrong fs type'},
            result)
        self.assertEqual(2, exit_code)

    def test_unmount_actions(self):
        for action in ('unmount', 'unmountdevice'):
            self.mounter.reset_mock()
            result, exit_code = self.call(action, '/mnt/r0')
            self.assertEqual(({'status': 'Success'}, 0), (result, exit_code))
            self.mounter.unmount.assert_called_once_with('/mnt/r0')

    def test_unmount_fails(self):
        self.mounter.unmount.side_effect = exception.UnmountError(
            target='/mnt/r0', reason='target is busy')

        result, exit_code = self.call('unmountdevice', '/mnt/r0')

        self.assertEqual(
            {'status': 'Failure',
             'message': 'unmount: cannot unmount /mnt/r0: target is busy'},
            result)
        self.assertEqual(1, exit_code)

    def test_getvolumename(self):
        result, exit_code = self.call(
            'getvolumename', '{"resource":"r0","kubernetes.io/fsType":"ext4"}')

        self.assertEqual({'status': 'Success', 'volumeName': 'r0'}, result)
        self.assertEqual(0, exit_code)
        self.assertEqual([], self.client.calls)

    def test_isattached(self):
        self.client.assigned = [False, True]

        result, exit_code = self.call('isattached', OPTIONS, 'nodeA')

        self.assertEqual({'status': 'Success', 'attached': 'true'}, result)
        self.assertEqual(0, exit_code)
        self.assertEqual(2, len(self.client.calls))

    def test_isattached_not_attached(self):
        result, exit_code = self.call('isattached', OPTIONS, 'nodeA')

        self.assertEqual({'status': 'Failure',
                          'message': 'resource "r0" not attached'},
                         result)
        self.assertEqual(2, exit_code)
        self.assertEqual(4, len(self.client.calls))

    def test_isattached_manager_error(self):
        self.client.assigned = [exception.ClusterManagerError(
            command='drbdmanage list-assignments', resource='r0',
            reason='no quorum')]

        result, exit_code = self.call('isattached', OPTIONS, 'nodeA')

        self.assertEqual(
            {'status': 'Failure',
             'message': 'drbdmanage list-assignments failed for resource '
                        '"r0": no quorum'},
            result)
        self.assertEqual(2, exit_code)
        self.assertEqual(1, len(self.client.calls))
