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
import re

from oslo_concurrency import processutils as putils
from oslo_log import log as logging

from drbd_flexvolume import common
from drbd_flexvolume import config
from drbd_flexvolume import constants
from drbd_flexvolume import defaults
from drbd_flexvolume import exception
from drbd_flexvolume import messages


CONF = config.CONF
LOG = logging.getLogger(__name__)


# As per http://man7.org/linux/man-pages/man5/proc.5.html
class MountInfo(object):
    # Data to return instead of failing
    BAD_MOUNTINFO = ('', '', '', '', '', '', '-', '', '', '')
    ESCAPED_REGEX = re.compile(r'\\([0-7]{3})')

    def __init__(self, data):
        # Don't fail on bad data, just log it and return whatever we can.
        if isinstance(data, str):
            data = data.split()
        self.original_data = data

        length = len(data)
        if length < 10:
            LOG.error('Mount info data is too short: %s', data)
            data = self.BAD_MOUNTINFO
            length = len(data)

        i = 6
        while i < length and data[i] != '-':
            i += 1

        # We must have found the optional fields separator
        if i >= length - 3:
            LOG.error('Bad mount info data, missing separator: %s', data)
            data = self.BAD_MOUNTINFO
            i = 6

        self.mount_id = data[0]
        self.parent_id = data[1]
        self.st_dev = data[2]
        self.root = self._unescape(data[3])
        self.mount_point = self._unescape(data[4])
        self.mount_options = data[5]
        self.optional_fields = list(data[6:i])

        self.fs_type = data[i+1]
        self.mount_source = self._unescape(data[i+2])
        self.super_options = data[i+3]

    @classmethod
    def _unescape(cls, value):
        # Spaces, tabs, newlines and backslashes come as octal escapes
        return cls.ESCAPED_REGEX.sub(lambda m: chr(int(m.group(1), 8)),
                                     value)

    @property
    def source(self):
        # Bindmounts will have devtmpfs and we want the root instead
        if self.mount_source.startswith('/'):
            return self.mount_source
        return self.root

    def __str__(self):
        return ('<root: %s, dest: %s, src: %s>' %
                (self.root, self.mount_point, self.mount_source))

    __repr__ = __str__


class ProcMountState(object):
    """Mount table of the running system."""
    MOUNTINFO = '/proc/self/mountinfo'

    def __init__(self, filename=None):
        self.filename = filename or self.MOUNTINFO

    def mounts(self):
        with open(self.filename) as f:
            return [MountInfo(line) for line in f.read().split('\n') if line]

    def find(self, path):
        """Return the MountInfo of the last mount on path, or None."""
        path = os.path.normpath(path)
        found = None
        # Later entries are stacked on top of earlier ones
        for mount in self.mounts():
            if mount.mount_point == path:
                found = mount
        return found


class MountController(object):
    DEFAULT_MKFS_ARGS = tuple()
    MKFS_ARGS = {'ext4': ('-F',), 'ext3': ('-F',), 'xfs': ('-f',)}

    def __init__(self, execute=None, mount_state=None, default_fs=None):
        self.execute = execute or common.execute
        self.mount_state = mount_state or ProcMountState()
        self.default_fs = default_fs or CONF.DEFAULT_MOUNT_FS

    @staticmethod
    def _same_device(source, device_path):
        return os.path.realpath(source) == os.path.realpath(device_path)

    def is_mounted(self, target_path):
        return self.mount_state.find(target_path) is not None

    def _current_fs(self, device_path):
        # We don't use the util-linux Python library to reduce dependencies
        stdout, stderr = self.execute('lsblk', '-nlfoFSTYPE', device_path,
                                      retries=5, errors=[1, 32], delay=2)
        fs_types = [line for line in stdout.split() if line]
        return fs_types[0] if fs_types else None

    def _format(self, device_path, fs_type):
        LOG.info('Creating %s filesystem on %s' % (fs_type, device_path))
        cmd = [defaults.MKFS + fs_type]
        cmd.extend(self.MKFS_ARGS.get(fs_type, self.DEFAULT_MKFS_ARGS))
        cmd.append(device_path)
        self.execute(*cmd)

    def _prepare_fs(self, device_path, target_path, fs_type):
        """Return the filesystem to mount, creating it on blank devices."""
        current_fs = self._current_fs(device_path)
        if not current_fs:
            fs_type = fs_type or self.default_fs
            self._format(device_path, fs_type)
            return fs_type

        if fs_type and fs_type != current_fs:
            raise exception.MountError(
                device=device_path, target=target_path,
                reason=messages.FS_MISMATCH %
                {'current': current_fs, 'requested': fs_type})
        return current_fs

    def mount(self, device_path, target_path, fs_type=None):
        mount = self.mount_state.find(target_path)
        if mount:
            if self._same_device(mount.source, device_path):
                LOG.info('%s already mounted on %s' %
                         (device_path, target_path))
                return
            raise exception.MountError(
                device=device_path, target=target_path,
                reason=messages.ALREADY_MOUNTED %
                {'target': target_path, 'source': mount.source})

        try:
            if not os.path.isdir(target_path):
                os.makedirs(target_path)

            fs_type = self._prepare_fs(device_path, target_path, fs_type)
            LOG.info('Mounting %s on %s as %s' %
                     (device_path, target_path, fs_type))
            self.execute('mount', '-t', fs_type, device_path, target_path)
        except putils.ProcessExecutionError as exc:
            raise exception.MountError(device=device_path, target=target_path,
                                       reason=common.command_output(exc))
        except (OSError, exception.CommandError) as exc:
            raise exception.MountError(device=device_path, target=target_path,
                                       reason=exc)

    def unmount(self, target_path):
        if not self.is_mounted(target_path):
            LOG.info('%s is not mounted, nothing to do' % target_path)
            return

        LOG.info('Unmounting %s' % target_path)
        try:
            self.execute('umount', target_path,
                         retries=constants.UMOUNT_RETRIES)
        except putils.ProcessExecutionError as exc:
            raise exception.UnmountError(target=target_path,
                                         reason=common.command_output(exc))
        except exception.CommandError as exc:
            raise exception.UnmountError(target=target_path, reason=exc)
