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

VENDOR_VERSION = '0.1.0'

STATUS_SUCCESS = 'Success'
STATUS_FAILURE = 'Failure'
STATUS_NOT_SUPPORTED = 'NotSupported'

EXIT_SUCCESS = 0
# The orchestrator is expected to retry the call
EXIT_RETRY = 1
EXIT_USAGE = 2

ACTION_INIT = 'init'
ACTION_ATTACH = 'attach'
ACTION_WAIT_FOR_ATTACH = 'waitforattach'
ACTION_DETACH = 'detach'
ACTION_MOUNT_DEVICE = 'mountdevice'
ACTION_UNMOUNT_DEVICE = 'unmountdevice'
ACTION_UNMOUNT = 'unmount'
ACTION_GET_VOLUME_NAME = 'getvolumename'
ACTION_IS_ATTACHED = 'isattached'

# Advertised when no action is given at all
DOCUMENTED_ACTIONS = (ACTION_INIT, ACTION_ATTACH, ACTION_DETACH,
                      ACTION_MOUNT_DEVICE, ACTION_UNMOUNT_DEVICE,
                      ACTION_GET_VOLUME_NAME, ACTION_IS_ATTACHED)

OPT_FS_TYPE = 'kubernetes.io/fsType'
OPT_READ_WRITE = 'kubernetes.io/readwrite'
OPT_RESOURCE = 'resource'

DRBD_DEVICE_PREFIX = '/dev/drbd'
# drbdmanage assignment state flags
FLAG_DEPLOY = 'deploy'

UMOUNT_RETRIES = 4
# mount(8) and umount(8) exit code for generic mount failures (busy, etc.)
MOUNT_FAILURE_CODE = 32
