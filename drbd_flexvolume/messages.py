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


NO_ACTION = 'No driver action! Valid actions are: %s'
TOO_FEW_ARGS = '%(action)s: too few arguments passed: %(args)s'
UNSUPPORTED_ACTION = 'Unsupported driver action: %(action)s'
PARSE_OPTIONS = "couldn't parse options from %(raw)s"
NO_DEVICE = 'options name no resource and no device was given'
INVALID_CONFIG = 'Invalid configuration: %(reason)s'

CLUSTER_MANAGER = '%(command)s failed for resource %(resource)s: %(reason)s'
ASSIGN = 'failed to assign resource %(resource)s: %(reason)s'
UNASSIGN = 'failed to unassign resource %(resource)s: %(reason)s'
DEVICE_PATH = 'unable to find device path for resource %(resource)s'
NOT_ATTACHED = 'resource %(resource)s not attached'
MOUNT = 'cannot mount %(device)s on %(target)s: %(reason)s'
UNMOUNT = 'cannot unmount %(target)s: %(reason)s'
COMMAND = 'cannot run %(command)s: %(reason)s'

ALREADY_MOUNTED = '%(target)s is already mounted from %(source)s'
FS_MISMATCH = ('device has filesystem %(current)s but %(requested)s was '
               'requested')

# Prefix the orchestrator sees for failures of a given action
ACTION_FAILED = '%(action)s: %(reason)s'
