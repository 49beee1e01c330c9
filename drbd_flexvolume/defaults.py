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

NAME = 'drbd-flexvolume'
DRBDMANAGE = 'drbdmanage'
DRBDSETUP = 'drbdsetup'
# Kubelet runs exec plugins as root, so no helper is needed by default
ROOT_HELPER = ''
MOUNT_FS = 'ext4'
MKFS = 'mkfs.'
POLL_INTERVAL = 2
ATTACH_RETRIES = 4
ASSIGNMENT_RETRIES = 4
LOG_FILE = ''
USE_SYSLOG = True

FLEX_CFG = {'drbdmanage': DRBDMANAGE, 'drbdsetup': DRBDSETUP,
            'root_helper': ROOT_HELPER, 'default_fs': MOUNT_FS,
            'poll_interval': POLL_INTERVAL, 'attach_retries': ATTACH_RETRIES,
            'assignment_retries': ASSIGNMENT_RETRIES, 'log_file': LOG_FILE,
            'use_syslog': USE_SYSLOG, 'debug': False}

LOGGING_FORMAT = ('%(asctime)s %(project_name)s %(levelname)s %(name)s '
                  '[%(request_id)s] %(message)s')

LOG_LEVELS = ('oslo_concurrency=WARN', 'oslo.concurrency=WARN',
              'oslo_config=WARN')

DEBUG_LOG_LEVELS = ('oslo_concurrency=DEBUG', 'oslo.concurrency=DEBUG',
                    'oslo_config=WARN')
