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

import numbers
import time

from oslo_log import log as logging

from drbd_flexvolume import config
from drbd_flexvolume import exception


CONF = config.CONF
LOG = logging.getLogger(__name__)


class RetryPolicy(object):
    """Bounded number of attempts with a fixed sleep between them."""
    __slots__ = ('max_attempts', 'interval')

    def __init__(self, max_attempts, interval):
        if (isinstance(max_attempts, bool) or
                not isinstance(max_attempts, int) or max_attempts < 1):
            raise ValueError('max_attempts must be a positive integer, got %r'
                             % (max_attempts,))
        if (isinstance(interval, bool) or
                not isinstance(interval, numbers.Real) or interval < 0):
            raise ValueError('interval must be a non negative number, got %r'
                             % (interval,))
        self.max_attempts = max_attempts
        self.interval = interval

    @classmethod
    def for_attach(cls):
        return cls(CONF.ATTACH_RETRIES, CONF.POLL_INTERVAL)

    @classmethod
    def for_assignment(cls):
        return cls(CONF.ASSIGNMENT_RETRIES, CONF.POLL_INTERVAL)

    def attempts(self):
        """Yield attempt numbers, sleeping between consecutive ones."""
        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1 and self.interval:
                time.sleep(self.interval)
            yield attempt

    def __repr__(self):
        return '<RetryPolicy max_attempts=%s interval=%ss>' % (
            self.max_attempts, self.interval)


def wait_for_device_path(client, resource, policy):
    """Return the local device path once the cluster manager creates it.

    Raises WaitTimeout if it doesn't show up within the policy's attempts.
    Cluster manager errors are not retried.
    """
    for attempt in policy.attempts():
        path = client.query_device_path(resource)
        if path:
            LOG.info('Resource %s has device %s (attempt %s/%s)' %
                     (resource.name, path, attempt, policy.max_attempts))
            return path
        LOG.debug('No device for resource %s yet (attempt %s/%s)' %
                  (resource.name, attempt, policy.max_attempts))

    raise exception.WaitTimeout(resource=resource.name)


def wait_for_assignment(client, resource, policy):
    """Return whether the resource gets assigned to the node in time."""
    for attempt in policy.attempts():
        if client.query_assigned(resource):
            LOG.info('Resource %s is assigned to node %s (attempt %s/%s)' %
                     (resource.name, resource.node_name, attempt,
                      policy.max_attempts))
            return True
        LOG.debug('Resource %s not assigned to node %s yet (attempt %s/%s)' %
                  (resource.name, resource.node_name, attempt,
                   policy.max_attempts))

    LOG.info('Resource %s not assigned to node %s after %s attempts' %
             (resource.name, resource.node_name, policy.max_attempts))
    return False
