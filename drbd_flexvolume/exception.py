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

"""Errors raised by the driver.

Every exception carries the exit code the orchestrator should get when it is
reported, and the message is built from the class template and the keyword
arguments given on creation.  Keyword arguments listed in ``QUOTED`` are
rendered as double quoted strings, which is how resource names and actions
are shown to the user.
"""
import json

from oslo_log import log as logging

from drbd_flexvolume import constants
from drbd_flexvolume import messages


LOG = logging.getLogger(__name__)


def quote(value):
    return json.dumps(str(value), ensure_ascii=False)


class FlexVolumeException(Exception):
    message = 'An unknown exception occurred: %(reason)s'
    exit_code = constants.EXIT_RETRY
    QUOTED = ('resource', 'action')

    def __init__(self, message=None, exit_code=None, **kwargs):
        self.kwargs = kwargs
        if exit_code is not None:
            self.exit_code = exit_code

        if not message:
            values = {k: quote(v) if k in self.QUOTED else v
                      for k, v in kwargs.items()}
            try:
                message = self.message % values
            except (KeyError, TypeError):
                LOG.exception('Exception in string format operation, '
                              'kwargs: %s' % kwargs)
                message = self.message

        self.msg = message
        super(FlexVolumeException, self).__init__(message)

    def __getattr__(self, name):
        try:
            return self.__dict__['kwargs'][name]
        except KeyError:
            raise AttributeError(name)


class UsageError(FlexVolumeException):
    message = '%(reason)s'
    exit_code = constants.EXIT_USAGE


class TooFewArguments(UsageError):
    message = messages.TOO_FEW_ARGS
    QUOTED = ()


class OptionsParseError(UsageError):
    message = messages.PARSE_OPTIONS


class InvalidConfiguration(UsageError):
    message = messages.INVALID_CONFIG


class UnsupportedAction(FlexVolumeException):
    message = messages.UNSUPPORTED_ACTION
    exit_code = constants.EXIT_USAGE


class CommandError(FlexVolumeException):
    message = messages.COMMAND


class ClusterManagerError(FlexVolumeException):
    message = messages.CLUSTER_MANAGER
    exit_code = constants.EXIT_USAGE


class AssignmentError(FlexVolumeException):
    message = messages.ASSIGN


class UnassignmentError(FlexVolumeException):
    message = messages.UNASSIGN
    exit_code = constants.EXIT_USAGE


class WaitTimeout(FlexVolumeException):
    message = messages.DEVICE_PATH


class NotAttached(FlexVolumeException):
    message = messages.NOT_ATTACHED
    exit_code = constants.EXIT_USAGE


class MountError(FlexVolumeException):
    message = messages.MOUNT
    exit_code = constants.EXIT_USAGE


class UnmountError(FlexVolumeException):
    message = messages.UNMOUNT
