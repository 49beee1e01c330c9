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

"""Responses returned to the orchestrator.

A response is a status plus either a message (failures) or at most one
payload (successes).  Payloads are the per action extra fields of the
FlexVolume protocol.
"""
import json

from drbd_flexvolume import constants


class Payload(object):
    __slots__ = ()
    KEY = None

    def value(self):
        raise NotImplementedError

    def __eq__(self, other):
        return type(self) is type(other) and self.value() == other.value()

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return '<%s %s=%r>' % (type(self).__name__, self.KEY, self.value())


class Device(Payload):
    __slots__ = ('path',)
    KEY = 'device'

    def __init__(self, path):
        self.path = path

    def value(self):
        return self.path


class Attached(Payload):
    __slots__ = ()
    KEY = 'attached'

    def value(self):
        # The protocol wants a string, not a boolean
        return 'true'


class VolumeName(Payload):
    __slots__ = ('name',)
    KEY = 'volumeName'

    def __init__(self, name):
        self.name = name

    def value(self):
        return self.name


class Response(object):
    __slots__ = ('status', 'message', 'payload')
    STATUSES = (constants.STATUS_SUCCESS, constants.STATUS_FAILURE,
                constants.STATUS_NOT_SUPPORTED)

    def __init__(self, status, message=None, payload=None):
        if status not in self.STATUSES:
            raise ValueError('Invalid status %r' % status)
        if status == constants.STATUS_SUCCESS and message:
            raise ValueError('Successful responses carry no message')
        if status != constants.STATUS_SUCCESS and payload is not None:
            raise ValueError('Only successful responses carry a payload')

        self.status = status
        self.message = message
        self.payload = payload

    @classmethod
    def success(cls, payload=None):
        return cls(constants.STATUS_SUCCESS, payload=payload)

    @classmethod
    def failure(cls, message):
        return cls(constants.STATUS_FAILURE, message=message)

    @classmethod
    def not_supported(cls, message):
        return cls(constants.STATUS_NOT_SUPPORTED, message=message)

    @property
    def succeeded(self):
        return self.status == constants.STATUS_SUCCESS

    def to_dict(self):
        result = {'status': self.status}
        if self.message:
            result['message'] = self.message
        if self.payload is not None:
            result[self.payload.KEY] = self.payload.value()
        return result

    @property
    def json(self):
        return json.dumps(self.to_dict(), separators=(',', ':'))

    def __eq__(self, other):
        return isinstance(other, Response) and self.to_dict() == other.to_dict()

    def __ne__(self, other):
        return not self == other

    def __str__(self):
        return self.json

    __repr__ = __str__
