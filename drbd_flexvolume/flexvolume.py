#!/usr/bin/env python
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

import logging as py_logging
import sys

from oslo_log import log as logging

from drbd_flexvolume import api
from drbd_flexvolume import config
from drbd_flexvolume import constants
from drbd_flexvolume import exception
from drbd_flexvolume import responses


CONF = config.CONF
LOG = logging.getLogger(__name__)


def run(argv):
    """Return the response and exit code for an argument vector.

    Never raises: whatever goes wrong ends up in a Failure response.
    """
    try:
        CONF.validate()
    except exception.InvalidConfiguration as exc:
        return responses.Response.failure(exc.msg), exc.exit_code

    try:
        return api.FlexVolumeAPI().call(argv)
    except Exception as exc:
        LOG.exception('Unexpected error running %s' % (argv,))
        return (responses.Response.failure('Unexpected error: %s' % exc),
                constants.EXIT_RETRY)


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    try:
        CONF.setup_logging()
    except Exception:
        # Kubelet reads stderr as part of the response, discard logs instead
        py_logging.getLogger().addHandler(py_logging.NullHandler())

    LOG.info('DRBD FlexVolume v%s called with %s' %
             (constants.VENDOR_VERSION, argv))
    response, exit_code = run(argv)

    sys.stdout.write(response.json + '\n')
    sys.stdout.flush()
    sys.exit(exit_code)


if __name__ == '__main__':
    main()
