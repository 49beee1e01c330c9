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
import numbers
import os
import socket

from oslo_config import cfg
from oslo_context import context as context_utils
from oslo_log import log as logging

from drbd_flexvolume import defaults
from drbd_flexvolume import exception


LOG = logging.getLogger(__name__)


class Config(object):
    @staticmethod
    def _env_string(name, default=''):
        return os.environ.get(name, default) or default

    @staticmethod
    def _env_bool(name, default=False):
        res = os.environ.get(name)
        if not res:
            return default
        return res.upper() == 'TRUE'

    def _env_json(self, name, default=None):
        value = os.environ.get(name)
        if not value:
            return default

        try:
            return json.loads(value)
        except Exception:
            # Reported on validate, we must still be able to answer in JSON
            self._errors.append('%s is not valid JSON: %s' % (name, value))
            return default

    def _get_flex_cfg(self):
        config = self._env_json('X_FLEX_CONFIG', None)
        if config is None:
            config = {}
        elif not isinstance(config, dict):
            self._errors.append('X_FLEX_CONFIG must be a JSON object')
            config = {}

        for key, value in defaults.FLEX_CFG.items():
            config.setdefault(key, value)
        return config

    def __init__(self):
        self._errors = []
        FLEX_CONFIG = self._get_flex_cfg()

        self.DRBDMANAGE = FLEX_CONFIG.pop('drbdmanage')
        self.DRBDSETUP = FLEX_CONFIG.pop('drbdsetup')
        self.ROOT_HELPER = FLEX_CONFIG.pop('root_helper')
        self.POLL_INTERVAL = FLEX_CONFIG.pop('poll_interval')
        self.ATTACH_RETRIES = FLEX_CONFIG.pop('attach_retries')
        self.ASSIGNMENT_RETRIES = FLEX_CONFIG.pop('assignment_retries')
        self.LOG_FILE = FLEX_CONFIG.pop('log_file')
        self.USE_SYSLOG = FLEX_CONFIG.pop('use_syslog')

        self.DEFAULT_MOUNT_FS = self._env_string(
            'X_FLEX_DEFAULT_MOUNT_FS', FLEX_CONFIG.pop('default_fs'))
        self.DEBUG = self._env_bool('X_FLEX_DEBUG', FLEX_CONFIG.pop('debug'))
        self.NODE_NAME = self._env_string('X_FLEX_NODE_NAME',
                                          socket.gethostname())

        # Whatever is left are keys we don't know about
        self.FLEX_CONFIG = FLEX_CONFIG

    def validate(self):
        errors = list(self._errors)

        if self.FLEX_CONFIG:
            LOG.warning('Ignoring unknown configuration options: %s' %
                        ', '.join(sorted(self.FLEX_CONFIG)))

        for name in ('ATTACH_RETRIES', 'ASSIGNMENT_RETRIES'):
            value = getattr(self, name)
            if (isinstance(value, bool) or not isinstance(value, int) or
                    value < 1):
                errors.append('%s must be a positive integer number' %
                              name.lower())

        if (isinstance(self.POLL_INTERVAL, bool) or
                not isinstance(self.POLL_INTERVAL, numbers.Real) or
                self.POLL_INTERVAL < 0):
            errors.append('poll_interval must be a non negative number')

        for name in ('DRBDMANAGE', 'DRBDSETUP', 'DEFAULT_MOUNT_FS'):
            if not getattr(self, name):
                errors.append('%s cannot be empty' % name.lower())

        if errors:
            raise exception.InvalidConfiguration(reason='; '.join(errors))

    def setup_logging(self):
        """Configure oslo.log to never write on stdout.

        Stdout is reserved for the JSON response and kubelet merges stderr
        into it, so logs go to a file or to syslog, and are discarded when
        neither is available.
        """
        if self.DEBUG:
            log_levels = defaults.DEBUG_LOG_LEVELS
        else:
            log_levels = defaults.LOG_LEVELS
        logging.set_defaults(
            logging_context_format_string=defaults.LOGGING_FORMAT,
            default_log_levels=log_levels)

        conf = cfg.ConfigOpts()
        logging.register_options(conf)
        conf(args=[], project=defaults.NAME, default_config_files=[],
             default_config_dirs=[])
        conf.set_override('debug', self.DEBUG)
        conf.set_override('use_stderr', False)
        if self.LOG_FILE:
            conf.set_override('log_file', self.LOG_FILE)
        elif self.USE_SYSLOG:
            conf.set_override('use_syslog', True)
        else:
            conf.set_override('log_file', os.devnull)

        logging.setup(conf, defaults.NAME)
        context_utils.RequestContext(overwrite=True,
                                     project_name=defaults.NAME,
                                     request_id='-')
        return conf


CONF = Config()
