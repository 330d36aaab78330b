"""
MCA company master lookup
"""
import copy
import logging

import requests

from resolution_desk.core.errors import DeskError
from .fixtures import MCA_REGISTRY

logger = logging.getLogger(__name__)


class MCAClient:
    """Client for CIN/LLPIN verification against the MCA master data

    With no base URL configured the bundled registry extract answers.
    """

    def __init__(self, base_url='', timeout=5, registry=None):
        self.base_url = (base_url or '').rstrip('/')
        self.timeout = timeout
        self.registry = registry if registry is not None else MCA_REGISTRY

    def lookup(self, cin):
        """Return company master data for a CIN, or {} when it is unknown"""
        if not self.base_url:
            return copy.deepcopy(self.registry.get(cin, {}))

        try:
            response = requests.get(f'{self.base_url}/companies/{cin}', timeout=self.timeout)
        except requests.RequestException as e:
            logger.error('MCA lookup for %s failed: %s', cin, e)
            raise DeskError('MCA service unavailable', status_code=503)

        if response.status_code == 404:
            return {}
        if response.status_code != 200:
            logger.error('MCA lookup for %s returned HTTP %s', cin, response.status_code)
            raise DeskError('MCA service unavailable', status_code=503)
        return response.json()
