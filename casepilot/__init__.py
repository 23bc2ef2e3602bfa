"""CasePilot: recommends API test strategies and synthesizes prioritized test case specifications."""

__version__ = "0.1.0"

from casepilot.models.config import CasePilotConfig
from casepilot.models.endpoint import EndpointDescriptor
from casepilot.models.test_case import GeneratedTestCase, TestSuite

__all__ = [
    "__version__",
    "CasePilotConfig",
    "EndpointDescriptor",
    "GeneratedTestCase",
    "TestSuite",
]
